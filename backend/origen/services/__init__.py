"""Services Layer — ledger store, settings debouncer, account bootstrap and auth session.

Invariants:
    - Services depend on core protocols, never on a concrete gateway or channel
    - Every backend write in the application goes through a service

Design Decisions:
    - One object per running instance (store, auth session) wired in the lifespan,
      no module-level singletons
"""
