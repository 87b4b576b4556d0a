"""Infrastructure Layer — database, sync transports, local state and logging.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All backend calls mapped to the core error hierarchy

Design Decisions:
    - Gateway and channels implement core protocols: services depend on the protocol only
"""
