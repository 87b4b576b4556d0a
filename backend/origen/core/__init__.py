"""Core Layer — pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, schemas/ or db/
    - All functions are pure and deterministic (timestamps injectable via `now`)

Design Decisions:
    - Functional core separated from imperative shell: stock math and settings merging
      are testable without a store, a gateway or an event loop
"""
