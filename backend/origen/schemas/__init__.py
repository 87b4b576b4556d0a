"""Pydantic Schemas — entities, settings and request payloads.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Domain types from core/ used for enum fields

Design Decisions:
    - Separate from models: schemas are what the store caches and the API sends,
      models are persistence (ADR: rows never leave the gateway)
"""
