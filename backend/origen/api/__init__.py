"""API Layer — FastAPI routes and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return structured JSON responses (camelCase entity fields)

Design Decisions:
    - Thin routes delegate to the ledger store and auth session held on app.state
"""
