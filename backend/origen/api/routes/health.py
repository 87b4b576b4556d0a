"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if the database is unreachable or its schema is missing

Design Decisions:
    - Schema-missing reported separately from "unreachable": one means retry later,
      the other means the deployment needs its migrations run
"""

import logging
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from origen.api.dependencies import get_store
from origen.services.ledger_store import LedgerStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "origen-api",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check(request: Request, store: LedgerStore = Depends(get_store)):
    """Readiness probe — database connectivity and provisioned schema."""
    manager = getattr(request.app.state, "db_manager", None)
    db_ok = await manager.health_check() if manager else False
    if not db_ok or store.schema_missing:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": (
                    "database_not_initialized" if store.schema_missing
                    else "database_unavailable"
                ),
            },
        )
    return {
        "status": "ready",
        "checks": {"database": "healthy", "instance": store.instance_id},
    }
