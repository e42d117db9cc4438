"""Health & Readiness Probes — liveness and readiness endpoints.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if the store is unreachable or not at the
      schema version this build expects (readiness)

Design Decisions:
    - Separate liveness/readiness: a store left behind by a failed migration keeps
      the process alive but out of rotation
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from debatekb.api.dependencies import get_migration_engine
from debatekb.infrastructure import database
from debatekb.infrastructure.migration_engine import MigrationEngine

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "debatekb-api",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check(
    migrations: MigrationEngine = Depends(get_migration_engine),
):
    """Readiness probe — database connectivity and schema version."""
    manager = database.db_manager
    db_ok = await manager.health_check() if manager else False
    if not db_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
            },
        )

    current = await migrations.current_version()
    target = migrations.target_version()
    if current != target:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "schema_outdated",
                "store_version": current,
                "target_version": target,
            },
        )
    return {
        "status": "ready",
        "checks": {"database": "healthy", "store_version": current},
    }
