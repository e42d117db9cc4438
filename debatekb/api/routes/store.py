"""Store Version — exposes the schema version of the connected store.

Invariants:
    - Read-only: migrations run at startup, never through the API
"""

from fastapi import APIRouter, Depends

from debatekb.api.dependencies import get_migration_engine
from debatekb.infrastructure.migration_engine import MigrationEngine

router = APIRouter(prefix="/api/v1/store", tags=["store"])


@router.get("/version")
async def store_version(
    migrations: MigrationEngine = Depends(get_migration_engine),
):
    current = await migrations.current_version()
    target = migrations.target_version()
    return {
        "version": current,
        "target": target,
        "pending": list(range(current + 1, target + 1)),
    }
