"""FastAPI Dependencies — app-state accessors shared by route modules.

Invariants:
    - Long-lived objects (migration engine, transfer service, fallacy cache) live on
      app.state, created by the lifespan; routes never construct them
"""

from fastapi import Request

from debatekb.core.lookup_cache import LookupCache
from debatekb.infrastructure.migration_engine import MigrationEngine
from debatekb.services.snapshot_transfer import SnapshotTransferService


def get_migration_engine(request: Request) -> MigrationEngine:
    return request.app.state.migration_engine


def get_transfer_service(request: Request) -> SnapshotTransferService:
    return request.app.state.transfer_service


def get_fallacy_cache(request: Request) -> LookupCache[str]:
    return request.app.state.fallacy_cache
