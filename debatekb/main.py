"""debatekb API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map DebateKBError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - The store is migrated to head before the first request is served; a failed
      migration aborts startup and leaves the store at its last good version

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - configure_app_state() is shared by the lifespan and the test suite, so tests
      exercise the same wiring the server uses
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from debatekb.api.error_handlers import register_error_handlers
from debatekb.api.routes import entities, health, maintenance, relations, snapshots, store
from debatekb.config import Settings, get_settings
from debatekb.core.lookup_cache import LookupCache
from debatekb.core.normalize_text import normalize
from debatekb.infrastructure.database import DatabaseSessionManager, init_db
from debatekb.infrastructure.migration_engine import MigrationEngine
from debatekb.infrastructure.observability import setup_logging
from debatekb.services.snapshot_transfer import SnapshotTransferService

logger = logging.getLogger(__name__)


def configure_app_state(
    app: FastAPI, manager: DatabaseSessionManager, settings: Settings,
) -> None:
    """Attach the long-lived services routes depend on."""
    app.state.migration_engine = MigrationEngine(manager.engine)
    app.state.fallacy_cache = LookupCache(normalize)
    app.state.transfer_service = SnapshotTransferService(
        manager,
        format_version=settings.snapshot_format_version,
        default_threshold=settings.similarity_threshold,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(settings.database_url)
    configure_app_state(app, manager, settings)
    try:
        if settings.run_migrations_on_startup:
            await app.state.migration_engine.ensure_current()
    except Exception:
        await manager.dispose()
        raise
    logger.info("debatekb API started")
    yield
    logger.info("debatekb API shutting down")
    await app.state.transfer_service.wait_idle()
    await manager.dispose()


app = FastAPI(
    title="debatekb API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes: explicit registration
app.include_router(health.router)
app.include_router(store.router)
app.include_router(snapshots.router)
app.include_router(maintenance.router)
app.include_router(relations.router)
for entity_router in entities.ROUTERS:
    app.include_router(entity_router)

register_error_handlers(app)
