"""Service test fixtures — migrated SQLite store + FastAPI test client.

Invariants:
    - Every test gets a fresh file-backed SQLite store under tmp_path, migrated
      to head by the real MigrationEngine (FTS projections and seeded catalog
      exist exactly as in production)
    - db_manager patched so get_db and the readiness probe use the test store
    - app.state wired by configure_app_state(), the same helper the lifespan uses

Design Decisions:
    - File over :memory: the migration engine and the sessions open separate
      connections, which must all see one database
    - Tests that drive the API seed through the API; a second open session would
      hold a read lock and stall the client's commits
"""

import pytest
from httpx import ASGITransport, AsyncClient

import debatekb.infrastructure.database as db_module
from debatekb.config import get_settings
from debatekb.infrastructure.database import DatabaseSessionManager, create_engine
from debatekb.infrastructure.migration_engine import MigrationEngine
from debatekb.main import app, configure_app_state


@pytest.fixture
async def test_engine(tmp_path):
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}")
    await MigrationEngine(engine).upgrade()
    yield engine
    await engine.dispose()


@pytest.fixture
def test_manager(test_engine):
    return DatabaseSessionManager("", engine=test_engine)


@pytest.fixture
async def test_db(test_manager):
    async with test_manager.session() as session:
        yield session


@pytest.fixture
async def client(test_manager):
    """FastAPI test client bound to the test store."""
    original_manager = db_module.db_manager
    db_module.db_manager = test_manager
    configure_app_state(app, test_manager, get_settings())

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    db_module.db_manager = original_manager

