"""Schema Migration Engine — brings a store from its on-disk version to the target version.

Invariants:
    - Store version = int(alembic_version.version_num); no row means 0 (unversioned)
    - Steps apply strictly in order N -> N+1, one transaction per step; the
      alembic_version bump commits with the step or not at all
    - A failed step leaves the store at the last fully-applied version and raises
      MigrationError; nothing after it runs
    - The version never regresses: a store above the target is refused

Design Decisions:
    - Alembic drives each revision on OUR connection (config.attributes), inside an
      explicit BEGIN issued by the engine's "begin" listener, so SQLite DDL is
      transactional
    - upgrade() is shielded from task cancellation: a cancelled caller never
      abandons a step halfway
    - Revision ids are zero-padded integers; anything else in alembic_version is
      treated as a foreign store and refused
"""

import asyncio
import logging

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncEngine

from debatekb.core.errors import MigrationError
from debatekb.migrations import MIGRATIONS_DIR

logger = logging.getLogger(__name__)


def revision_to_version(revision: str | None) -> int:
    if revision is None:
        return 0
    try:
        return int(revision)
    except ValueError:
        raise MigrationError(
            f"Unrecognized store revision {revision!r}", from_version=-1,
        ) from None


def version_to_revision(version: int) -> str:
    return f"{version:04d}"


def build_alembic_config(script_location: str = str(MIGRATIONS_DIR)) -> Config:
    cfg = Config()
    cfg.set_main_option("script_location", script_location)
    return cfg


def _read_revision(sync_conn: Connection) -> str | None:
    return MigrationContext.configure(sync_conn).get_current_revision()


class MigrationEngine:
    """Runs Alembic revisions one step at a time against an async engine."""

    def __init__(self, engine: AsyncEngine, script_location: str = str(MIGRATIONS_DIR)):
        self.engine = engine
        self.script_location = script_location
        self._lock = asyncio.Lock()

    def _config(self) -> Config:
        return build_alembic_config(self.script_location)

    def target_version(self) -> int:
        head = ScriptDirectory.from_config(self._config()).get_current_head()
        return revision_to_version(head)

    async def current_version(self) -> int:
        async with self.engine.connect() as conn:
            revision = await conn.run_sync(_read_revision)
        return revision_to_version(revision)

    async def pending_steps(self) -> list[int]:
        current = await self.current_version()
        return list(range(current + 1, self.target_version() + 1))

    async def upgrade(self, target: int | None = None) -> int:
        """Apply every pending step up to `target` (default: head). Returns the new version."""
        return await asyncio.shield(self._upgrade(target))

    async def ensure_current(self) -> int:
        """Startup gate: migrate to head or raise MigrationError."""
        version = await self.upgrade()
        logger.info(f"Store ready at version {version}", extra={"store_version": version})
        return version

    async def _upgrade(self, target: int | None) -> int:
        async with self._lock:
            head = self.target_version()
            target = head if target is None else target
            current = await self.current_version()

            if current > head:
                raise MigrationError(
                    f"Store version {current} is newer than this application supports ({head})",
                    from_version=current,
                )
            if target > head:
                raise MigrationError(
                    f"Requested version {target} does not exist (head is {head})",
                    from_version=current,
                )
            if target < current:
                raise MigrationError(
                    f"Refusing to move store from version {current} back to {target}",
                    from_version=current,
                )

            for step in range(current + 1, target + 1):
                await self._apply_step(step, from_version=step - 1)
            return target

    async def _apply_step(self, step: int, from_version: int) -> None:
        revision = version_to_revision(step)
        cfg = self._config()

        def _run(sync_conn: Connection) -> None:
            cfg.attributes["connection"] = sync_conn
            command.upgrade(cfg, revision)

        logger.info(f"Applying migration {revision}", extra={"revision": revision})
        try:
            async with self.engine.connect() as conn:
                async with conn.begin():
                    await conn.run_sync(_run)
        except MigrationError:
            raise
        except Exception as e:
            logger.error(
                f"Migration {revision} failed: {e}",
                extra={"revision": revision, "store_version": from_version},
                exc_info=True,
            )
            raise MigrationError(
                f"Migration step {from_version} -> {step} failed: {e}",
                from_version=from_version,
                failed_step=step,
            ) from e
        logger.info(f"Store now at version {step}", extra={"store_version": step})
