"""Snapshot Transfer — import/export orchestration with per-direction mutual exclusion.

Invariants:
    - At most one import and at most one export run at a time per service;
      a second caller gets TransferInProgressError (409), never a queued run
    - An import commits once, after every item was classified; a fatal error
      (bad JSON, unsupported version) rolls back and propagates
    - Runs are tasks shielded from caller cancellation: a disconnected client
      never leaves a half-finished import, and the busy flag is released by the
      task itself

Design Decisions:
    - Flags checked and set with no await in between: atomic under asyncio
    - One session per run (unit of work); nothing is shared with request sessions
"""

import asyncio
import logging
from collections.abc import Awaitable

from debatekb.core.domain_types import IMPORT_ORDER
from debatekb.core.errors import TransferInProgressError
from debatekb.core.similarity import DEFAULT_THRESHOLD
from debatekb.core.snapshot_codec import SUPPORTED_FORMAT_VERSION, encode_document
from debatekb.core.timestamps import now_iso
from debatekb.infrastructure.database import DatabaseSessionManager
from debatekb.schemas.merge_report import MergeReport
from debatekb.schemas.snapshot import ITEM_MODELS
from debatekb.services.merge_engine import MergeEngine
from debatekb.services.repositories import REPOSITORIES

logger = logging.getLogger(__name__)


class SnapshotTransferService:
    """Entry point for import(snapshot) -> MergeReport and export() -> Snapshot."""

    def __init__(
        self,
        sessions: DatabaseSessionManager,
        format_version: str = SUPPORTED_FORMAT_VERSION,
        default_threshold: float = DEFAULT_THRESHOLD,
    ):
        self.sessions = sessions
        self.format_version = format_version
        self.default_threshold = default_threshold
        self._importing = False
        self._exporting = False
        self._tasks: set[asyncio.Task] = set()

    @property
    def import_running(self) -> bool:
        return self._importing

    @property
    def export_running(self) -> bool:
        return self._exporting

    async def import_snapshot(
        self, data: bytes, similarity_threshold: float | None = None,
    ) -> MergeReport:
        if self._importing:
            raise TransferInProgressError("import")
        self._importing = True
        threshold = self.default_threshold if similarity_threshold is None else similarity_threshold
        return await self._spawn(self._run_import(data, threshold))

    async def export_snapshot(self) -> bytes:
        if self._exporting:
            raise TransferInProgressError("export")
        self._exporting = True
        return await self._spawn(self._run_export())

    async def _spawn(self, work: Awaitable):
        task = asyncio.ensure_future(work)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return await asyncio.shield(task)

    async def _run_import(self, data: bytes, threshold: float) -> MergeReport:
        try:
            async with self.sessions.session() as db:
                engine = MergeEngine(db, threshold, self.format_version)
                report = await engine.run(data)
                await db.commit()
                return report
        finally:
            self._importing = False

    async def _run_export(self) -> bytes:
        try:
            async with self.sessions.session() as db:
                sections = {}
                for entity_type in IMPORT_ORDER:
                    rows = await REPOSITORIES[entity_type](db).list_all()
                    item_model = ITEM_MODELS[entity_type]
                    sections[entity_type] = [item_model.from_row(r).to_wire() for r in rows]
            payload = encode_document(sections, now_iso(), self.format_version)
            logger.info(
                f"Exported {sum(len(v) for v in sections.values())} items",
                extra={"total_items": sum(len(v) for v in sections.values())},
            )
            return payload
        finally:
            self._exporting = False

    async def wait_idle(self) -> None:
        """Wait for in-flight transfers (shutdown)."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
