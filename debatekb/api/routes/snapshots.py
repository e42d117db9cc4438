"""Snapshot Transfer — import and export endpoints.

Invariants:
    - Import body is the raw snapshot document (application/json bytes); it is
      decoded by the merge engine, not by FastAPI, so a malformed document yields
      the snapshot error envelope rather than a request validation error
    - Only one import (and one export) runs at a time: a concurrent call gets 409
    - Threshold overrides are limited to [0.85, 0.95]

Design Decisions:
    - Import returns the MergeReport with 200 even when items failed: per-item
      errors are data, only fatal preconditions are HTTP errors
"""

import logging

from fastapi import APIRouter, Depends, Query, Request, Response

from debatekb.api.dependencies import get_transfer_service
from debatekb.config import MAX_SIMILARITY_THRESHOLD, MIN_SIMILARITY_THRESHOLD
from debatekb.core.timestamps import now_iso
from debatekb.schemas.merge_report import MergeReport
from debatekb.services.snapshot_transfer import SnapshotTransferService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/snapshots", tags=["snapshots"])


@router.post("/import", response_model=MergeReport)
async def import_snapshot(
    request: Request,
    similarity_threshold: float | None = Query(
        None, ge=MIN_SIMILARITY_THRESHOLD, le=MAX_SIMILARITY_THRESHOLD,
    ),
    transfers: SnapshotTransferService = Depends(get_transfer_service),
):
    """Merge a snapshot document into the local store."""
    data = await request.body()
    return await transfers.import_snapshot(data, similarity_threshold)


@router.get("/export")
async def export_snapshot(
    transfers: SnapshotTransferService = Depends(get_transfer_service),
):
    """Serialize the whole store as a snapshot document."""
    payload = await transfers.export_snapshot()
    stamp = now_iso()[:10]
    return Response(
        content=payload,
        media_type="application/json",
        headers={
            "Content-Disposition": f'attachment; filename="debatekb-snapshot-{stamp}.json"',
        },
    )
