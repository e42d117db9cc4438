"""Maintenance — manual consistency repairs."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from debatekb.infrastructure.database import get_db
from debatekb.services.maintenance import cleanup_orphan_questions

router = APIRouter(prefix="/api/v1/maintenance", tags=["maintenance"])


@router.post("/orphan-questions")
async def delete_orphan_questions(db: AsyncSession = Depends(get_db)):
    """Delete questions whose target no longer exists."""
    return {"deleted": await cleanup_orphan_questions(db)}
