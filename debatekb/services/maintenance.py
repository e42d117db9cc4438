"""Maintenance — consistency repairs that are not enforced continuously.

Invariants:
    - cleanup_orphan_questions deletes exactly the questions whose target_id is
      neither a Topic id nor a Claim id, and commits
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from debatekb.services.repositories import QuestionRepository

logger = logging.getLogger(__name__)


async def cleanup_orphan_questions(db: AsyncSession) -> int:
    deleted = await QuestionRepository(db).delete_orphans()
    await db.commit()
    logger.info(f"Deleted {deleted} orphan questions", extra={"entity_type": "question"})
    return deleted
