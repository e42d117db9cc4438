"""Relations — navigation between linked entities.

Invariants:
    - Parent is required (404) before its children are listed
    - A question whose target was deleted resolves to 404, never to a stale kind
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from debatekb.core.errors import ErrorContext, ResourceNotFoundError
from debatekb.infrastructure.database import get_db
from debatekb.schemas.entities import (
    ClaimResponse, EvidenceResponse, QuestionResponse, RebuttalResponse, TargetResponse,
)
from debatekb.services.repositories import (
    ClaimRepository, EvidenceRepository, QuestionRepository, RebuttalRepository,
    TopicRepository,
)

router = APIRouter(prefix="/api/v1", tags=["relations"])


@router.get("/questions/{question_id}/target", response_model=TargetResponse)
async def question_target(question_id: str, db: AsyncSession = Depends(get_db)):
    repo = QuestionRepository(db)
    question = await repo.require(question_id)
    target = await repo.resolve_target(question.target_id)
    if target is None:
        raise ResourceNotFoundError(
            "Question target", question.target_id,
            ErrorContext(entity_type="Question", entity_id=question_id),
        )
    return TargetResponse(kind=target.kind, id=target.id)


@router.get("/topics/{topic_id}/claims", response_model=list[ClaimResponse])
async def topic_claims(topic_id: str, db: AsyncSession = Depends(get_db)):
    await TopicRepository(db).require(topic_id)
    return [
        ClaimResponse.model_validate(c)
        for c in await ClaimRepository(db).list_for_topic(topic_id)
    ]


@router.get("/claims/{claim_id}/rebuttals", response_model=list[RebuttalResponse])
async def claim_rebuttals(claim_id: str, db: AsyncSession = Depends(get_db)):
    await ClaimRepository(db).require(claim_id)
    return [
        RebuttalResponse.model_validate(r)
        for r in await RebuttalRepository(db).list_for_claim(claim_id)
    ]


@router.get("/claims/{claim_id}/evidences", response_model=list[EvidenceResponse])
async def claim_evidences(claim_id: str, db: AsyncSession = Depends(get_db)):
    await ClaimRepository(db).require(claim_id)
    return [
        EvidenceResponse.model_validate(e)
        for e in await EvidenceRepository(db).list_for_claim(claim_id)
    ]


@router.get("/targets/{target_id}/questions", response_model=list[QuestionResponse])
async def target_questions(target_id: str, db: AsyncSession = Depends(get_db)):
    return [
        QuestionResponse.model_validate(q)
        for q in await QuestionRepository(db).list_for_target(target_id)
    ]
