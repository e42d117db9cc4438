"""Entity CRUD — one router per entity type, built by a single factory.

Invariants:
    - POST returns 201 with the stored entity (id, timestamps, fingerprint filled in)
    - PATCH applies only the fields the client sent; an empty body is a no-op that
      still returns the entity
    - DELETE returns 204; children follow the store's cascade / set-null rules
    - Every write commits once, after the repository flushed

Design Decisions:
    - Factory over eight near-identical modules: the entities share one contract,
      the per-entity differences live in the repository and schema classes
    - Repositories are built per request from the request's session; the fallacy
      repository additionally receives the app-owned name cache
"""

import logging
from collections.abc import Callable

from fastapi import APIRouter, Depends, Query, Request, Response, status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from debatekb.api.dependencies import get_fallacy_cache
from debatekb.infrastructure.database import get_db
from debatekb.schemas.entities import (
    ClaimCreate, ClaimResponse, ClaimUpdate,
    EvidenceCreate, EvidenceResponse, EvidenceUpdate,
    FallacyCreate, FallacyResponse, FallacyUpdate,
    QuestionCreate, QuestionResponse, QuestionUpdate,
    RebuttalCreate, RebuttalResponse, RebuttalUpdate,
    SourceCreate, SourceResponse, SourceUpdate,
    TagCreate, TagResponse, TagUpdate,
    TopicCreate, TopicResponse, TopicUpdate,
)
from debatekb.services.repositories import (
    ClaimRepository, EvidenceRepository, FallacyRepository, QuestionRepository,
    RebuttalRepository, Repository, SourceRepository, TagRepository, TopicRepository,
)

logger = logging.getLogger(__name__)

RepositoryFactory = Callable[[AsyncSession, Request], Repository]


def _plain(repo_cls: type[Repository]) -> RepositoryFactory:
    return lambda db, request: repo_cls(db)


def _fallacies(db: AsyncSession, request: Request) -> Repository:
    return FallacyRepository(db, cache=get_fallacy_cache(request))


def build_entity_router(
    path: str,
    tag: str,
    make_repo: RepositoryFactory,
    create_model: type[BaseModel],
    update_model: type[BaseModel],
    response_model: type[BaseModel],
) -> APIRouter:
    """CRUD + search router for one entity type under /api/v1/{path}."""
    router = APIRouter(prefix=f"/api/v1/{path}", tags=[tag])

    @router.post("", response_model=response_model, status_code=status.HTTP_201_CREATED)
    async def create_entity(
        body: create_model, request: Request, db: AsyncSession = Depends(get_db),
    ):
        repo = make_repo(db, request)
        entity = await repo.create(**body.model_dump(exclude_none=True))
        await db.commit()
        logger.info(
            f"Created {repo.label} {entity.id}",
            extra={"entity_type": repo.label, "entity_id": entity.id},
        )
        return response_model.model_validate(entity)

    @router.get("")
    async def list_entities(
        request: Request,
        limit: int = Query(50, ge=1, le=500),
        offset: int = Query(0, ge=0),
        db: AsyncSession = Depends(get_db),
    ):
        repo = make_repo(db, request)
        items = await repo.list_all(limit=limit, offset=offset)
        return {
            "items": [response_model.model_validate(e) for e in items],
            "pagination": {"limit": limit, "offset": offset, "total": await repo.count()},
        }

    @router.get("/search", response_model=list[response_model])
    async def search_entities(
        request: Request,
        q: str = Query(..., min_length=1),
        limit: int = Query(50, ge=1, le=500),
        db: AsyncSession = Depends(get_db),
    ):
        repo = make_repo(db, request)
        return [response_model.model_validate(e) for e in await repo.search(q, limit)]

    @router.get("/{entity_id}", response_model=response_model)
    async def get_entity(
        entity_id: str, request: Request, db: AsyncSession = Depends(get_db),
    ):
        repo = make_repo(db, request)
        return response_model.model_validate(await repo.require(entity_id))

    @router.patch("/{entity_id}", response_model=response_model)
    async def update_entity(
        entity_id: str, body: update_model, request: Request,
        db: AsyncSession = Depends(get_db),
    ):
        repo = make_repo(db, request)
        fields = body.model_dump(exclude_unset=True)
        if not fields:
            return response_model.model_validate(await repo.require(entity_id))
        entity = await repo.update(entity_id, **fields)
        await db.commit()
        return response_model.model_validate(entity)

    @router.delete("/{entity_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_entity(
        entity_id: str, request: Request, db: AsyncSession = Depends(get_db),
    ):
        repo = make_repo(db, request)
        if not await repo.delete(entity_id):
            await repo.require(entity_id)
        await db.commit()
        logger.info(
            f"Deleted {repo.label} {entity_id}",
            extra={"entity_type": repo.label, "entity_id": entity_id},
        )
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router


tags = build_entity_router(
    "tags", "tags", _plain(TagRepository), TagCreate, TagUpdate, TagResponse,
)
sources = build_entity_router(
    "sources", "sources", _plain(SourceRepository),
    SourceCreate, SourceUpdate, SourceResponse,
)
topics = build_entity_router(
    "topics", "topics", _plain(TopicRepository), TopicCreate, TopicUpdate, TopicResponse,
)
claims = build_entity_router(
    "claims", "claims", _plain(ClaimRepository), ClaimCreate, ClaimUpdate, ClaimResponse,
)
rebuttals = build_entity_router(
    "rebuttals", "rebuttals", _plain(RebuttalRepository),
    RebuttalCreate, RebuttalUpdate, RebuttalResponse,
)
evidences = build_entity_router(
    "evidences", "evidences", _plain(EvidenceRepository),
    EvidenceCreate, EvidenceUpdate, EvidenceResponse,
)
questions = build_entity_router(
    "questions", "questions", _plain(QuestionRepository),
    QuestionCreate, QuestionUpdate, QuestionResponse,
)
fallacies = build_entity_router(
    "fallacies", "fallacies", _fallacies, FallacyCreate, FallacyUpdate, FallacyResponse,
)

ROUTERS: tuple[APIRouter, ...] = (
    tags, sources, topics, claims, rebuttals, evidences, questions, fallacies,
)
