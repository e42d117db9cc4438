"""Repositories — per-entity CRUD, lookup and search over an AsyncSession.

Invariants:
    - Repositories flush, never commit: the caller owns the unit of work
    - Claim/Source/Topic fingerprints are recomputed on every create and update,
      from the same functions the 0010 backfill uses
    - updated_at never decreases: local updates set max(now, previous); an explicit
      updated_at (merge engine) is accepted only if it is not older than the stored one
    - Rebuttal/Evidence parents and Question targets are checked before insert
      (DanglingReferenceError), the FK is the backstop
    - Tag labels are unique (case-insensitive) at the repository level

Design Decisions:
    - One generic Repository[M] with small per-entity hooks instead of a class per
      operation: every entity gets the same create/get/require/update/delete/list/
      search/count surface the API and merge engine rely on
    - search() tries the FTS5 projection inside a SAVEPOINT and falls back to LIKE
      when the projection is missing or rejects the query
    - FallacyRepository.find_by_name goes through an app-owned LookupCache of ids,
      never of ORM instances (instances are bound to one session)
"""

import logging
import re
from collections.abc import Mapping
from typing import Any, ClassVar, Generic, TypeVar

from sqlalchemy import delete, func, literal_column, or_, select, table, text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from debatekb.core.domain_types import ClaimRef, EntityType, TargetRef, TopicRef
from debatekb.core.errors import (
    DanglingReferenceError, DuplicateIdError, DuplicateLabelError,
    EntityValidationError, ErrorContext, ResourceNotFoundError,
)
from debatekb.core.fingerprint import claim_fingerprint, source_fingerprint, topic_fingerprint
from debatekb.core.lookup_cache import LookupCache
from debatekb.core.merge_policy import Candidate
from debatekb.core.normalize_text import normalize
from debatekb.core.timestamps import advance, is_newer, now_iso
from debatekb.db.base import Base, new_id
from debatekb.models import Claim, Evidence, Fallacy, Question, Rebuttal, Source, Tag, Topic

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=Base)

_WORD_RE = re.compile(r"\w+")
_IMMUTABLE = frozenset({"id", "created_at", "fingerprint"})


def fts_query(raw: str) -> str | None:
    """Prefix-match every word: 'free will' -> '"free"* "will"*'."""
    words = _WORD_RE.findall(normalize(raw))
    if not words:
        return None
    return " ".join(f'"{w}"*' for w in words)


def label_key(label: str) -> str:
    """Unicode-aware case-insensitive identity of a tag label."""
    return " ".join(label.casefold().split())


def _like_pattern(raw: str) -> str:
    escaped = raw.strip().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class Repository(Generic[M]):
    """Generic persistence for one entity type."""

    model: ClassVar[type[Base]]
    entity_type: ClassVar[EntityType | None] = None
    label: ClassVar[str]
    text_field: ClassVar[str]
    search_fields: ClassVar[tuple[str, ...]]
    fts_enabled: ClassVar[bool] = False

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── reads ──────────────────────────────────────────────────

    async def get(self, entity_id: str) -> M | None:
        return await self.db.get(self.model, entity_id)

    async def require(self, entity_id: str) -> M:
        entity = await self.get(entity_id)
        if entity is None:
            raise ResourceNotFoundError(self.label, entity_id)
        return entity

    async def exists(self, entity_id: str) -> bool:
        result = await self.db.execute(
            select(self.model.id).where(self.model.id == entity_id),
        )
        return result.scalar_one_or_none() is not None

    async def list_all(self, limit: int | None = None, offset: int = 0) -> list[M]:
        query = select(self.model).order_by(self.model.created_at, self.model.id)
        if limit is not None:
            query = query.limit(limit)
        if offset:
            query = query.offset(offset)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(self.model))
        return result.scalar_one()

    async def search(self, query: str, limit: int = 50) -> list[M]:
        if not query or not query.strip():
            return []
        if self.fts_enabled:
            found = await self._search_fts(query, limit)
            if found:
                return found
        return await self._search_like(query, limit)

    async def _search_fts(self, query: str, limit: int) -> list[M]:
        match = fts_query(query)
        if match is None:
            return []
        name = self.model.__tablename__
        fts = f"{name}_fts"
        rowids = (
            select(literal_column("rowid"))
            .select_from(table(fts))
            .where(text(f"{fts} MATCH :match").bindparams(match=match))
        )
        statement = (
            select(self.model)
            .where(literal_column(f"{name}.rowid").in_(rowids))
            .limit(limit)
        )
        try:
            async with self.db.begin_nested():
                result = await self.db.execute(statement)
                return list(result.scalars().all())
        except DBAPIError as e:
            logger.warning(
                f"FTS search on {fts} failed, using LIKE: {e.orig}",
                extra={"entity_type": self.label},
            )
            return []

    async def _search_like(self, query: str, limit: int) -> list[M]:
        pattern = _like_pattern(query)
        conditions = [
            getattr(self.model, f).ilike(pattern, escape="\\") for f in self.search_fields
        ]
        result = await self.db.execute(
            select(self.model).where(or_(*conditions))
            .order_by(self.model.created_at).limit(limit),
        )
        return list(result.scalars().all())

    async def candidates(self) -> list[Candidate]:
        """(id, text) pairs scanned for near-duplicates."""
        column = getattr(self.model, self.text_field)
        result = await self.db.execute(select(self.model.id, column))
        return [Candidate(row[0], row[1] or "") for row in result.all()]

    # ─── fingerprints ───────────────────────────────────────────

    def compute_fingerprint(self, values: Mapping[str, Any]) -> str | None:
        """Fingerprint for a set of field values; None for unfingerprinted types."""
        return None

    async def find_by_fingerprint(self, fingerprint: str) -> M | None:
        if not hasattr(self.model, "fingerprint"):
            return None
        result = await self.db.execute(
            select(self.model)
            .where(self.model.fingerprint == fingerprint)
            .order_by(self.model.created_at).limit(1),
        )
        return result.scalars().first()

    def _refresh_fingerprint(self, entity: M) -> None:
        values = {c: getattr(entity, c) for c in self.model.__table__.columns.keys()}
        fp = self.compute_fingerprint(values)
        if fp is not None:
            entity.fingerprint = fp

    # ─── writes ─────────────────────────────────────────────────

    def _check_fields(self, fields: Mapping[str, Any]) -> None:
        columns = self.model.__table__.columns.keys()
        for name in fields:
            if name not in columns:
                raise EntityValidationError(
                    f"Unknown {self.label} field '{name}'", name,
                )

    async def _before_create(self, fields: dict[str, Any]) -> None:
        """Hook: reference and uniqueness checks before insert."""

    async def _before_update(self, entity: M, fields: dict[str, Any]) -> None:
        """Hook: reference and uniqueness checks before update."""

    async def create(self, **fields: Any) -> M:
        fields.pop("fingerprint", None)
        self._check_fields(fields)
        if fields.get("id") is None:
            fields["id"] = new_id()
        elif await self.exists(fields["id"]):
            raise DuplicateIdError(self.label, fields["id"])
        if not fields.get("created_at"):
            fields["created_at"] = now_iso()
        if not fields.get("updated_at"):
            fields["updated_at"] = fields["created_at"]
        await self._before_create(fields)

        entity = self.model(**fields)
        self._refresh_fingerprint(entity)
        self.db.add(entity)
        await self.db.flush()
        return entity

    async def update(self, entity_id: str, **fields: Any) -> M:
        entity = await self.require(entity_id)
        explicit_updated_at = fields.pop("updated_at", None)
        for name in _IMMUTABLE:
            fields.pop(name, None)
        self._check_fields(fields)
        await self._before_update(entity, fields)

        previous = entity.updated_at
        for name, value in fields.items():
            setattr(entity, name, value)
        if explicit_updated_at and not is_newer(previous, explicit_updated_at):
            entity.updated_at = explicit_updated_at
        else:
            entity.updated_at = advance(previous)
        self._refresh_fingerprint(entity)
        await self.db.flush()
        return entity

    async def delete(self, entity_id: str) -> bool:
        """Delete one entity; children follow via ON DELETE CASCADE / SET NULL."""
        entity = await self.get(entity_id)
        if entity is None:
            return False
        await self.db.delete(entity)
        await self.db.flush()
        return True

    async def require_claim(self, claim_id: str, field_name: str = "claim_id") -> None:
        if not claim_id or not await ClaimRepository(self.db).exists(claim_id):
            raise DanglingReferenceError(
                f"{field_name} '{claim_id}' does not reference an existing Claim",
                ErrorContext(entity_type=self.label, entity_id=claim_id),
            )


# ─── Entity repositories ────────────────────────────────────────

class TagRepository(Repository[Tag]):
    model = Tag
    entity_type = EntityType.TAG
    label = "Tag"
    text_field = "label"
    search_fields = ("label",)

    async def find_by_label(self, label: str) -> Tag | None:
        # SQLite lower() folds ASCII only ("État" stays "État"): compare in Python
        key = label_key(label)
        result = await self.db.execute(
            select(Tag.id, Tag.label).order_by(Tag.created_at, Tag.id),
        )
        for tag_id, stored in result.all():
            if label_key(stored) == key:
                return await self.get(tag_id)
        return None

    async def _before_create(self, fields: dict[str, Any]) -> None:
        label = fields.get("label")
        if label and await self.find_by_label(label) is not None:
            raise DuplicateLabelError(label)

    async def _before_update(self, entity: Tag, fields: dict[str, Any]) -> None:
        label = fields.get("label")
        if label:
            other = await self.find_by_label(label)
            if other is not None and other.id != entity.id:
                raise DuplicateLabelError(label)


class SourceRepository(Repository[Source]):
    model = Source
    entity_type = EntityType.SOURCE
    label = "Source"
    text_field = "title"
    search_fields = ("title", "citation", "publisher")
    fts_enabled = True

    def compute_fingerprint(self, values: Mapping[str, Any]) -> str | None:
        return source_fingerprint(
            values.get("title") or "", values.get("publisher"),
            values.get("date"), values.get("url"),
        )


class TopicRepository(Repository[Topic]):
    model = Topic
    entity_type = EntityType.TOPIC
    label = "Topic"
    text_field = "title"
    search_fields = ("title", "summary")

    def compute_fingerprint(self, values: Mapping[str, Any]) -> str | None:
        return topic_fingerprint(values.get("title") or "", values.get("tags") or [])


class ClaimRepository(Repository[Claim]):
    model = Claim
    entity_type = EntityType.CLAIM
    label = "Claim"
    text_field = "text"
    search_fields = ("text",)
    fts_enabled = True

    def compute_fingerprint(self, values: Mapping[str, Any]) -> str | None:
        return claim_fingerprint(values.get("text") or "")

    async def list_for_topic(self, topic_id: str) -> list[Claim]:
        """Claims whose topics list contains topic_id."""
        member = text(
            "EXISTS (SELECT 1 FROM json_each(claims.topics) "
            "WHERE json_each.value = :topic_id)",
        ).bindparams(topic_id=topic_id)
        result = await self.db.execute(
            select(Claim).where(member).order_by(Claim.created_at),
        )
        return list(result.scalars().all())


class RebuttalRepository(Repository[Rebuttal]):
    model = Rebuttal
    entity_type = EntityType.REBUTTAL
    label = "Rebuttal"
    text_field = "text"
    search_fields = ("text",)
    fts_enabled = True

    async def _before_create(self, fields: dict[str, Any]) -> None:
        await self.require_claim(fields.get("claim_id"))

    async def _before_update(self, entity: Rebuttal, fields: dict[str, Any]) -> None:
        if "claim_id" in fields:
            await self.require_claim(fields["claim_id"])

    async def list_for_claim(self, claim_id: str) -> list[Rebuttal]:
        result = await self.db.execute(
            select(Rebuttal).where(Rebuttal.claim_id == claim_id)
            .order_by(Rebuttal.created_at),
        )
        return list(result.scalars().all())

    async def candidates_for_claim(self, claim_id: str) -> list[Candidate]:
        return [Candidate(r.id, r.text) for r in await self.list_for_claim(claim_id)]


class EvidenceRepository(Repository[Evidence]):
    model = Evidence
    entity_type = EntityType.EVIDENCE
    label = "Evidence"
    text_field = "content"
    search_fields = ("content",)

    async def check_source(self, source_id: str | None) -> None:
        if source_id and not await SourceRepository(self.db).exists(source_id):
            raise DanglingReferenceError(
                f"source_id '{source_id}' does not reference an existing Source",
                ErrorContext(entity_type=self.label, entity_id=source_id),
            )

    async def _before_create(self, fields: dict[str, Any]) -> None:
        await self.require_claim(fields.get("claim_id"))
        await self.check_source(fields.get("source_id"))

    async def _before_update(self, entity: Evidence, fields: dict[str, Any]) -> None:
        if "claim_id" in fields:
            await self.require_claim(fields["claim_id"])
        if "source_id" in fields:
            await self.check_source(fields["source_id"])

    async def list_for_claim(self, claim_id: str) -> list[Evidence]:
        result = await self.db.execute(
            select(Evidence).where(Evidence.claim_id == claim_id)
            .order_by(Evidence.created_at),
        )
        return list(result.scalars().all())

    async def candidates_for_claim(self, claim_id: str) -> list[Candidate]:
        return [Candidate(e.id, e.content) for e in await self.list_for_claim(claim_id)]


class QuestionRepository(Repository[Question]):
    model = Question
    entity_type = EntityType.QUESTION
    label = "Question"
    text_field = "text"
    search_fields = ("text",)
    fts_enabled = True

    async def resolve_target(self, target_id: str) -> TargetRef | None:
        """TopicRef or ClaimRef for target_id, None when it dangles."""
        if await TopicRepository(self.db).exists(target_id):
            return TopicRef(target_id)
        if await ClaimRepository(self.db).exists(target_id):
            return ClaimRef(target_id)
        return None

    async def _require_target(self, target_id: str | None) -> None:
        if not target_id or await self.resolve_target(target_id) is None:
            raise DanglingReferenceError(
                f"target_id '{target_id}' references neither a Topic nor a Claim",
                ErrorContext(entity_type=self.label, entity_id=target_id),
            )

    async def _before_create(self, fields: dict[str, Any]) -> None:
        await self._require_target(fields.get("target_id"))

    async def _before_update(self, entity: Question, fields: dict[str, Any]) -> None:
        if "target_id" in fields:
            await self._require_target(fields["target_id"])

    async def list_for_target(self, target_id: str) -> list[Question]:
        result = await self.db.execute(
            select(Question).where(Question.target_id == target_id)
            .order_by(Question.created_at),
        )
        return list(result.scalars().all())

    async def delete_orphans(self) -> int:
        """Delete questions whose target is neither a Topic nor a Claim."""
        result = await self.db.execute(
            delete(Question).where(
                Question.target_id.not_in(select(Topic.id)),
                Question.target_id.not_in(select(Claim.id)),
            ),
        )
        await self.db.flush()
        return result.rowcount or 0


class FallacyRepository(Repository[Fallacy]):
    model = Fallacy
    label = "Fallacy"
    text_field = "name"
    search_fields = ("name", "description")

    def __init__(self, db: AsyncSession, cache: LookupCache[str] | None = None):
        super().__init__(db)
        self.cache = cache if cache is not None else LookupCache(normalize)

    async def find_by_name(self, name: str) -> Fallacy | None:
        """Fallacy whose normalized name equals normalize(name)."""
        cached = self.cache.get(name)
        if not LookupCache.is_missing(cached):
            return None if cached is None else await self.get(cached)

        key = self.cache.key_for(name)
        result = await self.db.execute(select(Fallacy.id, Fallacy.name))
        for fallacy_id, fallacy_name in result.all():
            if normalize(fallacy_name) == key:
                self.cache.put(name, fallacy_id)
                return await self.get(fallacy_id)
        self.cache.put(name, None)
        return None

    async def list_catalog(self) -> list[Fallacy]:
        result = await self.db.execute(
            select(Fallacy).where(Fallacy.is_custom.is_(False)).order_by(Fallacy.name),
        )
        return list(result.scalars().all())

    async def create(self, **fields: Any) -> Fallacy:
        fields.setdefault("is_custom", True)
        entity = await super().create(**fields)
        self.cache.invalidate()
        return entity

    async def update(self, entity_id: str, **fields: Any) -> Fallacy:
        entity = await super().update(entity_id, **fields)
        self.cache.invalidate()
        return entity

    async def delete(self, entity_id: str) -> bool:
        deleted = await super().delete(entity_id)
        self.cache.invalidate()
        return deleted


# Snapshot entity type -> repository, in import order
REPOSITORIES: dict[EntityType, type[Repository]] = {
    EntityType.TAG: TagRepository,
    EntityType.SOURCE: SourceRepository,
    EntityType.TOPIC: TopicRepository,
    EntityType.CLAIM: ClaimRepository,
    EntityType.REBUTTAL: RebuttalRepository,
    EntityType.EVIDENCE: EvidenceRepository,
    EntityType.QUESTION: QuestionRepository,
}
