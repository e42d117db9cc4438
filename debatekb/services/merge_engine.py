"""Merge Engine — classifies and reconciles snapshot items against the local store.

Invariants:
    - Format version is checked before the first read or write of the store;
      a mismatch raises and nothing is touched
    - Items are processed Tags -> Sources -> Topics -> Claims -> Rebuttals ->
      Evidence -> Questions, so parents always precede children
    - Each item runs in its own SAVEPOINT: any failure rolls back that item only,
      is counted, and is reported as "<Type> <id>: <message>"
    - Near-duplicates are reported for review and never written

Design Decisions:
    - Incoming items that are exact duplicates of a local row (fingerprint or tag
      label match) alias their id to the local id for the rest of the run, so
      children in the same snapshot attach to the surviving parent
    - The engine never commits; SnapshotTransferService owns the transaction
"""

import logging
from typing import Any

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from debatekb.core.domain_types import IMPORT_ORDER, EntityType
from debatekb.core.errors import DanglingReferenceError, DebateKBError, ErrorContext
from debatekb.core.merge_policy import (
    Candidate, MergeOutcome, classify_id_match, find_near_duplicate, validate_threshold,
)
from debatekb.core.repository_protocols import FingerprintLookup, TargetResolver
from debatekb.core.similarity import DEFAULT_THRESHOLD
from debatekb.core.snapshot_codec import (
    SUPPORTED_FORMAT_VERSION, check_format_version, decode_document, read_sections,
)
from debatekb.schemas.merge_report import MergeReport, ReviewItem
from debatekb.schemas.snapshot import ITEM_MODELS, SnapshotItem
from debatekb.services.repositories import (
    REPOSITORIES, EvidenceRepository, QuestionRepository, RebuttalRepository, Repository,
    TagRepository,
)

logger = logging.getLogger(__name__)

# Types whose near-duplicate scan runs over every row of the same type
_GLOBAL_SCAN = frozenset({EntityType.SOURCE, EntityType.TOPIC, EntityType.CLAIM})
# Types whose near-duplicate scan runs over siblings sharing the same claim
_SIBLING_SCAN = frozenset({EntityType.REBUTTAL, EntityType.EVIDENCE})


def describe_error(error: Exception) -> str:
    if isinstance(error, ValidationError):
        return "; ".join(
            f"{'.'.join(str(p) for p in e['loc']) or 'item'}: {e['msg']}"
            for e in error.errors()
        )
    if isinstance(error, DebateKBError):
        return error.message
    return str(error) or type(error).__name__


def _raw_id(raw: Any) -> str:
    if isinstance(raw, dict) and raw.get("id"):
        return str(raw["id"])
    return "<no id>"


class MergeEngine:
    """One import run over one session."""

    def __init__(
        self,
        db: AsyncSession,
        similarity_threshold: float = DEFAULT_THRESHOLD,
        format_version: str = SUPPORTED_FORMAT_VERSION,
    ):
        self.db = db
        self.threshold = validate_threshold(similarity_threshold)
        self.format_version = format_version
        self._aliases: dict[EntityType, dict[str, str]] = {t: {} for t in EntityType}

    async def run(self, data: bytes | str) -> MergeReport:
        document = decode_document(data)
        check_format_version(document, self.format_version)
        sections = read_sections(document)

        report = MergeReport()
        for entity_type in IMPORT_ORDER:
            for raw in sections[entity_type]:
                await self._process(entity_type, raw, report)

        logger.info(
            f"Import finished: {report.total_items} items",
            extra={
                "total_items": report.total_items, "items_created": report.created,
                "items_updated": report.updated, "items_duplicate": report.duplicates,
                "items_near_duplicate": report.near_duplicates,
                "items_failed": report.errors,
            },
        )
        return report

    async def _process(self, entity_type: EntityType, raw: Any, report: MergeReport) -> None:
        item_id = _raw_id(raw)
        try:
            async with self.db.begin_nested():
                item = ITEM_MODELS[entity_type].model_validate(raw)
                outcome, review = await self._merge_item(entity_type, item)
        except Exception as e:
            message = f"{entity_type.label} {item_id}: {describe_error(e)}"
            logger.warning(
                f"Import item failed: {message}",
                extra={"entity_type": entity_type.value, "entity_id": item_id},
            )
            report.record_error(message)
            return

        report.record(outcome)
        if review is not None:
            report.items_for_review.append(review)

    async def _merge_item(
        self, entity_type: EntityType, item: SnapshotItem,
    ) -> tuple[MergeOutcome, ReviewItem | None]:
        repo = REPOSITORIES[entity_type](self.db)
        fields = self._apply_aliases(entity_type, item.to_fields())
        await self._check_references(entity_type, fields)

        existing = await repo.get(item.id)
        if existing is not None:
            outcome = classify_id_match(item.updated_at or "", existing.updated_at)
            if outcome is MergeOutcome.UPDATED:
                fields.pop("id")
                fields.pop("created_at", None)
                await repo.update(item.id, **fields)
            return outcome, None

        duplicate_of = await self._find_exact_duplicate(entity_type, repo, item, fields)
        if duplicate_of is not None:
            self._aliases[entity_type][item.id] = duplicate_of
            return MergeOutcome.DUPLICATE, None

        candidates = await self._candidates(entity_type, repo, fields)
        match = find_near_duplicate(item.match_text, candidates, self.threshold)
        if match is not None:
            return MergeOutcome.NEAR_DUPLICATE, ReviewItem(
                entity_type=entity_type.value,
                incoming_id=item.id,
                existing_id=match.existing_id,
                incoming_text=item.match_text,
                existing_text=match.existing_text,
                similarity_score=round(match.score, 4),
            )

        await repo.create(**fields)
        return MergeOutcome.CREATED, None

    async def _find_exact_duplicate(
        self,
        entity_type: EntityType,
        repo: FingerprintLookup,
        item: SnapshotItem,
        fields: dict[str, Any],
    ) -> str | None:
        if entity_type is EntityType.TAG:
            tag = await TagRepository(self.db).find_by_label(item.match_text)
            return tag.id if tag is not None else None
        fingerprint = repo.compute_fingerprint(fields)
        if fingerprint is None:
            return None
        existing = await repo.find_by_fingerprint(fingerprint)
        return existing.id if existing is not None else None

    async def _candidates(
        self, entity_type: EntityType, repo: Repository, fields: dict[str, Any],
    ) -> list[Candidate]:
        if entity_type in _GLOBAL_SCAN:
            return await repo.candidates()
        if entity_type in _SIBLING_SCAN:
            return await repo.candidates_for_claim(fields["claim_id"])
        return []

    def _apply_aliases(self, entity_type: EntityType, fields: dict[str, Any]) -> dict[str, Any]:
        tags = self._aliases[EntityType.TAG]
        topics = self._aliases[EntityType.TOPIC]
        claims = self._aliases[EntityType.CLAIM]
        sources = self._aliases[EntityType.SOURCE]

        if entity_type is EntityType.TOPIC:
            fields["tags"] = [tags.get(t, t) for t in fields.get("tags") or []]
        elif entity_type is EntityType.CLAIM:
            fields["topics"] = [topics.get(t, t) for t in fields.get("topics") or []]
        elif entity_type in _SIBLING_SCAN:
            fields["claim_id"] = claims.get(fields["claim_id"], fields["claim_id"])
            if fields.get("source_id"):
                fields["source_id"] = sources.get(fields["source_id"], fields["source_id"])
        elif entity_type is EntityType.QUESTION:
            target = fields["target_id"]
            fields["target_id"] = topics.get(target, claims.get(target, target))
        return fields

    async def _check_references(self, entity_type: EntityType, fields: dict[str, Any]) -> None:
        if entity_type is EntityType.REBUTTAL:
            await RebuttalRepository(self.db).require_claim(fields["claim_id"])
        elif entity_type is EntityType.EVIDENCE:
            evidence = EvidenceRepository(self.db)
            await evidence.require_claim(fields["claim_id"])
            await evidence.check_source(fields.get("source_id"))
        elif entity_type is EntityType.QUESTION:
            target_id = fields["target_id"]
            resolver: TargetResolver = QuestionRepository(self.db)
            if await resolver.resolve_target(target_id) is None:
                raise DanglingReferenceError(
                    f"target '{target_id}' is neither a Topic nor a Claim",
                    ErrorContext(entity_type=entity_type.value, entity_id=target_id),
                )
