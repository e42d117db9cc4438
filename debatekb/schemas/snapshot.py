"""Snapshot Schemas — camelCase item DTOs for the import/export document.

Invariants:
    - Wire names are camelCase (createdAt, claimId, ...); model fields are snake_case
    - Enum values serialize as canonical lowercase tokens; legacy labels accepted on read
    - Every item has a non-blank id
    - updatedAt defaults to createdAt when a legacy item omits it
    - Claim, Topic and Source fingerprints are exported; incoming ones are
      accepted but ignored, the store recomputes them

Design Decisions:
    - One DTO per entity, each validated on its own inside the merge engine's
      per-item boundary (see core/snapshot_codec.py)
    - to_fields() is the only bridge to the ORM: the merge engine never maps
      wire names itself
"""

from typing import Any, ClassVar

from pydantic import (
    AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator,
)
from pydantic.alias_generators import to_camel

from debatekb.core.domain_types import (
    EntityType, EvidenceType, Posture, Quality, QuestionKind, Stance, Strength,
)
from debatekb.core.timestamps import is_valid_iso


class SnapshotItem(BaseModel):
    """Fields shared by every snapshot item."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore",
    )

    entity_type: ClassVar[EntityType]
    text_field: ClassVar[str]
    # ORM attribute names exported for this entity (besides id and timestamps)
    exported_fields: ClassVar[tuple[str, ...]]

    id: str = Field(min_length=1)
    created_at: str | None = None
    updated_at: str | None = None

    @field_validator("id")
    @classmethod
    def strip_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("id must not be blank")
        return v

    @field_validator("created_at", "updated_at")
    @classmethod
    def check_timestamp(cls, v: str | None) -> str | None:
        if v is not None and not is_valid_iso(v):
            raise ValueError(f"not an ISO-8601 timestamp: {v!r}")
        return v

    @model_validator(mode="after")
    def default_updated_at(self):
        if self.updated_at is None:
            self.updated_at = self.created_at
        return self

    @property
    def match_text(self) -> str:
        """Text compared during the near-duplicate scan."""
        return getattr(self, self.text_field)

    def to_fields(self) -> dict[str, Any]:
        """ORM keyword arguments (snake_case) for create/update."""
        fields = {name: getattr(self, name) for name in self.exported_fields}
        fields["id"] = self.id
        if self.created_at is not None:
            fields["created_at"] = self.created_at
        if self.updated_at is not None:
            fields["updated_at"] = self.updated_at
        return fields

    @classmethod
    def from_row(cls, row: Any) -> "SnapshotItem":
        """Wrap a stored row for export; stored data is trusted, not re-validated."""
        values = {name: getattr(row, name) for name in cls.exported_fields}
        if "fingerprint" in cls.model_fields:
            values["fingerprint"] = row.fingerprint
        return cls.model_construct(
            id=row.id, created_at=row.created_at, updated_at=row.updated_at, **values,
        )

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class TagItem(SnapshotItem):
    entity_type = EntityType.TAG
    text_field = "label"
    exported_fields = ("label", "color")

    label: str = Field(min_length=1)
    color: str | None = None


class SourceItem(SnapshotItem):
    entity_type = EntityType.SOURCE
    text_field = "title"
    exported_fields = (
        "title", "citation", "url", "publisher", "date", "notes", "reliability_score",
    )

    title: str = Field(min_length=1)
    citation: str | None = None
    url: str | None = None
    publisher: str | None = None
    date: str | None = None
    notes: str | None = None
    reliability_score: float | None = Field(None, ge=0.0, le=1.0)
    fingerprint: str | None = None


class TopicItem(SnapshotItem):
    entity_type = EntityType.TOPIC
    text_field = "title"
    exported_fields = ("title", "summary", "posture", "tags")

    title: str = Field(min_length=1)
    summary: str = ""
    posture: Posture = Posture.NEUTRAL_CRITICAL
    tags: list[str] = []
    fingerprint: str | None = None

    @field_validator("posture", mode="before")
    @classmethod
    def parse_posture(cls, v):
        return Posture.parse(v)


class ClaimItem(SnapshotItem):
    entity_type = EntityType.CLAIM
    text_field = "text"
    exported_fields = ("text", "stance", "strength", "topics", "fallacy_ids")

    text: str = Field(min_length=1)
    stance: Stance = Stance.NEUTRAL
    strength: Strength = Strength.MEDIUM
    topics: list[str] = []
    fallacy_ids: list[str] = []
    fingerprint: str | None = Field(
        None,
        validation_alias=AliasChoices("fingerprint", "claimFingerprint"),
        serialization_alias="fingerprint",
    )

    @field_validator("stance", mode="before")
    @classmethod
    def parse_stance(cls, v):
        return Stance.parse(v)

    @field_validator("strength", mode="before")
    @classmethod
    def parse_strength(cls, v):
        return Strength.parse(v)


class RebuttalItem(SnapshotItem):
    entity_type = EntityType.REBUTTAL
    text_field = "text"
    exported_fields = ("claim_id", "text", "fallacy_ids")

    claim_id: str = Field(min_length=1)
    text: str = Field(min_length=1)
    fallacy_ids: list[str] = []


class EvidenceItem(SnapshotItem):
    entity_type = EntityType.EVIDENCE
    text_field = "content"
    exported_fields = ("claim_id", "content", "type", "quality", "source_id")

    claim_id: str = Field(min_length=1)
    content: str = Field(min_length=1)
    type: EvidenceType = EvidenceType.EXAMPLE
    quality: Quality = Quality.MEDIUM
    source_id: str | None = None

    @field_validator("type", mode="before")
    @classmethod
    def parse_type(cls, v):
        return EvidenceType.parse(v)

    @field_validator("quality", mode="before")
    @classmethod
    def parse_quality(cls, v):
        return Quality.parse(v)


class QuestionItem(SnapshotItem):
    entity_type = EntityType.QUESTION
    text_field = "text"
    exported_fields = ("target_id", "text", "kind")

    target_id: str = Field(min_length=1)
    text: str = Field(min_length=1)
    kind: QuestionKind = QuestionKind.CLARIFYING

    @field_validator("kind", mode="before")
    @classmethod
    def parse_kind(cls, v):
        return QuestionKind.parse(v)


ITEM_MODELS: dict[EntityType, type[SnapshotItem]] = {
    model.entity_type: model
    for model in (
        TagItem, SourceItem, TopicItem, ClaimItem, RebuttalItem, EvidenceItem, QuestionItem,
    )
}
