"""Entity Schemas — Pydantic request/response models for the CRUD API.

Invariants:
    - Required text fields are stripped and non-empty
    - Enum fields accept canonical tokens AND legacy labels; anything else is a 400
    - Update models carry only the fields the client sent (model_dump(exclude_unset=True))
    - reliability_score within [0, 1]

Design Decisions:
    - One Create/Update/Response triple per entity: explicit over generic models,
      OpenAPI shows real field lists
    - fingerprint is response-only: always recomputed by the repository
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from debatekb.core.domain_types import (
    EvidenceType, Posture, Quality, QuestionKind, Stance, Strength,
)


def _strip_required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("must not be empty or whitespace")
    return v


def _parse_optional(enum_cls, v):
    return None if v is None else enum_cls.parse(v)


class EntityResponse(BaseModel):
    """Fields shared by every entity response."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: str
    updated_at: str


# ─── Tags ───────────────────────────────────────────────────────

class TagCreate(BaseModel):
    id: str | None = None
    label: str = Field(min_length=1, max_length=200)
    color: str | None = Field(None, max_length=32)

    @field_validator("label")
    @classmethod
    def strip_label(cls, v: str) -> str:
        return _strip_required(v)


class TagUpdate(BaseModel):
    label: str | None = Field(None, min_length=1, max_length=200)
    color: str | None = Field(None, max_length=32)


class TagResponse(EntityResponse):
    label: str
    color: str | None = None


# ─── Sources ────────────────────────────────────────────────────

class SourceCreate(BaseModel):
    id: str | None = None
    title: str = Field(min_length=1, max_length=2000)
    citation: str | None = None
    url: str | None = Field(None, max_length=2000)
    publisher: str | None = None
    date: str | None = Field(None, max_length=32)
    notes: str | None = None
    reliability_score: float | None = Field(None, ge=0.0, le=1.0)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return _strip_required(v)


class SourceUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=2000)
    citation: str | None = None
    url: str | None = Field(None, max_length=2000)
    publisher: str | None = None
    date: str | None = Field(None, max_length=32)
    notes: str | None = None
    reliability_score: float | None = Field(None, ge=0.0, le=1.0)


class SourceResponse(EntityResponse):
    title: str
    citation: str | None = None
    url: str | None = None
    publisher: str | None = None
    date: str | None = None
    notes: str | None = None
    reliability_score: float | None = None
    fingerprint: str | None = None


# ─── Topics ─────────────────────────────────────────────────────

class TopicCreate(BaseModel):
    id: str | None = None
    title: str = Field(min_length=1, max_length=2000)
    summary: str = ""
    posture: Posture = Posture.NEUTRAL_CRITICAL
    tags: list[str] = []

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return _strip_required(v)

    @field_validator("posture", mode="before")
    @classmethod
    def parse_posture(cls, v):
        return Posture.parse(v)


class TopicUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=2000)
    summary: str | None = None
    posture: Posture | None = None
    tags: list[str] | None = None

    @field_validator("posture", mode="before")
    @classmethod
    def parse_posture(cls, v):
        return _parse_optional(Posture, v)


class TopicResponse(EntityResponse):
    title: str
    summary: str
    posture: Posture
    tags: list[str]
    fingerprint: str | None = None


# ─── Claims ─────────────────────────────────────────────────────

class ClaimCreate(BaseModel):
    id: str | None = None
    text: str = Field(min_length=1, max_length=10_000)
    stance: Stance = Stance.NEUTRAL
    strength: Strength = Strength.MEDIUM
    topics: list[str] = []
    fallacy_ids: list[str] = []

    @field_validator("text")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return _strip_required(v)

    @field_validator("stance", mode="before")
    @classmethod
    def parse_stance(cls, v):
        return Stance.parse(v)

    @field_validator("strength", mode="before")
    @classmethod
    def parse_strength(cls, v):
        return Strength.parse(v)


class ClaimUpdate(BaseModel):
    text: str | None = Field(None, min_length=1, max_length=10_000)
    stance: Stance | None = None
    strength: Strength | None = None
    topics: list[str] | None = None
    fallacy_ids: list[str] | None = None

    @field_validator("stance", mode="before")
    @classmethod
    def parse_stance(cls, v):
        return _parse_optional(Stance, v)

    @field_validator("strength", mode="before")
    @classmethod
    def parse_strength(cls, v):
        return _parse_optional(Strength, v)


class ClaimResponse(EntityResponse):
    text: str
    stance: Stance
    strength: Strength
    topics: list[str]
    fallacy_ids: list[str]
    fingerprint: str


# ─── Rebuttals ──────────────────────────────────────────────────

class RebuttalCreate(BaseModel):
    id: str | None = None
    claim_id: str
    text: str = Field(min_length=1, max_length=10_000)
    fallacy_ids: list[str] = []

    @field_validator("text")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return _strip_required(v)


class RebuttalUpdate(BaseModel):
    text: str | None = Field(None, min_length=1, max_length=10_000)
    fallacy_ids: list[str] | None = None


class RebuttalResponse(EntityResponse):
    claim_id: str
    text: str
    fallacy_ids: list[str]


# ─── Evidence ───────────────────────────────────────────────────

class EvidenceCreate(BaseModel):
    id: str | None = None
    claim_id: str
    content: str = Field(min_length=1, max_length=20_000)
    type: EvidenceType = EvidenceType.EXAMPLE
    quality: Quality = Quality.MEDIUM
    source_id: str | None = None

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        return _strip_required(v)

    @field_validator("type", mode="before")
    @classmethod
    def parse_type(cls, v):
        return EvidenceType.parse(v)

    @field_validator("quality", mode="before")
    @classmethod
    def parse_quality(cls, v):
        return Quality.parse(v)


class EvidenceUpdate(BaseModel):
    content: str | None = Field(None, min_length=1, max_length=20_000)
    type: EvidenceType | None = None
    quality: Quality | None = None
    source_id: str | None = None

    @field_validator("type", mode="before")
    @classmethod
    def parse_type(cls, v):
        return _parse_optional(EvidenceType, v)

    @field_validator("quality", mode="before")
    @classmethod
    def parse_quality(cls, v):
        return _parse_optional(Quality, v)


class EvidenceResponse(EntityResponse):
    claim_id: str
    content: str
    type: EvidenceType
    quality: Quality
    source_id: str | None = None


# ─── Questions ──────────────────────────────────────────────────

class QuestionCreate(BaseModel):
    id: str | None = None
    target_id: str
    text: str = Field(min_length=1, max_length=10_000)
    kind: QuestionKind = QuestionKind.CLARIFYING

    @field_validator("text")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return _strip_required(v)

    @field_validator("kind", mode="before")
    @classmethod
    def parse_kind(cls, v):
        return QuestionKind.parse(v)


class QuestionUpdate(BaseModel):
    target_id: str | None = None
    text: str | None = Field(None, min_length=1, max_length=10_000)
    kind: QuestionKind | None = None

    @field_validator("kind", mode="before")
    @classmethod
    def parse_kind(cls, v):
        return _parse_optional(QuestionKind, v)


class QuestionResponse(EntityResponse):
    target_id: str
    text: str
    kind: QuestionKind


class TargetResponse(BaseModel):
    """Resolved polymorphic question target."""
    kind: str
    id: str


# ─── Fallacies ──────────────────────────────────────────────────

class FallacyCreate(BaseModel):
    id: str | None = None
    name: str = Field(min_length=1, max_length=200)
    description: str = ""
    example: str = ""
    category: str | None = Field(None, max_length=64)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _strip_required(v)


class FallacyUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    example: str | None = None
    category: str | None = Field(None, max_length=64)


class FallacyResponse(EntityResponse):
    name: str
    description: str
    example: str
    category: str | None = None
    is_custom: bool
