"""Domain Types — enums with legacy-label tolerance and the polymorphic question target.

Invariants:
    - Canonical stored/serialized form of every enum is a lowercase snake_case token
    - parse() accepts canonical values AND legacy labels indefinitely (a store may be
      read by a build from before or after a value-remapping migration)
    - parse() raises ValueError on unknown values; lenient() falls back to the default
    - TargetRef is the application-level sum type for Question.target_id

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
    - Strict parse for incoming data, lenient for stored rows: bad input is rejected,
      bad rows never make the store unreadable
"""

from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

E = TypeVar("E", bound="LabelledEnum")


class LabelledEnum(str, Enum):
    """str Enum with canonical values, legacy aliases and a default member."""

    @classmethod
    def aliases(cls) -> dict[str, str]:
        return {}

    @classmethod
    def default(cls: type[E]) -> E:
        raise NotImplementedError

    @classmethod
    def parse(cls: type[E], value: "str | E") -> E:
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        key = cls.aliases().get(key, key)
        try:
            return cls(key)
        except ValueError:
            allowed = ", ".join(m.value for m in cls)
            raise ValueError(
                f"Invalid {cls.__name__} '{value}' (expected one of: {allowed})",
            ) from None

    @classmethod
    def is_known(cls, value: "str | LabelledEnum") -> bool:
        """True when parse() accepts value (canonical token or legacy label)."""
        try:
            cls.parse(value)
        except ValueError:
            return False
        return True

    @classmethod
    def lenient(cls: type[E], value: "str | E | None") -> E:
        if value is None or not cls.is_known(value):
            return cls.default()
        return cls.parse(value)


class Posture(LabelledEnum):
    """Topic tone. v1 stores used French labels, remapped by migration 0003."""
    NEUTRAL_CRITICAL = "neutral_critical"
    SKEPTICAL = "skeptical"
    ACADEMIC_COMPARATIVE = "academic_comparative"

    @classmethod
    def aliases(cls) -> dict[str, str]:
        return LEGACY_POSTURE_LABELS

    @classmethod
    def default(cls) -> "Posture":
        return cls.NEUTRAL_CRITICAL


# Old stored label -> canonical label (shared with migration 0003)
LEGACY_POSTURE_LABELS: dict[str, str] = {
    "neutral_critique": "neutral_critical",
    "neutre_critique": "neutral_critical",
    "sceptique": "skeptical",
    "comparatif_academique": "academic_comparative",
}


class Stance(LabelledEnum):
    PRO = "pro"
    CON = "con"
    NEUTRAL = "neutral"

    @classmethod
    def default(cls) -> "Stance":
        return cls.NEUTRAL


class Strength(LabelledEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def aliases(cls) -> dict[str, str]:
        return {"med": "medium"}

    @classmethod
    def default(cls) -> "Strength":
        return cls.MEDIUM


class EvidenceType(LabelledEnum):
    STUDY = "study"
    STATISTIC = "statistic"
    QUOTE = "quote"
    EXAMPLE = "example"

    @classmethod
    def aliases(cls) -> dict[str, str]:
        return {"stat": "statistic"}

    @classmethod
    def default(cls) -> "EvidenceType":
        return cls.EXAMPLE


class Quality(LabelledEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def aliases(cls) -> dict[str, str]:
        return {"med": "medium"}

    @classmethod
    def default(cls) -> "Quality":
        return cls.MEDIUM


class QuestionKind(LabelledEnum):
    SOCRATIC = "socratic"
    CLARIFYING = "clarifying"
    CHALLENGE = "challenge"
    EVIDENCE = "evidence"

    @classmethod
    def default(cls) -> "QuestionKind":
        return cls.CLARIFYING


class EntityType(str, Enum):
    """Snapshot entity kinds, in import (create-before-reference) order."""
    TAG = "tag"
    SOURCE = "source"
    TOPIC = "topic"
    CLAIM = "claim"
    REBUTTAL = "rebuttal"
    EVIDENCE = "evidence"
    QUESTION = "question"

    @property
    def label(self) -> str:
        return self.value.capitalize()


IMPORT_ORDER: tuple[EntityType, ...] = tuple(EntityType)


# ─── Polymorphic Question target ────────────────────────────────

@dataclass(frozen=True)
class TopicRef:
    id: str
    kind: str = "topic"


@dataclass(frozen=True)
class ClaimRef:
    id: str
    kind: str = "claim"


TargetRef = TopicRef | ClaimRef
