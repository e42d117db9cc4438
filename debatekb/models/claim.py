"""Claim ORM — a statement taking a stance on one or more topics.

Invariants:
    - text is non-blank
    - fingerprint = claim_fingerprint(text), always present, indexed, NOT unique
      (two claims may legitimately share normalized text across topics)
    - Deleting a Claim deletes its rebuttals and evidence (ON DELETE CASCADE)

Design Decisions:
    - topics and fallacy_ids as JSON lists: many-to-many without join tables,
      matching the snapshot shape
    - passive_deletes=True: the database performs the cascade in the same
      statement, so unloaded children never leak
"""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from debatekb.core.domain_types import Stance, Strength
from debatekb.db.base import Base, EntityMixin, require_enum, require_text
from debatekb.db.types import JSONStringList, LenientEnum


class Claim(EntityMixin, Base):
    """Claim entity — text, stance, strength and references."""
    __tablename__ = "claims"

    text: Mapped[str] = mapped_column(Text, nullable=False)
    stance: Mapped[Stance] = mapped_column(
        LenientEnum(Stance), nullable=False, default=Stance.NEUTRAL,
    )
    strength: Mapped[Strength] = mapped_column(
        LenientEnum(Strength), nullable=False, default=Strength.MEDIUM,
    )
    topics: Mapped[list[str]] = mapped_column(JSONStringList, nullable=False, default=list)
    fallacy_ids: Mapped[list[str]] = mapped_column(
        JSONStringList, nullable=False, default=list,
    )
    fingerprint: Mapped[str] = mapped_column(String(16), nullable=False, index=True)

    rebuttals: Mapped[list["Rebuttal"]] = relationship(
        "Rebuttal", back_populates="claim",
        cascade="all, delete-orphan", passive_deletes=True, lazy="selectin",
    )
    evidences: Mapped[list["Evidence"]] = relationship(
        "Evidence", back_populates="claim",
        cascade="all, delete-orphan", passive_deletes=True, lazy="selectin",
    )

    @validates("text")
    def _validate_text(self, key, value):
        return require_text(key, value)

    @validates("stance")
    def _validate_stance(self, key, value):
        return require_enum(Stance, key, value)

    @validates("strength")
    def _validate_strength(self, key, value):
        return require_enum(Strength, key, value)
