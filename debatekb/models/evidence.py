"""Evidence ORM — a fact supporting or undermining a claim.

Invariants:
    - Always belongs to a Claim (claim_id FK, ON DELETE CASCADE)
    - source_id is optional (ON DELETE SET NULL)
    - content is non-blank
"""

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from debatekb.core.domain_types import EvidenceType, Quality
from debatekb.db.base import Base, EntityMixin, require_enum, require_text
from debatekb.db.types import LenientEnum


class Evidence(EntityMixin, Base):
    """Evidence entity — content linked to a claim and optionally a source."""
    __tablename__ = "evidences"

    claim_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("claims.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[EvidenceType] = mapped_column(
        LenientEnum(EvidenceType), nullable=False, default=EvidenceType.EXAMPLE,
    )
    quality: Mapped[Quality] = mapped_column(
        LenientEnum(Quality), nullable=False, default=Quality.MEDIUM,
    )
    source_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("sources.id", ondelete="SET NULL"),
        nullable=True, index=True,
    )

    claim: Mapped["Claim"] = relationship("Claim", back_populates="evidences")
    source: Mapped["Source"] = relationship("Source", back_populates="evidences")

    @validates("content")
    def _validate_content(self, key, value):
        return require_text(key, value)

    @validates("type")
    def _validate_type(self, key, value):
        return require_enum(EvidenceType, key, value)

    @validates("quality")
    def _validate_quality(self, key, value):
        return require_enum(Quality, key, value)
