"""Rebuttal ORM — a counter-argument to one claim.

Invariants:
    - Always belongs to a Claim (claim_id FK, ON DELETE CASCADE)
    - fallacy_ids is a list (a single legacy fallacy_tag was widened by revision 0009)
"""

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from debatekb.db.base import Base, EntityMixin, require_text
from debatekb.db.types import JSONStringList


class Rebuttal(EntityMixin, Base):
    """Rebuttal entity — text answering a claim, tagged with fallacies."""
    __tablename__ = "rebuttals"

    claim_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("claims.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    text: Mapped[str] = mapped_column(Text, nullable=False)
    fallacy_ids: Mapped[list[str]] = mapped_column(
        JSONStringList, nullable=False, default=list,
    )

    claim: Mapped["Claim"] = relationship("Claim", back_populates="rebuttals")

    @validates("text")
    def _validate_text(self, key, value):
        return require_text(key, value)
