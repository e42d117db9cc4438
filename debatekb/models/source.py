"""Source ORM — a bibliographic reference cited by evidence.

Invariants:
    - title is non-blank
    - reliability_score is None or within [0.0, 1.0]
    - fingerprint = source_fingerprint(title, publisher, date, url), set by the repository
    - Deleting a Source nullifies Evidence.source_id (ON DELETE SET NULL), never
      deletes evidence
"""

from sqlalchemy import Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from debatekb.core.errors import EntityValidationError
from debatekb.db.base import Base, EntityMixin, require_text


class Source(EntityMixin, Base):
    """Source entity — title, citation details and a reliability score."""
    __tablename__ = "sources"

    title: Mapped[str] = mapped_column(Text, nullable=False)
    citation: Mapped[str | None] = mapped_column(Text, nullable=True)
    url: Mapped[str | None] = mapped_column(Text, nullable=True)
    publisher: Mapped[str | None] = mapped_column(Text, nullable=True)
    date: Mapped[str | None] = mapped_column(String(32), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    reliability_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    fingerprint: Mapped[str | None] = mapped_column(String(16), nullable=True, index=True)

    evidences: Mapped[list["Evidence"]] = relationship(
        "Evidence", back_populates="source",
        passive_deletes=True, lazy="selectin",
    )

    @validates("title")
    def _validate_title(self, key, value):
        return require_text(key, value)

    @validates("reliability_score")
    def _validate_reliability(self, key, value):
        if value is None:
            return None
        score = float(value)
        if not 0.0 <= score <= 1.0:
            raise EntityValidationError(
                f"reliability_score must be within [0, 1], got {value}", key,
            )
        return score
