"""Question ORM — an open question about a topic or a claim.

Invariants:
    - target_id names a Topic OR a Claim; no FK backs it (polymorphic), so
      QuestionRepository.resolve_target() and orphan cleanup keep it honest
"""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, validates

from debatekb.core.domain_types import QuestionKind
from debatekb.db.base import Base, EntityMixin, require_enum, require_text
from debatekb.db.types import LenientEnum


class Question(EntityMixin, Base):
    """Question entity — text, kind and a polymorphic target."""
    __tablename__ = "questions"

    target_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    kind: Mapped[QuestionKind] = mapped_column(
        LenientEnum(QuestionKind), nullable=False, default=QuestionKind.CLARIFYING,
    )

    @validates("text")
    def _validate_text(self, key, value):
        return require_text(key, value)

    @validates("kind")
    def _validate_kind(self, key, value):
        return require_enum(QuestionKind, key, value)
