"""Topic ORM — the subject under debate.

Invariants:
    - title is non-blank
    - tags is an ordered list of tag ids or labels (JSON text column)
    - fingerprint = topic_fingerprint(title, tags), set by the repository
"""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, validates

from debatekb.core.domain_types import Posture
from debatekb.db.base import Base, EntityMixin, require_enum, require_text
from debatekb.db.types import JSONStringList, LenientEnum


class Topic(EntityMixin, Base):
    """Topic entity — title, summary, posture and tags."""
    __tablename__ = "topics"

    title: Mapped[str] = mapped_column(Text, nullable=False)
    summary: Mapped[str] = mapped_column(Text, nullable=False, default="")
    posture: Mapped[Posture] = mapped_column(
        LenientEnum(Posture), nullable=False, default=Posture.NEUTRAL_CRITICAL,
    )
    tags: Mapped[list[str]] = mapped_column(JSONStringList, nullable=False, default=list)
    fingerprint: Mapped[str | None] = mapped_column(String(16), nullable=True, index=True)

    @validates("title")
    def _validate_title(self, key, value):
        return require_text(key, value)

    @validates("posture")
    def _validate_posture(self, key, value):
        return require_enum(Posture, key, value)
