"""Tag ORM — a free-form label attached to topics.

Invariants:
    - label is non-blank; uniqueness is enforced by TagRepository, not the schema
      (legacy stores may already hold duplicate labels)
"""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, validates

from debatekb.db.base import Base, EntityMixin, require_text


class Tag(EntityMixin, Base):
    """Tag entity — label plus optional display color."""
    __tablename__ = "tags"

    label: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    color: Mapped[str | None] = mapped_column(String(32), nullable=True)

    @validates("label")
    def _validate_label(self, key, value):
        return require_text(key, value)
