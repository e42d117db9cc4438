"""Fallacy ORM — catalog entries (seeded) and user-defined fallacies.

Invariants:
    - Catalog rows (is_custom = False) are seeded by revision 0008
    - name is non-blank
"""

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column, validates

from debatekb.db.base import Base, EntityMixin, require_text


class Fallacy(EntityMixin, Base):
    """Fallacy entity — name, description, example and category."""
    __tablename__ = "fallacies"

    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    example: Mapped[str] = mapped_column(Text, nullable=False, default="")
    category: Mapped[str | None] = mapped_column(String(64), nullable=True)
    is_custom: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    @validates("name")
    def _validate_name(self, key, value):
        return require_text(key, value)
