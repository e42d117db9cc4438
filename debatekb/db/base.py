"""SQLAlchemy Declarative Base — shared base class and timestamp columns for all ORM models.

Invariants:
    - All models inherit from Base
    - Base is the single source of truth for table metadata
    - Every entity carries a string id and ISO-8601 created_at/updated_at

Design Decisions:
    - Separate file for Base: avoids circular imports between models
    - Timestamps are strings, not DateTime: stored values must round-trip
      byte-for-byte through snapshots, and legacy rows hold whatever format they had
"""

import uuid

from sqlalchemy import String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from debatekb.core.errors import EntityValidationError
from debatekb.core.timestamps import now_iso


class Base(DeclarativeBase):
    """Base class for all debatekb ORM models."""
    pass


def new_id() -> str:
    return str(uuid.uuid4())


class EntityMixin:
    """Primary key + timestamps shared by every entity table."""

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    created_at: Mapped[str] = mapped_column(String(32), nullable=False, default=now_iso)
    updated_at: Mapped[str] = mapped_column(String(32), nullable=False, default=now_iso)


def require_text(field_name: str, value: str | None) -> str:
    """Reject None/blank values for mandatory text fields."""
    if value is None or not str(value).strip():
        raise EntityValidationError(f"{field_name} must not be blank", field_name)
    return value



def require_enum(enum_cls, field_name: str, value):
    """Strict enum parsing for incoming values (legacy labels accepted)."""
    try:
        return enum_cls.parse(value)
    except ValueError as e:
        raise EntityValidationError(str(e), field_name) from e
