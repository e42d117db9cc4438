"""Column Types — lenient decoding for enum and JSON list columns.

Invariants:
    - Writes are strict: enum columns only ever store canonical tokens
    - Reads never fail: unknown enum values decode to the enum default (WARNING),
      corrupted JSON lists decode to [] (ERROR)
    - Legacy labels (e.g. "sceptique") decode to their canonical member

Design Decisions:
    - TypeDecorator over sa.Enum: no CHECK constraint, so a store written by an
      older or newer build stays readable
    - Lists stored as JSON text: the store has no array type, and the snapshot
      format already speaks JSON
"""

import json
import logging

from sqlalchemy import String, Text
from sqlalchemy.types import TypeDecorator

from debatekb.core.domain_types import LabelledEnum

logger = logging.getLogger(__name__)


class LenientEnum(TypeDecorator):
    """Stores a LabelledEnum as its value; reads legacy/unknown values leniently."""

    impl = String
    cache_ok = True

    def __init__(self, enum_cls: type[LabelledEnum], length: int = 32):
        super().__init__(length=length)
        self.enum_cls = enum_cls

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return self.enum_cls.parse(value).value

    def process_result_value(self, value, dialect):
        if value is not None and not self.enum_cls.is_known(value):
            logger.warning(
                f"Unknown stored {self.enum_cls.__name__} value {value!r}, "
                f"reading as {self.enum_cls.default().value!r}",
            )
        return self.enum_cls.lenient(value)


class JSONStringList(TypeDecorator):
    """List[str] stored as a JSON array in a TEXT column."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return json.dumps([str(v) for v in (value or [])], ensure_ascii=False)

    def process_result_value(self, value, dialect):
        return decode_string_list(value)


def decode_string_list(value: str | None) -> list[str]:
    """Decode a stored JSON list; corrupted values read as []."""
    if value is None or not value.strip():
        return []
    try:
        data = json.loads(value)
    except json.JSONDecodeError:
        logger.error(f"Corrupted JSON list column value {value[:80]!r}, reading as []")
        return []
    if not isinstance(data, list):
        logger.error(f"JSON list column holds {type(data).__name__}, reading as []")
        return []
    return [str(v) for v in data]
