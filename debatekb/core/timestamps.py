"""Timestamps — ISO-8601 UTC strings used for created_at/updated_at.

Invariants:
    - Emitted form is always YYYY-MM-DDTHH:MM:SS.fffZ (fixed width, so lexical order
      equals chronological order for values this module produced)
    - is_newer() compares instants, not strings; legacy second-precision values
      ("2025-11-08T13:00:00Z") compare correctly against millisecond values
    - advance() never returns a value older than the previous one
"""

from datetime import datetime, timedelta, timezone

_FORMAT = "%Y-%m-%dT%H:%M:%S"


def format_iso(moment: datetime) -> str:
    moment = moment.astimezone(timezone.utc)
    return f"{moment.strftime(_FORMAT)}.{moment.microsecond // 1000:03d}Z"


def now_iso() -> str:
    return format_iso(datetime.now(timezone.utc))


def parse_iso(value: str) -> datetime:
    """Parse an ISO-8601 string; naive values are taken as UTC."""
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def is_valid_iso(value: str) -> bool:
    try:
        parse_iso(value)
    except (ValueError, AttributeError):
        return False
    return True


def is_newer(first: str, second: str) -> bool:
    """True iff `first` is strictly later than `second`."""
    try:
        return parse_iso(first) > parse_iso(second)
    except ValueError:
        # unparseable legacy values: fall back to lexical order
        return first > second


def advance(previous: str | None) -> str:
    """Timestamp for a local mutation: now, unless `previous` is already later."""
    current = now_iso()
    if previous and is_newer(previous, current):
        return previous
    return current


def sequential(base: datetime, count: int, step_ms: int = 1) -> list[str]:
    """`count` strictly increasing timestamps starting at `base`."""
    return [format_iso(base + timedelta(milliseconds=i * step_ms)) for i in range(count)]
