"""Text Normalization — canonical comparable form for fingerprints and similarity.

Invariants:
    - Pure, total, deterministic: any str in, str out
    - Idempotent: normalize(normalize(x)) == normalize(x)
    - Strings that differ only by case, accents, punctuation or spacing normalize equal

Design Decisions:
    - Punctuation is Unicode category P* (not string.punctuation): covers « », ¿, 、
      while keeping symbols such as "|" and "+" which are content, not punctuation
    - Marks are stripped twice: lowercasing can emit new combining marks ("İ" -> "i̇")
"""

import re
import unicodedata

_WHITESPACE_RE = re.compile(r"\s+")


def _strip_marks(text: str) -> str:
    return "".join(ch for ch in text if not unicodedata.category(ch).startswith("M"))


def _strip_punctuation(text: str) -> str:
    return "".join(ch for ch in text if not unicodedata.category(ch).startswith("P"))


def normalize(text: str) -> str:
    """Decompose, drop accents, lowercase, drop punctuation, collapse whitespace."""
    decomposed = unicodedata.normalize("NFD", text)
    lowered = _strip_marks(decomposed).lower()
    lowered = _strip_marks(unicodedata.normalize("NFD", lowered))
    cleaned = _strip_punctuation(lowered)
    return _WHITESPACE_RE.sub(" ", cleaned).strip()
