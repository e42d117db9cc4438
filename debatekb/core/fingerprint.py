"""Fingerprints — short deterministic hashes of normalized content for duplicate detection.

Invariants:
    - fingerprint(x) == fingerprint(y) whenever normalize(x) == normalize(y)
    - Always FINGERPRINT_LENGTH lowercase hex characters (64 bits of SHA-256)
    - Composite fingerprints include only non-blank fields: the populated field set
      is part of the identity

Design Decisions:
    - Truncated SHA-256: non-cryptographic use, 64 bits is ample for a personal
      dataset of tens of thousands of records
    - "|" joins composite fields: it is a symbol (Sm), so normalization keeps it
"""

import hashlib
from urllib.parse import urlsplit

from debatekb.core.normalize_text import normalize

FINGERPRINT_LENGTH = 16
FIELD_DELIMITER = "|"


def fingerprint(text: str) -> str:
    """First 16 hex chars of SHA-256 over the UTF-8 bytes of normalize(text)."""
    digest = hashlib.sha256(normalize(text).encode("utf-8")).hexdigest()
    return digest[:FINGERPRINT_LENGTH]


def composite_fingerprint(*fields: str | None) -> str:
    """Fingerprint of several fields, each normalized independently and joined."""
    parts = [normalize(f) for f in fields if f is not None and f.strip()]
    return fingerprint(FIELD_DELIMITER.join(parts))


def claim_fingerprint(text: str) -> str:
    return fingerprint(text)


def _url_identity(url: str) -> str:
    """host + path when the URL parses with a host, the raw URL otherwise."""
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return url
    if not parts.netloc:
        return url
    return f"{parts.hostname or parts.netloc}{parts.path}"


def source_fingerprint(
    title: str,
    publisher: str | None = None,
    date: str | None = None,
    url: str | None = None,
) -> str:
    """Bibliographic identity: title | publisher | date | url host+path."""
    url_part = _url_identity(url) if url and url.strip() else None
    return composite_fingerprint(title, publisher, date, url_part)


def topic_fingerprint(title: str, tags: list[str] | None = None) -> str:
    """Topic identity: title plus its tags in sorted order."""
    return composite_fingerprint(title, *sorted(tags or []))
