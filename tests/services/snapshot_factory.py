"""Snapshot document builders shared by merge, transfer and route tests."""

import json

STAMP = "2025-06-01T00:00:00.000Z"
LATER = "2025-07-01T00:00:00.000Z"


def snapshot(format_version: str = "1.0", **sections) -> dict:
    """Snapshot document with the given entity sections (plural keys)."""
    return {
        "formatVersion": format_version,
        "exportedAt": STAMP,
        "app": "debatekb",
        "entities": sections,
    }


def encode(document: dict) -> bytes:
    return json.dumps(document).encode("utf-8")


def claim(claim_id: str, text: str, updated_at: str = STAMP, **extra) -> dict:
    return {
        "id": claim_id, "text": text, "stance": "pro", "strength": "medium",
        "topics": [], "createdAt": STAMP, "updatedAt": updated_at, **extra,
    }
