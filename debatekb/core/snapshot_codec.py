"""Snapshot Codec — envelope encode/decode and the format-version gate.

Invariants:
    - Encoded form is UTF-8 JSON: {formatVersion, exportedAt, app, entities: {...}}
    - decode_document() either returns a dict or raises SnapshotFormatError
    - check_format_version() runs before any store access; a mismatch raises
      UnsupportedSnapshotVersionError and nothing is written
    - Entity items stay raw dicts here: each one is validated later, inside its own
      per-item boundary, so one malformed item cannot reject the whole document

Design Decisions:
    - Legacy key "schemaVersion" accepted as an alias of "formatVersion"
    - Legacy flat layout (entity lists at top level, no "entities" object) accepted
      on read; always written nested
"""

import json
from typing import Any

from debatekb.core.domain_types import EntityType
from debatekb.core.errors import SnapshotFormatError, UnsupportedSnapshotVersionError

SUPPORTED_FORMAT_VERSION = "1.0"
APP_NAME = "debatekb"

# EntityType -> key under "entities"
SECTION_KEYS: dict[EntityType, str] = {
    EntityType.TAG: "tags",
    EntityType.SOURCE: "sources",
    EntityType.TOPIC: "topics",
    EntityType.CLAIM: "claims",
    EntityType.REBUTTAL: "rebuttals",
    EntityType.EVIDENCE: "evidences",
    EntityType.QUESTION: "questions",
}


def decode_document(data: bytes | str) -> dict[str, Any]:
    try:
        document = json.loads(data)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise SnapshotFormatError(f"not valid UTF-8 JSON ({e})") from e
    if not isinstance(document, dict):
        raise SnapshotFormatError("top-level value must be an object")
    return document


def read_format_version(document: dict[str, Any]) -> str | None:
    version = document.get("formatVersion", document.get("schemaVersion"))
    return None if version is None else str(version)


def check_format_version(
    document: dict[str, Any], supported: str = SUPPORTED_FORMAT_VERSION,
) -> str:
    """Return the declared version, or raise if it is missing or unsupported."""
    version = read_format_version(document)
    if version != supported:
        raise UnsupportedSnapshotVersionError(version, supported)
    return version


def read_sections(document: dict[str, Any]) -> dict[EntityType, list[Any]]:
    """Raw item lists per entity type; absent sections are empty."""
    container = document.get("entities")
    if container is None:
        container = document
    if not isinstance(container, dict):
        raise SnapshotFormatError("'entities' must be an object")
    sections: dict[EntityType, list[Any]] = {}
    for entity_type, key in SECTION_KEYS.items():
        items = container.get(key) or []
        if not isinstance(items, list):
            raise SnapshotFormatError(f"'{key}' must be a list")
        sections[entity_type] = items
    return sections


def encode_document(
    sections: dict[EntityType, list[dict[str, Any]]],
    exported_at: str,
    format_version: str = SUPPORTED_FORMAT_VERSION,
) -> bytes:
    document = {
        "formatVersion": format_version,
        "exportedAt": exported_at,
        "app": APP_NAME,
        "entities": {
            key: sections.get(entity_type, [])
            for entity_type, key in SECTION_KEYS.items()
        },
    }
    return json.dumps(document, ensure_ascii=False, indent=2).encode("utf-8")
