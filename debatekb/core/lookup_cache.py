"""Lookup Cache — explicit memoization table over a pure key derivation.

Invariants:
    - Keys are derived by a caller-supplied pure function (e.g. normalize(name))
    - The cache never outlives its owner: no module-level instance exists
    - invalidate() drops everything; writers to the backing table must call it

Design Decisions:
    - Owned by the application state (FastAPI lifespan) and passed to repositories,
      so lifetime and invalidation are visible at the call site
    - Misses are cached too (value None) until the next invalidation
"""

from collections.abc import Callable
from typing import Generic, TypeVar

V = TypeVar("V")

_MISSING = object()


class LookupCache(Generic[V]):
    """Map derived string keys to values, with hit/miss counters."""

    def __init__(self, derive_key: Callable[[str], str]):
        self._derive_key = derive_key
        self._entries: dict[str, V | None] = {}
        self.hits = 0
        self.misses = 0

    def key_for(self, raw: str) -> str:
        return self._derive_key(raw)

    def get(self, raw: str) -> "V | None | object":
        """Cached value, None for a cached miss, or _MISSING when never looked up."""
        entry = self._entries.get(self.key_for(raw), _MISSING)
        if entry is _MISSING:
            self.misses += 1
        else:
            self.hits += 1
        return entry

    def put(self, raw: str, value: V | None) -> None:
        self._entries[self.key_for(raw)] = value

    def invalidate(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    @staticmethod
    def is_missing(entry: object) -> bool:
        return entry is _MISSING
