"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell: dependency arrows point inward only
    - The merge engine depends on these shapes, not on the repository classes;
      services/repositories.py is one implementation

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: boundary methods are async because implementations do IO,
      but core pure functions that USE these protocols are never async themselves
"""

from collections.abc import Mapping
from typing import Any, Protocol

from debatekb.core.domain_types import TargetRef


class StoredEntity(Protocol):
    """Structural contract for any persisted record the merge engine inspects."""
    id: str
    created_at: str
    updated_at: str


class FingerprintLookup(Protocol):
    """Exact-duplicate lookup used by the merge engine."""
    def compute_fingerprint(self, values: Mapping[str, Any]) -> str | None: ...
    async def find_by_fingerprint(self, fingerprint: str) -> StoredEntity | None: ...


class TargetResolver(Protocol):
    async def resolve_target(self, target_id: str) -> TargetRef | None: ...
