"""Merge Policy — pure classification rules for incoming snapshot items.

Invariants:
    - Precedence is fixed: id match > fingerprint/label match > near-duplicate > create
    - An id match updates only when incoming updatedAt is STRICTLY newer; equal or
      older timestamps are duplicates (re-importing the same snapshot is a no-op)
    - A near-duplicate is never created nor merged: it is reported for review
    - Functions here never touch the store; the merge engine feeds them lookups

Design Decisions:
    - Candidates passed as plain (id, text) pairs so the scan is testable without
      ORM rows
    - Best (highest-score) candidate wins; ties keep the first candidate seen
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from debatekb.core.normalize_text import normalize
from debatekb.core.similarity import DEFAULT_THRESHOLD, ratio
from debatekb.core.timestamps import is_newer


class MergeOutcome(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    DUPLICATE = "duplicate"
    NEAR_DUPLICATE = "near_duplicate"


@dataclass(frozen=True)
class Candidate:
    id: str
    text: str


@dataclass(frozen=True)
class NearMatch:
    existing_id: str
    existing_text: str
    score: float


def classify_id_match(incoming_updated_at: str, existing_updated_at: str) -> MergeOutcome:
    """Outcome for an incoming item whose id already exists locally."""
    if is_newer(incoming_updated_at, existing_updated_at):
        return MergeOutcome.UPDATED
    return MergeOutcome.DUPLICATE


def find_near_duplicate(
    text: str,
    candidates: Iterable[Candidate],
    threshold: float = DEFAULT_THRESHOLD,
) -> NearMatch | None:
    """Highest-scoring candidate with similarity >= threshold, or None.

    Texts too long to score are skipped, never matched.
    """
    normalized = normalize(text)
    best: NearMatch | None = None
    for candidate in candidates:
        try:
            score = ratio(normalized, normalize(candidate.text))
        except ValueError:
            continue
        if score < threshold:
            continue
        if best is None or score > best.score:
            best = NearMatch(candidate.id, candidate.text, score)
    return best


def validate_threshold(threshold: float) -> float:
    if not 0.0 <= threshold <= 1.0:
        raise ValueError(f"similarity_threshold must be within [0, 1], got {threshold}")
    return threshold
