"""Similarity Scoring — Levenshtein ratio over normalized text for near-duplicate flagging.

Invariants:
    - similarity(x, x) == 1.0, similarity("", "") == 1.0, symmetric
    - Result always within [0.0, 1.0]
    - Advisory only: never the basis for an automatic duplicate decision
      (fingerprint equality is)

Design Decisions:
    - Two-row DP over the shorter string: O(min(m, n)) memory
    - MAX_TEXT_LENGTH bounds the O(m*n) cost; are_similar() treats oversize
      inputs as "not similar" instead of raising
"""

from debatekb.core.normalize_text import normalize

MAX_TEXT_LENGTH = 5000
DEFAULT_THRESHOLD = 0.90


def levenshtein_distance(a: str, b: str) -> int:
    """Edit distance (insert/delete/substitute, unit cost)."""
    if len(a) > MAX_TEXT_LENGTH or len(b) > MAX_TEXT_LENGTH:
        raise ValueError(
            f"Text too long for similarity comparison (max: {MAX_TEXT_LENGTH} characters)",
        )
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    shorter, longer = (a, b) if len(a) <= len(b) else (b, a)
    previous = list(range(len(shorter) + 1))
    current = [0] * (len(shorter) + 1)

    for i in range(1, len(longer) + 1):
        current[0] = i
        for j in range(1, len(shorter) + 1):
            cost = 0 if longer[i - 1] == shorter[j - 1] else 1
            current[j] = min(
                current[j - 1] + 1,
                previous[j] + 1,
                previous[j - 1] + cost,
            )
        previous, current = current, previous

    return previous[len(shorter)]


def ratio(a: str, b: str) -> float:
    """Similarity of two already-normalized strings."""
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0
    distance = levenshtein_distance(a, b)
    return 1.0 - distance / max(len(a), len(b))


def similarity(a: str, b: str) -> float:
    """1 - lev(normalize(a), normalize(b)) / max length."""
    return ratio(normalize(a), normalize(b))


def are_similar(a: str, b: str, threshold: float = DEFAULT_THRESHOLD) -> bool:
    try:
        return similarity(a, b) >= threshold
    except ValueError:
        return False
