"""Merge Policy — verifies id-match classification and the near-duplicate scan."""

import pytest

from debatekb.core.merge_policy import (
    Candidate, MergeOutcome, classify_id_match, find_near_duplicate, validate_threshold,
)
from debatekb.core.similarity import MAX_TEXT_LENGTH


def test_strictly_newer_updates():
    assert classify_id_match(
        "2025-02-01T00:00:00.000Z", "2025-01-01T00:00:00.000Z",
    ) is MergeOutcome.UPDATED


@pytest.mark.parametrize("incoming", [
    "2025-01-01T00:00:00.000Z",
    "2025-01-01T00:00:00Z",
    "2024-12-31T23:59:59.999Z",
])
def test_equal_or_older_is_duplicate(incoming):
    assert classify_id_match(incoming, "2025-01-01T00:00:00.000Z") is MergeOutcome.DUPLICATE


def test_near_duplicate_found_above_threshold():
    match = find_near_duplicate(
        "The death penalty deters violent crime",
        [Candidate("c1", "Cats are mammals"), Candidate("c2", "The death penalty deters violent crimes")],
        0.9,
    )
    assert match is not None
    assert match.existing_id == "c2"
    assert 0.9 <= match.score < 1.0


def test_best_candidate_wins():
    match = find_near_duplicate(
        "abcdefghij",
        [Candidate("far", "abcdefghzz"), Candidate("near", "abcdefghiz")],
        0.5,
    )
    assert match.existing_id == "near"


def test_nothing_above_threshold():
    assert find_near_duplicate("Taxes should rise", [Candidate("c1", "Cats are mammals")], 0.9) is None
    assert find_near_duplicate("anything", [], 0.9) is None


def test_oversize_candidates_are_skipped():
    huge = "a" * (MAX_TEXT_LENGTH + 1)
    assert find_near_duplicate(huge, [Candidate("c1", huge + "b")], 0.9) is None


def test_validate_threshold():
    assert validate_threshold(0.9) == 0.9
    with pytest.raises(ValueError):
        validate_threshold(1.5)
