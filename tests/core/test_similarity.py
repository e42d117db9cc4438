"""Similarity Scoring — verifies Levenshtein distance and the normalized ratio.

Tests:
    - Known distances
    - Bounds, identity and symmetry
    - Oversize inputs raise in the scorer and are "not similar" in are_similar
"""

import pytest

from debatekb.core.similarity import (
    MAX_TEXT_LENGTH, are_similar, levenshtein_distance, ratio, similarity,
)


@pytest.mark.parametrize("a, b, expected", [
    ("kitten", "sitting", 3),
    ("", "abc", 3),
    ("abc", "", 3),
    ("same", "same", 0),
    ("flaw", "lawn", 2),
])
def test_levenshtein_distance(a, b, expected):
    assert levenshtein_distance(a, b) == expected


def test_identity_and_empty():
    assert similarity("Anything at all", "anything at all!") == 1.0
    assert similarity("", "") == 1.0
    assert ratio("", "x") == 0.0


def test_symmetric_and_bounded():
    pairs = [("kitten", "sitting"), ("free will exists", "free will is real"), ("a", "zzzz")]
    for a, b in pairs:
        score = similarity(a, b)
        assert score == similarity(b, a)
        assert 0.0 <= score <= 1.0


def test_ratio_value():
    assert ratio("kitten", "sitting") == pytest.approx(1 - 3 / 7)


def test_are_similar_threshold():
    assert are_similar(
        "The death penalty deters violent crime",
        "The death penalty deters violent crimes",
        0.9,
    )
    assert not are_similar("Taxes should rise", "Cats are mammals", 0.9)


def test_oversize_text_raises_in_distance():
    with pytest.raises(ValueError):
        levenshtein_distance("a" * (MAX_TEXT_LENGTH + 1), "a")


def test_oversize_text_is_not_similar():
    assert not are_similar("a" * (MAX_TEXT_LENGTH + 1), "a" * MAX_TEXT_LENGTH + "b")
