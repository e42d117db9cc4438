"""Timestamps — verifies the fixed-width ISO form and instant comparison."""

from datetime import datetime, timezone

from debatekb.core.timestamps import (
    advance, format_iso, is_newer, is_valid_iso, now_iso, sequential,
)


def test_format_is_fixed_width_utc_millis():
    moment = datetime(2025, 1, 2, 3, 4, 5, 678_000, tzinfo=timezone.utc)
    assert format_iso(moment) == "2025-01-02T03:04:05.678Z"
    assert len(now_iso()) == len("2025-01-02T03:04:05.678Z")


def test_is_newer_compares_instants_across_precisions():
    assert is_newer("2025-11-08T13:00:00.001Z", "2025-11-08T13:00:00Z")
    assert not is_newer("2025-11-08T13:00:00Z", "2025-11-08T13:00:00.000Z")
    assert is_newer("2025-11-08T14:00:00+01:00", "2025-11-08T12:59:59Z")


def test_is_valid_iso():
    assert is_valid_iso("2025-11-08T13:00:00Z")
    assert not is_valid_iso("yesterday")


def test_advance_never_goes_backwards():
    future = "2999-01-01T00:00:00.000Z"
    assert advance(future) == future
    assert is_newer(advance("2000-01-01T00:00:00.000Z"), "2000-01-01T00:00:00.000Z")
    assert is_valid_iso(advance(None))


def test_sequential_is_strictly_increasing():
    stamps = sequential(datetime(2025, 1, 1, tzinfo=timezone.utc), 5)
    assert len(set(stamps)) == 5
    assert stamps == sorted(stamps)
    assert stamps[1] == "2025-01-01T00:00:00.001Z"
