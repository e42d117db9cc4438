"""Lookup Cache — verifies derived keys, cached misses and invalidation."""

from debatekb.core.lookup_cache import LookupCache
from debatekb.core.normalize_text import normalize


def test_unknown_key_is_missing():
    cache = LookupCache(normalize)
    assert LookupCache.is_missing(cache.get("Ad Hominem"))
    assert cache.misses == 1


def test_hits_share_derived_key():
    cache = LookupCache(normalize)
    cache.put("Ad Hominem", "ad_hominem")
    assert cache.get("ad hominem!") == "ad_hominem"
    assert cache.hits == 1


def test_misses_are_cached_as_none():
    cache = LookupCache(normalize)
    cache.put("Nope", None)
    entry = cache.get("nope")
    assert entry is None
    assert not LookupCache.is_missing(entry)


def test_invalidate_clears_everything():
    cache = LookupCache(normalize)
    cache.put("a", "1")
    cache.put("b", None)
    assert len(cache) == 2
    cache.invalidate()
    assert len(cache) == 0
    assert LookupCache.is_missing(cache.get("a"))
