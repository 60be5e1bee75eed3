"""
Unit tests for the derived view cache and its key.
"""
from datetime import timedelta, timezone

import pytest

from weightgraph.core.series import Span
from weightgraph.core.units import WeightUnit
from weightgraph.core.view_cache import CachedView, CacheKey, DerivedViewCache, bucket_anchor, scroll_bucket
from sample_data import BASE_TIME

BUCKET = timedelta(hours=12)


def _key(span=Span.WEEK, unit=WeightUnit.KILOGRAM, version=1, bucket=0):
    return CacheKey(span=span, unit=unit, data_version=version, scroll_bucket=bucket)


class TestCacheKey:
    def test_is_hashable_value(self):
        assert _key() == _key()
        assert hash(_key()) == hash(_key())

    @pytest.mark.parametrize("changes", [
        {"span": Span.MONTH}, {"unit": WeightUnit.POUND}, {"version": 2}, {"bucket": 1},
    ])
    def test_any_component_changes_key(self, changes):
        assert _key(**changes) != _key()

    def test_rejects_wrong_types(self):
        with pytest.raises(TypeError):
            CacheKey(span="week", unit=WeightUnit.KILOGRAM, data_version=0, scroll_bucket=0)
        with pytest.raises(TypeError):
            CacheKey(span=Span.WEEK, unit="kg", data_version=0, scroll_bucket=0)
        with pytest.raises(TypeError):
            CacheKey(span=Span.WEEK, unit=WeightUnit.KILOGRAM, data_version=0, scroll_bucket=0.5)

    def test_rejects_negative_version(self):
        with pytest.raises(ValueError):
            _key(version=-1)


class TestScrollBucket:
    def test_small_jitter_stays_in_bucket(self):
        index = scroll_bucket(BASE_TIME, BUCKET)
        assert scroll_bucket(BASE_TIME + timedelta(hours=5), BUCKET) == index
        assert scroll_bucket(BASE_TIME - timedelta(hours=5), BUCKET) == index

    def test_crossing_boundary_changes_bucket(self):
        assert scroll_bucket(BASE_TIME + timedelta(hours=7), BUCKET) == scroll_bucket(BASE_TIME, BUCKET) + 1

    def test_bucket_anchor_round_trips(self):
        index = scroll_bucket(BASE_TIME + timedelta(hours=3), BUCKET)
        anchor = bucket_anchor(index, BUCKET, BASE_TIME)
        assert anchor == BASE_TIME
        assert anchor.tzinfo == timezone.utc


class TestDerivedViewCache:
    def test_get_absent_before_put(self):
        cache = DerivedViewCache(4)
        assert cache.get(_key()) is None
        view = CachedView()
        cache.put(_key(), view)
        assert cache.get(_key()) is view

    def test_unit_or_span_change_misses(self):
        cache = DerivedViewCache(4)
        cache.put(_key(), CachedView())
        assert cache.get(_key(unit=WeightUnit.POUND)) is None
        assert cache.get(_key(span=Span.YEAR)) is None

    def test_lru_eviction(self):
        cache = DerivedViewCache(2)
        cache.put(_key(bucket=1), CachedView())
        cache.put(_key(bucket=2), CachedView())
        cache.get(_key(bucket=1))
        cache.put(_key(bucket=3), CachedView())
        assert _key(bucket=1) in cache
        assert _key(bucket=2) not in cache
        assert len(cache) == 2

    def test_new_bucket_keeps_other_entries(self):
        cache = DerivedViewCache(8)
        for bucket in range(5):
            cache.put(_key(bucket=bucket), CachedView())
        assert len(cache) == 5

    def test_invalidate_by_predicate(self):
        cache = DerivedViewCache(8)
        for bucket in range(4):
            cache.put(_key(bucket=bucket), CachedView())
        assert cache.invalidate(lambda key: key.scroll_bucket % 2 == 0) == 2
        assert sorted(key.scroll_bucket for key in list(cache._entries)) == [1, 3]

    def test_sync_clears_on_context_change(self):
        cache = DerivedViewCache(8)
        assert cache.sync(Span.WEEK, WeightUnit.KILOGRAM, 1) is True
        cache.put(_key(), CachedView())
        assert cache.sync(Span.WEEK, WeightUnit.KILOGRAM, 1) is False
        assert len(cache) == 1
        assert cache.sync(Span.WEEK, WeightUnit.KILOGRAM, 2) is True
        assert len(cache) == 0

    def test_rejects_non_positive_capacity(self):
        with pytest.raises(ValueError):
            DerivedViewCache(0)
