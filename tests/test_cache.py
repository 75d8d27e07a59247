"""Tests for the per-category briefing cache."""

import pytest

from daily_briefing.domain.models import Category
from daily_briefing.infrastructure.cache import BriefingCache, CacheEntry


class TestBriefingCache:
    """Tests for get, is_valid and set."""

    def test_starts_empty(self, cache):
        for category in Category:
            entry = cache.get(category)
            assert entry == CacheEntry(data=None, timestamp=0)
            assert not cache.is_valid(entry)

    def test_set_stamps_current_time(self, cache, clock):
        cache.set(Category.WEATHER, {"temp": 70})

        entry = cache.get(Category.WEATHER)
        assert entry.data == {"temp": 70}
        assert entry.timestamp == clock.now
        assert cache.is_valid(entry)

    def test_expires_at_ttl(self, cache, clock):
        cache.set(Category.STOCKS, {"sp500": {}})

        clock.now += 3_599_999
        assert cache.is_valid(cache.get(Category.STOCKS))

        clock.now += 1
        assert not cache.is_valid(cache.get(Category.STOCKS))

    def test_set_overwrites(self, cache, clock):
        cache.set(Category.WEATHER, {"temp": 60})
        clock.advance(10)
        cache.set(Category.WEATHER, {"temp": 65})

        entry = cache.get(Category.WEATHER)
        assert entry.data == {"temp": 65}
        assert entry.timestamp == clock.now

    def test_categories_are_independent(self, cache):
        cache.set(Category.GLOBAL_NEWS, [{"title": "A"}])

        assert cache.get(Category.GLOBAL_NEWS).data == [{"title": "A"}]
        assert cache.get(Category.LEGAL_NEWS).data is None

    def test_returned_data_is_a_copy(self, cache):
        payload = {"temp": 70}
        cache.set(Category.WEATHER, payload)
        payload["temp"] = 0

        entry = cache.get(Category.WEATHER)
        entry.data["temp"] = 1

        assert cache.get(Category.WEATHER).data == {"temp": 70}

    def test_rejects_empty_payload(self, cache):
        with pytest.raises(ValueError):
            cache.set(Category.WEATHER, None)

    def test_invalidate_and_clear(self, cache):
        cache.set(Category.WEATHER, {"temp": 70})
        cache.set(Category.STOCKS, {"sp500": {}})

        cache.invalidate(Category.WEATHER)
        assert cache.get(Category.WEATHER).data is None
        assert cache.get(Category.STOCKS).data is not None

        cache.clear()
        assert cache.get(Category.STOCKS).data is None

    def test_snapshot(self, cache, clock):
        cache.set(Category.WEATHER, {"temp": 70})
        clock.advance(90)

        report = cache.snapshot()

        assert set(report) == {"weather", "stocks", "globalNews", "legalNews"}
        assert report["weather"] == {"populated": True, "valid": True, "age_seconds": 90.0}
        assert report["stocks"] == {"populated": False, "valid": False, "age_seconds": None}

    def test_custom_ttl(self, clock):
        cache = BriefingCache(ttl=60, clock=clock)
        cache.set(Category.WEATHER, {"temp": 70})
        clock.advance(61)

        assert not cache.is_valid(cache.get(Category.WEATHER))
