"""Shared fixtures for the briefing service tests."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from daily_briefing.adapters.implementations import CalendarAdaptor
from daily_briefing.api.dependencies import get_briefing_service, get_cache, get_calendar_adaptor
from daily_briefing.domain.models import (
    IndexQuote,
    NewsSearchResult,
    NewsStory,
    StockSnapshot,
    WeatherSnapshot,
)
from daily_briefing.infrastructure.cache import BriefingCache
from daily_briefing.main import app
from daily_briefing.services import BriefingService


FIXED_NOW = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start_millis: int = 1_700_000_000_000):
        self.now = start_millis

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += int(seconds * 1000)


class SpyAdaptor:
    """Stands in for an upstream adaptor and records every fetch."""

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    async def fetch_and_normalize(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.result


def make_story(index: int) -> NewsStory:
    return NewsStory(
        title=f"Story {index}",
        summary=f"Summary {index}",
        url=f"https://example.com/{index}",
        source="Reuters",
        imageUrl=None,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return BriefingCache(ttl=3600, clock=clock)


@pytest.fixture
def weather_snapshot():
    return WeatherSnapshot(
        temp=72,
        feels_like=70,
        description="clear sky",
        icon="01d",
        humidity=40,
        wind_speed=6,
    )


@pytest.fixture
def stock_snapshot():
    return StockSnapshot(
        sp500=IndexQuote(price="512.34", change="1.20", changePercent="0.2345"),
        nasdaq=IndexQuote(price="438.10", change="-2.05", changePercent="-0.4657"),
    )


@pytest.fixture
def news_result():
    return NewsSearchResult(stories=[make_story(i) for i in range(5)])


@pytest.fixture
def weather_spy(weather_snapshot):
    return SpyAdaptor(result=weather_snapshot)


@pytest.fixture
def stock_spy(stock_snapshot):
    return SpyAdaptor(result=stock_snapshot)


@pytest.fixture
def news_spy(news_result):
    return SpyAdaptor(result=news_result)


@pytest.fixture
def briefing_service(cache, weather_spy, stock_spy, news_spy):
    return BriefingService(
        cache=cache,
        weather_adaptor=weather_spy,
        stock_adaptor=stock_spy,
        news_adaptor=news_spy,
    )


@pytest.fixture
def calendar_service():
    """MagicMock shaped like a Calendar v3 service resource."""
    service = MagicMock()
    service.events.return_value.list.return_value.execute.return_value = {
        "items": [{"id": "evt-1", "summary": "Standup"}]
    }
    service.events.return_value.get.return_value.execute.return_value = {
        "id": "evt-1",
        "summary": "Standup",
    }
    service.freebusy.return_value.query.return_value.execute.return_value = {
        "calendars": {"primary": {"busy": [{"start": "2024-01-15T12:00:00Z", "end": "2024-01-15T13:00:00Z"}]}}
    }
    return service


@pytest.fixture
def calendar_adaptor(calendar_service):
    return CalendarAdaptor(service_factory=lambda: calendar_service, clock=lambda: FIXED_NOW)


@pytest.fixture
def client(cache, briefing_service, calendar_adaptor):
    app.dependency_overrides[get_cache] = lambda: cache
    app.dependency_overrides[get_briefing_service] = lambda: briefing_service
    app.dependency_overrides[get_calendar_adaptor] = lambda: calendar_adaptor
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
