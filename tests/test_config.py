"""Tests for environment-driven settings."""

import pytest
from pydantic import ValidationError

from daily_briefing.core.config import Settings


def make_settings(**overrides):
    return Settings(_env_file=None, **overrides)


class TestSettings:
    """Tests for defaults, overrides and validation."""

    def test_defaults(self, monkeypatch):
        for name in ("WEATHER_API_KEY", "STOCK_API_KEY", "GOOGLE_CREDENTIALS", "CACHE_TTL", "NEWS_FALLBACK_POLICY"):
            monkeypatch.delenv(name, raising=False)

        settings = make_settings()

        assert settings.CACHE_TTL == 3600
        assert settings.WEATHER_LOCATION == "Los Angeles,US"
        assert settings.WEATHER_UNITS == "imperial"
        assert settings.STOCK_CALLS_PER_MINUTE == 5
        assert settings.NEWS_FALLBACK_POLICY == "placeholder"
        assert settings.CALENDAR_ID == "primary"
        assert settings.WEATHER_API_KEY is None
        assert settings.GOOGLE_CREDENTIALS is None

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("WEATHER_API_KEY", "weather-key")
        monkeypatch.setenv("CACHE_TTL", "120")
        monkeypatch.setenv("NEWS_FALLBACK_POLICY", "Error")

        settings = make_settings()

        assert settings.WEATHER_API_KEY == "weather-key"
        assert settings.CACHE_TTL == 120
        assert settings.NEWS_FALLBACK_POLICY == "error"

    def test_rejects_unknown_fallback_policy(self):
        with pytest.raises(ValidationError):
            make_settings(NEWS_FALLBACK_POLICY="retry")

    def test_rejects_non_positive_call_rate(self):
        with pytest.raises(ValidationError):
            make_settings(STOCK_CALLS_PER_MINUTE=0)
