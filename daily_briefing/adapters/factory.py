import logging
from typing import Any, Callable, Dict

from daily_briefing.adapters.implementations import (
    CalendarAdaptor,
    NewsSearchAdaptor,
    StockQuoteAdaptor,
    WeatherAdaptor,
)
from daily_briefing.core.config import Settings
from daily_briefing.infrastructure.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


class AdaptorNotFoundError(KeyError):
    """Raised when no builder is registered for an adaptor type."""


class AdaptorFactory:
    """
    Factory for creating adaptor instances from application settings.
    Maps adaptor type strings to builder callables.
    """

    def __init__(self, settings: Settings):
        """
        Initialize the factory with the built-in adaptor builders.

        Args:
            settings: Application settings holding provider configuration
        """
        self.settings = settings
        self._builders: Dict[str, Callable[[Settings], Any]] = {
            "weather": self._build_weather,
            "stocks": self._build_stocks,
            "news": self._build_news,
            "calendar": self._build_calendar,
        }
        logger.info("Initialized AdaptorFactory")

    def create_adaptor(self, adaptor_type: str) -> Any:
        """
        Create an adaptor instance of the specified type.

        Args:
            adaptor_type: One of the registered adaptor types

        Raises:
            AdaptorNotFoundError: If the adaptor type is not registered
        """
        builder = self._builders.get(adaptor_type)
        if builder is None:
            raise AdaptorNotFoundError(f"Adaptor type '{adaptor_type}' not registered")

        adaptor = builder(self.settings)
        logger.info(f"Created {adaptor_type} adaptor")
        return adaptor

    @staticmethod
    def _build_weather(settings: Settings) -> WeatherAdaptor:
        return WeatherAdaptor(
            api_key=settings.WEATHER_API_KEY,
            location=settings.WEATHER_LOCATION,
            units=settings.WEATHER_UNITS,
            base_url=settings.WEATHER_API_URL,
            timeout=settings.HTTP_TIMEOUT,
        )

    @staticmethod
    def _build_stocks(settings: Settings) -> StockQuoteAdaptor:
        return StockQuoteAdaptor(
            api_key=settings.STOCK_API_KEY,
            rate_limiter=RateLimiter(calls_per_minute=settings.STOCK_CALLS_PER_MINUTE),
            base_url=settings.STOCK_API_URL,
            timeout=settings.HTTP_TIMEOUT,
        )

    @staticmethod
    def _build_news(settings: Settings) -> NewsSearchAdaptor:
        return NewsSearchAdaptor(
            model=settings.NEWS_MODEL,
            max_tokens=settings.NEWS_MAX_TOKENS,
            timeout=settings.NEWS_TIMEOUT,
            fallback_policy=settings.NEWS_FALLBACK_POLICY,
        )

    @staticmethod
    def _build_calendar(settings: Settings) -> CalendarAdaptor:
        return CalendarAdaptor.from_credentials(
            settings.GOOGLE_CREDENTIALS,
            calendar_id=settings.CALENDAR_ID,
            default_max_results=settings.CALENDAR_MAX_RESULTS,
            free_time_window_days=settings.FREE_TIME_WINDOW_DAYS,
        )
