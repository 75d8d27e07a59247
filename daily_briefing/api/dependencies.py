from functools import lru_cache

from daily_briefing.adapters import AdaptorFactory
from daily_briefing.adapters.implementations import CalendarAdaptor
from daily_briefing.core.config import get_settings
from daily_briefing.core.logging import get_logger
from daily_briefing.infrastructure.cache import BriefingCache
from daily_briefing.services import BriefingService

# Initialize logger
logger = get_logger(__name__)


@lru_cache()
def get_cache() -> BriefingCache:
    """
    Dependency providing the process-wide briefing cache.

    Constructed once per process and never persisted.
    """
    return BriefingCache(ttl=get_settings().CACHE_TTL)


@lru_cache()
def get_adaptor_factory() -> AdaptorFactory:
    """Dependency providing the adaptor factory."""
    return AdaptorFactory(get_settings())


@lru_cache()
def get_briefing_service() -> BriefingService:
    """
    Dependency providing the briefing service.

    The stock adaptor's rate limiter lives as long as this service, so
    spacing holds across requests.
    """
    factory = get_adaptor_factory()
    logger.debug("Building briefing service")
    return BriefingService(
        cache=get_cache(),
        weather_adaptor=factory.create_adaptor("weather"),
        stock_adaptor=factory.create_adaptor("stocks"),
        news_adaptor=factory.create_adaptor("news"),
    )


@lru_cache()
def get_calendar_adaptor() -> CalendarAdaptor:
    """
    Dependency providing the calendar adaptor.

    Credentials are read on first use, so a missing configuration surfaces
    as an operation failure rather than at startup.
    """
    return get_adaptor_factory().create_adaptor("calendar")
