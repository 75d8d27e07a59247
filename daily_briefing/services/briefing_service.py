import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from daily_briefing.adapters.implementations import (
    NewsSearchAdaptor,
    StockQuoteAdaptor,
    WeatherAdaptor,
)
from daily_briefing.domain.models import Category, NewsCategory
from daily_briefing.infrastructure.cache import BriefingCache

logger = logging.getLogger(__name__)


class BriefingService:
    """Serves briefing categories from the cache, fetching upstream on a miss."""

    def __init__(
        self,
        cache: BriefingCache,
        weather_adaptor: WeatherAdaptor,
        stock_adaptor: StockQuoteAdaptor,
        news_adaptor: NewsSearchAdaptor
    ):
        self.cache = cache
        self.weather_adaptor = weather_adaptor
        self.stock_adaptor = stock_adaptor
        self.news_adaptor = news_adaptor

    async def _cached(
        self,
        category: Category,
        fetch: Callable[[], Awaitable[Tuple[Any, bool]]]
    ) -> Tuple[Any, bool]:
        """
        Return ``(payload, cached)`` for a category.

        ``fetch`` returns the fresh payload and whether it may be stored. A
        failing fetch propagates and leaves the existing entry untouched.
        """
        entry = self.cache.get(category)
        if self.cache.is_valid(entry):
            logger.debug(f"Cache hit for {category.value}")
            return entry.data, True

        logger.info(f"Cache miss for {category.value}, fetching upstream")
        payload, storable = await fetch()
        if storable:
            self.cache.set(category, payload)
        return payload, False

    async def get_weather(self) -> Tuple[Dict[str, Any], bool]:
        """Weather snapshot for the configured location."""
        async def fetch():
            snapshot = await self.weather_adaptor.fetch_and_normalize()
            return snapshot.model_dump(), True

        return await self._cached(Category.WEATHER, fetch)

    async def get_stocks(self) -> Tuple[Dict[str, Any], bool]:
        """Broad-market and tech index quotes."""
        async def fetch():
            snapshot = await self.stock_adaptor.fetch_and_normalize()
            return snapshot.model_dump(), True

        return await self._cached(Category.STOCKS, fetch)

    async def get_news(self, api_key: str, category: Optional[str]) -> Tuple[List[Dict[str, Any]], bool]:
        """
        Five news stories for the requested template.

        Placeholder stories are returned to the caller but never cached.
        """
        news_category = NewsCategory.from_request(category)

        async def fetch():
            result = await self.news_adaptor.fetch_and_normalize(api_key=api_key, category=news_category)
            stories = [story.model_dump() for story in result.stories]
            return stories, not result.placeholder

        return await self._cached(news_category.cache_category, fetch)
