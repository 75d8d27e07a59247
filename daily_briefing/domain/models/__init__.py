"""
Domain models for the Daily Briefing Service.
"""

from daily_briefing.domain.models.briefing import (
    Category,
    IndexQuote,
    NewsCategory,
    NewsSearchResult,
    NewsStory,
    StockSnapshot,
    WeatherSnapshot,
)

__all__ = [
    "Category",
    "IndexQuote",
    "NewsCategory",
    "NewsSearchResult",
    "NewsStory",
    "StockSnapshot",
    "WeatherSnapshot",
]
