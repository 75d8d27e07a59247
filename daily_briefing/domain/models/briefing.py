from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel


class Category(str, Enum):
    """Cached data categories, one cache entry each."""
    WEATHER = "weather"
    STOCKS = "stocks"
    GLOBAL_NEWS = "globalNews"
    LEGAL_NEWS = "legalNews"


class NewsCategory(str, Enum):
    """Search-intent templates understood by the news adaptor."""
    GLOBAL = "global"
    OTHER = "other"

    @classmethod
    def from_request(cls, value: Optional[str]) -> "NewsCategory":
        """Anything other than ``global`` selects the legal-tech template."""
        return cls.GLOBAL if value == cls.GLOBAL.value else cls.OTHER

    @property
    def cache_category(self) -> Category:
        return Category.GLOBAL_NEWS if self is NewsCategory.GLOBAL else Category.LEGAL_NEWS


class WeatherSnapshot(BaseModel):
    """Current conditions for the configured location."""
    temp: int
    feels_like: int
    description: str
    icon: str
    humidity: Any
    wind_speed: int


class IndexQuote(BaseModel):
    """A single index proxy quote, numbers preformatted as strings."""
    price: str
    change: str
    changePercent: str


class StockSnapshot(BaseModel):
    """Broad-market and tech-heavy index quotes."""
    sp500: IndexQuote
    nasdaq: IndexQuote


class NewsStory(BaseModel):
    """A single news story returned by the search model."""
    title: str
    summary: str
    url: str
    source: str
    imageUrl: Optional[str] = None


class NewsSearchResult(BaseModel):
    """
    Stories returned by the news adaptor.

    ``placeholder`` is set when the model produced no JSON array and the
    adaptor substituted the fixed "News Unavailable" stories.
    """
    stories: List[NewsStory]
    placeholder: bool = False
