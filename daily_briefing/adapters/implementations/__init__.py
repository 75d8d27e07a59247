"""
Concrete adaptor implementations, one per upstream provider.
"""

from daily_briefing.adapters.implementations.calendar import CalendarAdaptor
from daily_briefing.adapters.implementations.news import NewsSearchAdaptor
from daily_briefing.adapters.implementations.stocks import StockQuoteAdaptor
from daily_briefing.adapters.implementations.weather import WeatherAdaptor

__all__ = [
    "CalendarAdaptor",
    "NewsSearchAdaptor",
    "StockQuoteAdaptor",
    "WeatherAdaptor",
]
