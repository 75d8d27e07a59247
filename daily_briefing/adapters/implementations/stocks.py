from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, Optional, Tuple

import httpx

from daily_briefing.adapters.interfaces import HTTPAdaptor
from daily_briefing.core.exceptions import ConfigurationError, UpstreamError
from daily_briefing.core.logging import get_logger
from daily_briefing.domain.models import IndexQuote, StockSnapshot
from daily_briefing.infrastructure.rate_limiter import RateLimiter

logger = get_logger(__name__)

STOCK_FAILURE_MESSAGE = "Stock API failed or rate limit reached"

# Payload key -> ETF used as the index proxy, fetched in this order
INDEX_PROXIES: Tuple[Tuple[str, str], ...] = (
    ("sp500", "SPY"),
    ("nasdaq", "QQQ"),
)


def format_two_places(value: Any) -> str:
    """Format a numeric string with exactly two decimals, halves rounded up."""
    return str(Decimal(str(value).strip()).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


class StockQuoteAdaptor(HTTPAdaptor[Dict[str, Dict[str, Any]], StockSnapshot]):
    """
    Index proxy quotes from Alpha Vantage ``GLOBAL_QUOTE``.

    Quotes are fetched one after another; the rate limiter spaces the calls
    to stay within the provider's per-minute allowance.
    """

    provider_name = "alphavantage"

    def __init__(
        self,
        api_key: Optional[str],
        rate_limiter: Optional[RateLimiter] = None,
        base_url: str = "https://www.alphavantage.co/query",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        super().__init__(timeout=timeout, transport=transport)
        self.api_key = api_key
        self.rate_limiter = rate_limiter or RateLimiter(calls_per_minute=5)
        self.base_url = base_url

    async def fetch(self, **kwargs) -> Dict[str, Dict[str, Any]]:
        """
        Fetch the raw ``Global Quote`` block for every index proxy.

        Raises:
            UpstreamError: If any call fails or returns no usable quote.
        """
        if not self.api_key:
            raise ConfigurationError("STOCK_API_KEY is not configured")

        quotes = {}
        async with self._client() as client:
            for key, symbol in INDEX_PROXIES:
                await self.rate_limiter.acquire()
                params = {"function": "GLOBAL_QUOTE", "symbol": symbol, "apikey": self.api_key}
                logger.debug(f"Fetching quote for {symbol}")
                data = await self._get_json(client, self.base_url, params, STOCK_FAILURE_MESSAGE)

                quote = data.get("Global Quote") if isinstance(data, dict) else None
                if not quote:
                    notice = None
                    if isinstance(data, dict):
                        notice = data.get("Note") or data.get("Information") or data.get("Error Message")
                    logger.warning(
                        f"No quote data for {symbol}",
                        extra={"symbol": symbol, "provider_notice": notice}
                    )
                    raise UpstreamError(STOCK_FAILURE_MESSAGE, provider=self.provider_name)
                quotes[key] = quote
        return quotes

    def normalize(self, data: Dict[str, Dict[str, Any]]) -> StockSnapshot:
        try:
            return StockSnapshot(**{key: self._normalize_quote(data[key]) for key, _ in INDEX_PROXIES})
        except (KeyError, InvalidOperation, AttributeError) as e:
            logger.error(f"Malformed quote payload: {str(e)}")
            raise UpstreamError(
                STOCK_FAILURE_MESSAGE,
                provider=self.provider_name,
                original_exception=e
            ) from e

    @staticmethod
    def _normalize_quote(quote: Dict[str, Any]) -> IndexQuote:
        return IndexQuote(
            price=format_two_places(quote["05. price"]),
            change=format_two_places(quote["09. change"]),
            changePercent=str(quote["10. change percent"]).strip().rstrip("%"),
        )
