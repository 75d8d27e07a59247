"""Tests for the stock quote adaptor and the rate limiter it uses."""

import httpx
import pytest

from daily_briefing.adapters.implementations import StockQuoteAdaptor
from daily_briefing.adapters.implementations.stocks import format_two_places
from daily_briefing.core.exceptions import ConfigurationError, UpstreamError
from daily_briefing.infrastructure.rate_limiter import RateLimiter


def global_quote(symbol, price, change, percent):
    return {
        "Global Quote": {
            "01. symbol": symbol,
            "05. price": price,
            "09. change": change,
            "10. change percent": percent,
        }
    }


QUOTES = {
    "SPY": global_quote("SPY", "123.456", "1.2", "0.9800%"),
    "QQQ": global_quote("QQQ", "438.1", "-2.054", "-0.4657%"),
}


class ManualClock:
    """Seconds clock advanced by the fake sleep."""

    def __init__(self):
        self.now = 1000.0
        self.sleeps = []

    def __call__(self):
        return self.now

    async def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def manual_clock():
    return ManualClock()


@pytest.fixture
def limiter(manual_clock):
    return RateLimiter(calls_per_minute=5, clock=manual_clock, sleep=manual_clock.sleep)


def make_adaptor(handler, limiter, api_key="stock-key"):
    return StockQuoteAdaptor(
        api_key=api_key,
        rate_limiter=limiter,
        transport=httpx.MockTransport(handler),
    )


class TestFormatting:
    """Tests for two-decimal formatting."""

    @pytest.mark.parametrize(
        "raw, expected",
        [("123.456", "123.46"), ("1.2", "1.20"), ("-2.054", "-2.05"), ("0.005", "0.01"), ("512", "512.00")],
    )
    def test_format_two_places(self, raw, expected):
        assert format_two_places(raw) == expected


class TestStockQuoteAdaptor:
    """Tests for fetching and normalizing index quotes."""

    async def test_fetches_both_proxies_in_order(self, limiter, manual_clock):
        symbols = []

        def handler(request):
            symbol = request.url.params["symbol"]
            symbols.append(symbol)
            assert request.url.params["function"] == "GLOBAL_QUOTE"
            assert request.url.params["apikey"] == "stock-key"
            return httpx.Response(200, json=QUOTES[symbol])

        snapshot = await make_adaptor(handler, limiter).fetch_and_normalize()

        assert symbols == ["SPY", "QQQ"]
        assert snapshot.model_dump() == {
            "sp500": {"price": "123.46", "change": "1.20", "changePercent": "0.9800"},
            "nasdaq": {"price": "438.10", "change": "-2.05", "changePercent": "-0.4657"},
        }
        assert manual_clock.sleeps == [pytest.approx(12.0)]

    async def test_rate_limit_note_raises_after_first_call(self, limiter):
        calls = []

        def handler(request):
            calls.append(request.url.params["symbol"])
            return httpx.Response(200, json={"Note": "Thank you for using Alpha Vantage! Our standard API call frequency is 5 calls per minute."})

        with pytest.raises(UpstreamError, match="rate limit reached"):
            await make_adaptor(handler, limiter).fetch()

        assert calls == ["SPY"]

    async def test_second_quote_missing_raises(self, limiter):
        def handler(request):
            if request.url.params["symbol"] == "SPY":
                return httpx.Response(200, json=QUOTES["SPY"])
            return httpx.Response(200, json={"Global Quote": {}})

        with pytest.raises(UpstreamError, match="Stock API failed"):
            await make_adaptor(handler, limiter).fetch()

    async def test_non_success_status_raises(self, limiter):
        def handler(request):
            return httpx.Response(503, text="Service Unavailable")

        with pytest.raises(UpstreamError) as exc_info:
            await make_adaptor(handler, limiter).fetch()

        assert exc_info.value.status_code == 503

    async def test_missing_api_key(self, limiter):
        def handler(request):
            raise AssertionError("no request expected")

        with pytest.raises(ConfigurationError):
            await make_adaptor(handler, limiter, api_key="").fetch()

    def test_malformed_quote_raises(self, limiter):
        adaptor = StockQuoteAdaptor(api_key="stock-key", rate_limiter=limiter)
        data = {"sp500": {"05. price": "not-a-number", "09. change": "1", "10. change percent": "1%"},
                "nasdaq": QUOTES["QQQ"]["Global Quote"]}

        with pytest.raises(UpstreamError):
            adaptor.normalize(data)


class TestRateLimiter:
    """Tests for call spacing."""

    async def test_first_call_does_not_wait(self, limiter, manual_clock):
        waited = await limiter.acquire()

        assert waited == 0.0
        assert manual_clock.sleeps == []

    async def test_consecutive_calls_are_spaced(self, limiter, manual_clock):
        await limiter.acquire()
        manual_clock.now += 5
        waited = await limiter.acquire()

        assert waited == pytest.approx(7.0)

    async def test_no_wait_after_interval_elapsed(self, limiter, manual_clock):
        await limiter.acquire()
        manual_clock.now += 20
        waited = await limiter.acquire()

        assert waited == 0.0
        assert manual_clock.sleeps == []

    def test_interval_follows_provider_limit(self):
        assert RateLimiter(calls_per_minute=30).min_interval == pytest.approx(2.0)

    def test_rejects_non_positive_limit(self):
        with pytest.raises(ValueError):
            RateLimiter(calls_per_minute=0)
