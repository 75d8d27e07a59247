import math
from typing import Any, Dict, Optional

import httpx

from daily_briefing.adapters.interfaces import HTTPAdaptor
from daily_briefing.core.exceptions import ConfigurationError, UpstreamError
from daily_briefing.core.logging import get_logger
from daily_briefing.domain.models import WeatherSnapshot

logger = get_logger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards positive infinity."""
    return int(math.floor(value + 0.5))


class WeatherAdaptor(HTTPAdaptor[Dict[str, Any], WeatherSnapshot]):
    """Current conditions for a fixed location from OpenWeatherMap."""

    provider_name = "openweathermap"

    def __init__(
        self,
        api_key: Optional[str],
        location: str = "Los Angeles,US",
        units: str = "imperial",
        base_url: str = "https://api.openweathermap.org/data/2.5/weather",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        super().__init__(timeout=timeout, transport=transport)
        self.api_key = api_key
        self.location = location
        self.units = units
        self.base_url = base_url

    async def fetch(self, **kwargs) -> Dict[str, Any]:
        if not self.api_key:
            raise ConfigurationError("WEATHER_API_KEY is not configured")

        params = {"q": self.location, "appid": self.api_key, "units": self.units}
        logger.debug(f"Fetching weather for {self.location}")
        async with self._client() as client:
            return await self._get_json(client, self.base_url, params, "Weather API failed")

    def normalize(self, data: Dict[str, Any]) -> WeatherSnapshot:
        """
        Round temperature, feels-like and wind speed; pass the rest through.

        Raises:
            UpstreamError: If the provider body lacks any expected field.
        """
        try:
            main = data["main"]
            condition = data["weather"][0]
            return WeatherSnapshot(
                temp=round_half_up(main["temp"]),
                feels_like=round_half_up(main["feels_like"]),
                description=condition["description"],
                icon=condition["icon"],
                humidity=main["humidity"],
                wind_speed=round_half_up(data["wind"]["speed"]),
            )
        except (KeyError, IndexError, TypeError) as e:
            logger.error(f"Incomplete weather payload: missing {str(e)}")
            raise UpstreamError(
                "Weather API returned an incomplete payload",
                provider=self.provider_name,
                original_exception=e
            ) from e
