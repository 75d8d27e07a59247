from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Optional, TypeVar
import logging

import httpx

from daily_briefing.core.exceptions import UpstreamError

# Type variables for generics
T = TypeVar('T')  # Generic type for raw provider data
R = TypeVar('R')  # Generic type for the canonical payload

logger = logging.getLogger(__name__)


class ExternalAPIAdaptorInterface(Generic[T, R], ABC):
    """
    Abstract base interface for upstream provider adaptors.

    Every adaptor fetches a raw provider response, translates it into the
    canonical payload for its category and raises ``UpstreamError`` when the
    provider fails.

    Type Parameters:
        T: The type of data received from the provider
        R: The canonical payload returned after normalization
    """

    provider_name: str = "upstream"

    @abstractmethod
    async def fetch(self, **kwargs) -> T:
        """
        Retrieves raw data from the provider.

        Raises:
            UpstreamError: If the provider responds with a failure.
        """
        pass

    @abstractmethod
    def normalize(self, data: T) -> R:
        """
        Converts provider data to the canonical payload.

        Raises:
            UpstreamError: If the data cannot be turned into a full payload.
        """
        pass

    async def fetch_and_normalize(self, **kwargs) -> R:
        """
        Convenience method that fetches data and normalizes it in one operation.
        """
        data = await self.fetch(**kwargs)
        return self.normalize(data)


class HTTPAdaptor(ExternalAPIAdaptorInterface[T, R], ABC):
    """
    Base for adaptors talking to a JSON-over-HTTP provider with ``httpx``.

    A client is opened per fetch sequence. Tests pass a ``transport`` to
    stand in for the provider.
    """

    def __init__(
        self,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    async def _get_json(
        self,
        client: httpx.AsyncClient,
        url: str,
        params: Dict[str, Any],
        failure_message: str
    ) -> Any:
        """
        GET ``url`` and decode the JSON body.

        Raises:
            UpstreamError: On connection failure, non-success status or a
                body that is not JSON.
        """
        try:
            response = await client.get(url, params=params)
        except httpx.RequestError as e:
            logger.error(f"{self.provider_name} request error: {str(e)}")
            raise UpstreamError(
                failure_message,
                provider=self.provider_name,
                original_exception=e
            ) from e

        if not response.is_success:
            logger.error(
                f"{self.provider_name} returned status {response.status_code}",
                extra={"provider": self.provider_name, "status_code": response.status_code}
            )
            raise UpstreamError(
                failure_message,
                provider=self.provider_name,
                status_code=response.status_code
            )

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"{self.provider_name} returned a non-JSON body")
            raise UpstreamError(
                failure_message,
                provider=self.provider_name,
                status_code=response.status_code,
                original_exception=e
            ) from e
