import asyncio
import time
from typing import Awaitable, Callable, Optional

from daily_briefing.core.logging import get_logger

logger = get_logger(__name__)


class RateLimiter:
    """
    Spaces consecutive calls to a provider according to its per-minute limit.

    ``acquire()`` waits until at least ``60 / calls_per_minute`` seconds have
    passed since the previous call on the same limiter. The first call never
    waits.
    """

    def __init__(
        self,
        calls_per_minute: int,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        """
        Initialize the limiter.

        Args:
            calls_per_minute: Provider limit on calls per minute
            clock: Monotonic clock returning seconds
            sleep: Coroutine used to wait
        """
        if calls_per_minute <= 0:
            raise ValueError(f"calls_per_minute must be positive, got: {calls_per_minute}")

        self.calls_per_minute = calls_per_minute
        self.min_interval = 60.0 / calls_per_minute
        self._clock = clock
        self._sleep = sleep
        self._last_call: Optional[float] = None
        self._lock = asyncio.Lock()

    async def acquire(self) -> float:
        """
        Wait for the next call slot.

        Returns:
            Seconds spent waiting
        """
        async with self._lock:
            waited = 0.0
            if self._last_call is not None:
                elapsed = self._clock() - self._last_call
                if elapsed < self.min_interval:
                    waited = self.min_interval - elapsed
                    logger.debug(f"Rate limiter waiting {waited:.2f}s")
                    await self._sleep(waited)
            self._last_call = self._clock()
            return waited
