import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Minimum spacing between consecutive AI calls, shared process-wide.

    A call arriving before `next_allowed_at()` is delayed (never rejected) until
    the interval has elapsed. Clock and sleep are injectable so tests run
    without real delays.
    """

    def __init__(
        self,
        min_interval_s: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.min_interval_s = max(0.0, float(min_interval_s))
        self._clock = clock
        self._sleep = sleep
        self._last_call: Optional[float] = None
        self._lock = asyncio.Lock()

    def next_allowed_at(self) -> float:
        """Clock time at which the next call may proceed (now if no call happened yet)."""
        if self._last_call is None:
            return self._clock()
        return self._last_call + self.min_interval_s

    async def acquire(self) -> float:
        """Wait for the slot, stamp it, and return how long the caller was delayed."""
        async with self._lock:
            wait = self.next_allowed_at() - self._clock()
            if wait > 0:
                logger.debug("Rate limiter delaying AI call by %.3fs", wait)
                await self._sleep(wait)
            self._last_call = self._clock()
            return max(0.0, wait)
