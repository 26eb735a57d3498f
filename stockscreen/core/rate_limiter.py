import asyncio
import time
from typing import Optional
from stockscreen.core.config import settings
from stockscreen.core.logger import Logger

logger = Logger("RateLimiter")


class RateLimiter:
    """Minimum-gap limiter for upstream market data requests.

    Each acquire() reserves the next start slot under the lock and sleeps
    outside it, so concurrent callers are spaced out but not serialized
    for the duration of their requests.
    """

    def __init__(self, rate_limit_ms: Optional[int] = None):
        if rate_limit_ms is None:
            rate_limit_ms = settings.UPSTREAM_MIN_INTERVAL_MS or 0
        self.rate_limit_ms = rate_limit_ms
        self.rate_limit_seconds = self.rate_limit_ms / 1000
        self._next_slot: float = 0
        self._lock = asyncio.Lock()

    async def acquire(self):
        """Wait until we're allowed to make another upstream call."""
        if self.rate_limit_seconds <= 0:
            return

        async with self._lock:
            now = time.monotonic()
            start = max(now, self._next_slot)
            self._next_slot = start + self.rate_limit_seconds

        wait_time = start - now
        if wait_time > 0:
            logger.debug(f"Throttling upstream call for {wait_time:.3f}s")
            await asyncio.sleep(wait_time)

    async def __aenter__(self):
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        pass
