"""
Outbound rate limiting shared by every fetch tier.
"""
import asyncio
import time
from typing import Callable, Optional

from style_scraper.config import config


class RateLimiter:
    """
    Enforces a minimum interval between outbound requests.

    State is the pair (last_request, min_interval). The lock makes
    ``wait`` the single mutator, so concurrent scrapes queue up
    instead of reading a stale timestamp.
    """

    def __init__(
        self,
        min_interval: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.min_interval = min_interval
        self.last_request: Optional[float] = None
        self._clock = clock
        self._lock = asyncio.Lock()

    async def wait(self) -> float:
        """Sleep until the interval has elapsed, then record the request. Returns seconds slept."""
        async with self._lock:
            slept = 0.0
            if self.last_request is not None:
                remaining = self.min_interval - (self._clock() - self.last_request)
                if remaining > 0:
                    await asyncio.sleep(remaining)
                    slept = remaining
            self.last_request = self._clock()
            return slept


_default_limiter: Optional[RateLimiter] = None


def get_default_limiter() -> RateLimiter:
    """Process-wide limiter built from config on first use."""
    global _default_limiter
    if _default_limiter is None:
        _default_limiter = RateLimiter(config.MIN_REQUEST_INTERVAL)
    return _default_limiter
