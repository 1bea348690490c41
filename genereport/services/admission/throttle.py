"""Outbound throttle

Blocks the caller until an upstream quota has room, instead of rejecting.
Used in front of NCBI E-utilities, which allow 3 requests per second per
client, or 10 with an API key.
"""

import logging
import time
from typing import Callable, Optional

from genereport.settings import settings

from .rate_limiter import RateLimiter, now_ms

logger = logging.getLogger(__name__)

NCBI_REQUESTS_PER_SECOND = 3
NCBI_REQUESTS_PER_SECOND_WITH_KEY = 10


class OutboundThrottle:
    """Sliding-window throttle shared by every call to one upstream"""

    def __init__(
        self,
        max_requests: int,
        window_ms: int = 1000,
        key: str = "outbound",
        limiter: RateLimiter | None = None,
        clock: Callable[[], float] = now_ms,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Args:
            max_requests: requests allowed per window
            window_ms: window length in milliseconds
            key: bucket key in the limiter store
            limiter: backing limiter (private in-memory limiter if None)
            clock: returns the current time in epoch milliseconds
            sleep: blocks for the given number of seconds
        """
        self.max_requests = max(1, int(max_requests))
        self.window_ms = window_ms
        self.key = key
        self.limiter = limiter if limiter is not None else RateLimiter(clock=clock)
        self.sleep = sleep

    def acquire(self) -> float:
        """Wait for a slot and record the request in it

        Returns:
            milliseconds spent waiting
        """
        waited = 0.0
        while True:
            result = self.limiter.check(self.key, self.window_ms, self.max_requests)
            if result.allowed:
                if waited:
                    logger.debug("Waited %.0f ms for %s slot", waited, self.key)
                return waited
            delay_ms = max(1, result.reset_ms)
            self.sleep(delay_ms / 1000)
            waited += delay_ms


def ncbi_requests_per_second(api_key: str | None = None) -> int:
    return NCBI_REQUESTS_PER_SECOND_WITH_KEY if api_key else NCBI_REQUESTS_PER_SECOND


_ncbi_throttle: Optional[OutboundThrottle] = None


def get_ncbi_throttle() -> OutboundThrottle:
    """Process-wide throttle for NCBI E-utilities, sized by settings.ncbi_api_key"""
    global _ncbi_throttle
    rate = ncbi_requests_per_second(settings.ncbi_api_key)
    if _ncbi_throttle is None or _ncbi_throttle.max_requests != rate:
        _ncbi_throttle = OutboundThrottle(rate, key="ncbi")
    return _ncbi_throttle


def reset_ncbi_throttle() -> None:
    global _ncbi_throttle
    _ncbi_throttle = None
