"""Sliding-window rate limiter

Best-effort abuse mitigation: one timestamp list per ``feature:identifier``
key. Entries older than the window are pruned lazily whenever the key is
checked. With the default in-memory store the quota is per process and
resets on restart.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Mapping

from .stores import InMemoryRateLimitStore, RateLimitStore

logger = logging.getLogger(__name__)


def now_ms() -> float:
    """Current wall-clock time in epoch milliseconds"""
    return time.time() * 1000


@dataclass(frozen=True)
class RateLimitResult:
    """Admission decision with quota metadata"""

    allowed: bool
    limit: int
    remaining: int
    reset_ms: int  # until the oldest request in the window expires

    @property
    def retry_after_seconds(self) -> int:
        return max(1, -(-self.reset_ms // 1000))

    def headers(self, now: float | None = None) -> dict[str, str]:
        """X-RateLimit-* headers (plus Retry-After when rejected)"""
        now = now_ms() if now is None else now
        headers = {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(-(-int(now + self.reset_ms) // 1000)),
        }
        if not self.allowed:
            headers["Retry-After"] = str(self.retry_after_seconds)
        return headers


class RateLimiter:
    """Sliding-window limiter over an injectable store"""

    def __init__(self, store: RateLimitStore | None = None, clock: Callable[[], float] = now_ms):
        """
        Args:
            store: bucket store (in-memory if omitted)
            clock: returns the current time in epoch milliseconds
        """
        self.store = store if store is not None else InMemoryRateLimitStore()
        self.clock = clock

    def check(
        self, key: str, window_ms: int, max_requests: int, now: float | None = None
    ) -> RateLimitResult:
        """Check one request against the bucket and record it if allowed

        Args:
            key: bucket key, built by the caller as ``feature:identifier``
            window_ms: window length in milliseconds
            max_requests: requests allowed per window
            now: current time (defaults to the limiter clock)

        Returns:
            RateLimitResult
        """
        now = self.clock() if now is None else now
        limit = max(1, int(max_requests))
        window_start = now - window_ms

        def _apply(timestamps: list[float]) -> tuple[list[float], RateLimitResult]:
            fresh = [t for t in timestamps if t > window_start]

            if len(fresh) >= limit:
                oldest = fresh[0]
                reset_ms = max(0, int(window_ms - (now - oldest)))
                return fresh, RateLimitResult(allowed=False, limit=limit, remaining=0, reset_ms=reset_ms)

            fresh.append(now)
            oldest = fresh[0]
            reset_ms = max(0, int(window_ms - (now - oldest)))
            remaining = max(0, limit - len(fresh))
            return fresh, RateLimitResult(allowed=True, limit=limit, remaining=remaining, reset_ms=reset_ms)

        result = self.store.update(key, _apply)
        if not result.allowed:
            logger.info("Rate limit exceeded", extra={"key": key, "reset_ms": result.reset_ms})
        return result

    def reset(self) -> None:
        self.store.clear()


def client_key(feature: str, identifier: str) -> str:
    """Bucket key isolating quotas per feature and per client"""
    return f"{feature}:{identifier}"


def get_client_identifier(headers: Mapping[str, str], fallback: str | None = None) -> str:
    """Best-effort client identity from proxy headers

    X-Forwarded-For can be a comma-separated list; the client is the first hop.
    """
    xff = headers.get("x-forwarded-for")
    if xff:
        first = xff.split(",")[0].strip()
        if first:
            return first
    real_ip = headers.get("x-real-ip")
    if real_ip and real_ip.strip():
        return real_ip.strip()
    return fallback or "unknown"
