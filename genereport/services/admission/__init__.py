"""Admission control

Rate limiting and TTL caching placed in front of costly or externally
rate-limited operations.

- RateLimiter: sliding-window limiter keyed by ``feature:identifier``
- TTLCache: per-key expiring results
- OutboundThrottle: blocking limiter in front of upstream APIs (NCBI)
- stores: injectable backing stores (in-memory by default)
"""

from .cache import TTLCache
from .rate_limiter import (
    RateLimiter,
    RateLimitResult,
    client_key,
    get_client_identifier,
    now_ms,
)
from .stores import (
    CacheEntry,
    CacheStore,
    InMemoryCacheStore,
    InMemoryRateLimitStore,
    RateLimitStore,
)
from .throttle import (
    OutboundThrottle,
    get_ncbi_throttle,
    ncbi_requests_per_second,
    reset_ncbi_throttle,
)

__all__ = [
    "TTLCache",
    "RateLimiter",
    "RateLimitResult",
    "client_key",
    "get_client_identifier",
    "now_ms",
    "OutboundThrottle",
    "get_ncbi_throttle",
    "ncbi_requests_per_second",
    "reset_ncbi_throttle",
    "CacheEntry",
    "CacheStore",
    "InMemoryCacheStore",
    "InMemoryRateLimitStore",
    "RateLimitStore",
]
