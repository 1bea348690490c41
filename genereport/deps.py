"""
Dependency providers for the core services.

- get_rate_limiter(): process-wide RateLimiter shared by all features
- get_router(): tier router over the process-wide knowledge base
- get_translate_service(): TranslateService wired with the shared limiter
- get_lookup_service(): ClinVar / PubMed LookupService with the shared limiter
"""
from __future__ import annotations

from functools import lru_cache

from genereport.services.admission import RateLimiter
from genereport.services.lookup_service import LookupService
from genereport.services.orchestration import Router
from genereport.services.translate_service import TranslateService


@lru_cache(maxsize=1)
def get_rate_limiter() -> RateLimiter:
    return RateLimiter()


@lru_cache(maxsize=1)
def get_router() -> Router:
    return Router()


@lru_cache(maxsize=1)
def get_translate_service() -> TranslateService:
    return TranslateService(router=get_router(), rate_limiter=get_rate_limiter())


@lru_cache(maxsize=1)
def get_lookup_service() -> LookupService:
    return LookupService(rate_limiter=get_rate_limiter())


def clear_cached_providers() -> None:
    """Clear cached providers so settings changes take effect (tests, scripts)."""
    get_lookup_service.cache_clear()
    get_translate_service.cache_clear()
    get_router.cache_clear()
    get_rate_limiter.cache_clear()
