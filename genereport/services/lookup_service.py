"""ClinVar and literature entry points

Each lookup is gated by a per-client rate limit before any cache or
network access, mirroring the translate path.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import ValidationError

from genereport.errors import ExternalLookupError
from genereport.models.api import (
    ClinvarRequest,
    ErrorResponse,
    LiteratureRequest,
    RateLimitedResponse,
    validation_details,
)
from genereport.services.admission import RateLimiter, RateLimitResult, client_key
from genereport.services.clinvar import ClinVarClient, ClinvarResponse
from genereport.services.literature import LiteratureClient, LiteratureResponse
from genereport.settings import settings

from .translate_service import rate_limited_response, status_for

logger = logging.getLogger(__name__)

LookupResponse = Union[ClinvarResponse, LiteratureResponse, ErrorResponse, RateLimitedResponse]


@dataclass
class LookupOutcome:
    response: LookupResponse
    rate_limit: Optional[RateLimitResult] = None

    @property
    def status(self) -> int:
        return status_for(self.response)


class LookupService:
    """Rate-limited ClinVar and PubMed lookups"""

    def __init__(
        self,
        clinvar_client: ClinVarClient | None = None,
        literature_client: LiteratureClient | None = None,
        rate_limiter: RateLimiter | None = None,
    ):
        self._clinvar_client = clinvar_client
        self._literature_client = literature_client
        self.rate_limiter = rate_limiter or RateLimiter()

    @property
    def clinvar_client(self) -> ClinVarClient:
        if self._clinvar_client is None:
            self._clinvar_client = ClinVarClient()
        return self._clinvar_client

    @property
    def literature_client(self) -> LiteratureClient:
        if self._literature_client is None:
            self._literature_client = LiteratureClient()
        return self._literature_client

    def _admit(self, feature: str, client_id: str, per_window: int) -> RateLimitResult:
        return self.rate_limiter.check(
            client_key(feature, client_id),
            window_ms=settings.rate_limit_window_seconds * 1000,
            max_requests=max(1, per_window),
        )

    def clinvar(self, payload: Any, client_id: str = "unknown") -> LookupOutcome:
        """Look up one variant identifier in ClinVar

        Args:
            payload: mapping with ``query``
            client_id: caller identity used for rate limiting
        """
        rate_limit = self._admit("clinvar", client_id, settings.rate_limit_clinvar_per_min)
        if not rate_limit.allowed:
            return LookupOutcome(rate_limited_response(rate_limit), rate_limit)

        try:
            request = ClinvarRequest.model_validate(payload)
        except ValidationError as e:
            return LookupOutcome(
                ErrorResponse(error="Validation failed", code="validation_error", details=validation_details(e)),
                rate_limit,
            )

        response = self.clinvar_client.lookup(request.query)
        logger.info("ClinVar lookup: found=%s error=%s", response.found, bool(response.error))
        return LookupOutcome(response, rate_limit)

    def literature(self, payload: Any, client_id: str = "unknown") -> LookupOutcome:
        """Search PubMed for background reading on the given genes and topics"""
        rate_limit = self._admit("literature", client_id, settings.rate_limit_literature_per_min)
        if not rate_limit.allowed:
            return LookupOutcome(rate_limited_response(rate_limit), rate_limit)

        try:
            request = LiteratureRequest.model_validate(payload)
        except ValidationError as e:
            return LookupOutcome(
                ErrorResponse(error="Validation failed", code="validation_error", details=validation_details(e)),
                rate_limit,
            )

        try:
            response = self.literature_client.search(request.genes, request.topics, request.max_results)
        except ExternalLookupError as e:
            return LookupOutcome(
                ErrorResponse(error=str(e), code="lookup_failed", details="Please try again later."),
                rate_limit,
            )
        logger.info("Literature search: %d article(s)", len(response.articles))
        return LookupOutcome(response, rate_limit)
