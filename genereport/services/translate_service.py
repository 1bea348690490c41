"""Translate entry point (TranslateService)

Validates the submission, runs the tier router with admission control
in front of the generative call, and turns faults into structured error
envelopes. Report text is never logged; only lengths, routes and counts.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import ValidationError

from genereport.errors import (
    GenerationParseError,
    LLMTimeoutError,
    LLMTransportError,
    ProviderConfigurationError,
)
from genereport.models.api import (
    ErrorResponse,
    RateLimitedResponse,
    TranslateRequest,
    validation_details,
)
from genereport.models.translation import TranslationResult
from genereport.services.admission import RateLimiter, RateLimitResult, client_key
from genereport.services.orchestration import Router, TierRoute
from genereport.settings import settings

logger = logging.getLogger(__name__)

TranslateResponse = Union[TranslationResult, ErrorResponse, RateLimitedResponse]

RETRY_DETAILS = "Too many requests. Please wait a bit and try again."
FAILURE_DETAILS = "An error occurred while processing your request. Please try again."

# Error code -> HTTP status
STATUS_BY_CODE: dict[str, int] = {
    "validation_error": 400,
    "invalid_json": 400,
    "rate_limited": 429,
    "analysis_failed": 500,
    "lookup_failed": 500,
    "not_configured": 503,
    "timeout": 504,
}


def status_for(response: Any) -> int:
    """HTTP status for a service response"""
    if isinstance(response, ErrorResponse):
        return STATUS_BY_CODE.get(response.code or "", 500)
    return 200


def rate_limited_response(rate_limit: RateLimitResult) -> RateLimitedResponse:
    return RateLimitedResponse(
        details=RETRY_DETAILS,
        limit=rate_limit.limit,
        remaining=rate_limit.remaining,
        reset_ms=rate_limit.reset_ms,
    )


@dataclass
class TranslateOutcome:
    """Service response plus the metadata the transport layer needs"""

    response: TranslateResponse
    request_id: str
    route: Optional[TierRoute] = None
    rate_limit: Optional[RateLimitResult] = None

    @property
    def status(self) -> int:
        return status_for(self.response)


class TranslateService:
    """Inbound translate operation"""

    def __init__(self, router: Router | None = None, rate_limiter: RateLimiter | None = None):
        self.router = router or Router()
        self.rate_limiter = rate_limiter or RateLimiter()

    def admit(self, client_id: str) -> RateLimitResult:
        """Consume one generative-call slot for the client"""
        return self.rate_limiter.check(
            client_key("translate", client_id),
            window_ms=settings.rate_limit_window_seconds * 1000,
            max_requests=max(1, settings.rate_limit_translate_per_min),
        )

    def submit(self, payload: Any, client_id: str = "unknown") -> TranslateResponse:
        """Translate one submission

        Args:
            payload: mapping with ``text`` and optional ``mode``
            client_id: caller identity used for rate limiting

        Returns:
            TranslationResult, or ErrorResponse / RateLimitedResponse
        """
        return self.submit_detailed(payload, client_id).response

    def submit_detailed(self, payload: Any, client_id: str = "unknown") -> TranslateOutcome:
        """Same as submit, also reporting the route and rate-limit state"""
        request_id = uuid.uuid4().hex[:12]

        try:
            request = TranslateRequest.model_validate(payload)
        except ValidationError as e:
            logger.info("[%s] rejected: %d validation error(s)", request_id, e.error_count())
            return TranslateOutcome(
                ErrorResponse(error="Validation failed", code="validation_error", details=validation_details(e)),
                request_id,
            )

        logger.info("[%s] translate: %d chars, mode=%s", request_id, len(request.text), request.mode)

        try:
            routed = self.router.route(request.text, request.mode, admit=lambda: self.admit(client_id))
        except LLMTimeoutError as e:
            logger.error("[%s] %s timed out", request_id, e.provider or "provider")
            return TranslateOutcome(ErrorResponse(error="Analysis timed out", code="timeout"), request_id)
        except (LLMTransportError, GenerationParseError) as e:
            logger.error("[%s] generative tier failed: %s (%s)", request_id, type(e).__name__, e.provider)
            return TranslateOutcome(self._analysis_failed(), request_id)
        except ProviderConfigurationError as e:
            logger.error("[%s] service not configured: %s", request_id, e)
            return TranslateOutcome(ErrorResponse(error="Service not configured", code="not_configured"), request_id)
        except Exception:
            logger.exception("[%s] unexpected translate failure", request_id)
            return TranslateOutcome(self._analysis_failed(), request_id)

        if routed.is_rate_limited:
            logger.info("[%s] rate limited", request_id)
            return TranslateOutcome(
                rate_limited_response(routed.rate_limit),
                request_id,
                route=routed.route,
                rate_limit=routed.rate_limit,
            )

        result = routed.result
        logger.info(
            "[%s] route=%s entities=%d refusals=%d",
            request_id, routed.route.value, len(result.extracted_entities), len(result.refusals),
        )
        return TranslateOutcome(result, request_id, route=routed.route, rate_limit=routed.rate_limit)

    @staticmethod
    def _analysis_failed() -> ErrorResponse:
        return ErrorResponse(error="Failed to analyze report", code="analysis_failed", details=FAILURE_DETAILS)
