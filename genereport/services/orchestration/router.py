"""Tier router (Router)

classify -> prebuilt template (terminal) -> prebuilt-only response when
external calls are disabled -> admission check -> generative tier.
"""

import logging
from typing import TYPE_CHECKING, Callable, Optional

from genereport.errors import TemplateNotFoundError
from genereport.services.admission import RateLimitResult
from genereport.services.classification import ClassificationResult, ReportClassifier
from genereport.services.knowledge import KnowledgeBase, get_knowledge_base
from genereport.services.llm import get_llm_service
from genereport.settings import settings

from .fallback import build_prebuilt_only_response
from .generative_responder import GenerativeResponder
from .models import RoutedResult, TierRoute
from .prebuilt_responder import PrebuiltResponder
from .safety import ensure_refusals

if TYPE_CHECKING:
    from genereport.models.api import TranslateMode
    from genereport.services.llm.base import BaseLLMService

logger = logging.getLogger(__name__)


class Router:
    """Tiered decision engine

    Classification -> routing -> response generation.
    """

    def __init__(
        self,
        knowledge_base: KnowledgeBase | None = None,
        llm_service_factory: Callable[[], "BaseLLMService"] = get_llm_service,
        classifier: ReportClassifier | None = None,
        prebuilt_responder: PrebuiltResponder | None = None,
        generative_responder: GenerativeResponder | None = None,
    ):
        """
        Args:
            knowledge_base: shared template source (process-wide if None)
            llm_service_factory: builds the provider on first generative use
            classifier: report classifier (built over knowledge_base if None)
            prebuilt_responder: prebuilt tier (built over knowledge_base if None)
            generative_responder: generative tier (built lazily if None)
        """
        self.kb = knowledge_base or get_knowledge_base()
        self.classifier = classifier or ReportClassifier(self.kb)
        self.prebuilt_responder = prebuilt_responder or PrebuiltResponder(self.kb)
        self._generative_responder = generative_responder
        self._llm_service_factory = llm_service_factory

    @property
    def generative_responder(self) -> GenerativeResponder:
        # Provider clients need a credential, so they are only built when used
        if self._generative_responder is None:
            self._generative_responder = GenerativeResponder(self._llm_service_factory(), self.kb)
        return self._generative_responder

    def is_prebuilt_only(self, mode: "TranslateMode" = "auto") -> bool:
        """Prebuilt-only when requested, configured, or when no credential is set"""
        return mode == "prebuilt_only" or settings.effective_prebuilt_only

    def decide(self, classification: ClassificationResult, mode: "TranslateMode" = "auto") -> TierRoute:
        """Pick the tier for a classified text (no side effects)"""
        prebuilt_only = self.is_prebuilt_only(mode)
        if classification.is_confident and (prebuilt_only or not settings.prefer_generative):
            return TierRoute.PREBUILT
        if prebuilt_only:
            return TierRoute.PREBUILT_ONLY
        return TierRoute.GENERATIVE

    def route(
        self,
        text: str,
        mode: "TranslateMode" = "auto",
        admit: Optional[Callable[[], RateLimitResult]] = None,
    ) -> RoutedResult:
        """Run the full pipeline for one text

        Args:
            text: raw report text
            mode: "auto" or "prebuilt_only"
            admit: admission check run immediately before the generative call

        Returns:
            RoutedResult

        Raises:
            LLMTimeoutError, LLMTransportError, GenerationParseError: generative-tier faults
        """
        classification = self.classifier.classify(text)
        intents = classification.disallowed_intents
        match = classification.match
        if intents:
            logger.info("Detected disallowed intents: %s", intents)

        route = self.decide(classification, mode)

        if route == TierRoute.PREBUILT:
            try:
                result = self.prebuilt_responder.synthesize(match)
                logger.info("Using prebuilt response for %s (%s)", match.key, match.confidence)
                return RoutedResult(
                    route=TierRoute.PREBUILT,
                    result=ensure_refusals(result, intents),
                    match=match,
                    disallowed_intents=intents,
                )
            except TemplateNotFoundError as e:
                # Match and knowledge base disagree; continue with the next tier
                logger.error("Prebuilt response failed for %s: %s", match.key, e)
                route = TierRoute.PREBUILT_ONLY if self.is_prebuilt_only(mode) else TierRoute.GENERATIVE

        if route == TierRoute.PREBUILT_ONLY:
            logger.info("No prebuilt template matched; prebuilt-only response")
            return RoutedResult(
                route=TierRoute.PREBUILT_ONLY,
                result=ensure_refusals(build_prebuilt_only_response(self.kb), intents),
                match=match,
                disallowed_intents=intents,
            )

        rate_limit = None
        if admit is not None:
            rate_limit = admit()
            if not rate_limit.allowed:
                return RoutedResult(
                    route=TierRoute.RATE_LIMITED,
                    match=match,
                    disallowed_intents=intents,
                    rate_limit=rate_limit,
                )

        outcome = self.generative_responder.translate_detailed(text, intents)
        return RoutedResult(
            route=TierRoute.GENERATIVE if outcome.validated else TierRoute.FALLBACK,
            result=outcome.result,
            match=match,
            disallowed_intents=intents,
            rate_limit=rate_limit,
        )
