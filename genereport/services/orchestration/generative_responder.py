"""Generative responder (GenerativeResponder)

Builds the prompt, calls the configured provider once, parses and
validates the output. An output that decodes but fails the contract is
replaced by the deterministic fallback; it is never surfaced as an error.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable

from genereport.errors import GenerationParseError
from genereport.models.translation import TranslationResult, check_translation_result
from genereport.prompts import (
    CORE_GLOSSARY_TERMS,
    format_translation_system_prompt,
    format_translation_user_prompt,
)
from genereport.services.knowledge import KnowledgeBase, get_knowledge_base

from .fallback import build_fallback_response
from .safety import ensure_refusals

if TYPE_CHECKING:
    from genereport.services.llm.base import BaseLLMService

logger = logging.getLogger(__name__)

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)


@dataclass
class GenerationOutcome:
    """Result of one generative attempt"""

    result: TranslationResult
    validated: bool  # False when the fallback replaced an invalid output
    errors: list[str] = field(default_factory=list)


def parse_generation(raw_text: str) -> Any:
    """Decode provider output, stripping an optional fenced code block

    Args:
        raw_text: provider response text

    Returns:
        decoded JSON value

    Raises:
        GenerationParseError: the text is not a JSON record
    """
    m = _FENCED_BLOCK.search(raw_text)
    candidate = m.group(1) if m else raw_text
    try:
        return json.loads(candidate.strip())
    except json.JSONDecodeError as e:
        raise GenerationParseError("Failed to analyze report") from e


class GenerativeResponder:
    """Provider-agnostic generative tier"""

    def __init__(self, llm_service: "BaseLLMService", knowledge_base: KnowledgeBase | None = None):
        """
        Args:
            llm_service: reasoning provider
            knowledge_base: glossary and disclaimer source (process-wide if None)
        """
        self.llm_service = llm_service
        self.kb = knowledge_base or get_knowledge_base()

    def build_system_prompt(self) -> str:
        return format_translation_system_prompt(
            glossary_context=self.kb.build_glossary_context(CORE_GLOSSARY_TERMS),
            disclaimer=self.kb.get_disclaimer(),
        )

    def translate(self, text: str, disallowed_intents: Iterable[str] = ()) -> TranslationResult:
        """Translate a report excerpt with the provider

        Args:
            text: raw report text (sent verbatim)
            disallowed_intents: labels detected by the classifier

        Returns:
            TranslationResult (validated output, or the deterministic fallback)

        Raises:
            LLMTimeoutError: the provider call timed out
            LLMTransportError: the provider could not be reached
            GenerationParseError: the output was not decodable JSON
        """
        return self.translate_detailed(text, disallowed_intents).result

    def translate_detailed(self, text: str, disallowed_intents: Iterable[str] = ()) -> GenerationOutcome:
        """Same as translate, also reporting whether the fallback was used"""
        raw = self.llm_service.generate_text(
            self.build_system_prompt(),
            format_translation_user_prompt(text),
        )
        provider = getattr(self.llm_service, "provider_name", type(self.llm_service).__name__)

        try:
            data = parse_generation(raw)
        except GenerationParseError as e:
            e.provider = provider
            logger.error("%s output is not valid JSON (%d chars)", provider, len(raw))
            raise

        check = check_translation_result(data)
        if not check.ok:
            logger.warning(
                "%s output failed validation (%d error(s)); using fallback: %s",
                provider, len(check.errors), "; ".join(check.errors[:5]),
            )
            return GenerationOutcome(build_fallback_response(text, self.kb), validated=False, errors=check.errors)

        return GenerationOutcome(ensure_refusals(check.result, disallowed_intents), validated=True)
