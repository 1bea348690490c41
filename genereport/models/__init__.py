"""Data contracts shared across the tiers"""

from .translation import (
    CONFIDENCE_RANK,
    Confidence,
    ContractCheck,
    EntityType,
    ExtractedEntity,
    GlossaryEntry,
    NextStep,
    Refusal,
    Source,
    TranslationResult,
    Urgency,
    check_translation_result,
)
from .api import (
    ClinvarRequest,
    ErrorResponse,
    LiteratureRequest,
    RateLimitedResponse,
    TranslateMode,
    TranslateRequest,
    validation_details,
)

__all__ = [
    "CONFIDENCE_RANK",
    "Confidence",
    "ContractCheck",
    "EntityType",
    "ExtractedEntity",
    "GlossaryEntry",
    "NextStep",
    "Refusal",
    "Source",
    "TranslationResult",
    "Urgency",
    "check_translation_result",
    "ClinvarRequest",
    "ErrorResponse",
    "LiteratureRequest",
    "RateLimitedResponse",
    "TranslateMode",
    "TranslateRequest",
    "validation_details",
]
