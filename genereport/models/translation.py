"""Translation response contract

Pydantic models for the single structured output shared by the prebuilt
and generative tiers. Every field is required (lists may be empty) and
unknown fields are dropped, so a generative payload either satisfies the
contract exactly or is replaced by the deterministic fallback.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ValidationError
from typing_extensions import TypeAlias


# =============================================================================
# Value sets
# =============================================================================

EntityType: TypeAlias = Literal[
    'gene',
    'rsid',
    'hgvs',
    'variant_classification',
    'zygosity',
    'condition',
    'unknown',
]

Confidence: TypeAlias = Literal['high', 'medium', 'low']

Urgency: TypeAlias = Literal[
    'routine',        # normal follow-up timeline
    'soon',           # within a few weeks
    'important',      # should prioritize
    'informational',  # no urgency, just FYI
]

CONFIDENCE_RANK = {'low': 0, 'medium': 1, 'high': 2}


# =============================================================================
# Components
# =============================================================================

class ExtractedEntity(BaseModel):
    """A typed token of interest found in the report text"""
    type: EntityType
    value: str
    confidence: Confidence
    notes: Optional[str] = None


class GlossaryEntry(BaseModel):
    term: str
    meaning: str
    why_it_matters: str
    common_misreadings: Optional[List[str]] = None


class NextStep(BaseModel):
    title: str
    rationale: str
    who_to_talk_to: str
    urgency: Urgency


class Source(BaseModel):
    label: str
    url: Optional[str] = None
    why_relevant: str


class Refusal(BaseModel):
    """A request that could not be fulfilled, with a safe alternative"""
    user_intent: str
    refusal_text: str
    safe_alternative: str


# =============================================================================
# Main contract
# =============================================================================

class TranslationResult(BaseModel):
    """Structured plain-language explanation of a genetic report excerpt"""
    disclaimer: str
    extracted_entities: List[ExtractedEntity]
    summary_plain_english: str
    glossary: List[GlossaryEntry]
    what_this_does_not_mean: List[str]
    next_steps: List[NextStep]
    questions_to_ask: List[str]
    sources: List[Source]
    refusals: List[Refusal]

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


# =============================================================================
# Validation
# =============================================================================

@dataclass
class ContractCheck:
    """Outcome of checking an untrusted payload against the contract"""

    ok: bool
    result: TranslationResult | None = None
    errors: list[str] = field(default_factory=list)


def _format_error(err: dict) -> str:
    loc = '.'.join(str(p) for p in err.get('loc', ())) or '<root>'
    return f"{loc}: {err.get('msg', 'invalid')}"


def check_translation_result(data: Any) -> ContractCheck:
    """Validate an untrusted payload; never raises

    Args:
        data: decoded generative output (any JSON value)

    Returns:
        ContractCheck with the parsed result, or the list of violations
    """
    if not isinstance(data, dict):
        return ContractCheck(ok=False, errors=[f"<root>: expected an object, got {type(data).__name__}"])
    try:
        result = TranslationResult.model_validate(data)
    except ValidationError as e:
        return ContractCheck(ok=False, errors=[_format_error(err) for err in e.errors()])
    return ContractCheck(ok=True, result=result)


__all__ = [
    'EntityType',
    'Confidence',
    'Urgency',
    'CONFIDENCE_RANK',
    'ExtractedEntity',
    'GlossaryEntry',
    'NextStep',
    'Source',
    'Refusal',
    'TranslationResult',
    'ContractCheck',
    'check_translation_result',
]
