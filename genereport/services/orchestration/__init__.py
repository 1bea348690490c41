"""Tier orchestration

- Router: classify -> prebuilt / prebuilt-only / generative
- PrebuiltResponder: template synthesis (no network)
- GenerativeResponder: provider call, parsing, contract validation
- fallback: deterministic responses that never need a provider
"""

from .fallback import build_fallback_response, build_prebuilt_only_response
from .generative_responder import GenerationOutcome, GenerativeResponder, parse_generation
from .models import RoutedResult, TierRoute
from .prebuilt_responder import PrebuiltResponder
from .router import Router
from .safety import build_refusals, ensure_refusals

__all__ = [
    "Router",
    "RoutedResult",
    "TierRoute",
    "PrebuiltResponder",
    "GenerativeResponder",
    "GenerationOutcome",
    "parse_generation",
    "build_fallback_response",
    "build_prebuilt_only_response",
    "build_refusals",
    "ensure_refusals",
]
