"""ClinVar variant-classification lookup"""

from .client import (
    ClinVarClient,
    build_search_term,
    detect_query_type,
    interpretation_guide,
    normalize_review_status,
    normalize_significance,
)
from .models import ClinvarResponse, ClinvarVariant

__all__ = [
    "ClinVarClient",
    "ClinvarResponse",
    "ClinvarVariant",
    "build_search_term",
    "detect_query_type",
    "interpretation_guide",
    "normalize_review_status",
    "normalize_significance",
]
