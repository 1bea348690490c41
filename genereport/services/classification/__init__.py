"""Intent & entity classification

- ReportClassifier: genes, identifiers, classifications, zygosity, disallowed intents
- PrebuiltMatch: the (gene, classification) template selected for the prebuilt tier
"""

from .classifier import ReportClassifier, classify, extract_identifier_entities, get_classifier
from .models import (
    GENE_PANEL,
    GENERAL,
    PANEL_GENE,
    UNKNOWN_GENE,
    ClassificationHit,
    ClassificationResult,
    PrebuiltMatch,
)

__all__ = [
    "ReportClassifier",
    "classify",
    "extract_identifier_entities",
    "get_classifier",
    "ClassificationHit",
    "ClassificationResult",
    "PrebuiltMatch",
    "GENE_PANEL",
    "GENERAL",
    "PANEL_GENE",
    "UNKNOWN_GENE",
]
