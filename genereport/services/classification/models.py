"""Classifier data models"""

from dataclasses import dataclass, field
from typing import Optional

from genereport.models.translation import CONFIDENCE_RANK, Confidence, ExtractedEntity


# Sentinel gene values
UNKNOWN_GENE = "unknown"
PANEL_GENE = "panel"

# Sentinel classification values
GENERAL = "general"
GENE_PANEL = "gene_panel"


@dataclass(frozen=True)
class PrebuiltMatch:
    """A (gene, classification) pair the knowledge base has a template for"""

    gene: str  # symbol, or UNKNOWN_GENE / PANEL_GENE
    classification: str  # gene template key or classification-table key (e.g. "VUS")
    confidence: Confidence
    detected_genes: tuple[str, ...] = ()  # panel case only

    @property
    def is_panel(self) -> bool:
        return self.gene == PANEL_GENE

    @property
    def is_classification_only(self) -> bool:
        return self.gene == UNKNOWN_GENE

    @property
    def key(self) -> str:
        """Log-safe identifier, e.g. ``BRCA1/pathogenic``"""
        return f"{self.gene}/{self.classification}"


@dataclass(frozen=True)
class ClassificationHit:
    """A classification cue found in the text"""

    key: str  # normalized: pathogenic, vus, benign, carrier
    phrase: str  # literal text as found


@dataclass
class ClassificationResult:
    """Everything the classifier derived from one input text"""

    entities: list[ExtractedEntity] = field(default_factory=list)
    disallowed_intents: list[str] = field(default_factory=list)
    match: Optional[PrebuiltMatch] = None
    has_genetics_context: bool = False
    classification: Optional[ClassificationHit] = None

    @property
    def is_confident(self) -> bool:
        """Whether the prebuilt tier may answer (confidence medium or better)"""
        if self.match is None:
            return False
        return CONFIDENCE_RANK[self.match.confidence] >= CONFIDENCE_RANK["medium"]

    @property
    def gene_symbols(self) -> list[str]:
        return [e.value for e in self.entities if e.type == "gene"]
