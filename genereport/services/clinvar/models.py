"""ClinVar lookup models"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field
from typing_extensions import TypeAlias


QueryType: TypeAlias = Literal['rsid', 'hgvs', 'variation_id', 'gene', 'unknown']

ClinicalSignificance: TypeAlias = Literal[
    'Pathogenic',
    'Likely pathogenic',
    'Uncertain significance',
    'Likely benign',
    'Benign',
    'Conflicting interpretations',
    'Not provided',
    'Other',
]

ReviewStatus: TypeAlias = Literal[
    'practice guideline',
    'reviewed by expert panel',
    'criteria provided, multiple submitters, no conflicts',
    'criteria provided, conflicting interpretations',
    'criteria provided, single submitter',
    'no assertion criteria provided',
    'no assertion provided',
]


class ClinvarVariant(BaseModel):
    variation_id: str
    name: str
    gene_symbol: Optional[str] = None
    clinical_significance: ClinicalSignificance
    review_status: ReviewStatus
    conditions: List[str] = Field(default_factory=list)
    last_evaluated: Optional[str] = None
    submissions_count: Optional[int] = None
    source_url: str


class ClinvarResponse(BaseModel):
    """Lookup outcome; lookup failures are reported in ``error``"""
    query: str
    found: bool
    variant: Optional[ClinvarVariant] = None
    interpretation_guide: str
    disclaimer: str
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return self.model_dump(exclude_none=True)
