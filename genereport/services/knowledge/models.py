"""Knowledge base models

Shapes of the curated JSON sources. Every section is optional in a single
source file so that several files can be merged into one KnowledgeBase.
"""
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from genereport.models.translation import Urgency


DEFAULT_DISCLAIMER = (
    "This information is for educational purposes only and is not intended as medical advice, "
    "diagnosis, or treatment. Genetic information should be interpreted by qualified healthcare "
    "professionals in the context of your complete health history. Always consult with a licensed "
    "healthcare provider or certified genetic counselor before making any medical decisions based "
    "on genetic test results."
)

DEFAULT_SHORT_DISCLAIMER = (
    "Educational only. Not medical advice. Consult a healthcare provider or genetic counselor "
    "for personalized guidance."
)


# =============================================================================
# Gene templates
# =============================================================================

class NextStepTemplate(BaseModel):
    title: str
    description: str
    urgency: Urgency = 'routine'
    who_to_talk_to: Optional[str] = None


class GeneResponse(BaseModel):
    """Canned answer for one (gene, classification) pair"""
    summary: str
    what_this_means: List[str] = Field(default_factory=list)
    what_this_does_not_mean: List[str] = Field(default_factory=list)
    next_steps: List[NextStepTemplate] = Field(default_factory=list)
    questions_to_ask: List[str] = Field(default_factory=list)
    caution: Optional[str] = None


class GeneEntry(BaseModel):
    full_name: str
    description: str
    associated_conditions: List[str] = Field(default_factory=list)
    inheritance: Optional[str] = None
    penetrance: Optional[str] = None
    important_context: Optional[str] = None
    synonyms: List[str] = Field(default_factory=list)
    responses: Dict[str, GeneResponse] = Field(default_factory=dict)


# =============================================================================
# Classification-only templates
# =============================================================================

class StandardResponse(BaseModel):
    summary: str
    key_points: List[str] = Field(default_factory=list)
    recommendation: Optional[str] = None


class ClassificationEntry(BaseModel):
    """Generic answer used when the classification is known but the gene is not"""
    label: str
    meaning: str
    standard_response: StandardResponse
    questions_to_ask: List[str] = Field(default_factory=list)


# =============================================================================
# Glossary / question templates
# =============================================================================

class GlossaryTerm(BaseModel):
    term: str
    full_name: str
    meaning: str
    why_it_matters: str
    common_misreadings: List[str] = Field(default_factory=list)
    what_to_do: str = ''


class QuestionsTemplate(BaseModel):
    general_questions: List[str] = Field(default_factory=list)
    for_vus_results: List[str] = Field(default_factory=list)
    for_pathogenic_results: List[str] = Field(default_factory=list)
    for_carrier_status: List[str] = Field(default_factory=list)
    about_the_test: List[str] = Field(default_factory=list)


# =============================================================================
# Source file / merged knowledge base
# =============================================================================

class KnowledgeSource(BaseModel):
    """One JSON file; any subset of sections"""
    genes: Dict[str, GeneEntry] = Field(default_factory=dict)
    common_classifications: Dict[str, ClassificationEntry] = Field(default_factory=dict)
    terms: List[GlossaryTerm] = Field(default_factory=list)
    questions: Optional[QuestionsTemplate] = None
    disclaimer: Optional[str] = None
    short_disclaimer: Optional[str] = None


class KnowledgeData(BaseModel):
    """Merged, read-only content of all sources"""
    genes: Dict[str, GeneEntry] = Field(default_factory=dict)
    classifications: Dict[str, ClassificationEntry] = Field(default_factory=dict)
    terms: List[GlossaryTerm] = Field(default_factory=list)
    questions: QuestionsTemplate = Field(default_factory=QuestionsTemplate)
    disclaimer: str = DEFAULT_DISCLAIMER
    short_disclaimer: str = DEFAULT_SHORT_DISCLAIMER
