"""Deterministic responses that never need a provider

- build_fallback_response: used when generative output fails the contract
- build_prebuilt_only_response: used when no template matched and external calls are disabled
"""

from genereport.models.translation import (
    GlossaryEntry,
    NextStep,
    Source,
    TranslationResult,
)
from genereport.services.classification import extract_identifier_entities
from genereport.services.knowledge import KnowledgeBase, get_knowledge_base

from .safety import clinvar_source


def build_fallback_response(text: str, knowledge_base: KnowledgeBase | None = None) -> TranslationResult:
    """Conservative, contract-valid result derived from the text alone"""
    kb = knowledge_base or get_knowledge_base()
    return TranslationResult(
        disclaimer=kb.get_disclaimer(),
        extracted_entities=extract_identifier_entities(text),
        summary_plain_english=(
            "We were unable to fully analyze this report automatically. Please review the extracted "
            "information below and consult with a genetic counselor for a complete interpretation."
        ),
        glossary=[GlossaryEntry(
            term="Genetic Report",
            meaning="A document containing information about genetic variants found in your DNA sample.",
            why_it_matters="Understanding your genetic report can help you and your healthcare providers "
                           "make informed decisions about your health.",
        )],
        what_this_does_not_mean=[
            "This automated analysis is not a substitute for professional interpretation",
            "The presence of variants does not necessarily indicate disease",
        ],
        next_steps=[NextStep(
            title="Consult a Genetic Counselor",
            rationale="A certified genetic counselor can provide personalized interpretation of your results",
            who_to_talk_to="Certified Genetic Counselor (CGC)",
            urgency="routine",
        )],
        questions_to_ask=[
            "What do these specific results mean for my health?",
            "Should I have any additional testing?",
            "What are the implications for my family members?",
        ],
        sources=[
            Source(
                label="National Society of Genetic Counselors",
                url="https://www.nsgc.org/findageneticcounselor",
                why_relevant="Find a certified genetic counselor in your area",
            ),
            clinvar_source("Look up variant classifications"),
        ],
        refusals=[],
    )


PREBUILT_ONLY_SUMMARY = (
    "Prebuilt-only mode is enabled, so this service will not call an external AI model. "
    "No matching prebuilt template was found for the text you provided.\n\n"
    "Try one of these:\n"
    "- Paste only the \"Findings / Results\" section\n"
    "- Include the gene name (e.g., BRCA1) and a classification (Pathogenic / VUS / Benign)\n"
    "- Include a variant identifier (rsID or HGVS), if present"
)


def build_prebuilt_only_response(knowledge_base: KnowledgeBase | None = None) -> TranslationResult:
    """Fixed informational result for prebuilt-only mode without a template match"""
    kb = knowledge_base or get_knowledge_base()
    return TranslationResult(
        disclaimer=kb.get_disclaimer(),
        extracted_entities=[],
        summary_plain_english=PREBUILT_ONLY_SUMMARY,
        glossary=[],
        what_this_does_not_mean=[
            "This is NOT a medical interpretation",
            "This does NOT mean your results are normal or abnormal",
            "This does NOT replace a clinician or genetic counselor",
        ],
        next_steps=[
            NextStep(
                title="Focus the input",
                rationale="Shorter, genetics-only text is more likely to match a prebuilt template.",
                who_to_talk_to="You (editing the pasted text)",
                urgency="informational",
            ),
            NextStep(
                title="Use ClinVar Lookup (if you have an rsID/HGVS)",
                rationale="If your report includes a variant identifier, ClinVar can provide public "
                          "classification context.",
                who_to_talk_to="ClinVar tool + a healthcare professional for interpretation",
                urgency="routine",
            ),
        ],
        questions_to_ask=[
            "Does my report list a specific variant identifier (rsID or HGVS)?",
            "What is the reported classification (Pathogenic, VUS, Benign)?",
            "Should this result be confirmed with clinical testing?",
        ],
        sources=[
            clinvar_source("Public database for variant classifications and supporting evidence"),
            Source(
                label="Questions for a Clinician",
                why_relevant="Prepare questions for a genetics professional",
            ),
        ],
        refusals=[],
    )
