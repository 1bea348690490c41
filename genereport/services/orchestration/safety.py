"""Shared safety content: standard sources and refusal records"""

from typing import Iterable

from genereport.models.translation import Refusal, Source, TranslationResult


CLINVAR_URL = "https://www.ncbi.nlm.nih.gov/clinvar/"
NSGC_URL = "https://www.nsgc.org/findageneticcounselor"
GENEREVIEWS_URL = "https://www.ncbi.nlm.nih.gov/books/NBK1116/"


def clinvar_source(why_relevant: str = "Look up variant classifications and evidence") -> Source:
    return Source(label="ClinVar Database", url=CLINVAR_URL, why_relevant=why_relevant)


def nsgc_source(why_relevant: str = "Get professional guidance on your results") -> Source:
    return Source(label="Find a Genetic Counselor", url=NSGC_URL, why_relevant=why_relevant)


def genereviews_source() -> Source:
    return Source(
        label="GeneReviews",
        url=GENEREVIEWS_URL,
        why_relevant="Detailed information about genetic conditions",
    )


_DEFAULT_ALTERNATIVE = (
    "I can explain what the terms in your report mean and help you prepare "
    "questions for a genetic counselor or your doctor."
)

# label -> (refusal_text, safe_alternative)
REFUSAL_TEXTS: dict[str, tuple[str, str]] = {
    "medication advice": (
        "I can't advise on starting, stopping or changing any medication. "
        "Those decisions depend on your full medical history and must be made with your clinician.",
        "I can explain what your genetic result means in general terms and suggest questions "
        "to ask your doctor about medications.",
    ),
    "treatment recommendation": (
        "I can't recommend treatments. Treatment choices need a clinician who knows your full history.",
        "I can explain the result and the kinds of specialists who discuss options with patients.",
    ),
    "diagnosis request": (
        "I can't diagnose any condition. A genetic result alone is not a diagnosis.",
        "I can explain what the result does and does not mean, and who can evaluate you in person.",
    ),
    "prognosis request": (
        "I can't predict whether you will develop a condition or estimate your personal risk.",
        "I can explain concepts such as penetrance and why outcomes vary between people.",
    ),
    "supplement advice": (
        "I can't recommend supplements or vitamins based on a genetic result.",
        "I can explain what the gene does and suggest questions for your healthcare provider.",
    ),
    "prescription request": (
        "I can't prescribe or suggest prescriptions.",
        "A licensed clinician can review your result and decide whether any prescription is appropriate.",
    ),
    "treatment request": (
        "I can't provide treatment or cure recommendations.",
        "I can explain the result in plain language and point you to a genetic counselor.",
    ),
}


def build_refusals(intents: Iterable[str]) -> list[Refusal]:
    """One refusal per disallowed-intent label, in the given order"""
    refusals = []
    for intent in dict.fromkeys(intents):
        text, alternative = REFUSAL_TEXTS.get(
            intent,
            ("I can't help with medical decision-making.", _DEFAULT_ALTERNATIVE),
        )
        refusals.append(Refusal(user_intent=intent, refusal_text=text, safe_alternative=alternative))
    return refusals


def ensure_refusals(result: TranslationResult, intents: Iterable[str]) -> TranslationResult:
    """Attach deterministic refusals when intents were detected but none were returned"""
    intents = list(intents)
    if not intents or result.refusals:
        return result
    return result.model_copy(update={"refusals": build_refusals(intents)})
