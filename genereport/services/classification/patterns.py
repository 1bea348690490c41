"""Pattern rule tables

Each rule pairs a compiled pattern with a semantic label. Tables are
evaluated in order; where a table is first-match-wins that is noted.
"""

import re
from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Gene candidates
# =============================================================================

# Upper-case alphanumeric, length 2-12
GENE_SYMBOL_PATTERN = re.compile(r"\b[A-Z][A-Z0-9]{1,11}\b")

# Point-change notation (C677T, R117H) looks like a symbol but is not a gene
VARIANT_NOTATION_PATTERN = re.compile(r"^[A-Z]\d+[A-Z]$")

# Upper-case words that commonly appear in reports and are never genes
SYMBOL_STOPLIST = frozenset({
    # English
    "THE", "AND", "FOR", "NOT", "BUT", "WITH", "YOU", "YOUR", "ARE", "WAS",
    "HAS", "HAVE", "THIS", "THAT", "FROM", "NO", "OR", "OF", "IN", "ON",
    "AT", "IS", "IT", "AN", "AS", "BY", "TO", "IF", "BE", "WE", "MY", "ME",
    "NONE", "NOTE", "SEE", "ALL", "ANY", "YES",
    # Report headings and result words
    "GENE", "GENES", "TEST", "TESTED", "TESTING", "RESULT", "RESULTS",
    "REPORT", "SUMMARY", "FINDINGS", "FINDING", "INTERPRETATION",
    "POSITIVE", "NEGATIVE", "DETECTED", "VARIANT", "VARIANTS", "LIKELY",
    "PATHOGENIC", "BENIGN", "UNCERTAIN", "SIGNIFICANCE", "CARRIER",
    "HETEROZYGOUS", "HOMOZYGOUS", "HEMIZYGOUS", "PATIENT", "NAME", "DATE",
    "SAMPLE", "METHOD", "METHODS", "LIMITATIONS", "RECOMMENDATIONS",
    "CLINICAL", "GENETIC", "GENETICS", "IMPORTANT", "CAUTION", "WARNING",
    # Acronyms
    "DNA", "RNA", "VUS", "ACMG", "HGVS", "CLIA", "CAP", "FDA", "NIH",
    "NCBI", "USA", "UK", "ID", "DOB", "MD", "PHD", "CGC", "NSGC", "SNP",
    "SNV", "CNV", "PCR", "NGS", "WGS", "WES", "PDF", "LP", "LB", "VCV",
    "RCV", "HBOC", "AD", "AR", "XL", "XX", "XY", "OK", "II", "III", "IV",
    "VI", "VII", "VIII", "IX", "XI", "XII",
    # APOE allele labels
    "E2", "E3", "E4",
})

# Identifier-shaped tokens
RSID_PATTERN = re.compile(r"\brs\d+\b", re.IGNORECASE)
HGVS_PATTERN = re.compile(r"\b(?:NM|NC|NP|NG)_\d+\.\d+:[cgpnmr]\.[A-Za-z0-9_>+\-*]+")


# =============================================================================
# Genetics-context cues
# =============================================================================

# The candidate token itself is excluded from the window, so a gene symbol
# never serves as its own evidence.
CONTEXT_CUE_PATTERN = re.compile(
    r"\b(?:genes?|genetic|genetics|genotypes?|variants?|mutations?|alleles?"
    r"|carriers?|heterozygous|homozygous|hemizygous|zygosity"
    r"|pathogenic|benign|vus|uncertain\s+significance|disease[\s-]causing"
    r"|tested|exons?|introns?|deletion|duplication|chromosomes?|snps?"
    r"|rs\d+|[cp]\.[A-Za-z0-9_>*+\-]+|[eε][234](?:\s*/\s*[eε][234])?)\b"
    r"|\b(?:NM|NC|NP|NG)_\d+",
    re.IGNORECASE,
)

CONTEXT_WINDOW = 80


# =============================================================================
# Classification (first match wins)
# =============================================================================

@dataclass(frozen=True)
class ClassificationRule:
    key: str
    pattern: re.Pattern
    suppressed_by: Optional[re.Pattern] = None


LIKELY_PATHOGENIC_PATTERN = re.compile(r"\blikely[\s-]+pathogenic\b", re.IGNORECASE)

CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule("pathogenic", LIKELY_PATHOGENIC_PATTERN),
    ClassificationRule(
        "pathogenic",
        re.compile(r"\b(?:pathogenic|disease[\s-]causing)\b", re.IGNORECASE),
        suppressed_by=LIKELY_PATHOGENIC_PATTERN,
    ),
    ClassificationRule(
        "vus",
        re.compile(
            r"\b(?:VUS|variants?\s+of\s+uncertain\s+significance|uncertain\s+significance)\b",
            re.IGNORECASE,
        ),
    ),
    ClassificationRule("benign", re.compile(r"\blikely[\s-]+benign\b", re.IGNORECASE)),
    ClassificationRule("benign", re.compile(r"\bbenign\b", re.IGNORECASE)),
    ClassificationRule("carrier", re.compile(r"\bcarrier\b", re.IGNORECASE)),
)


# =============================================================================
# Zygosity and gene-specific overrides
# =============================================================================

ZYGOSITY_PATTERN = re.compile(r"\b(heterozygous|homozygous|hemizygous)\b", re.IGNORECASE)

# Zygosity keys in precedence order when several are present
ZYGOSITY_PRECEDENCE = ("homozygous", "heterozygous", "hemizygous")

# Genes whose templates are keyed by zygosity rather than classification
ZYGOSITY_TEMPLATE_GENES = frozenset({"F5", "MTHFR"})

APOE_E4_PATTERN = re.compile(r"\b[eε][234]\s*/\s*[eε]4\b|\b[eε]4\b", re.IGNORECASE)


# =============================================================================
# Gene panel
# =============================================================================

PANEL_PATTERN = re.compile(
    r"\btested\s+genes?(?:\s*\(s\))?\s*:\s*(?P<genes>[^\n;.]+)",
    re.IGNORECASE,
)


# =============================================================================
# Disallowed intents
# =============================================================================

DISALLOWED_INTENT_RULES: tuple[tuple[re.Pattern, str], ...] = (
    (
        re.compile(
            r"should i (?:take|stop|start|change|increase|decrease) ?(?:my )?"
            r"(?:medications?|medicines?|drugs?|dose|dosage)",
            re.IGNORECASE,
        ),
        "medication advice",
    ),
    (re.compile(r"what (?:medications?|medicines?|drugs?) should i", re.IGNORECASE), "medication advice"),
    (re.compile(r"what (?:treatments?) should i", re.IGNORECASE), "treatment recommendation"),
    (
        re.compile(r"do i have (?:an? )?(?:cancer|disease|condition|disorder)", re.IGNORECASE),
        "diagnosis request",
    ),
    (re.compile(r"am i going to (?:get|develop|die|have)", re.IGNORECASE), "prognosis request"),
    (re.compile(r"what (?:supplements?|vitamins?) should", re.IGNORECASE), "supplement advice"),
    (re.compile(r"\bdiagnose", re.IGNORECASE), "diagnosis request"),
    (re.compile(r"\bprescribe", re.IGNORECASE), "prescription request"),
    (re.compile(r"\bcure\b|\btreat my\b", re.IGNORECASE), "treatment request"),
)
