"""ClinVar client (NCBI E-utilities)

esearch resolves a free-form identifier to ClinVar ids, esummary fetches
the first record. Results (including "not found") are cached per
normalized query; transport failures are returned in the response
``error`` field and are not cached.
"""

import logging
import re
from typing import Any, Optional

import httpx

from genereport.services.admission import OutboundThrottle, TTLCache, get_ncbi_throttle
from genereport.services.knowledge import KnowledgeBase, get_knowledge_base
from genereport.settings import settings

from .models import (
    ClinicalSignificance,
    ClinvarResponse,
    ClinvarVariant,
    QueryType,
    ReviewStatus,
)

logger = logging.getLogger(__name__)

EUTILS_BASE_URL = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils"
CLINVAR_BASE_URL = "https://www.ncbi.nlm.nih.gov/clinvar"


# =============================================================================
# Query handling
# =============================================================================

def detect_query_type(query: str) -> QueryType:
    q = query.strip()
    if re.fullmatch(r"rs\d+", q, re.IGNORECASE):
        return "rsid"
    if re.fullmatch(r"(VCV)?\d+", q, re.IGNORECASE):
        return "variation_id"
    if re.match(r"(NM_|NC_|NP_|NG_)", q, re.IGNORECASE):
        return "hgvs"
    if re.fullmatch(r"[A-Z][A-Z0-9]{1,10}", q, re.IGNORECASE):
        return "gene"
    return "unknown"


def build_search_term(query: str, query_type: QueryType) -> str:
    q = query.strip()
    if query_type == "rsid":
        return f"{q}[Variant ID]"
    if query_type == "variation_id":
        return f"{re.sub(r'^VCV', '', q, flags=re.IGNORECASE)}[Variation ID]"
    if query_type == "hgvs":
        return f'"{q}"[Variant name]'
    if query_type == "gene":
        return f"{q}[Gene Name]"
    return q


# =============================================================================
# Normalization
# =============================================================================

def normalize_significance(description: Optional[str]) -> ClinicalSignificance:
    if not description:
        return "Not provided"
    lower = description.lower()
    if "conflicting" in lower:
        return "Conflicting interpretations"
    if "likely pathogenic" in lower:
        return "Likely pathogenic"
    if "pathogenic" in lower:
        return "Pathogenic"
    if "uncertain" in lower or "vus" in lower:
        return "Uncertain significance"
    if "likely benign" in lower:
        return "Likely benign"
    if "benign" in lower:
        return "Benign"
    return "Other"


def normalize_review_status(status: Optional[str]) -> ReviewStatus:
    if not status:
        return "no assertion provided"
    lower = status.lower()
    if "practice guideline" in lower:
        return "practice guideline"
    if "expert panel" in lower:
        return "reviewed by expert panel"
    if "multiple submitters" in lower and "no conflicts" in lower:
        return "criteria provided, multiple submitters, no conflicts"
    if "conflicting" in lower:
        return "criteria provided, conflicting interpretations"
    if "single submitter" in lower:
        return "criteria provided, single submitter"
    if "no assertion criteria" in lower:
        return "no assertion criteria provided"
    return "no assertion provided"


def summary_to_variant(uid: str, summary: dict[str, Any]) -> ClinvarVariant:
    # Newer esummary payloads use germline_classification
    significance = summary.get("clinical_significance") or summary.get("germline_classification") or {}
    genes = summary.get("genes") or []
    traits = summary.get("trait_set") or []
    scv = (summary.get("supporting_submissions") or {}).get("scv")
    return ClinvarVariant(
        variation_id=uid,
        name=summary.get("title") or "Unknown variant",
        gene_symbol=genes[0].get("symbol") if genes else None,
        clinical_significance=normalize_significance(significance.get("description")),
        review_status=normalize_review_status(significance.get("review_status")),
        conditions=[t["trait_name"] for t in traits if t.get("trait_name")],
        last_evaluated=significance.get("last_evaluated") or None,
        submissions_count=len(scv) if isinstance(scv, list) else None,
        source_url=f"{CLINVAR_BASE_URL}/variation/{uid}",
    )


NOT_FOUND_GUIDE = """No variant found matching your query. This could mean:
- The variant hasn't been submitted to ClinVar
- The query format wasn't recognized
- The variant exists under a different identifier

Try searching with a different identifier format (rsID, HGVS notation, or ClinVar variation ID)."""

INTERPRETATION_GUIDES: dict[str, str] = {
    "Pathogenic": """This variant is classified as PATHOGENIC, meaning there is strong evidence it is associated with disease. However:
- This does NOT mean you will definitely develop the condition
- Risk depends on penetrance (not all carriers develop symptoms)
- Family history and other factors affect individual risk
- Discuss with a genetic counselor for personalized interpretation""",
    "Likely pathogenic": """This variant is classified as LIKELY PATHOGENIC (>90% certainty of disease association). This is treated clinically similar to pathogenic variants, but:
- Classification may change as more evidence emerges
- Individual risk varies based on many factors
- Consult a genetic counselor for guidance""",
    "Uncertain significance": """This variant is classified as VUS (Variant of Uncertain Significance). This means:
- NOT enough evidence to determine if it's harmful or harmless
- VUS is NOT a diagnosis
- Most VUS are eventually reclassified as benign
- Do NOT make medical decisions based on a VUS alone
- Consider periodic re-evaluation as classifications update""",
    "Likely benign": "This variant is classified as LIKELY BENIGN (>90% certainty it's harmless). "
                     "Generally, no clinical action is needed.",
    "Benign": "This variant is classified as BENIGN - it is not associated with disease. "
              "This is normal human variation.",
    "Conflicting interpretations": """Different laboratories have submitted conflicting interpretations for this variant. This means:
- The evidence is not yet conclusive
- Treat with caution - do not make decisions based solely on this
- A genetic counselor can help interpret in your specific context""",
}


def interpretation_guide(variant: Optional[ClinvarVariant]) -> str:
    if variant is None:
        return NOT_FOUND_GUIDE
    significance = variant.clinical_significance
    return INTERPRETATION_GUIDES.get(
        significance,
        f'This variant has a classification of "{significance}". '
        "Discuss with a healthcare provider for interpretation.",
    )


# =============================================================================
# Client
# =============================================================================

class ClinVarClient:
    """Cached ClinVar lookups"""

    def __init__(
        self,
        http_client: httpx.Client | None = None,
        cache: TTLCache[ClinvarResponse] | None = None,
        knowledge_base: KnowledgeBase | None = None,
        api_key: str | None = None,
        throttle: OutboundThrottle | None = None,
    ):
        """
        Args:
            http_client: outbound client (one with the NCBI timeout if None)
            cache: response cache (ClinVar TTL from settings if None)
            knowledge_base: disclaimer source (process-wide if None)
            api_key: NCBI API key (settings if None)
            throttle: outbound NCBI throttle (process-wide if None)
        """
        self.http = http_client or httpx.Client(timeout=settings.ncbi_timeout_seconds)
        self.throttle = throttle if throttle is not None else get_ncbi_throttle()
        if cache is None:
            cache = TTLCache(default_ttl_seconds=settings.clinvar_cache_ttl_seconds, name="clinvar")
        self.cache = cache
        self._kb = knowledge_base
        self.api_key = api_key or settings.ncbi_api_key

    @property
    def kb(self) -> KnowledgeBase:
        return self._kb or get_knowledge_base()

    def _params(self, **params: Any) -> dict[str, Any]:
        params["retmode"] = "json"
        if self.api_key:
            params["api_key"] = self.api_key
        return params

    def search(self, query: str, query_type: QueryType) -> list[str]:
        self.throttle.acquire()
        response = self.http.get(
            f"{EUTILS_BASE_URL}/esearch.fcgi",
            params=self._params(db="clinvar", term=build_search_term(query, query_type), retmax=5),
        )
        response.raise_for_status()
        return list(response.json().get("esearchresult", {}).get("idlist") or [])

    def summaries(self, uids: list[str]) -> list[ClinvarVariant]:
        if not uids:
            return []
        self.throttle.acquire()
        response = self.http.get(
            f"{EUTILS_BASE_URL}/esummary.fcgi",
            params=self._params(db="clinvar", id=",".join(uids)),
        )
        response.raise_for_status()
        result = response.json().get("result") or {}
        variants = []
        for uid in result.get("uids") or []:
            entry = result.get(uid)
            if isinstance(entry, dict):
                variants.append(summary_to_variant(str(uid), entry))
        return variants

    def lookup(self, query: str) -> ClinvarResponse:
        """Look up one identifier (rsID, HGVS, variation id or gene symbol)

        Args:
            query: free-form identifier

        Returns:
            ClinvarResponse; transport failures are reported in ``error``
        """
        trimmed = query.strip()
        cache_key = f"clinvar:{trimmed.lower()}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        query_type = detect_query_type(trimmed)
        disclaimer = self.kb.get_disclaimer()
        try:
            uids = self.search(trimmed, query_type)
            if not uids:
                response = ClinvarResponse(
                    query=trimmed,
                    found=False,
                    interpretation_guide=interpretation_guide(None),
                    disclaimer=disclaimer,
                )
            else:
                variants = self.summaries(uids[:1])
                if variants:
                    response = ClinvarResponse(
                        query=trimmed,
                        found=True,
                        variant=variants[0],
                        interpretation_guide=interpretation_guide(variants[0]),
                        disclaimer=disclaimer,
                    )
                else:
                    response = ClinvarResponse(
                        query=trimmed,
                        found=False,
                        interpretation_guide=interpretation_guide(None),
                        disclaimer=disclaimer,
                        error="Found variant ID but could not retrieve details",
                    )
        except (httpx.HTTPError, ValueError) as e:
            logger.error("ClinVar lookup failed (%s): %s", query_type, type(e).__name__)
            return ClinvarResponse(
                query=trimmed,
                found=False,
                interpretation_guide=interpretation_guide(None),
                disclaimer=disclaimer,
                error="Failed to lookup variant",
            )

        self.cache.set(cache_key, response)
        return response
