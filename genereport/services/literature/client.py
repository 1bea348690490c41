"""PubMed suggested-reading search

Only the gene and topic keywords chosen by the caller are sent to PubMed,
never report text. Queries start strict (reviews and guidelines, recent,
genetics context) and are relaxed step by step until something matches.
"""

import logging
import re
from typing import Any, Optional, Sequence

import httpx

from genereport.errors import ExternalLookupError
from genereport.services.admission import OutboundThrottle, TTLCache, get_ncbi_throttle
from genereport.settings import settings

from .models import LiteratureArticle, LiteratureResponse

logger = logging.getLogger(__name__)

EUTILS_BASE_URL = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils"
PUBMED_ARTICLE_URL = "https://pubmed.ncbi.nlm.nih.gov/{pmid}/"
TOOL_NAME = "genereport"

GENETICS_CONTEXT = "(genetic[tiab] OR hereditary[tiab] OR variant[tiab] OR mutation[tiab])"
PUBLICATION_TYPE = "(review[pt] OR guideline[pt] OR meta-analysis[pt])"
REVIEW_ONLY = "(review[pt] OR meta-analysis[pt])"
DATE_FILTER = '("2016"[pdat] : "3000"[pdat])'
WIDER_DATE_FILTER = '("2010"[pdat] : "3000"[pdat])'

LITERATURE_DISCLAIMER = (
    "Suggested reading only. These links are provided for education and are not medical advice. "
    "This search uses only the selected gene/topic keywords (not your full report text)."
)
BROADENED_NOTE = " Search was broadened to find results."


# =============================================================================
# Query construction
# =============================================================================

def _gene_part(genes: Sequence[str]) -> str:
    return " OR ".join(f"{g}[tiab]" for g in genes)


def _topic_part(topics: Optional[Sequence[str]]) -> str:
    return " OR ".join(f'"{t.replace(chr(34), "")}"[tiab]' for t in topics or [])


def build_pubmed_query(genes: Sequence[str], topics: Optional[Sequence[str]] = None) -> str:
    """Strictest query: genes, topics, genetics context, review types, last decade"""
    topic_part = _topic_part(topics)
    parts = [f"({_gene_part(genes)})"]
    if topic_part:
        parts.append(f"({topic_part})")
    parts.extend([GENETICS_CONTEXT, PUBLICATION_TYPE, DATE_FILTER])
    return " AND ".join(parts)


def build_fallback_queries(genes: Sequence[str], topics: Optional[Sequence[str]] = None) -> list[str]:
    """Progressively relaxed queries, strictest first, without duplicates"""
    gene_part = f"({_gene_part(genes)})"
    topic_part = _topic_part(topics)

    attempts = [
        build_pubmed_query(genes, topics),
        " AND ".join([gene_part, GENETICS_CONTEXT, PUBLICATION_TYPE, DATE_FILTER]),
        " AND ".join([gene_part, PUBLICATION_TYPE, DATE_FILTER]),
        " AND ".join([gene_part, REVIEW_ONLY, WIDER_DATE_FILTER]),
        " AND ".join([gene_part, f"({topic_part})", WIDER_DATE_FILTER]) if topic_part
        else " AND ".join([gene_part, WIDER_DATE_FILTER]),
    ]
    return list(dict.fromkeys(attempts))


def build_cache_key(genes: Sequence[str], topics: Optional[Sequence[str]], max_results: int) -> str:
    gene_key = ",".join(sorted(g.strip().upper() for g in genes))
    topic_key = ",".join(sorted(t.strip().lower() for t in topics or []))
    return f"genes={gene_key}|topics={topic_key}|max={max_results}"


def build_why_relevant(title: str, genes: Sequence[str], topics: Optional[Sequence[str]] = None) -> str:
    """Relevance note derived from the article title and the search keywords only"""
    matched_genes = [g for g in genes if re.search(rf"\b{re.escape(g)}\b", title, re.IGNORECASE)]
    matched_topics = [t for t in topics or [] if t.lower() in title.lower()]

    parts = []
    if matched_genes:
        parts.append(f"Matches gene{'s' if len(matched_genes) > 1 else ''}: {', '.join(matched_genes)}")
    if matched_topics:
        parts.append(f"Matches topic{'s' if len(matched_topics) > 1 else ''}: {', '.join(matched_topics)}")

    if not parts:
        return ("Suggested review/guideline-style background reading related to your detected "
                "gene/topic keywords (PubMed).")
    return f"{' · '.join(parts)}. Suggested review/guideline-style background reading (PubMed)."


def summary_to_article(
    uid: str,
    item: dict[str, Any],
    genes: Sequence[str],
    topics: Optional[Sequence[str]] = None,
) -> Optional[LiteratureArticle]:
    title = item.get("title")
    if not title or not isinstance(title, str):
        return None

    pubdate = item.get("pubdate")
    year = None
    if isinstance(pubdate, str):
        m = re.search(r"\b(?:19|20)\d{2}\b", pubdate)
        year = m.group(0) if m else None

    authors = None
    if isinstance(item.get("authors"), list):
        authors = ", ".join(a["name"] for a in item["authors"] if isinstance(a, dict) and a.get("name")) or None

    pmid = str(item.get("uid") or uid)
    return LiteratureArticle(
        title=title,
        pmid=pmid,
        journal=item.get("fulljournalname") or item.get("source") or None,
        year=year,
        authors=authors,
        url=PUBMED_ARTICLE_URL.format(pmid=pmid),
        why_relevant=build_why_relevant(title, [g.upper() for g in genes], topics),
    )


# =============================================================================
# Client
# =============================================================================

class LiteratureClient:
    """Cached PubMed searches"""

    def __init__(
        self,
        http_client: httpx.Client | None = None,
        cache: TTLCache[LiteratureResponse] | None = None,
        api_key: str | None = None,
        throttle: OutboundThrottle | None = None,
    ):
        self.http = http_client or httpx.Client(timeout=settings.ncbi_timeout_seconds)
        self.throttle = throttle if throttle is not None else get_ncbi_throttle()
        if cache is None:
            cache = TTLCache(default_ttl_seconds=settings.literature_cache_ttl_seconds, name="literature")
        self.cache = cache
        self.api_key = api_key or settings.ncbi_api_key

    def _get(self, endpoint: str, **params: Any) -> dict[str, Any]:
        params.update(db="pubmed", retmode="json", tool=TOOL_NAME)
        if self.api_key:
            params["api_key"] = self.api_key
        self.throttle.acquire()
        response = self.http.get(
            f"{EUTILS_BASE_URL}/{endpoint}", params=params, headers={"Accept": "application/json"}
        )
        response.raise_for_status()
        return response.json()

    def esearch(self, term: str, retmax: int) -> list[str]:
        data = self._get("esearch.fcgi", term=term, retmax=retmax, sort="relevance")
        ids = (data.get("esearchresult") or {}).get("idlist") or []
        return list(ids) if isinstance(ids, list) else []

    def esummary(
        self,
        pmids: list[str],
        genes: Sequence[str],
        topics: Optional[Sequence[str]] = None,
    ) -> list[LiteratureArticle]:
        if not pmids:
            return []
        result = self._get("esummary.fcgi", id=",".join(pmids)).get("result") or {}
        articles = []
        for uid in result.get("uids") or []:
            item = result.get(uid)
            if not isinstance(item, dict):
                continue
            article = summary_to_article(str(uid), item, genes, topics)
            if article is not None:
                articles.append(article)
        return articles

    def search(
        self,
        genes: Sequence[str],
        topics: Optional[Sequence[str]] = None,
        max_results: int = 5,
    ) -> LiteratureResponse:
        """Find review-style reading for the given keywords

        Args:
            genes: gene symbols (1-3)
            topics: optional topic phrases
            max_results: articles to return (1-10)

        Returns:
            LiteratureResponse (possibly with no articles)

        Raises:
            ExternalLookupError: PubMed could not be reached or answered with an error
        """
        genes = [g.strip() for g in genes if g.strip()]
        topics = [t.strip() for t in topics or [] if t.strip()] or None

        cache_key = build_cache_key(genes, topics, max_results)
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        attempts = build_fallback_queries(genes, topics)
        used_query = attempts[0]
        try:
            pmids: list[str] = []
            for query in attempts:
                used_query = query
                pmids = self.esearch(query, max_results)
                if pmids:
                    break
            articles = self.esummary(pmids, genes, topics)
        except (httpx.HTTPError, ValueError) as e:
            logger.error("PubMed search failed: %s", type(e).__name__)
            raise ExternalLookupError("Failed to fetch literature") from e

        broadened = used_query != attempts[0]
        if broadened:
            logger.info("PubMed search broadened to attempt %d", attempts.index(used_query) + 1)
        response = LiteratureResponse(
            query=used_query,
            articles=articles,
            disclaimer=LITERATURE_DISCLAIMER + (BROADENED_NOTE if broadened else ""),
        )
        self.cache.set(cache_key, response)
        return response
