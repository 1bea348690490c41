"""PubMed suggested-reading search"""

from .client import (
    LiteratureClient,
    build_cache_key,
    build_fallback_queries,
    build_pubmed_query,
    build_why_relevant,
)
from .models import LiteratureArticle, LiteratureResponse

__all__ = [
    "LiteratureClient",
    "LiteratureArticle",
    "LiteratureResponse",
    "build_cache_key",
    "build_fallback_queries",
    "build_pubmed_query",
    "build_why_relevant",
]
