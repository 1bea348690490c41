"""Knowledge base accessor

Curated gene/classification templates, glossary, clinician questions and
disclaimers, loaded from JSON on first use and cached for the life of the
process. Reloading requires a restart (``reset_knowledge_base`` exists for
tests and notebooks).

A missing or malformed source is logged and skipped. When every source
fails the accessor serves an empty knowledge base; callers treat "no
template found" as a normal outcome that hands off to the next tier.
"""
from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Iterable, Optional, Sequence

from pydantic import ValidationError

from genereport.settings import settings

from .models import (
    ClassificationEntry,
    GeneEntry,
    GeneResponse,
    GlossaryTerm,
    KnowledgeData,
    KnowledgeSource,
    QuestionsTemplate,
)

logger = logging.getLogger(__name__)

# Built-in sources, merged in this order
DEFAULT_SOURCE_FILES = (
    "common-genes.json",
    "carrier-genes.json",
    "glossary.json",
    "questions-for-clinician.json",
    "disclaimers.json",
)


class KnowledgeBase:
    """Read-only view over the merged knowledge sources"""

    def __init__(self, data: KnowledgeData | None = None):
        self.data = data or KnowledgeData()
        self._symbol_synonyms: dict[str, str] = {}
        self._phrase_synonyms: dict[str, str] = {}
        for symbol, entry in self.data.genes.items():
            for syn in entry.synonyms:
                if " " in syn:
                    self._phrase_synonyms[syn.lower()] = symbol
                else:
                    self._symbol_synonyms[syn] = symbol

    @property
    def is_empty(self) -> bool:
        return not self.data.genes and not self.data.classifications and not self.data.terms

    # -------------------------------------------------------------------------
    # Genes
    # -------------------------------------------------------------------------

    def supported_genes(self) -> list[str]:
        return list(self.data.genes.keys())

    def get_gene(self, symbol: str) -> Optional[GeneEntry]:
        return self.data.genes.get(symbol)

    def resolve_gene_symbol(self, token: str) -> Optional[str]:
        """Map a symbol-shaped token or a synonym to its canonical gene key"""
        if token in self.data.genes:
            return token
        if token in self._symbol_synonyms:
            return self._symbol_synonyms[token]
        return self._phrase_synonyms.get(token.lower())

    def phrase_synonyms(self) -> dict[str, str]:
        """Multi-word synonyms (lower-cased) -> gene key"""
        return dict(self._phrase_synonyms)

    def get_gene_response(self, symbol: str, classification: str) -> Optional[GeneResponse]:
        gene = self.get_gene(symbol)
        if gene is None:
            return None
        return gene.responses.get(classification)

    # -------------------------------------------------------------------------
    # Classification-only templates
    # -------------------------------------------------------------------------

    def classification_key(self, classification: str) -> Optional[str]:
        """Table key for a classification, matched case-insensitively"""
        if classification in self.data.classifications:
            return classification
        lowered = classification.lower()
        for key in self.data.classifications:
            if key.lower() == lowered:
                return key
        return None

    def get_classification(self, classification: str) -> Optional[ClassificationEntry]:
        key = self.classification_key(classification)
        return self.data.classifications.get(key) if key else None

    # -------------------------------------------------------------------------
    # Glossary
    # -------------------------------------------------------------------------

    def get_glossary_term(self, term: str) -> Optional[GlossaryTerm]:
        lowered = term.lower()
        for t in self.data.terms:
            if t.term.lower() == lowered or t.full_name.lower() == lowered:
                return t
        return None

    def get_matching_terms(self, keywords: Iterable[str]) -> list[GlossaryTerm]:
        normalized = [k.lower() for k in keywords]
        return [
            t for t in self.data.terms
            if any(
                k in t.term.lower() or k in t.full_name.lower() or k in t.meaning.lower()
                for k in normalized
            )
        ]

    def build_glossary_context(self, terms: Iterable[str]) -> str:
        """Short glossary blurbs for the prompt; empty string when nothing matches"""
        matching = self.get_matching_terms(terms)
        if not matching:
            return ""
        return "\n\n".join(
            f"**{t.term}** ({t.full_name}): {t.meaning}\n"
            f"Why it matters: {t.why_it_matters}\n"
            f"What to do: {t.what_to_do}"
            for t in matching
        )

    # -------------------------------------------------------------------------
    # Questions / disclaimers
    # -------------------------------------------------------------------------

    @property
    def questions(self) -> QuestionsTemplate:
        return self.data.questions

    def get_relevant_questions(self, result_types: Sequence[str]) -> list[str]:
        """Clinician questions for 'vus' / 'pathogenic' / 'carrier' / 'general' results"""
        q = self.data.questions
        questions = list(q.general_questions)
        if "vus" in result_types:
            questions.extend(q.for_vus_results)
        if "pathogenic" in result_types:
            questions.extend(q.for_pathogenic_results)
        if "carrier" in result_types:
            questions.extend(q.for_carrier_status)
        return list(dict.fromkeys(questions))

    def get_disclaimer(self) -> str:
        return self.data.disclaimer

    def get_short_disclaimer(self) -> str:
        return self.data.short_disclaimer


# =============================================================================
# Loading / merging
# =============================================================================

def _merge_gene(old: GeneEntry, new: GeneEntry) -> GeneEntry:
    """Fields present in the newer source win; responses are merged by key"""
    update = {name: getattr(new, name) for name in new.model_fields_set if name != "responses"}
    update["responses"] = {**old.responses, **new.responses}
    return old.model_copy(update=update)


def merge_sources(sources: Iterable[KnowledgeSource]) -> KnowledgeData:
    """Merge sources in order; later sources override/extend earlier ones by key"""
    merged = KnowledgeData()
    for src in sources:
        for symbol, entry in src.genes.items():
            existing = merged.genes.get(symbol)
            merged.genes[symbol] = _merge_gene(existing, entry) if existing else entry

        merged.classifications.update(src.common_classifications)

        if src.terms:
            by_term = {t.term.lower(): i for i, t in enumerate(merged.terms)}
            for term in src.terms:
                idx = by_term.get(term.term.lower())
                if idx is None:
                    by_term[term.term.lower()] = len(merged.terms)
                    merged.terms.append(term)
                else:
                    merged.terms[idx] = term

        if src.questions is not None:
            update = {name: getattr(src.questions, name) for name in src.questions.model_fields_set}
            merged.questions = merged.questions.model_copy(update=update)

        if src.disclaimer:
            merged.disclaimer = src.disclaimer
        if src.short_disclaimer:
            merged.short_disclaimer = src.short_disclaimer
    return merged


def load_source(path: Path) -> Optional[KnowledgeSource]:
    """Read one JSON source; None (logged) when missing or malformed"""
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        return KnowledgeSource.model_validate(raw)
    except FileNotFoundError:
        logger.error("Knowledge source not found: %s", path)
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Failed to read knowledge source %s: %s", path, e)
    except ValidationError as e:
        logger.error("Malformed knowledge source %s: %d error(s)", path, e.error_count())
    return None


def load_knowledge_base(paths: Iterable[Path]) -> KnowledgeBase:
    sources = [src for src in (load_source(Path(p)) for p in paths) if src is not None]
    kb = KnowledgeBase(merge_sources(sources))
    logger.info(
        "Knowledge base loaded: %d source(s), %d gene(s), %d classification template(s), %d term(s)",
        len(sources), len(kb.data.genes), len(kb.data.classifications), len(kb.data.terms),
    )
    return kb


def default_source_paths() -> list[Path]:
    kb_dir = Path(settings.kb_dir)
    return [kb_dir / name for name in DEFAULT_SOURCE_FILES] + [Path(p) for p in settings.extra_template_files]


# Module-level cache
_KB_CACHE: Optional[KnowledgeBase] = None
_KB_LOCK = threading.Lock()


def get_knowledge_base() -> KnowledgeBase:
    """Process-wide knowledge base, built on first call"""
    global _KB_CACHE
    if _KB_CACHE is None:
        with _KB_LOCK:
            if _KB_CACHE is None:
                _KB_CACHE = load_knowledge_base(default_source_paths())
    return _KB_CACHE


def reset_knowledge_base() -> None:
    """Drop the cached knowledge base so the next access reloads it"""
    global _KB_CACHE
    with _KB_LOCK:
        _KB_CACHE = None
