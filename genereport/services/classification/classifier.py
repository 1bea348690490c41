"""Report classifier (ReportClassifier)

Deterministic, rule-based detection of genes, identifiers, classifications,
zygosity cues and disallowed medical intents in free report text, plus the
selection of a prebuilt template match. No network, no learning.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from genereport.models.translation import ExtractedEntity
from genereport.services.knowledge import KnowledgeBase, get_knowledge_base

from . import patterns
from .models import (
    GENE_PANEL,
    GENERAL,
    PANEL_GENE,
    UNKNOWN_GENE,
    ClassificationHit,
    ClassificationResult,
    PrebuiltMatch,
)

logger = logging.getLogger(__name__)


def extract_identifier_entities(text: str) -> list[ExtractedEntity]:
    """rsID and HGVS tokens as entities, de-duplicated in order of appearance"""
    entities = []
    for value in dict.fromkeys(m.group(0) for m in patterns.RSID_PATTERN.finditer(text)):
        entities.append(ExtractedEntity(type="rsid", value=value, confidence="high"))
    for value in dict.fromkeys(m.group(0) for m in patterns.HGVS_PATTERN.finditer(text)):
        entities.append(ExtractedEntity(type="hgvs", value=value, confidence="high"))
    return entities


@dataclass(frozen=True)
class _GeneMention:
    start: int
    literal: str
    symbol: Optional[str]  # canonical key when known to the knowledge base


class ReportClassifier:
    """Rule-based classifier backed by the knowledge base"""

    def __init__(self, knowledge_base: KnowledgeBase | None = None, context_window: int = patterns.CONTEXT_WINDOW):
        """
        Args:
            knowledge_base: template source (process-wide knowledge base if None)
            context_window: characters on each side of a candidate searched for a genetics cue
        """
        self.kb = knowledge_base or get_knowledge_base()
        self.context_window = context_window
        self._phrase_patterns = [
            (re.compile(r"\b" + r"\s*".join(re.escape(w) for w in phrase.split()) + r"\b", re.IGNORECASE), symbol)
            for phrase, symbol in self.kb.phrase_synonyms().items()
        ]

    def classify(self, text: str) -> ClassificationResult:
        """Classify one report excerpt

        Args:
            text: raw report text

        Returns:
            ClassificationResult (match is None when no template applies)
        """
        mentions = self._find_gene_mentions(text)
        hit = self.detect_classification(text)
        zygosity = self._find_zygosity(text)
        has_context = self.has_genetics_context(text)

        entities = self._gene_entities(mentions)
        entities.extend(extract_identifier_entities(text))
        if hit is not None:
            entities.append(ExtractedEntity(type="variant_classification", value=hit.phrase, confidence="high"))
        for literal in zygosity:
            entities.append(ExtractedEntity(type="zygosity", value=literal, confidence="high"))

        match = self._select_match(text, mentions, hit, zygosity, has_context)
        result = ClassificationResult(
            entities=entities,
            disallowed_intents=self.detect_disallowed_intents(text),
            match=match,
            has_genetics_context=has_context,
            classification=hit,
        )
        logger.debug(
            "classified: entities=%d match=%s intents=%s",
            len(entities), match.key if match else None, result.disallowed_intents,
        )
        return result

    # -------------------------------------------------------------------------
    # Detectors
    # -------------------------------------------------------------------------

    def detect_disallowed_intents(self, text: str) -> list[str]:
        """Labels of medical requests the service must refuse, de-duplicated in rule order"""
        labels = [label for pattern, label in patterns.DISALLOWED_INTENT_RULES if pattern.search(text)]
        return list(dict.fromkeys(labels))

    def detect_classification(self, text: str) -> Optional[ClassificationHit]:
        """First matching classification rule, or None"""
        for rule in patterns.CLASSIFICATION_RULES:
            if rule.suppressed_by is not None and rule.suppressed_by.search(text):
                continue
            m = rule.pattern.search(text)
            if m:
                return ClassificationHit(key=rule.key, phrase=m.group(0))
        return None

    def has_genetics_context(self, text: str) -> bool:
        return patterns.CONTEXT_CUE_PATTERN.search(text) is not None

    def _has_cue_near(self, text: str, start: int, end: int) -> bool:
        # The candidate token is excluded so it cannot vouch for itself
        before = text[max(0, start - self.context_window):start]
        after = text[end:end + self.context_window]
        return (
            patterns.CONTEXT_CUE_PATTERN.search(before) is not None
            or patterns.CONTEXT_CUE_PATTERN.search(after) is not None
        )

    def _is_symbol_candidate(self, token: str) -> bool:
        if token in patterns.SYMBOL_STOPLIST:
            return False
        return patterns.VARIANT_NOTATION_PATTERN.match(token) is None

    def _find_gene_mentions(self, text: str) -> list[_GeneMention]:
        """Accepted gene mentions in order of appearance

        Genes known to the knowledge base need a genetics cue anywhere in the
        text. Unknown symbol-shaped tokens need one within the context window.
        """
        found: list[_GeneMention] = []
        taken: list[tuple[int, int]] = []
        text_has_cue = self.has_genetics_context(text)

        if text_has_cue:
            for pattern, symbol in self._phrase_patterns:
                for m in pattern.finditer(text):
                    found.append(_GeneMention(m.start(), m.group(0), symbol))
                    taken.append((m.start(), m.end()))

        for m in patterns.GENE_SYMBOL_PATTERN.finditer(text):
            token = m.group(0)
            if not self._is_symbol_candidate(token):
                continue
            if any(s <= m.start() < e for s, e in taken):
                continue
            symbol = self.kb.resolve_gene_symbol(token)
            if symbol is not None:
                if not text_has_cue:
                    continue
            elif not self._has_cue_near(text, m.start(), m.end()):
                continue
            found.append(_GeneMention(m.start(), token, symbol))

        found.sort(key=lambda g: g.start)
        return found

    def _find_zygosity(self, text: str) -> list[str]:
        seen: dict[str, str] = {}
        for m in patterns.ZYGOSITY_PATTERN.finditer(text):
            seen.setdefault(m.group(1).lower(), m.group(1))
        return list(seen.values())

    # -------------------------------------------------------------------------
    # Entities
    # -------------------------------------------------------------------------

    def _gene_entities(self, mentions: list[_GeneMention]) -> list[ExtractedEntity]:
        entities: list[ExtractedEntity] = []
        seen: set[str] = set()
        for g in mentions:
            dedupe_key = g.symbol or g.literal
            if dedupe_key in seen:
                continue
            seen.add(dedupe_key)

            if g.symbol is None:
                entities.append(ExtractedEntity(
                    type="gene",
                    value=g.literal,
                    confidence="low",
                    notes="Gene-like symbol not in the knowledge base",
                ))
                continue

            gene = self.kb.get_gene(g.symbol)
            notes = gene.full_name if g.literal == g.symbol else f"Recognized as {g.symbol} ({gene.full_name})"
            entities.append(ExtractedEntity(type="gene", value=g.literal, confidence="high", notes=notes))
        return entities

    # -------------------------------------------------------------------------
    # Match selection
    # -------------------------------------------------------------------------

    def _override_keys(self, symbol: str, text: str, zygosity: list[str]) -> list[str]:
        """Template keys that take precedence over the detected classification"""
        keys = []
        if symbol == "APOE" and patterns.APOE_E4_PATTERN.search(text):
            keys.append("e4_carrier")
        if symbol in patterns.ZYGOSITY_TEMPLATE_GENES:
            present = {z.lower() for z in zygosity}
            keys.extend(z for z in patterns.ZYGOSITY_PRECEDENCE if z in present)
        return keys

    def _select_match(
        self,
        text: str,
        mentions: list[_GeneMention],
        hit: Optional[ClassificationHit],
        zygosity: list[str],
        has_context: bool,
    ) -> Optional[PrebuiltMatch]:
        # A tested-gene list without a classification is informational
        if hit is None:
            panel = self._detect_panel(text)
            if panel is not None:
                return panel

        for symbol in dict.fromkeys(g.symbol for g in mentions if g.symbol):
            keys = self._override_keys(symbol, text, zygosity)
            keys.append(hit.key if hit else GENERAL)
            for key in keys:
                if self.kb.get_gene_response(symbol, key) is not None:
                    confidence = "medium" if key == GENERAL else "high"
                    return PrebuiltMatch(gene=symbol, classification=key, confidence=confidence)

        if hit is not None:
            table_key = self.kb.classification_key(hit.key)
            if table_key is not None:
                return PrebuiltMatch(
                    gene=UNKNOWN_GENE,
                    classification=table_key,
                    confidence="high" if has_context else "medium",
                )
        return None

    def _detect_panel(self, text: str) -> Optional[PrebuiltMatch]:
        m = patterns.PANEL_PATTERN.search(text)
        if not m:
            return None
        detected = [
            token for token in dict.fromkeys(patterns.GENE_SYMBOL_PATTERN.findall(m.group("genes")))
            if self._is_symbol_candidate(token)
        ]
        if not any(self.kb.resolve_gene_symbol(token) for token in detected):
            return None
        return PrebuiltMatch(
            gene=PANEL_GENE,
            classification=GENE_PANEL,
            confidence="high",
            detected_genes=tuple(detected),
        )


_default_classifier: Optional[ReportClassifier] = None


def get_classifier() -> ReportClassifier:
    """Process-wide classifier over the process-wide knowledge base"""
    global _default_classifier
    if _default_classifier is None or _default_classifier.kb is not get_knowledge_base():
        _default_classifier = ReportClassifier(get_knowledge_base())
    return _default_classifier


def classify(text: str) -> ClassificationResult:
    return get_classifier().classify(text)
