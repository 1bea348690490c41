"""Curated knowledge base

- base: loader/merger and the read-only KnowledgeBase accessor
- models: JSON source shapes (genes, classification templates, glossary, questions)
- data/: built-in JSON sources
"""

from .base import (
    DEFAULT_SOURCE_FILES,
    KnowledgeBase,
    get_knowledge_base,
    load_knowledge_base,
    load_source,
    merge_sources,
    reset_knowledge_base,
)
from .models import (
    ClassificationEntry,
    GeneEntry,
    GeneResponse,
    GlossaryTerm,
    KnowledgeData,
    KnowledgeSource,
    NextStepTemplate,
    QuestionsTemplate,
)

__all__ = [
    "DEFAULT_SOURCE_FILES",
    "KnowledgeBase",
    "get_knowledge_base",
    "load_knowledge_base",
    "load_source",
    "merge_sources",
    "reset_knowledge_base",
    "ClassificationEntry",
    "GeneEntry",
    "GeneResponse",
    "GlossaryTerm",
    "KnowledgeData",
    "KnowledgeSource",
    "NextStepTemplate",
    "QuestionsTemplate",
]
