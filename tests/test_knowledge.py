"""Knowledge base tests"""

import json

from genereport.services.knowledge import (
    GeneEntry,
    GeneResponse,
    KnowledgeSource,
    load_knowledge_base,
    merge_sources,
)
from genereport.services.knowledge.models import DEFAULT_DISCLAIMER


class TestKnowledgeBase:
    """Lookups over the packaged sources"""

    def test_supported_genes(self, kb):
        genes = kb.supported_genes()
        for symbol in ("BRCA1", "BRCA2", "APOE", "MTHFR", "F5", "CFTR", "HBB"):
            assert symbol in genes

    def test_gene_response(self, kb):
        assert kb.get_gene_response("BRCA1", "pathogenic") is not None
        assert kb.get_gene_response("BRCA1", "carrier") is None
        assert kb.get_gene_response("NOPE1", "pathogenic") is None

    def test_resolve_synonyms(self, kb):
        assert kb.resolve_gene_symbol("BRCA1") == "BRCA1"
        assert kb.resolve_gene_symbol("FVL") == "F5"
        assert kb.resolve_gene_symbol("Factor V Leiden") == "F5"
        assert kb.resolve_gene_symbol("TP53") is None
        assert kb.phrase_synonyms() == {"factor v leiden": "F5"}

    def test_classification_key_is_case_insensitive(self, kb):
        assert kb.classification_key("vus") == "VUS"
        assert kb.classification_key("Pathogenic") == "pathogenic"
        assert kb.classification_key("unknown") is None
        assert kb.get_classification("VUS").label.startswith("VUS")

    def test_glossary(self, kb):
        assert kb.get_glossary_term("vus").term == "VUS"
        assert kb.get_glossary_term("nonexistent") is None

        context = kb.build_glossary_context(["Penetrance"])
        assert "**Penetrance**" in context
        assert kb.build_glossary_context(["zzzz"]) == ""

    def test_relevant_questions(self, kb):
        general = kb.get_relevant_questions(["general"])
        vus = kb.get_relevant_questions(["vus"])

        assert general == kb.questions.general_questions
        assert vus[:len(general)] == general
        assert "How likely is it that this VUS will be reclassified?" in vus
        assert len(vus) == len(set(vus))

    def test_disclaimers(self, kb):
        assert "not intended as medical advice" in kb.get_disclaimer()
        assert kb.get_short_disclaimer().startswith("Educational only")


class TestLoading:
    """Merging and failure handling"""

    def _gene(self, summary: str, **extra) -> GeneEntry:
        return GeneEntry(
            full_name="Test gene",
            description="A gene",
            responses={"general": GeneResponse(summary=summary)},
            **extra,
        )

    def test_later_source_overrides_and_extends(self):
        first = KnowledgeSource(genes={"ABC1": self._gene("first")})
        second = KnowledgeSource(genes={
            "ABC1": GeneEntry(
                full_name="Renamed",
                description="A gene",
                responses={"vus": GeneResponse(summary="vus")},
            ),
        })

        merged = merge_sources([first, second])
        gene = merged.genes["ABC1"]

        assert gene.full_name == "Renamed"
        assert set(gene.responses) == {"general", "vus"}

    def test_missing_file_is_skipped(self, tmp_path):
        good = tmp_path / "genes.json"
        good.write_text(json.dumps({
            "genes": {"ABC1": {"full_name": "Test", "description": "d", "responses": {}}},
        }), encoding="utf-8")

        kb = load_knowledge_base([tmp_path / "missing.json", good])
        assert kb.supported_genes() == ["ABC1"]

    def test_malformed_sources_are_skipped(self, tmp_path):
        broken = tmp_path / "broken.json"
        broken.write_text("{not json", encoding="utf-8")
        wrong_shape = tmp_path / "wrong.json"
        wrong_shape.write_text(json.dumps({"genes": {"ABC1": {"responses": 3}}}), encoding="utf-8")

        kb = load_knowledge_base([broken, wrong_shape])
        assert kb.is_empty
        assert kb.get_disclaimer() == DEFAULT_DISCLAIMER
