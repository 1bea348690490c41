"""Prebuilt responder (PrebuiltResponder)

Composes a full TranslationResult from a classifier match and the curated
templates. No network I/O; identical matches always produce identical
results.
"""

import logging

from genereport.errors import TemplateNotFoundError
from genereport.models.translation import (
    ExtractedEntity,
    GlossaryEntry,
    NextStep,
    TranslationResult,
)
from genereport.services.classification import GENERAL, PrebuiltMatch
from genereport.services.knowledge import (
    ClassificationEntry,
    GeneEntry,
    GeneResponse,
    KnowledgeBase,
    NextStepTemplate,
    get_knowledge_base,
)

from .safety import clinvar_source, genereviews_source, nsgc_source

logger = logging.getLogger(__name__)


PANEL_SUMMARY = (
    "Your text lists the genes that were tested: {genes}. A list of tested genes is not itself "
    "a finding. It tells you what the laboratory looked at, not what it found. Look for a "
    "specific variant together with a classification (for example Pathogenic, VUS or Benign) "
    "before drawing any conclusions."
)


class PrebuiltResponder:
    """Template-backed responder for the prebuilt tier"""

    def __init__(self, knowledge_base: KnowledgeBase | None = None):
        """
        Args:
            knowledge_base: template source (process-wide knowledge base if None)
        """
        self.kb = knowledge_base or get_knowledge_base()

    def synthesize(self, match: PrebuiltMatch) -> TranslationResult:
        """Build the structured answer for a match

        Args:
            match: classifier match against the same knowledge base

        Returns:
            TranslationResult

        Raises:
            TemplateNotFoundError: the knowledge base has no template for the match
        """
        if match.is_panel:
            return self._panel_response(match)

        if match.is_classification_only:
            entry = self.kb.get_classification(match.classification)
            if entry is None:
                raise TemplateNotFoundError(f"No classification template for {match.key}")
            return self._classification_response(match, entry)

        gene = self.kb.get_gene(match.gene)
        response = self.kb.get_gene_response(match.gene, match.classification)
        if gene is None or response is None:
            raise TemplateNotFoundError(f"No gene template for {match.key}")
        return self._gene_response(match, gene, response)

    # -------------------------------------------------------------------------
    # Match shapes
    # -------------------------------------------------------------------------

    def _gene_response(self, match: PrebuiltMatch, gene: GeneEntry, response: GeneResponse) -> TranslationResult:
        entities = [ExtractedEntity(type="gene", value=match.gene, confidence="high", notes=gene.full_name)]
        if match.classification != GENERAL:
            entities.append(ExtractedEntity(
                type="variant_classification",
                value=match.classification,
                confidence=match.confidence,
            ))

        summary = response.summary
        if gene.important_context:
            summary += f"\n\n**Important Context**: {gene.important_context}"

        if gene.associated_conditions:
            why = f"Associated with: {', '.join(gene.associated_conditions)}"
        else:
            why = "This gene is relevant to your health"
        glossary = [GlossaryEntry(term=match.gene, meaning=gene.description, why_it_matters=why)]
        if gene.inheritance:
            glossary.append(GlossaryEntry(
                term="Inheritance Pattern",
                meaning=gene.inheritance,
                why_it_matters="This affects how the variant may be passed to family members",
            ))
        if gene.penetrance:
            glossary.append(GlossaryEntry(
                term="Penetrance",
                meaning=gene.penetrance,
                why_it_matters="This indicates the likelihood of developing symptoms if you carry the variant",
            ))

        cautions = list(response.what_this_does_not_mean)
        if response.caution:
            cautions.append(f"CAUTION: {response.caution}")

        return TranslationResult(
            disclaimer=self.kb.get_disclaimer(),
            extracted_entities=entities,
            summary_plain_english=summary,
            glossary=glossary,
            what_this_does_not_mean=cautions,
            next_steps=[_next_step(step) for step in response.next_steps],
            questions_to_ask=list(response.questions_to_ask),
            sources=[clinvar_source(), nsgc_source(), genereviews_source()],
            refusals=[],
        )

    def _classification_response(self, match: PrebuiltMatch, entry: ClassificationEntry) -> TranslationResult:
        standard = entry.standard_response
        term = self.kb.get_glossary_term(match.classification)
        if term is not None:
            glossary = [GlossaryEntry(
                term=term.term,
                meaning=f"{term.full_name} - {term.meaning}",
                why_it_matters=term.why_it_matters,
                common_misreadings=term.common_misreadings or None,
            )]
        else:
            glossary = [GlossaryEntry(
                term=match.classification,
                meaning=entry.meaning,
                why_it_matters="The classification determines what a variant means for you",
            )]

        return TranslationResult(
            disclaimer=self.kb.get_disclaimer(),
            extracted_entities=[ExtractedEntity(
                type="variant_classification",
                value=entry.label,
                confidence="high",
            )],
            summary_plain_english=standard.summary,
            glossary=glossary,
            what_this_does_not_mean=list(standard.key_points),
            next_steps=[NextStep(
                title="Consult a Genetic Counselor",
                rationale=standard.recommendation or "A genetic counselor can explain what this means for you",
                who_to_talk_to="Certified Genetic Counselor",
                urgency="routine",
            )],
            questions_to_ask=list(entry.questions_to_ask),
            sources=[
                clinvar_source("Check for updated variant classifications"),
                nsgc_source("Professional guidance on genetic results"),
            ],
            refusals=[],
        )

    def _panel_response(self, match: PrebuiltMatch) -> TranslationResult:
        entities = []
        for symbol in match.detected_genes:
            canonical = self.kb.resolve_gene_symbol(symbol)
            gene = self.kb.get_gene(canonical) if canonical else None
            entities.append(ExtractedEntity(
                type="gene",
                value=symbol,
                confidence="high" if gene else "medium",
                notes=f"Listed as tested; {gene.full_name}" if gene else "Listed as tested",
            ))

        questions = list(self.kb.questions.about_the_test) or [
            "Which genes and variants were actually tested?",
        ]
        questions.append("Was any variant found in these genes, and how was it classified?")

        return TranslationResult(
            disclaimer=self.kb.get_disclaimer(),
            extracted_entities=entities,
            summary_plain_english=PANEL_SUMMARY.format(genes=", ".join(match.detected_genes)),
            glossary=[GlossaryEntry(
                term="Gene panel",
                meaning="A test that looks at a set of genes at the same time.",
                why_it_matters="The panel list describes what was examined, not what was found",
            )],
            what_this_does_not_mean=[
                "A list of tested genes is NOT a finding",
                "It does NOT mean a variant was found in any of these genes",
                "It does NOT mean you have or will develop any condition",
            ],
            next_steps=[
                NextStep(
                    title="Look for a specific variant and classification",
                    rationale="Results sections name a variant (gene, rsID or HGVS) and a classification "
                              "such as Pathogenic, VUS or Benign.",
                    who_to_talk_to="You (reviewing the full report)",
                    urgency="informational",
                ),
                NextStep(
                    title="Consult a Genetic Counselor",
                    rationale="A counselor can walk you through the full report, including negative results.",
                    who_to_talk_to="Certified Genetic Counselor",
                    urgency="routine",
                ),
            ],
            questions_to_ask=list(dict.fromkeys(questions)),
            sources=[clinvar_source(), nsgc_source(), genereviews_source()],
            refusals=[],
        )


def _next_step(step: NextStepTemplate) -> NextStep:
    who = step.who_to_talk_to
    if not who:
        who = "Certified Genetic Counselor" if "Genetic" in step.title else "Healthcare Provider"
    return NextStep(title=step.title, rationale=step.description, who_to_talk_to=who, urgency=step.urgency)
