"""Translate and lookup service tests"""

from unittest.mock import Mock

import pytest

from genereport.errors import (
    ExternalLookupError,
    GenerationParseError,
    LLMTimeoutError,
    LLMTransportError,
    ProviderConfigurationError,
)
from genereport.models import ErrorResponse, RateLimitedResponse, TranslationResult
from genereport.services.clinvar import ClinVarClient, ClinvarResponse
from genereport.services.literature import LiteratureClient, LiteratureResponse
from genereport.services.lookup_service import LookupService
from genereport.services.orchestration import PrebuiltResponder, Router, TierRoute
from genereport.services.translate_service import TranslateService
from genereport.settings import settings

MEDICATION_TEXT = "what medication should I take for this mutation"


@pytest.fixture
def translate_service(router, rate_limiter):
    return TranslateService(router=router, rate_limiter=rate_limiter)


class TestValidation:
    """Submission validation"""

    def test_too_short(self, translate_service):
        outcome = translate_service.submit_detailed({"text": "   short  "})

        assert isinstance(outcome.response, ErrorResponse)
        assert outcome.response.error == "Validation failed"
        assert outcome.response.code == "validation_error"
        assert "too short to analyze" in outcome.response.details
        assert outcome.status == 400

    def test_too_long(self, translate_service, monkeypatch):
        monkeypatch.setattr(settings, "max_text_length", 20)

        response = translate_service.submit({"text": "x" * 21})
        assert response.code == "validation_error"
        assert "must not exceed" in response.details

    @pytest.mark.parametrize(
        "payload",
        [None, "just a string", {"text": 42}, {"mode": "auto"}, {"text": "BRCA1 pathogenic", "mode": "fast"}],
    )
    def test_malformed_payload(self, translate_service, payload):
        assert translate_service.submit(payload).code == "validation_error"


class TestTranslateService:
    """Routing, admission and error envelopes"""

    def test_prebuilt(self, translate_service):
        outcome = translate_service.submit_detailed({"text": "BRCA1, likely pathogenic, heterozygous"}, "1.2.3.4")

        assert isinstance(outcome.response, TranslationResult)
        assert outcome.route == TierRoute.PREBUILT
        assert outcome.rate_limit is None
        assert outcome.status == 200

    def test_generative(self, translate_service, mock_llm_service):
        outcome = translate_service.submit_detailed({"text": MEDICATION_TEXT}, "1.2.3.4")

        assert outcome.route == TierRoute.GENERATIVE
        assert outcome.rate_limit.remaining == 9
        assert [r.user_intent for r in outcome.response.refusals] == ["medication advice"]

    def test_rate_limit_applies_only_to_generative_calls(self, translate_service, monkeypatch):
        monkeypatch.setattr(settings, "rate_limit_translate_per_min", 1)

        for _ in range(3):
            assert translate_service.submit_detailed({"text": "BRCA1 pathogenic variant"}, "a").status == 200

        assert translate_service.submit_detailed({"text": MEDICATION_TEXT}, "a").status == 200
        limited = translate_service.submit_detailed({"text": MEDICATION_TEXT}, "a")

        assert isinstance(limited.response, RateLimitedResponse)
        assert limited.status == 429
        assert limited.response.details == "Too many requests. Please wait a bit and try again."
        assert limited.response.limit == 1
        assert limited.response.remaining == 0
        assert limited.response.retry_after_seconds >= 1

        # Other clients keep their own quota
        assert translate_service.submit_detailed({"text": MEDICATION_TEXT}, "b").status == 200

    def test_timeout(self, translate_service, mock_llm_service):
        mock_llm_service.generate_text.side_effect = LLMTimeoutError("Analysis timed out", provider="mock")

        outcome = translate_service.submit_detailed({"text": MEDICATION_TEXT})
        assert outcome.response.error == "Analysis timed out"
        assert outcome.response.code == "timeout"
        assert outcome.status == 504

    @pytest.mark.parametrize(
        "side_effect",
        [LLMTransportError("boom", provider="mock"), RuntimeError("unexpected")],
    )
    def test_provider_failure(self, translate_service, mock_llm_service, side_effect):
        mock_llm_service.generate_text.side_effect = side_effect

        outcome = translate_service.submit_detailed({"text": MEDICATION_TEXT})
        assert outcome.response.error == "Failed to analyze report"
        assert outcome.response.code == "analysis_failed"
        assert "boom" not in outcome.response.details
        assert outcome.status == 500

    def test_undecodable_output(self, translate_service, mock_llm_service):
        mock_llm_service.generate_text.return_value = "not json"
        assert translate_service.submit({"text": MEDICATION_TEXT}).code == "analysis_failed"

    def test_parse_error_type(self, translate_service, mock_llm_service):
        mock_llm_service.generate_text.side_effect = GenerationParseError("Failed to analyze report")
        assert translate_service.submit({"text": MEDICATION_TEXT}).code == "analysis_failed"

    def test_not_configured(self, kb, rate_limiter):
        def factory():
            raise ProviderConfigurationError("Unsupported LLM provider: bogus")

        service = TranslateService(Router(knowledge_base=kb, llm_service_factory=factory), rate_limiter)
        outcome = service.submit_detailed({"text": MEDICATION_TEXT})

        assert outcome.response.error == "Service not configured"
        assert outcome.status == 503

    def test_internal_value_error_is_an_analysis_failure(self, kb, rate_limiter):
        prebuilt = Mock(spec=PrebuiltResponder)
        prebuilt.synthesize.side_effect = ValueError("template bug")
        router = Router(knowledge_base=kb, prebuilt_responder=prebuilt)
        outcome = TranslateService(router, rate_limiter).submit_detailed({"text": "BRCA2 pathogenic variant detected"})

        assert outcome.response.code == "analysis_failed"
        assert "template bug" not in outcome.response.details
        assert outcome.status == 500


class TestLookupService:
    """ClinVar and literature entry points"""

    def _clinvar_response(self) -> ClinvarResponse:
        return ClinvarResponse(query="rs1", found=False, interpretation_guide="guide", disclaimer="d")

    def test_clinvar(self, rate_limiter):
        clinvar = Mock(spec=ClinVarClient)
        clinvar.lookup.return_value = self._clinvar_response()
        service = LookupService(clinvar_client=clinvar, rate_limiter=rate_limiter)

        outcome = service.clinvar({"query": "rs1"}, "1.2.3.4")

        assert outcome.status == 200
        assert outcome.rate_limit.allowed
        clinvar.lookup.assert_called_once_with("rs1")

    def test_clinvar_rate_limited(self, rate_limiter, monkeypatch):
        monkeypatch.setattr(settings, "rate_limit_clinvar_per_min", 1)
        clinvar = Mock(spec=ClinVarClient)
        clinvar.lookup.return_value = self._clinvar_response()
        service = LookupService(clinvar_client=clinvar, rate_limiter=rate_limiter)

        service.clinvar({"query": "rs1"}, "c")
        outcome = service.clinvar({"query": "rs1"}, "c")

        assert outcome.status == 429
        assert clinvar.lookup.call_count == 1

    def test_clinvar_validation(self, rate_limiter):
        service = LookupService(clinvar_client=Mock(spec=ClinVarClient), rate_limiter=rate_limiter)
        assert service.clinvar({"query": "x" * 501}).status == 400

    def test_literature(self, rate_limiter):
        literature = Mock(spec=LiteratureClient)
        literature.search.return_value = LiteratureResponse(query="q", articles=[], disclaimer="d")
        service = LookupService(literature_client=literature, rate_limiter=rate_limiter)

        outcome = service.literature({"genes": ["BRCA1"], "topics": ["screening"]})

        assert outcome.status == 200
        literature.search.assert_called_once_with(["BRCA1"], ["screening"], 5)

    @pytest.mark.parametrize(
        "payload",
        [{"genes": []}, {"genes": ["B"]}, {"genes": ["A1", "B1", "C1", "D1"]}, {"genes": ["BRCA1"], "max_results": 11}],
    )
    def test_literature_validation(self, rate_limiter, payload):
        service = LookupService(literature_client=Mock(spec=LiteratureClient), rate_limiter=rate_limiter)
        assert service.literature(payload).response.code == "validation_error"

    def test_literature_failure(self, rate_limiter):
        literature = Mock(spec=LiteratureClient)
        literature.search.side_effect = ExternalLookupError("Failed to fetch literature")
        service = LookupService(literature_client=literature, rate_limiter=rate_limiter)

        outcome = service.literature({"genes": ["BRCA1"]})
        assert outcome.response.error == "Failed to fetch literature"
        assert outcome.status == 500
