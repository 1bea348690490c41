"""Tier routing tests"""

import json
from unittest.mock import Mock

import pytest

from genereport.errors import TemplateNotFoundError
from genereport.services.admission import RateLimitResult
from genereport.services.orchestration import PrebuiltResponder, Router, TierRoute
from genereport.settings import settings

from conftest import WRONG_ENUM_OVERRIDES, valid_record

MEDICATION_TEXT = "what medication should I take for this mutation"


def _allow():
    return RateLimitResult(allowed=True, limit=10, remaining=9, reset_ms=60_000)


class TestTierRoute:
    """TierRoute Enum"""

    def test_values(self):
        assert TierRoute.PREBUILT.value == "prebuilt"
        assert TierRoute.PREBUILT_ONLY.value == "prebuilt_only"
        assert TierRoute.GENERATIVE.value == "generative"
        assert TierRoute.FALLBACK.value == "fallback"
        assert TierRoute.RATE_LIMITED.value == "rate_limited"


class TestRouter:
    """classify -> prebuilt / prebuilt-only / generative"""

    def test_confident_match_is_terminal(self, router, mock_llm_service):
        admit = Mock(side_effect=_allow)
        routed = router.route("BRCA1, likely pathogenic, heterozygous", admit=admit)

        assert routed.route == TierRoute.PREBUILT
        assert routed.match.key == "BRCA1/pathogenic"
        mock_llm_service.generate_text.assert_not_called()
        admit.assert_not_called()

    def test_no_match_goes_generative(self, router, mock_llm_service):
        routed = router.route(MEDICATION_TEXT, admit=_allow)

        assert routed.route == TierRoute.GENERATIVE
        assert routed.rate_limit.allowed is True
        assert routed.disallowed_intents == ["medication advice"]
        assert [r.user_intent for r in routed.result.refusals] == ["medication advice"]
        mock_llm_service.generate_text.assert_called_once()

    def test_prebuilt_keeps_refusals(self, router):
        routed = router.route("BRCA1 pathogenic. Should I take medication for it?")

        assert routed.route == TierRoute.PREBUILT
        assert [r.user_intent for r in routed.result.refusals] == ["medication advice"]

    def test_prebuilt_only_request(self, router, mock_llm_service):
        routed = router.route(MEDICATION_TEXT, mode="prebuilt_only")

        assert routed.route == TierRoute.PREBUILT_ONLY
        assert routed.result.summary_plain_english.startswith("Prebuilt-only mode is enabled")
        assert routed.result.refusals
        mock_llm_service.generate_text.assert_not_called()

    def test_missing_credential_means_prebuilt_only(self, router, mock_llm_service, monkeypatch):
        monkeypatch.setattr(settings, "llm_provider", "deepseek")
        monkeypatch.setattr(settings, "llm_api_key", None)

        routed = router.route(MEDICATION_TEXT)
        assert routed.route == TierRoute.PREBUILT_ONLY
        mock_llm_service.generate_text.assert_not_called()

    def test_prebuilt_only_still_uses_templates(self, router):
        routed = router.route("BRCA1 pathogenic variant", mode="prebuilt_only")
        assert routed.route == TierRoute.PREBUILT

    def test_prefer_generative(self, router, mock_llm_service, monkeypatch):
        monkeypatch.setattr(settings, "prefer_generative", True)

        routed = router.route("BRCA1 pathogenic variant")
        assert routed.route == TierRoute.GENERATIVE
        mock_llm_service.generate_text.assert_called_once()

    def test_rate_limited(self, router, mock_llm_service):
        rejected = RateLimitResult(allowed=False, limit=10, remaining=0, reset_ms=5_000)
        routed = router.route(MEDICATION_TEXT, admit=lambda: rejected)

        assert routed.is_rate_limited
        assert routed.result is None
        assert routed.rate_limit is rejected
        mock_llm_service.generate_text.assert_not_called()

    def test_invalid_output_routes_to_fallback(self, router, mock_llm_service):
        record = valid_record()
        del record["sources"]
        mock_llm_service.generate_text.return_value = json.dumps(record)

        routed = router.route(MEDICATION_TEXT)
        assert routed.route == TierRoute.FALLBACK
        assert routed.result.refusals == []

    @pytest.mark.parametrize("overrides", list(WRONG_ENUM_OVERRIDES.values()), ids=list(WRONG_ENUM_OVERRIDES))
    def test_wrong_enum_value_routes_to_fallback(self, router, mock_llm_service, overrides):
        mock_llm_service.generate_text.return_value = json.dumps(valid_record(**overrides))

        routed = router.route(MEDICATION_TEXT, admit=_allow)
        assert routed.route == TierRoute.FALLBACK
        assert routed.result.next_steps[0].urgency == "routine"
        assert routed.result.refusals == []
        mock_llm_service.generate_text.assert_called_once()

    def test_missing_template_moves_to_next_tier(self, kb, mock_llm_service):
        prebuilt = Mock(spec=PrebuiltResponder)
        prebuilt.synthesize.side_effect = TemplateNotFoundError("gone")
        router = Router(
            knowledge_base=kb,
            llm_service_factory=lambda: mock_llm_service,
            prebuilt_responder=prebuilt,
        )

        routed = router.route("BRCA1 pathogenic variant")
        assert routed.route == TierRoute.GENERATIVE

    def test_provider_built_lazily(self, kb, mock_llm_service):
        factory = Mock(return_value=mock_llm_service)
        router = Router(knowledge_base=kb, llm_service_factory=factory)

        router.route("BRCA1 pathogenic variant")
        factory.assert_not_called()

        router.route(MEDICATION_TEXT)
        router.route(MEDICATION_TEXT)
        factory.assert_called_once()
