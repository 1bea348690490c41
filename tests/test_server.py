"""HTTP surface tests"""

from unittest.mock import Mock

import pytest
from starlette.testclient import TestClient

from genereport.errors import LLMTimeoutError
from genereport.server import create_app
from genereport.services.clinvar import ClinVarClient, ClinvarResponse
from genereport.services.lookup_service import LookupService
from genereport.services.translate_service import TranslateService
from genereport.settings import settings

MEDICATION_TEXT = "what medication should I take for this mutation"


@pytest.fixture
def clinvar_client():
    client = Mock(spec=ClinVarClient)
    client.lookup.return_value = ClinvarResponse(
        query="rs1", found=False, interpretation_guide="guide", disclaimer="d",
    )
    return client


@pytest.fixture
def client(router, rate_limiter, clinvar_client):
    app = create_app(
        translate_service=TranslateService(router=router, rate_limiter=rate_limiter),
        lookup_service=LookupService(clinvar_client=clinvar_client, rate_limiter=rate_limiter),
    )
    return TestClient(app)


class TestTranslateEndpoint:
    """POST /api/translate"""

    def test_prebuilt(self, client):
        res = client.post("/api/translate", json={"text": "BRCA1, likely pathogenic, heterozygous"})

        assert res.status_code == 200
        assert res.headers["cache-control"] == "no-store"
        assert res.headers["pragma"] == "no-cache"
        body = res.json()
        assert body["extracted_entities"][0]["value"] == "BRCA1"
        assert body["refusals"] == []

    def test_generative_sets_rate_limit_headers(self, client):
        res = client.post("/api/translate", json={"text": MEDICATION_TEXT})

        assert res.status_code == 200
        assert res.headers["x-ratelimit-limit"] == "10"
        assert res.headers["x-ratelimit-remaining"] == "9"
        assert res.json()["refusals"][0]["user_intent"] == "medication advice"

    def test_invalid_json(self, client):
        res = client.post("/api/translate", content=b"{nope", headers={"content-type": "application/json"})

        assert res.status_code == 400
        assert res.json() == {"error": "Invalid JSON in request body", "code": "invalid_json"}

    def test_validation_error(self, client):
        res = client.post("/api/translate", json={"text": "short"})

        assert res.status_code == 400
        assert res.json()["error"] == "Validation failed"

    def test_rate_limited(self, client, monkeypatch):
        monkeypatch.setattr(settings, "rate_limit_translate_per_min", 1)
        headers = {"x-forwarded-for": "203.0.113.9"}

        client.post("/api/translate", json={"text": MEDICATION_TEXT}, headers=headers)
        res = client.post("/api/translate", json={"text": MEDICATION_TEXT}, headers=headers)

        assert res.status_code == 429
        assert int(res.headers["retry-after"]) >= 1
        body = res.json()
        assert body["code"] == "rate_limited"
        assert body["limit"] == 1
        assert body["remaining"] == 0

    def test_timeout(self, client, mock_llm_service):
        mock_llm_service.generate_text.side_effect = LLMTimeoutError("Analysis timed out")

        res = client.post("/api/translate", json={"text": MEDICATION_TEXT})
        assert res.status_code == 504
        assert res.json()["error"] == "Analysis timed out"

    def test_method_not_allowed(self, client):
        assert client.get("/api/translate").status_code == 405


class TestLookupEndpoints:
    """GET /api/clinvar and POST /api/literature"""

    def test_clinvar(self, client, clinvar_client):
        res = client.get("/api/clinvar", params={"query": "rs1"})

        assert res.status_code == 200
        assert res.headers["cache-control"] == "public, max-age=300"
        assert res.json()["found"] is False
        clinvar_client.lookup.assert_called_once_with("rs1")

    def test_clinvar_requires_query(self, client):
        res = client.get("/api/clinvar")

        assert res.status_code == 400
        assert res.json()["error"] == "Query parameter is required"

    def test_literature_validation(self, client):
        res = client.post("/api/literature", json={"genes": []})

        assert res.status_code == 400
        assert res.headers["cache-control"] == "no-store"

    def test_literature_invalid_json(self, client):
        res = client.post("/api/literature", content=b"", headers={"content-type": "application/json"})
        assert res.status_code == 400


def test_health(client):
    res = client.get("/health")

    assert res.status_code == 200
    assert res.json()["status"] == "ok"
