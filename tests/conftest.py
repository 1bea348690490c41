"""Test fixtures and settings"""

import json
from pathlib import Path
from unittest.mock import Mock

import pytest

from genereport.deps import clear_cached_providers
from genereport.services.admission import OutboundThrottle, RateLimiter, reset_ncbi_throttle
from genereport.services.classification import ReportClassifier
from genereport.services.knowledge import DEFAULT_SOURCE_FILES, load_knowledge_base
from genereport.services.llm.base import BaseLLMService
from genereport.services.llm.dummy_llm import DummyLLM
from genereport.services.orchestration import PrebuiltResponder, Router
from genereport.settings import settings

DATA_DIR = Path(__file__).parent.parent / "genereport" / "services" / "knowledge" / "data"


def valid_record(**overrides) -> dict:
    """Minimal contract-valid translation record"""
    record = {
        "disclaimer": "Educational only.",
        "extracted_entities": [{"type": "gene", "value": "BRCA1", "confidence": "high"}],
        "summary_plain_english": "A plain-language summary.",
        "glossary": [{"term": "VUS", "meaning": "Uncertain", "why_it_matters": "Not a diagnosis"}],
        "what_this_does_not_mean": ["It does NOT mean you have a disease"],
        "next_steps": [{
            "title": "Consult a Genetic Counselor",
            "rationale": "Personalized interpretation",
            "who_to_talk_to": "Certified Genetic Counselor",
            "urgency": "routine",
        }],
        "questions_to_ask": ["What does this mean for me?"],
        "sources": [{"label": "ClinVar", "url": "https://www.ncbi.nlm.nih.gov/clinvar/", "why_relevant": "Lookup"}],
        "refusals": [],
    }
    record.update(overrides)
    return record


# Records that decode but carry a value outside a contract value set
WRONG_ENUM_OVERRIDES = {
    "entity-type": {"extracted_entities": [{"type": "snp", "value": "rs80357906", "confidence": "high"}]},
    "entity-confidence": {"extracted_entities": [{"type": "gene", "value": "BRCA1", "confidence": "certain"}]},
    "urgency": {"next_steps": [{
        "title": "See a specialist",
        "rationale": "Follow-up",
        "who_to_talk_to": "Genetic counselor",
        "urgency": "asap",
    }]},
}


class FakeClock:
    """Epoch-millisecond clock advanced by hand"""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


def make_ncbi_throttle(clock: FakeClock) -> OutboundThrottle:
    """NCBI-sized throttle whose waits advance the fake clock"""
    return OutboundThrottle(3, key="ncbi", clock=clock, sleep=lambda seconds: clock.advance(seconds * 1000))


@pytest.fixture(autouse=True)
def default_settings(monkeypatch):
    """Generative tier reachable through the dummy provider unless a test says otherwise"""
    monkeypatch.setattr(settings, "llm_provider", "dummy")
    monkeypatch.setattr(settings, "llm_api_key", None)
    monkeypatch.setattr(settings, "prebuilt_only_mode", False)
    monkeypatch.setattr(settings, "prefer_generative", False)
    monkeypatch.setattr(settings, "rate_limit_translate_per_min", 10)
    monkeypatch.setattr(settings, "rate_limit_clinvar_per_min", 30)
    monkeypatch.setattr(settings, "rate_limit_literature_per_min", 30)
    monkeypatch.setattr(settings, "ncbi_api_key", None)
    clear_cached_providers()
    reset_ncbi_throttle()
    yield
    clear_cached_providers()
    reset_ncbi_throttle()


@pytest.fixture(scope="session")
def kb():
    """Knowledge base over the packaged JSON sources"""
    return load_knowledge_base([DATA_DIR / name for name in DEFAULT_SOURCE_FILES])


@pytest.fixture
def classifier(kb):
    return ReportClassifier(kb)


@pytest.fixture
def prebuilt_responder(kb):
    return PrebuiltResponder(kb)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def rate_limiter(fake_clock):
    return RateLimiter(clock=fake_clock)


@pytest.fixture
def ncbi_throttle(fake_clock):
    return make_ncbi_throttle(fake_clock)


@pytest.fixture
def dummy_llm_service():
    """Dummy LLM service fixture"""
    return DummyLLM()


@pytest.fixture
def mock_llm_service():
    """Provider mock answering with a contract-valid record"""
    llm = Mock(spec=BaseLLMService)
    llm.provider_name = "mock"
    llm.generate_text.return_value = json.dumps(valid_record())
    return llm


@pytest.fixture
def router(kb, mock_llm_service):
    return Router(knowledge_base=kb, llm_service_factory=lambda: mock_llm_service)
