"""Settings and logging runtime tests"""

import logging
import os
from unittest.mock import Mock

from genereport.deps import get_lookup_service, get_rate_limiter, get_translate_service
from genereport.runtime import get_project_root, setup_logging
from genereport.settings import settings, validate_settings


class TestSettings:
    """Derived settings and warnings"""

    def test_missing_credential(self, monkeypatch):
        monkeypatch.setattr(settings, "llm_provider", "deepseek")
        monkeypatch.setattr(settings, "llm_api_key", None)

        assert settings.has_llm_credential is False
        assert settings.effective_prebuilt_only is True
        assert "llm" in validate_settings()

    def test_credential(self, monkeypatch):
        monkeypatch.setattr(settings, "llm_provider", "openai")
        monkeypatch.setattr(settings, "llm_api_key", "test-key")

        assert settings.effective_prebuilt_only is False
        assert "llm" not in validate_settings()

    def test_dummy_needs_no_credential(self):
        assert settings.has_llm_credential is True

    def test_forced_prebuilt_only(self, monkeypatch):
        monkeypatch.setattr(settings, "prebuilt_only_mode", True)
        monkeypatch.setattr(settings, "prefer_generative", True)

        assert settings.effective_prebuilt_only is True
        assert "tiers" in validate_settings()

    def test_packaged_knowledge_base_dir(self):
        assert "kb" not in validate_settings()


class TestProviders:
    """Cached dependency providers"""

    def test_shared_rate_limiter(self):
        assert get_translate_service() is get_translate_service()
        assert get_translate_service().rate_limiter is get_rate_limiter()
        assert get_lookup_service().rate_limiter is get_rate_limiter()


class TestSetupLogging:
    """config/logging.yml loading"""

    def test_project_config_exists(self):
        assert os.path.exists(os.path.join(get_project_root(), "config", "logging.yml"))

    def test_loads_yaml_config(self, tmp_path):
        cfg = tmp_path / "logging.yml"
        cfg.write_text(
            "version: 1\n"
            "disable_existing_loggers: false\n"
            "loggers:\n"
            "  genereport_yaml_config:\n"
            "    level: ERROR\n",
            encoding="utf-8",
        )

        setup_logging(str(cfg))
        assert logging.getLogger("genereport_yaml_config").level == logging.ERROR

    def test_missing_config_falls_back(self, tmp_path):
        setup_logging(str(tmp_path / "missing.yml"))
        assert logging.getLogger("genereport").getEffectiveLevel() <= logging.WARNING

    def test_malformed_yaml_falls_back(self, tmp_path, monkeypatch):
        cfg = tmp_path / "logging.yml"
        cfg.write_text("version: [1\nhandlers: {console\n", encoding="utf-8")
        basic_config = Mock()
        monkeypatch.setattr(logging, "basicConfig", basic_config)

        setup_logging(str(cfg))
        basic_config.assert_called_once_with(level=settings.log_level.upper())
