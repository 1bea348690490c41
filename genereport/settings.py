"""Application settings"""

from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

# Load .env file
load_dotenv()

# Project root directory
ROOT_DIR = Path(__file__).parent.parent


class Settings(BaseSettings):
    """Application settings"""

    # LLM settings
    llm_provider: Literal["openai", "anthropic", "deepseek", "dummy"] = Field(
        default="deepseek", description="LLM provider (openai | anthropic | deepseek | dummy)"
    )
    llm_api_key: str | None = Field(default=None, description="API key for the selected LLM provider")
    llm_model: str | None = Field(
        default=None, description="Model name (None uses the provider default)"
    )
    llm_base_url: str | None = Field(
        default=None, description="Base URL override for OpenAI-compatible providers"
    )
    llm_timeout_seconds: float = Field(default=60.0, description="Timeout for one LLM call (seconds)")
    llm_max_tokens: int = Field(default=4000, description="Max output tokens for one LLM call")
    llm_temperature: float = Field(default=0.3, description="Sampling temperature")

    # Tier selection
    prebuilt_only_mode: bool = Field(
        default=False, description="Never call an external LLM; answer from templates only"
    )
    prefer_generative: bool = Field(
        default=False, description="Skip the prebuilt tier even when a template matches"
    )

    # Knowledge base
    kb_dir: Path = Field(
        default=Path(__file__).parent / "services" / "knowledge" / "data",
        description="Directory holding the knowledge base JSON files",
    )
    extra_template_files: list[Path] = Field(
        default_factory=list,
        description="Additional gene template files merged after the built-in ones",
    )

    # Request limits
    min_text_length: int = Field(default=10, description="Minimum report text length (chars)")
    max_text_length: int = Field(default=50000, description="Maximum report text length (chars)")

    # Admission control
    rate_limit_window_seconds: int = Field(default=60, description="Rate limit window (seconds)")
    rate_limit_translate_per_min: int = Field(
        default=10, description="Generative translations per client per window"
    )
    rate_limit_clinvar_per_min: int = Field(default=30, description="ClinVar lookups per client per window")
    rate_limit_literature_per_min: int = Field(
        default=30, description="Literature searches per client per window"
    )
    clinvar_cache_ttl_seconds: int = Field(default=300, description="ClinVar cache TTL (seconds)")
    literature_cache_ttl_seconds: int = Field(
        default=24 * 60 * 60, description="Literature cache TTL (seconds)"
    )

    # NCBI
    ncbi_api_key: str | None = Field(default=None, description="NCBI E-utilities API key")
    ncbi_timeout_seconds: float = Field(default=15.0, description="Timeout for NCBI calls (seconds)")

    # App settings
    app_debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Log level")
    host: str = Field(default="127.0.0.1", description="HTTP bind host")
    port: int = Field(default=8000, description="HTTP bind port")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    @property
    def has_llm_credential(self) -> bool:
        """Whether the configured provider can actually be called"""
        return self.llm_provider == "dummy" or bool(self.llm_api_key)

    @property
    def effective_prebuilt_only(self) -> bool:
        """Prebuilt-only when forced, or when no credential is configured"""
        return self.prebuilt_only_mode or not self.has_llm_credential


# Global settings instance
settings = Settings()


def validate_settings() -> dict[str, str]:
    """Validate settings and return warning messages"""
    warnings = {}

    # LLM settings
    if settings.llm_provider != "dummy" and not settings.llm_api_key:
        warnings["llm"] = (
            f"LLM_API_KEY is not set for provider '{settings.llm_provider}'; "
            "running in prebuilt-only mode."
        )
    if settings.prebuilt_only_mode and settings.prefer_generative:
        warnings["tiers"] = "PREFER_GENERATIVE has no effect while PREBUILT_ONLY_MODE is enabled."

    # Knowledge base
    if not Path(settings.kb_dir).exists():
        warnings["kb"] = f"Knowledge base directory not found: {settings.kb_dir}"
    for path in settings.extra_template_files:
        if not Path(path).exists():
            warnings[f"kb:{path}"] = f"Extra template file not found: {path}"

    if settings.min_text_length >= settings.max_text_length:
        warnings["limits"] = "MIN_TEXT_LENGTH must be smaller than MAX_TEXT_LENGTH."

    return warnings
