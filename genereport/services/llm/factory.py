"""LLM service factory"""

from genereport.errors import ProviderConfigurationError
from genereport.settings import settings

from .anthropic_llm import AnthropicLLM
from .base import BaseLLMService
from .dummy_llm import DummyLLM
from .openai_llm import DeepSeekLLM, OpenAILLM


def get_llm_service() -> BaseLLMService:
    """Return the LLM service selected by settings

    Returns:
        BaseLLMService instance

    Raises:
        ProviderConfigurationError: settings.llm_provider is not supported
    """
    if settings.llm_provider == "openai":
        return OpenAILLM()
    elif settings.llm_provider == "deepseek":
        return DeepSeekLLM()
    elif settings.llm_provider == "anthropic":
        return AnthropicLLM()
    elif settings.llm_provider == "dummy":
        return DummyLLM()
    else:
        raise ProviderConfigurationError(f"Unsupported LLM provider: {settings.llm_provider}")
