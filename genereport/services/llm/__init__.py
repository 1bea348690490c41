"""Reasoning providers

- BaseLLMService: provider interface (generate / chat / generate_text)
- OpenAILLM, DeepSeekLLM, AnthropicLLM, DummyLLM: implementations
- get_llm_service: selection by settings.llm_provider
"""

from .anthropic_llm import AnthropicLLM
from .base import BaseLLMService, LLMResponse, Message
from .dummy_llm import DummyLLM
from .factory import get_llm_service
from .openai_llm import DeepSeekLLM, OpenAILLM

__all__ = [
    "BaseLLMService",
    "LLMResponse",
    "Message",
    "OpenAILLM",
    "DeepSeekLLM",
    "AnthropicLLM",
    "DummyLLM",
    "get_llm_service",
]
