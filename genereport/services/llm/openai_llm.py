"""OpenAI API provider (and OpenAI-compatible endpoints)"""

import logging

import openai
from openai import OpenAI

from genereport.errors import LLMTimeoutError, LLMTransportError
from genereport.settings import settings

from .base import BaseLLMService, LLMResponse, Message

logger = logging.getLogger(__name__)


class OpenAILLM(BaseLLMService):
    """LLM service on the OpenAI chat completions API"""

    provider_name = "openai"
    default_model = "gpt-4o"
    default_base_url: str | None = None

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ):
        """Create the OpenAI client

        Args:
            api_key: API key (settings if None)
            model: model name (settings, then the provider default, if None)
            base_url: endpoint override for OpenAI-compatible providers
            timeout: per-call timeout in seconds (settings if None)
        """
        self.api_key = api_key or settings.llm_api_key
        self.model = model or settings.llm_model or self.default_model
        self.base_url = base_url or settings.llm_base_url or self.default_base_url
        self.timeout = timeout if timeout is not None else settings.llm_timeout_seconds
        # No SDK retries: a failed call turns into a user-facing error or the fallback
        self.client = OpenAI(
            api_key=self.api_key,
            base_url=self.base_url,
            timeout=self.timeout,
            max_retries=0,
        )

    def generate(self, messages: list[Message], **kwargs) -> LLMResponse:
        """Generate a response (sync, non-streaming)

        Args:
            messages: conversation messages
            **kwargs: extra parameters (temperature, max_tokens, response_format)

        Returns:
            LLMResponse
        """
        openai_messages = [{"role": msg.role, "content": msg.content} for msg in messages]
        params = {
            "temperature": settings.llm_temperature,
            "max_tokens": settings.llm_max_tokens,
            "response_format": {"type": "json_object"},
        }
        params.update(kwargs)

        try:
            response = self.client.chat.completions.create(
                model=self.model, messages=openai_messages, **params
            )
        except openai.APITimeoutError as e:
            logger.warning("%s call timed out after %ss", self.provider_name, self.timeout)
            raise LLMTimeoutError("Analysis timed out", provider=self.provider_name) from e
        except openai.APIError as e:
            logger.error("%s call failed: %s", self.provider_name, type(e).__name__)
            raise LLMTransportError("Failed to analyze report", provider=self.provider_name) from e

        usage = None
        if response.usage is not None:
            usage = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            }
        content = response.choices[0].message.content if response.choices else None
        return LLMResponse(
            content=content or "",
            model=response.model,
            usage=usage,
            metadata={"provider": self.provider_name},
        )


class DeepSeekLLM(OpenAILLM):
    """DeepSeek through its OpenAI-compatible endpoint"""

    provider_name = "deepseek"
    default_model = "deepseek-chat"
    default_base_url = "https://api.deepseek.com"
