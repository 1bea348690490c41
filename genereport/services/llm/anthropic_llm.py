"""Anthropic API provider"""

import logging

import anthropic
from anthropic import Anthropic

from genereport.errors import LLMTimeoutError, LLMTransportError
from genereport.settings import settings

from .base import BaseLLMService, LLMResponse, Message

logger = logging.getLogger(__name__)


class AnthropicLLM(BaseLLMService):
    """LLM service on the Anthropic messages API"""

    provider_name = "anthropic"
    default_model = "claude-3-5-sonnet-20241022"

    def __init__(self, api_key: str | None = None, model: str | None = None, timeout: float | None = None):
        """Create the Anthropic client

        Args:
            api_key: API key (settings if None)
            model: model name (settings, then the provider default, if None)
            timeout: per-call timeout in seconds (settings if None)
        """
        self.api_key = api_key or settings.llm_api_key
        self.model = model or settings.llm_model or self.default_model
        self.timeout = timeout if timeout is not None else settings.llm_timeout_seconds
        self.client = Anthropic(api_key=self.api_key, timeout=self.timeout, max_retries=0)

    def generate(self, messages: list[Message], **kwargs) -> LLMResponse:
        """Generate a response

        Args:
            messages: conversation messages
            **kwargs: extra parameters (temperature, max_tokens)

        Returns:
            LLMResponse
        """
        # The system message travels separately
        system_message = None
        conversation_messages = []

        for msg in messages:
            if msg.role == "system":
                system_message = msg.content
            else:
                conversation_messages.append({"role": msg.role, "content": msg.content})

        params = {"temperature": settings.llm_temperature}
        params.update(kwargs)
        max_tokens = params.pop("max_tokens", settings.llm_max_tokens)
        if system_message:
            params["system"] = system_message

        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                messages=conversation_messages,
                **params,
            )
        except anthropic.APITimeoutError as e:
            logger.warning("anthropic call timed out after %ss", self.timeout)
            raise LLMTimeoutError("Analysis timed out", provider=self.provider_name) from e
        except anthropic.APIError as e:
            logger.error("anthropic call failed: %s", type(e).__name__)
            raise LLMTransportError("Failed to analyze report", provider=self.provider_name) from e

        text = next((block.text for block in response.content if block.type == "text"), "")
        return LLMResponse(
            content=text,
            model=response.model,
            usage={
                "input_tokens": response.usage.input_tokens,
                "output_tokens": response.usage.output_tokens,
            },
            metadata={"provider": self.provider_name, "stop_reason": response.stop_reason},
        )
