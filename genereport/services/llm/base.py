"""Reasoning provider base interface"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class Message:
    """Chat message"""

    role: str  # "system" | "user" | "assistant"
    content: str


@dataclass
class LLMResponse:
    """Provider response"""

    content: str
    model: str | None = None
    usage: dict | None = None
    metadata: dict | None = None


class BaseLLMService(ABC):
    """Base class for interchangeable reasoning providers

    Providers differ only in transport (endpoint, credential, response
    envelope). Every call is bounded by a timeout; a timeout raises
    LLMTimeoutError and any other transport failure raises LLMTransportError.
    """

    provider_name: str = "base"

    @abstractmethod
    def generate(self, messages: list[Message], **kwargs) -> LLMResponse:
        """Generate a response for a message list (sync, non-streaming)

        Args:
            messages: conversation messages
            **kwargs: extra parameters (temperature, max_tokens, ...)

        Returns:
            LLMResponse
        """
        pass

    def chat(self, user_message: str, system_message: str | None = None, **kwargs) -> str:
        """Simple chat interface

        Args:
            user_message: user message
            system_message: system message (optional)
            **kwargs: extra parameters

        Returns:
            response text
        """
        messages = []
        if system_message:
            messages.append(Message(role="system", content=system_message))
        messages.append(Message(role="user", content=user_message))

        response = self.generate(messages, **kwargs)
        return response.content

    def generate_text(self, system_prompt: str, user_text: str, **kwargs) -> str:
        """Two-argument call used by the generative tier: raw text out"""
        return self.chat(user_text, system_message=system_prompt, **kwargs)
