"""Dummy provider (for tests and local runs without a credential)"""

import json
import re

from .base import BaseLLMService, LLMResponse, Message

_RSID = re.compile(r"\brs\d+\b", re.IGNORECASE)


class DummyLLM(BaseLLMService):
    """Returns a fixed, contract-valid JSON record without any network call"""

    provider_name = "dummy"

    def generate(self, messages: list[Message], **kwargs) -> LLMResponse:
        """Build a dummy response

        Args:
            messages: conversation messages
            **kwargs: extra parameters (ignored)

        Returns:
            LLMResponse whose content is a JSON translation record
        """
        user_message = ""
        for msg in reversed(messages):
            if msg.role == "user":
                user_message = msg.content
                break

        entities = [
            {"type": "rsid", "value": value, "confidence": "high"}
            for value in dict.fromkeys(_RSID.findall(user_message))
        ]
        record = {
            "disclaimer": "This information is for educational purposes only and is not medical advice.",
            "extracted_entities": entities,
            "summary_plain_english": (
                "[Dummy response mode - no AI model was called] "
                "A genetic counselor can explain what this report means for you."
            ),
            "glossary": [],
            "what_this_does_not_mean": ["This dummy response is NOT an interpretation of your report"],
            "next_steps": [
                {
                    "title": "Consult a Genetic Counselor",
                    "rationale": "A counselor can interpret your report in context.",
                    "who_to_talk_to": "Certified Genetic Counselor",
                    "urgency": "routine",
                }
            ],
            "questions_to_ask": ["What does this result mean for me?"],
            "sources": [],
            "refusals": [],
        }

        return LLMResponse(
            content=json.dumps(record),
            model="dummy-model",
            usage={"prompt_tokens": 0, "completion_tokens": 0, "total_tokens": 0},
            metadata={"provider": "dummy"},
        )
