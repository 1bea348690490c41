"""
Prompt module.

Central place for the LLM prompts used by the generative tier.
"""

from .translation import (
    CORE_GLOSSARY_TERMS,
    TRANSLATION_SYSTEM_PROMPT,
    TRANSLATION_USER_TEMPLATE,
    format_translation_system_prompt,
    format_translation_user_prompt,
)

__all__ = [
    "CORE_GLOSSARY_TERMS",
    "TRANSLATION_SYSTEM_PROMPT",
    "TRANSLATION_USER_TEMPLATE",
    "format_translation_system_prompt",
    "format_translation_user_prompt",
]
