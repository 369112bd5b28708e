"""LLM client module."""

from webrag.llm.client import GeminiClient, LLMClient
from webrag.llm.models import (
    RELAXED_SAFETY_SETTINGS,
    GenerationResult,
    HarmBlockThreshold,
    HarmCategory,
    SafetySetting,
)
from webrag.llm.prompts import (
    FALLBACK_ANSWER,
    GroundedPromptTemplate,
    PromptTemplate,
    truncate_context,
)

__all__ = [
    "FALLBACK_ANSWER",
    "GeminiClient",
    "GenerationResult",
    "GroundedPromptTemplate",
    "HarmBlockThreshold",
    "HarmCategory",
    "LLMClient",
    "PromptTemplate",
    "RELAXED_SAFETY_SETTINGS",
    "SafetySetting",
    "truncate_context",
]
