"""LLM data models."""

from enum import Enum

from pydantic import BaseModel, Field


class HarmCategory(str, Enum):
    """Gemini content-safety categories."""

    HARASSMENT = "HARM_CATEGORY_HARASSMENT"
    HATE_SPEECH = "HARM_CATEGORY_HATE_SPEECH"
    SEXUALLY_EXPLICIT = "HARM_CATEGORY_SEXUALLY_EXPLICIT"
    DANGEROUS_CONTENT = "HARM_CATEGORY_DANGEROUS_CONTENT"


class HarmBlockThreshold(str, Enum):
    """How aggressively a category is blocked."""

    BLOCK_NONE = "BLOCK_NONE"
    BLOCK_ONLY_HIGH = "BLOCK_ONLY_HIGH"
    BLOCK_MEDIUM_AND_ABOVE = "BLOCK_MEDIUM_AND_ABOVE"
    BLOCK_LOW_AND_ABOVE = "BLOCK_LOW_AND_ABOVE"


class SafetySetting(BaseModel):
    """Per-request override of one safety category.

    Attributes:
        category: Category to override.
        threshold: Blocking threshold for that category.
    """

    category: HarmCategory = Field(description="Safety category")
    threshold: HarmBlockThreshold = Field(description="Blocking threshold")

    def to_request(self) -> dict[str, str]:
        """Shape used in the generateContent request body."""
        return {"category": self.category.value, "threshold": self.threshold.value}


# Applied to every answer request: harassment and hate speech are never blocked.
RELAXED_SAFETY_SETTINGS: tuple[SafetySetting, ...] = (
    SafetySetting(
        category=HarmCategory.HARASSMENT,
        threshold=HarmBlockThreshold.BLOCK_NONE,
    ),
    SafetySetting(
        category=HarmCategory.HATE_SPEECH,
        threshold=HarmBlockThreshold.BLOCK_NONE,
    ),
)


class GenerationResult(BaseModel):
    """Result from LLM generation.

    Attributes:
        content: The generated text.
        model: Model used for generation.
        finish_reason: Why the model stopped, as reported by the API.
        prompt_tokens: Number of tokens in the prompt.
        completion_tokens: Number of tokens in the completion.
        total_tokens: Total tokens used.
    """

    content: str = Field(description="Generated text")
    model: str = Field(description="Model used")
    finish_reason: str | None = Field(default=None, description="Stop reason")
    prompt_tokens: int = Field(default=0, description="Prompt token count")
    completion_tokens: int = Field(default=0, description="Completion token count")
    total_tokens: int = Field(default=0, description="Total token count")
