"""Embedding data models."""

from pydantic import BaseModel, Field, model_validator


class EmbeddingResult(BaseModel):
    """A single text embedded by a hosted model.

    Attributes:
        text: The text that was sent to the model.
        embedding: The returned vector.
        model: Model that produced the vector.
        dimensions: Length of the vector.
    """

    text: str = Field(description="Embedded text")
    embedding: list[float] = Field(min_length=1, description="Embedding vector")
    model: str = Field(description="Embedding model name")
    dimensions: int = Field(gt=0, description="Vector dimensions")

    @model_validator(mode="after")
    def _check_dimensions(self) -> "EmbeddingResult":
        if self.dimensions != len(self.embedding):
            raise ValueError(
                f"dimensions ({self.dimensions}) does not match "
                f"embedding length ({len(self.embedding)})"
            )
        return self
