"""Embedding service module."""

from webrag.embeddings.models import EmbeddingResult
from webrag.embeddings.service import EmbeddingService, GeminiEmbeddingService

__all__ = [
    "EmbeddingResult",
    "EmbeddingService",
    "GeminiEmbeddingService",
]
