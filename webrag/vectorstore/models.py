"""Vector store data models."""

from typing import Any
from uuid import NAMESPACE_URL, uuid5

from pydantic import BaseModel, Field

# Payload key carrying the caller's document id; Qdrant point ids must be UUIDs.
DOCUMENT_ID_KEY = "document_id"


def point_id_for(document_id: str) -> str:
    """Deterministic Qdrant point id for a document id such as a URL."""
    return str(uuid5(NAMESPACE_URL, document_id))


class VectorRecord(BaseModel):
    """A document to store in the vector database.

    Attributes:
        id: Document identifier (the source URL).
        vector: The embedding vector.
        payload: Metadata stored with the vector.
    """

    id: str = Field(min_length=1, description="Document identifier")
    vector: list[float] = Field(min_length=1, description="Embedding vector")
    payload: dict[str, Any] = Field(
        default_factory=dict,
        description="Metadata payload",
    )


class SearchResult(BaseModel):
    """Result from a nearest-neighbour query.

    Attributes:
        id: Document identifier.
        score: Cosine similarity (higher is more similar).
        payload: Metadata exactly as it was stored.
    """

    id: str = Field(description="Document identifier")
    score: float = Field(description="Similarity score")
    payload: dict[str, Any] = Field(
        default_factory=dict,
        description="Stored metadata",
    )
