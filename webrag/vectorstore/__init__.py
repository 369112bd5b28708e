"""Vector store module."""

from webrag.vectorstore.models import SearchResult, VectorRecord, point_id_for
from webrag.vectorstore.service import QdrantVectorStore, VectorStore

__all__ = [
    "QdrantVectorStore",
    "SearchResult",
    "VectorRecord",
    "VectorStore",
    "point_id_for",
]
