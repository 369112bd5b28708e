"""Vector store interface and Qdrant implementation."""

import time
from abc import ABC, abstractmethod

from qdrant_client import AsyncQdrantClient
from qdrant_client.models import Distance, PointStruct, ScoredPoint, VectorParams

from webrag.config import QdrantSettings
from webrag.exceptions import ErrorCode, VectorStoreError
from webrag.logging_config import get_logger
from webrag.observability.metrics import track_retrieval, track_vectorstore_operation
from webrag.vectorstore.models import (
    DOCUMENT_ID_KEY,
    SearchResult,
    VectorRecord,
    point_id_for,
)

logger = get_logger(__name__)


class VectorStore(ABC):
    """Abstract base class for vector stores.

    Every operation targets the single reserved collection the store was
    configured with.
    """

    @property
    @abstractmethod
    def collection_name(self) -> str:
        """Name of the reserved collection."""
        ...

    @abstractmethod
    async def reset_collection(self) -> bool:
        """Delete the reserved collection if it exists.

        Returns:
            True if a collection was deleted, False if none existed.

        Raises:
            VectorStoreError: If deletion fails for any other reason.
        """
        ...

    @abstractmethod
    async def insert(self, record: VectorRecord) -> None:
        """Add one record, creating the collection on first use.

        Args:
            record: Record to store. Reusing an id overwrites the record.

        Raises:
            VectorStoreError: If the insert fails.
        """
        ...

    @abstractmethod
    async def query(self, vector: list[float], limit: int = 1) -> list[SearchResult]:
        """Find the records nearest to a vector.

        Args:
            vector: Query vector.
            limit: Maximum results to return.

        Returns:
            Up to `limit` results, most similar first. Empty if the
            collection holds no records.

        Raises:
            VectorStoreError: If the query fails.
        """
        ...


class QdrantVectorStore(VectorStore):
    """Qdrant vector store implementation."""

    def __init__(
        self,
        settings: QdrantSettings,
        client: AsyncQdrantClient | None = None,
    ) -> None:
        """Initialize Qdrant vector store.

        Args:
            settings: Qdrant configuration, including the collection name.
            client: Existing client (for testing).
        """
        self._settings = settings
        self._client = client
        self._owns_client = client is None

    @property
    def collection_name(self) -> str:
        """Name of the reserved collection."""
        return self._settings.collection_name

    async def _get_client(self) -> AsyncQdrantClient:
        """Get or create Qdrant client."""
        if self._client is None:
            api_key = None
            if self._settings.api_key:
                api_key = self._settings.api_key.get_secret_value()

            self._client = AsyncQdrantClient(
                url=self._settings.url,
                api_key=api_key,
            )
        return self._client

    async def close(self) -> None:
        """Close the Qdrant client."""
        if self._owns_client and self._client is not None:
            await self._client.close()
            self._client = None

    async def collection_exists(self) -> bool:
        """Check if the reserved collection exists."""
        client = await self._get_client()
        try:
            return await client.collection_exists(self.collection_name)
        except Exception as e:
            raise VectorStoreError(
                f"Failed to check collection: {e}",
                code=ErrorCode.VECTOR_STORE_ERROR,
                details={"collection": self.collection_name, "error": str(e)},
            ) from e

    async def create_collection(self, dimensions: int) -> None:
        """Create the reserved collection with cosine distance.

        Raises:
            VectorStoreError: COLLECTION_EXISTS if it is already there.
        """
        client = await self._get_client()
        name = self.collection_name

        try:
            if await client.collection_exists(name):
                raise VectorStoreError(
                    f"Collection already exists: {name}",
                    code=ErrorCode.COLLECTION_EXISTS,
                    details={"collection": name},
                )

            await client.create_collection(
                collection_name=name,
                vectors_config=VectorParams(
                    size=dimensions,
                    distance=Distance.COSINE,
                ),
            )
            logger.info(f"Created collection: {name}", extra={"dimensions": dimensions})

        except VectorStoreError:
            raise
        except Exception as e:
            raise VectorStoreError(
                f"Failed to create collection: {e}",
                code=ErrorCode.VECTOR_STORE_ERROR,
                details={"collection": name, "error": str(e)},
            ) from e

    async def ensure_collection(self, dimensions: int) -> None:
        """Create the reserved collection unless it already exists."""
        if not await self.collection_exists():
            await self.create_collection(dimensions)

    async def delete_collection(self) -> None:
        """Delete the reserved collection.

        Raises:
            VectorStoreError: COLLECTION_NOT_FOUND if it does not exist.
        """
        client = await self._get_client()
        name = self.collection_name

        try:
            if not await client.collection_exists(name):
                raise VectorStoreError(
                    f"Collection not found: {name}",
                    code=ErrorCode.COLLECTION_NOT_FOUND,
                    details={"collection": name},
                )

            await client.delete_collection(name)
            logger.info(f"Deleted collection: {name}")

        except VectorStoreError:
            raise
        except Exception as e:
            raise VectorStoreError(
                f"Failed to delete collection: {e}",
                code=ErrorCode.VECTOR_STORE_ERROR,
                details={"collection": name, "error": str(e)},
            ) from e

    async def reset_collection(self) -> bool:
        """Delete the reserved collection; a missing collection is a no-op."""
        start = time.perf_counter()
        try:
            await self.delete_collection()
        except VectorStoreError as e:
            if e.code != ErrorCode.COLLECTION_NOT_FOUND:
                track_vectorstore_operation(
                    "reset", time.perf_counter() - start, success=False
                )
                raise
            logger.debug(f"Nothing to reset: {self.collection_name}")
            deleted = False
        else:
            logger.info("Collection reset", extra={"collection": self.collection_name})
            deleted = True

        track_vectorstore_operation("reset", time.perf_counter() - start)
        return deleted

    async def insert(self, record: VectorRecord) -> None:
        """Upsert one record under a point id derived from its document id."""
        start = time.perf_counter()
        try:
            await self.ensure_collection(len(record.vector))
            client = await self._get_client()
            await client.upsert(
                collection_name=self.collection_name,
                points=[
                    PointStruct(
                        id=point_id_for(record.id),
                        vector=record.vector,
                        payload={**record.payload, DOCUMENT_ID_KEY: record.id},
                    )
                ],
            )
        except VectorStoreError:
            track_vectorstore_operation("insert", time.perf_counter() - start, success=False)
            raise
        except Exception as e:
            track_vectorstore_operation("insert", time.perf_counter() - start, success=False)
            raise VectorStoreError(
                f"Failed to insert record: {e}",
                code=ErrorCode.VECTOR_STORE_ERROR,
                details={"collection": self.collection_name, "id": record.id, "error": str(e)},
            ) from e

        track_vectorstore_operation("insert", time.perf_counter() - start)
        logger.debug(
            f"Inserted record {record.id}",
            extra={"collection": self.collection_name},
        )

    async def query(self, vector: list[float], limit: int = 1) -> list[SearchResult]:
        """Search the reserved collection by cosine similarity."""
        start = time.perf_counter()
        try:
            await self.ensure_collection(len(vector))
            client = await self._get_client()
            response = await client.query_points(
                collection_name=self.collection_name,
                query=vector,
                limit=limit,
                with_payload=True,
            )
            results = [self._to_search_result(point) for point in response.points]
        except VectorStoreError:
            track_vectorstore_operation("query", time.perf_counter() - start, success=False)
            raise
        except Exception as e:
            track_vectorstore_operation("query", time.perf_counter() - start, success=False)
            raise VectorStoreError(
                f"Failed to query: {e}",
                code=ErrorCode.VECTOR_STORE_ERROR,
                details={"collection": self.collection_name, "error": str(e)},
            ) from e

        track_vectorstore_operation("query", time.perf_counter() - start)
        track_retrieval(results[0].score if results else None)
        return results

    @staticmethod
    def _to_search_result(point: ScoredPoint) -> SearchResult:
        payload = dict(point.payload) if point.payload else {}
        document_id = payload.pop(DOCUMENT_ID_KEY, str(point.id))
        score = point.score if point.score is not None else 0.0
        return SearchResult(id=document_id, score=score, payload=payload)
