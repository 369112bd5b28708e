"""Embedding service interface and Gemini implementation."""

import time
from abc import ABC, abstractmethod

import httpx

from webrag.config import GeminiSettings
from webrag.embeddings.models import EmbeddingResult
from webrag.exceptions import EmbeddingError, ErrorCode
from webrag.logging_config import get_logger
from webrag.observability.metrics import track_embedding_request

logger = get_logger(__name__)


class EmbeddingService(ABC):
    """Abstract base class for embedding services.

    Defines the interface for generating text embeddings.
    """

    @abstractmethod
    async def embed(self, text: str) -> EmbeddingResult:
        """Generate embedding for a single text.

        The text is sent as-is: no chunking or truncation.

        Args:
            text: Text to embed.

        Returns:
            EmbeddingResult with vector.

        Raises:
            EmbeddingError: If embedding fails.
        """
        ...

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Get the model name used for embeddings."""
        ...

    @property
    @abstractmethod
    def dimensions(self) -> int:
        """Get the embedding dimensions."""
        ...


class GeminiEmbeddingService(EmbeddingService):
    """Embedding service backed by the Gemini `embedContent` REST method."""

    # Known model dimensions
    MODEL_DIMENSIONS = {
        "embedding-001": 768,
        "text-embedding-004": 768,
        "gemini-embedding-001": 3072,
    }

    def __init__(
        self,
        settings: GeminiSettings,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the Gemini embedding service.

        Args:
            settings: Gemini configuration.
            client: HTTP client. Creates new one if not provided.
        """
        self._settings = settings
        self._client = client
        self._owns_client = client is None
        self._dimensions: int | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._settings.timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def model_name(self) -> str:
        """Get the model name."""
        return self._settings.embedding_model

    @property
    def dimensions(self) -> int:
        """Get embedding dimensions.

        Learned from the first response; known model sizes before that.
        """
        if self._dimensions is not None:
            return self._dimensions
        return self.MODEL_DIMENSIONS.get(self.model_name, 768)

    async def embed(self, text: str) -> EmbeddingResult:
        """Generate embedding for a single text."""
        client = await self._get_client()
        url = f"{self._settings.base_url}/models/{self.model_name}:embedContent"
        payload = {
            "model": f"models/{self.model_name}",
            "content": {"parts": [{"text": text}]},
        }
        headers = {"x-goog-api-key": self._settings.api_key.get_secret_value()}

        start = time.perf_counter()
        try:
            result = await self._request(client, url, payload, headers, text)
        except EmbeddingError:
            track_embedding_request(
                self.model_name,
                time.perf_counter() - start,
                success=False,
            )
            raise

        track_embedding_request(self.model_name, time.perf_counter() - start)
        return result

    async def _request(
        self,
        client: httpx.AsyncClient,
        url: str,
        payload: dict[str, object],
        headers: dict[str, str],
        text: str,
    ) -> EmbeddingResult:
        try:
            response = await client.post(url, json=payload, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Embedding request failed: {e.response.status_code}",
                extra={"model": self.model_name, "status": e.response.status_code},
            )
            raise EmbeddingError(
                f"Embedding service returned {e.response.status_code}",
                code=ErrorCode.EMBEDDING_SERVICE_ERROR,
                details={"status_code": e.response.status_code},
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Embedding request error: {e}")
            raise EmbeddingError(
                f"Failed to connect to embedding service: {e}",
                code=ErrorCode.EMBEDDING_SERVICE_ERROR,
                details={"model": self.model_name},
            ) from e

        try:
            values = response.json()["embedding"]["values"]
            result = EmbeddingResult(
                text=text,
                embedding=values,
                model=self.model_name,
                dimensions=len(values),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise EmbeddingError(
                f"Invalid response from embedding service: {e}",
                code=ErrorCode.EMBEDDING_INVALID_RESPONSE,
                details={"error": str(e)},
            ) from e

        if self._dimensions is None:
            self._dimensions = result.dimensions

        return result
