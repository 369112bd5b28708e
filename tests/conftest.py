"""Pytest configuration and shared fixtures."""

from unittest.mock import AsyncMock

import pytest

from webrag.embeddings.models import EmbeddingResult
from webrag.embeddings.service import EmbeddingService
from webrag.llm.client import LLMClient
from webrag.llm.models import GenerationResult
from webrag.scraper.fetcher import PageFetcher
from webrag.scraper.models import ScrapedPage
from webrag.vectorstore.service import VectorStore

EXAMPLE_URL = "http://example.test/"


@pytest.fixture
def example_page() -> ScrapedPage:
    """Scraped form of a small test page."""
    return ScrapedPage(
        url=EXAMPLE_URL,
        title="Example Domain",
        meta_description="",
        body="Example Domain Example Domain for testing.",
    )


@pytest.fixture
def mock_fetcher(example_page: ScrapedPage) -> AsyncMock:
    """Fetcher that always returns the example page."""
    fetcher = AsyncMock(spec=PageFetcher)
    fetcher.fetch.return_value = example_page
    return fetcher


@pytest.fixture
def mock_embedding_service() -> AsyncMock:
    """Embedding service returning a fixed 3-dimensional vector."""
    service = AsyncMock(spec=EmbeddingService)
    service.model_name = "embedding-001"
    service.dimensions = 3

    async def embed(text: str) -> EmbeddingResult:
        return EmbeddingResult(
            text=text,
            embedding=[0.1, 0.2, 0.3],
            model="embedding-001",
            dimensions=3,
        )

    service.embed.side_effect = embed
    return service


@pytest.fixture
def mock_vector_store() -> AsyncMock:
    """Vector store with an empty reserved collection."""
    store = AsyncMock(spec=VectorStore)
    store.collection_name = "web_scraped_data_collection"
    store.reset_collection.return_value = True
    store.query.return_value = []
    return store


@pytest.fixture
def mock_llm_client() -> AsyncMock:
    """LLM client that answers with a fixed sentence."""
    client = AsyncMock(spec=LLMClient)
    client.model_name = "gemini-pro"
    client.generate_text.return_value = GenerationResult(
        content="Example Domain is a page used for testing.",
        model="gemini-pro",
    )
    return client
