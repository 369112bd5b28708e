"""Tests for the answer generator and pipeline orchestrator."""

import logging
from unittest.mock import AsyncMock

import pytest

from webrag.exceptions import (
    EmbeddingError,
    ErrorCode,
    LLMError,
    ScrapeError,
    VectorStoreError,
)
from webrag.llm.models import RELAXED_SAFETY_SETTINGS, GenerationResult
from webrag.llm.prompts import FALLBACK_ANSWER
from webrag.rag.answer import AnswerGenerator
from webrag.rag.models import AnswerContext, AskStatus
from webrag.rag.pipeline import NO_CONTEXT_MESSAGE, WebRAGPipeline
from webrag.vectorstore.models import SearchResult

EXAMPLE_URL = "http://example.test/"
STORED_METADATA = {
    "title": "Example Domain",
    "metaDescription": "",
    "body": "Example Domain Example Domain for testing.",
}


def _hit(payload: dict[str, str] | None = None) -> SearchResult:
    return SearchResult(id=EXAMPLE_URL, score=0.93, payload=payload or STORED_METADATA)


def _build(
    fetcher: AsyncMock,
    embedding_service: AsyncMock,
    vector_store: AsyncMock,
    llm_client: AsyncMock,
) -> WebRAGPipeline:
    return WebRAGPipeline(
        fetcher=fetcher,
        embedding_service=embedding_service,
        vector_store=vector_store,
        answer_generator=AnswerGenerator(llm_client),
    )


class TestAnswerGenerator:
    """Tests for AnswerGenerator."""

    def test_body_truncated_to_budget(self, mock_llm_client: AsyncMock) -> None:
        """Exactly the first 3000 characters of the body reach the prompt."""
        body = "".join(chr(ord("a") + i % 26) for i in range(5000))
        generator = AnswerGenerator(mock_llm_client)

        prompt = generator.build_prompt("q", AnswerContext(title="t", body=body))

        assert f"Content: {body[:3000]}\n" in prompt
        assert body[:3001] not in prompt

    def test_custom_budget(self, mock_llm_client: AsyncMock) -> None:
        """The budget is configurable."""
        generator = AnswerGenerator(mock_llm_client, context_char_budget=10)

        prompt = generator.build_prompt("q", AnswerContext(title="t", body="0123456789abc"))

        assert "Content: 0123456789\n" in prompt

    @pytest.mark.asyncio
    async def test_answer_verbatim(self, mock_llm_client: AsyncMock) -> None:
        """Model output is returned as-is."""
        generator = AnswerGenerator(mock_llm_client)

        answer = await generator.answer("What is this?", AnswerContext(title="t", body="b"))

        assert answer == "Example Domain is a page used for testing."

    @pytest.mark.asyncio
    async def test_safety_settings_sent(self, mock_llm_client: AsyncMock) -> None:
        """Every request carries the relaxed safety settings."""
        generator = AnswerGenerator(mock_llm_client)

        await generator.answer("q", AnswerContext(title="t", body="b"))

        kwargs = mock_llm_client.generate_text.call_args.kwargs
        assert kwargs["safety_settings"] == RELAXED_SAFETY_SETTINGS

    @pytest.mark.asyncio
    async def test_fallback_only_when_model_says_so(self, mock_llm_client: AsyncMock) -> None:
        """The fallback sentence comes from the model, not the generator."""
        mock_llm_client.generate_text.return_value = GenerationResult(
            content=FALLBACK_ANSWER,
            model="gemini-pro",
        )
        generator = AnswerGenerator(mock_llm_client)

        answer = await generator.answer("Unrelated?", AnswerContext(title="t", body="b"))

        assert answer == FALLBACK_ANSWER

    @pytest.mark.asyncio
    async def test_llm_error_propagates(self, mock_llm_client: AsyncMock) -> None:
        """Generation failures are raised to the caller."""
        mock_llm_client.generate_text.side_effect = LLMError("boom")
        generator = AnswerGenerator(mock_llm_client)

        with pytest.raises(LLMError):
            await generator.answer("q", AnswerContext())


class TestPipelineIngest:
    """Tests for WebRAGPipeline.ingest."""

    @pytest.mark.asyncio
    async def test_ingest_stores_page(
        self,
        mock_fetcher: AsyncMock,
        mock_embedding_service: AsyncMock,
        mock_vector_store: AsyncMock,
        mock_llm_client: AsyncMock,
    ) -> None:
        """The body is embedded and stored under the URL with its metadata."""
        pipeline = _build(mock_fetcher, mock_embedding_service, mock_vector_store, mock_llm_client)

        result = await pipeline.ingest(EXAMPLE_URL)

        mock_fetcher.fetch.assert_awaited_once_with(EXAMPLE_URL)
        mock_embedding_service.embed.assert_awaited_once_with(STORED_METADATA["body"])
        record = mock_vector_store.insert.call_args.args[0]
        assert record.id == EXAMPLE_URL
        assert record.vector == [0.1, 0.2, 0.3]
        assert record.payload == STORED_METADATA
        assert result.url == EXAMPLE_URL
        assert result.title == "Example Domain"
        assert result.dimensions == 3

    @pytest.mark.asyncio
    async def test_ingest_logs_title(
        self,
        mock_fetcher: AsyncMock,
        mock_embedding_service: AsyncMock,
        mock_vector_store: AsyncMock,
        mock_llm_client: AsyncMock,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Scraped title and success are logged."""
        pipeline = _build(mock_fetcher, mock_embedding_service, mock_vector_store, mock_llm_client)

        with caplog.at_level(logging.INFO, logger="webrag.rag.pipeline"):
            await pipeline.ingest(EXAMPLE_URL)

        assert "Scraped title: Example Domain" in caplog.messages
        assert f"Successfully ingested: {EXAMPLE_URL}" in caplog.messages

    @pytest.mark.asyncio
    async def test_scrape_failure_stops_ingest(
        self,
        mock_fetcher: AsyncMock,
        mock_embedding_service: AsyncMock,
        mock_vector_store: AsyncMock,
        mock_llm_client: AsyncMock,
    ) -> None:
        """Nothing is embedded or stored when the page cannot be loaded."""
        mock_fetcher.fetch.side_effect = ScrapeError("unreachable")
        pipeline = _build(mock_fetcher, mock_embedding_service, mock_vector_store, mock_llm_client)

        with pytest.raises(ScrapeError):
            await pipeline.ingest(EXAMPLE_URL)

        mock_embedding_service.embed.assert_not_awaited()
        mock_vector_store.insert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_embedding_failure_stops_ingest(
        self,
        mock_fetcher: AsyncMock,
        mock_embedding_service: AsyncMock,
        mock_vector_store: AsyncMock,
        mock_llm_client: AsyncMock,
    ) -> None:
        """No record is stored when embedding fails."""
        mock_embedding_service.embed.side_effect = EmbeddingError("quota")
        pipeline = _build(mock_fetcher, mock_embedding_service, mock_vector_store, mock_llm_client)

        with pytest.raises(EmbeddingError):
            await pipeline.ingest(EXAMPLE_URL)

        mock_vector_store.insert.assert_not_awaited()


class TestPipelineAsk:
    """Tests for WebRAGPipeline.ask."""

    @pytest.mark.asyncio
    async def test_no_context(
        self,
        mock_fetcher: AsyncMock,
        mock_embedding_service: AsyncMock,
        mock_vector_store: AsyncMock,
        mock_llm_client: AsyncMock,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """An empty collection is reported without calling the model."""
        pipeline = _build(mock_fetcher, mock_embedding_service, mock_vector_store, mock_llm_client)

        with caplog.at_level(logging.INFO, logger="webrag.rag.pipeline"):
            result = await pipeline.ask("Anything?")

        assert result.status == AskStatus.NO_CONTEXT
        assert result.answer is None
        assert NO_CONTEXT_MESSAGE in caplog.messages
        mock_llm_client.generate_text.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_answered(
        self,
        mock_fetcher: AsyncMock,
        mock_embedding_service: AsyncMock,
        mock_vector_store: AsyncMock,
        mock_llm_client: AsyncMock,
    ) -> None:
        """The top hit's title and body ground the answer."""
        mock_vector_store.query.return_value = [_hit()]
        pipeline = _build(mock_fetcher, mock_embedding_service, mock_vector_store, mock_llm_client)

        result = await pipeline.ask("What is this site?")

        assert result.status == AskStatus.ANSWERED
        assert result.answer == "Example Domain is a page used for testing."
        assert result.source == EXAMPLE_URL
        assert result.score == 0.93
        mock_embedding_service.embed.assert_awaited_once_with("What is this site?")
        assert mock_vector_store.query.call_args.kwargs["limit"] == 1

        prompt = mock_llm_client.generate_text.call_args.kwargs["prompt"]
        assert "Title: Example Domain" in prompt
        assert f"Content: {STORED_METADATA['body']}" in prompt
        assert "Question: What is this site?" in prompt

    @pytest.mark.asyncio
    async def test_result_count(
        self,
        mock_fetcher: AsyncMock,
        mock_embedding_service: AsyncMock,
        mock_vector_store: AsyncMock,
        mock_llm_client: AsyncMock,
    ) -> None:
        """Only the first result is used even when more are retrieved."""
        other = SearchResult(
            id="http://other.test/",
            score=0.5,
            payload={"title": "Other", "body": "other body"},
        )
        mock_vector_store.query.return_value = [_hit(), other]
        pipeline = WebRAGPipeline(
            mock_fetcher,
            mock_embedding_service,
            mock_vector_store,
            AnswerGenerator(mock_llm_client),
            result_count=2,
        )

        result = await pipeline.ask("q")

        assert mock_vector_store.query.call_args.kwargs["limit"] == 2
        assert result.source == EXAMPLE_URL
        assert "other body" not in mock_llm_client.generate_text.call_args.kwargs["prompt"]

    @pytest.mark.asyncio
    async def test_missing_metadata_fields(
        self,
        mock_fetcher: AsyncMock,
        mock_embedding_service: AsyncMock,
        mock_vector_store: AsyncMock,
        mock_llm_client: AsyncMock,
    ) -> None:
        """Absent title or body are treated as empty text."""
        mock_vector_store.query.return_value = [
            SearchResult(id=EXAMPLE_URL, score=0.5, payload={})
        ]
        pipeline = _build(mock_fetcher, mock_embedding_service, mock_vector_store, mock_llm_client)

        result = await pipeline.ask("q")

        assert result.status == AskStatus.ANSWERED
        prompt = mock_llm_client.generate_text.call_args.kwargs["prompt"]
        assert "Title: \nContent: \n" in prompt

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "stage",
        ["embed", "query", "generate", "unexpected"],
    )
    async def test_failures_contained(
        self,
        stage: str,
        mock_fetcher: AsyncMock,
        mock_embedding_service: AsyncMock,
        mock_vector_store: AsyncMock,
        mock_llm_client: AsyncMock,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """A failing stage is logged and reported, never raised."""
        mock_vector_store.query.return_value = [_hit()]
        if stage == "embed":
            mock_embedding_service.embed.side_effect = EmbeddingError("quota")
        elif stage == "query":
            mock_vector_store.query.side_effect = VectorStoreError("down")
        elif stage == "unexpected":
            mock_llm_client.generate_text.side_effect = RuntimeError("boom")
        else:
            mock_llm_client.generate_text.side_effect = LLMError(
                "blocked", code=ErrorCode.LLM_CONTENT_BLOCKED
            )
        pipeline = _build(mock_fetcher, mock_embedding_service, mock_vector_store, mock_llm_client)

        with caplog.at_level(logging.ERROR, logger="webrag.rag.pipeline"):
            result = await pipeline.ask("q")

        assert result.status == AskStatus.FAILED
        assert result.answer is None
        assert result.error
        assert any(m.startswith("Chat error:") for m in caplog.messages)


class TestPipelineRun:
    """Tests for WebRAGPipeline.run."""

    @pytest.mark.asyncio
    async def test_run_answered(
        self,
        mock_fetcher: AsyncMock,
        mock_embedding_service: AsyncMock,
        mock_vector_store: AsyncMock,
        mock_llm_client: AsyncMock,
    ) -> None:
        """Reset, ingest and ask run in order and succeed."""
        mock_vector_store.query.return_value = [_hit()]
        pipeline = _build(mock_fetcher, mock_embedding_service, mock_vector_store, mock_llm_client)

        result = await pipeline.run(EXAMPLE_URL, "What is this site?")

        assert result.success is True
        assert result.ingest is not None
        assert result.ingest.url == EXAMPLE_URL
        assert result.ask is not None
        assert result.ask.status == AskStatus.ANSWERED
        mock_vector_store.reset_collection.assert_awaited_once()

        call_order = [c[0] for c in mock_vector_store.mock_calls]
        assert call_order.index("reset_collection") < call_order.index("insert")
        assert call_order.index("insert") < call_order.index("query")

    @pytest.mark.asyncio
    async def test_run_no_context_succeeds(
        self,
        mock_fetcher: AsyncMock,
        mock_embedding_service: AsyncMock,
        mock_vector_store: AsyncMock,
        mock_llm_client: AsyncMock,
    ) -> None:
        """An empty retrieval is not a failure."""
        pipeline = _build(mock_fetcher, mock_embedding_service, mock_vector_store, mock_llm_client)

        result = await pipeline.run(EXAMPLE_URL, "q")

        assert result.success is True
        assert result.ask is not None
        assert result.ask.status == AskStatus.NO_CONTEXT

    @pytest.mark.asyncio
    async def test_run_ingest_failure(
        self,
        mock_fetcher: AsyncMock,
        mock_embedding_service: AsyncMock,
        mock_vector_store: AsyncMock,
        mock_llm_client: AsyncMock,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """An ingest failure skips the question and fails the run."""
        mock_fetcher.fetch.side_effect = ScrapeError(
            "Navigation timed out", code=ErrorCode.PAGE_TIMEOUT
        )
        pipeline = _build(mock_fetcher, mock_embedding_service, mock_vector_store, mock_llm_client)

        with caplog.at_level(logging.ERROR, logger="webrag.rag.pipeline"):
            result = await pipeline.run(EXAMPLE_URL, "q")

        assert result.success is False
        assert result.ask is None
        assert result.error_code == "WRG-2001"
        assert any(m.startswith("Pipeline error:") for m in caplog.messages)
        mock_vector_store.query.assert_not_awaited()
        mock_llm_client.generate_text.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_run_reset_failure(
        self,
        mock_fetcher: AsyncMock,
        mock_embedding_service: AsyncMock,
        mock_vector_store: AsyncMock,
        mock_llm_client: AsyncMock,
    ) -> None:
        """A reset failure stops the run before scraping."""
        mock_vector_store.reset_collection.side_effect = VectorStoreError("unreachable")
        pipeline = _build(mock_fetcher, mock_embedding_service, mock_vector_store, mock_llm_client)

        result = await pipeline.run(EXAMPLE_URL, "q")

        assert result.success is False
        mock_fetcher.fetch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_run_ask_failure(
        self,
        mock_fetcher: AsyncMock,
        mock_embedding_service: AsyncMock,
        mock_vector_store: AsyncMock,
        mock_llm_client: AsyncMock,
    ) -> None:
        """A failed question fails the run but keeps the ingest outcome."""
        mock_vector_store.query.return_value = [_hit()]
        mock_llm_client.generate_text.side_effect = LLMError("down")
        pipeline = _build(mock_fetcher, mock_embedding_service, mock_vector_store, mock_llm_client)

        result = await pipeline.run(EXAMPLE_URL, "q")

        assert result.success is False
        assert result.ingest is not None
        assert result.ask is not None
        assert result.ask.status == AskStatus.FAILED
        assert result.error == "down"

    @pytest.mark.asyncio
    async def test_run_unexpected_ask_error(
        self,
        mock_fetcher: AsyncMock,
        mock_embedding_service: AsyncMock,
        mock_vector_store: AsyncMock,
        mock_llm_client: AsyncMock,
    ) -> None:
        """A non-library exception while answering still yields a typed result."""
        mock_vector_store.query.return_value = [_hit()]
        mock_llm_client.generate_text.side_effect = RuntimeError("boom")
        pipeline = _build(mock_fetcher, mock_embedding_service, mock_vector_store, mock_llm_client)

        result = await pipeline.run(EXAMPLE_URL, "q")

        assert result.success is False
        assert result.ask is not None
        assert result.ask.status == AskStatus.FAILED
        assert result.error == "boom"
