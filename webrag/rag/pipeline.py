"""Scrape, index and answer orchestrator."""

from webrag.embeddings.service import EmbeddingService
from webrag.exceptions import WebRAGError
from webrag.logging_config import get_logger
from webrag.observability.metrics import track_pipeline_run
from webrag.rag.answer import AnswerGenerator
from webrag.rag.models import (
    AnswerContext,
    AskResult,
    AskStatus,
    IngestResult,
    PipelineRunResult,
)
from webrag.scraper.fetcher import PageFetcher
from webrag.vectorstore.models import VectorRecord
from webrag.vectorstore.service import VectorStore

logger = get_logger(__name__)

NO_CONTEXT_MESSAGE = "No relevant context found"


class WebRAGPipeline:
    """Orchestrates the single-page RAG pipeline.

    Every step awaits one external call before the next begins.
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        embedding_service: EmbeddingService,
        vector_store: VectorStore,
        answer_generator: AnswerGenerator,
        result_count: int = 1,
    ) -> None:
        """Initialize the pipeline.

        Args:
            fetcher: Page fetcher for ingestion.
            embedding_service: Embeds page bodies and questions.
            vector_store: Store holding the reserved collection.
            answer_generator: Produces the grounded answer.
            result_count: Documents retrieved per question.
        """
        self._fetcher = fetcher
        self._embedding_service = embedding_service
        self._vector_store = vector_store
        self._answer_generator = answer_generator
        self._result_count = result_count

    async def ingest(self, url: str) -> IngestResult:
        """Scrape a page and store its embedding under the URL.

        Raises:
            WebRAGError: If any step fails.
        """
        page = await self._fetcher.fetch(url)
        logger.info(f"Scraped title: {page.title}", extra={"url": url})

        embedding = await self._embedding_service.embed(page.body)

        await self._vector_store.insert(
            VectorRecord(
                id=url,
                vector=embedding.embedding,
                payload=page.to_metadata(),
            )
        )
        logger.info(f"Successfully ingested: {url}")

        return IngestResult(
            url=url,
            title=page.title,
            body_chars=len(page.body),
            dimensions=embedding.dimensions,
        )

    async def ask(self, question: str) -> AskResult:
        """Answer a question from the nearest stored page.

        Failures are logged and reported in the result, never raised.
        """
        try:
            embedding = await self._embedding_service.embed(question)
            results = await self._vector_store.query(
                embedding.embedding,
                limit=self._result_count,
            )

            if not results:
                logger.info(NO_CONTEXT_MESSAGE)
                return AskResult(question=question, status=AskStatus.NO_CONTEXT)

            top = results[0]
            context = AnswerContext(
                title=top.payload.get("title", ""),
                body=top.payload.get("body", ""),
            )
            answer = await self._answer_generator.answer(question, context)

        except WebRAGError as e:
            logger.error(
                f"Chat error: {e.message}",
                extra={"error_code": e.code.value, "details": e.details},
            )
            return AskResult(
                question=question,
                status=AskStatus.FAILED,
                error=e.message,
            )
        except Exception as e:
            logger.exception(f"Chat error: {e}")
            return AskResult(
                question=question,
                status=AskStatus.FAILED,
                error=str(e) or type(e).__name__,
            )

        logger.info(f"Answer: {answer}", extra={"source": top.id})
        return AskResult(
            question=question,
            status=AskStatus.ANSWERED,
            answer=answer,
            source=top.id,
            score=top.score,
        )

    async def run(self, url: str, question: str) -> PipelineRunResult:
        """Reset the collection, ingest one page and answer one question."""
        try:
            await self._vector_store.reset_collection()
            ingest_result = await self.ingest(url)
        except WebRAGError as e:
            logger.error(
                f"Pipeline error: {e.message}",
                extra={"error_code": e.code.value, "details": e.details},
            )
            track_pipeline_run("failed")
            return PipelineRunResult(
                success=False,
                error=e.message,
                error_code=e.code.value,
            )

        ask_result = await self.ask(question)
        success = ask_result.status != AskStatus.FAILED
        track_pipeline_run(ask_result.status.value)

        return PipelineRunResult(
            success=success,
            ingest=ingest_result,
            ask=ask_result,
            error=ask_result.error,
        )
