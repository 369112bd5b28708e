"""Run the scrape, index and answer pipeline once.

Usage:
    webrag --url http://books.toscrape.com/ --question "What is this site?"

Defaults come from PIPELINE_* environment variables. The process exits
with status 0 when the run succeeded and 1 when any stage failed.
"""

import argparse
import asyncio
import sys
from pathlib import Path

from pydantic import ValidationError

from webrag.config import PipelineSettings, Settings, get_settings
from webrag.embeddings.service import GeminiEmbeddingService
from webrag.exceptions import ConfigurationError
from webrag.llm.client import GeminiClient
from webrag.logging_config import get_logger, setup_logging
from webrag.observability.metrics import write_metrics_file
from webrag.rag.answer import AnswerGenerator
from webrag.rag.models import AskStatus, PipelineRunResult
from webrag.rag.pipeline import NO_CONTEXT_MESSAGE, WebRAGPipeline
from webrag.scraper.fetcher import PlaywrightPageFetcher
from webrag.vectorstore.service import QdrantVectorStore

logger = get_logger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2


def resolve_pipeline_settings(
    args: argparse.Namespace,
    base: PipelineSettings,
) -> PipelineSettings:
    """Apply command-line overrides on top of configured pipeline settings.

    Raises:
        ConfigurationError: If an override is out of range.
    """
    overrides = {
        "target_url": args.url,
        "question": args.question,
        "result_count": args.result_count,
        "context_char_budget": args.context_chars,
    }
    merged = base.model_dump() | {k: v for k, v in overrides.items() if v is not None}
    try:
        return PipelineSettings.model_validate(merged)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid pipeline settings: {e.error_count()} error(s)",
            details={"errors": e.errors(include_url=False)},
        ) from e


async def run_pipeline(
    settings: Settings,
    pipeline_settings: PipelineSettings,
) -> PipelineRunResult:
    """Build every service from settings, run once and release clients.

    Args:
        settings: Application settings.
        pipeline_settings: Inputs for this run.

    Returns:
        Typed outcome of the run.
    """
    embedding_service = GeminiEmbeddingService(settings=settings.gemini)
    llm_client = GeminiClient(settings=settings.gemini)
    vector_store = QdrantVectorStore(settings=settings.qdrant)

    pipeline = WebRAGPipeline(
        fetcher=PlaywrightPageFetcher(settings=settings.browser),
        embedding_service=embedding_service,
        vector_store=vector_store,
        answer_generator=AnswerGenerator(
            llm_client=llm_client,
            context_char_budget=pipeline_settings.context_char_budget,
        ),
        result_count=pipeline_settings.result_count,
    )

    try:
        return await pipeline.run(
            url=pipeline_settings.target_url,
            question=pipeline_settings.question,
        )
    finally:
        await embedding_service.close()
        await llm_client.close()
        await vector_store.close()


def report(result: PipelineRunResult) -> None:
    """Print the user-facing outcome of a run."""
    if result.ask is None:
        print(f"Error: {result.error}")
        return

    if result.ask.status == AskStatus.ANSWERED:
        print(result.ask.answer)
    elif result.ask.status == AskStatus.NO_CONTEXT:
        print(NO_CONTEXT_MESSAGE)
    else:
        print(f"Error: {result.ask.error}")


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="webrag",
        description="Scrape a web page and answer a question about it",
    )
    parser.add_argument(
        "--url",
        default=None,
        help="Page to ingest (default: PIPELINE_TARGET_URL)",
    )
    parser.add_argument(
        "--question",
        default=None,
        help="Question to answer (default: PIPELINE_QUESTION)",
    )
    parser.add_argument(
        "--result-count",
        type=int,
        default=None,
        help="Documents retrieved per question",
    )
    parser.add_argument(
        "--context-chars",
        type=int,
        default=None,
        help="Characters of page body passed to the model",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level override (default: LOG_LEVEL)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        default=None,
        help="Emit JSON log lines",
    )
    parser.add_argument(
        "--metrics-file",
        type=Path,
        default=None,
        help="Write Prometheus metrics to this textfile after the run",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Process exit status.
    """
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(level=args.log_level, json_output=args.json_logs)

    try:
        pipeline_settings = resolve_pipeline_settings(args, settings.pipeline)
    except ConfigurationError as e:
        logger.error(e.message, extra={"details": e.details})
        return EXIT_CONFIG_ERROR

    try:
        result = asyncio.run(run_pipeline(settings, pipeline_settings))
    except Exception:
        logger.exception("Main error")
        return EXIT_FAILURE
    finally:
        if args.metrics_file is not None:
            write_metrics_file(args.metrics_file)

    report(result)

    return EXIT_SUCCESS if result.success else EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
