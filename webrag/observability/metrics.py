"""Prometheus metrics for the scrape-and-answer pipeline.

Every external call (browser, Gemini, Qdrant) is timed and labelled with
its status. A run is a short-lived batch job, so the registry is written to a
textfile (node-exporter textfile collector) instead of being served.
"""

from pathlib import Path

from prometheus_client import (
    REGISTRY,
    Counter,
    Histogram,
    generate_latest,
    write_to_textfile,
)

from webrag.logging_config import get_logger

logger = get_logger(__name__)

# Scraping Metrics
SCRAPE_DURATION = Histogram(
    "webrag_scrape_duration_seconds",
    "Page scrape duration in seconds",
    ["status"],
    buckets=[0.5, 1.0, 2.0, 5.0, 10.0, 20.0, 30.0, 60.0],
)

SCRAPE_BODY_CHARS = Histogram(
    "webrag_scrape_body_chars",
    "Characters of visible body text per scraped page",
    buckets=[100, 500, 1000, 3000, 10000, 30000, 100000],
)

# Embedding Metrics
EMBEDDING_REQUEST_DURATION = Histogram(
    "webrag_embedding_request_duration_seconds",
    "Gemini embedContent latency",
    ["model", "status"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

EMBEDDING_REQUEST_TOTAL = Counter(
    "webrag_embedding_requests_total",
    "embedContent calls by model and status",
    ["model", "status"],
)

# Vector Store Metrics
VECTORSTORE_OPERATION_DURATION = Histogram(
    "webrag_vectorstore_operation_duration_seconds",
    "Qdrant call latency by operation",
    ["operation", "status"],
    buckets=[0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0],
)

RETRIEVAL_TOP_SCORE = Histogram(
    "webrag_retrieval_top_score",
    "Cosine similarity of the best match per question",
    buckets=[0.25, 0.5, 0.6, 0.7, 0.8, 0.85, 0.9, 0.95, 1.0],
)

# LLM Metrics
LLM_REQUEST_DURATION = Histogram(
    "webrag_llm_request_duration_seconds",
    "Gemini generateContent latency",
    ["model", "status"],
    buckets=[0.5, 1.0, 2.5, 5.0, 10.0, 20.0, 40.0, 60.0],
)

LLM_TOKENS_TOTAL = Counter(
    "webrag_llm_tokens_total",
    "Total LLM tokens used",
    ["model", "type"],  # prompt | completion
)

LLM_REQUEST_TOTAL = Counter(
    "webrag_llm_requests_total",
    "Total LLM requests",
    ["model", "status"],
)

# Pipeline Metrics
PIPELINE_RUN_TOTAL = Counter(
    "webrag_pipeline_runs_total",
    "Pipeline runs by outcome",
    ["outcome"],
)


def _status(success: bool) -> str:
    return "success" if success else "error"


def get_metrics() -> bytes:
    """Render the default registry in the text exposition format."""
    return generate_latest()


def write_metrics_file(path: str | Path) -> None:
    """Write the default registry to a Prometheus textfile.

    Args:
        path: Destination file, replaced atomically.
    """
    write_to_textfile(str(path), REGISTRY)
    logger.debug(f"Wrote metrics to {path}")


def track_scrape(duration: float, body_chars: int, success: bool = True) -> None:
    """Track a page scrape.

    Args:
        duration: Scrape duration in seconds.
        body_chars: Length of the extracted body text.
        success: Whether the scrape succeeded.
    """
    SCRAPE_DURATION.labels(status=_status(success)).observe(duration)
    if success:
        SCRAPE_BODY_CHARS.observe(body_chars)


def track_embedding_request(
    model: str,
    duration: float,
    success: bool = True,
) -> None:
    """Record one embedContent call."""
    status = _status(success)
    EMBEDDING_REQUEST_DURATION.labels(model=model, status=status).observe(duration)
    EMBEDDING_REQUEST_TOTAL.labels(model=model, status=status).inc()


def track_vectorstore_operation(
    operation: str,
    duration: float,
    success: bool = True,
) -> None:
    """Track a vector store operation."""
    VECTORSTORE_OPERATION_DURATION.labels(
        operation=operation,
        status=_status(success),
    ).observe(duration)


def track_retrieval(top_score: float | None) -> None:
    """Record the best score of a query, if it returned anything."""
    if top_score is not None and top_score > 0:
        RETRIEVAL_TOP_SCORE.observe(top_score)


def track_llm_request(
    model: str,
    duration: float,
    prompt_tokens: int,
    completion_tokens: int,
    success: bool = True,
) -> None:
    """Record one generateContent call.

    Token counts come from the response usage metadata and are only
    counted for successful calls.
    """
    status = _status(success)

    LLM_REQUEST_DURATION.labels(model=model, status=status).observe(duration)
    LLM_REQUEST_TOTAL.labels(model=model, status=status).inc()

    if success:
        LLM_TOKENS_TOTAL.labels(model=model, type="prompt").inc(prompt_tokens)
        LLM_TOKENS_TOTAL.labels(model=model, type="completion").inc(completion_tokens)


def track_pipeline_run(outcome: str) -> None:
    """Count a finished pipeline run by its outcome."""
    PIPELINE_RUN_TOTAL.labels(outcome=outcome).inc()
