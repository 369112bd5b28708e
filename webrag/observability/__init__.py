"""Observability module for metrics."""

from webrag.observability.metrics import (
    get_metrics,
    track_embedding_request,
    track_llm_request,
    track_pipeline_run,
    track_retrieval,
    track_scrape,
    track_vectorstore_operation,
    write_metrics_file,
)

__all__ = [
    "get_metrics",
    "track_embedding_request",
    "track_llm_request",
    "track_pipeline_run",
    "track_retrieval",
    "track_scrape",
    "track_vectorstore_operation",
    "write_metrics_file",
]
