"""RAG pipeline module."""

from webrag.rag.answer import AnswerGenerator
from webrag.rag.models import (
    AnswerContext,
    AskResult,
    AskStatus,
    IngestResult,
    PipelineRunResult,
)
from webrag.rag.pipeline import WebRAGPipeline

__all__ = [
    "AnswerContext",
    "AnswerGenerator",
    "AskResult",
    "AskStatus",
    "IngestResult",
    "PipelineRunResult",
    "WebRAGPipeline",
]
