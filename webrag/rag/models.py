"""Pipeline data models."""

from enum import Enum

from pydantic import BaseModel, Field


class AnswerContext(BaseModel):
    """Retrieved page content handed to the answer generator.

    Attributes:
        title: Page title.
        body: Full page body; truncated by the generator.
    """

    title: str = Field(default="", description="Page title")
    body: str = Field(default="", description="Page body")


class IngestResult(BaseModel):
    """Outcome of ingesting one page.

    Attributes:
        url: Ingested URL, also the stored document id.
        title: Scraped page title.
        body_chars: Length of the stored body text.
        dimensions: Embedding dimensions.
    """

    url: str = Field(description="Ingested URL")
    title: str = Field(description="Scraped page title")
    body_chars: int = Field(description="Stored body length")
    dimensions: int = Field(description="Embedding dimensions")


class AskStatus(str, Enum):
    """How a question was resolved."""

    ANSWERED = "answered"
    NO_CONTEXT = "no_context"
    FAILED = "failed"


class AskResult(BaseModel):
    """Outcome of answering one question.

    Attributes:
        question: The question asked.
        status: Resolution status.
        answer: Model output, verbatim, when status is ANSWERED.
        source: Document id the answer was grounded on.
        score: Similarity of that document to the question.
        error: Error message when status is FAILED.
    """

    question: str = Field(description="Question asked")
    status: AskStatus = Field(description="Resolution status")
    answer: str | None = Field(default=None, description="Generated answer")
    source: str | None = Field(default=None, description="Grounding document id")
    score: float | None = Field(default=None, description="Grounding document score")
    error: str | None = Field(default=None, description="Failure message")


class PipelineRunResult(BaseModel):
    """Outcome of a full reset, ingest and ask run.

    Attributes:
        success: False if any stage failed.
        ingest: Ingestion outcome, if ingestion completed.
        ask: Question outcome, if the question stage ran.
        error: Failure message from reset or ingest.
        error_code: Structured code of that failure.
    """

    success: bool = Field(description="Whether the run succeeded")
    ingest: IngestResult | None = Field(default=None, description="Ingestion outcome")
    ask: AskResult | None = Field(default=None, description="Question outcome")
    error: str | None = Field(default=None, description="Failure message")
    error_code: str | None = Field(default=None, description="Failure error code")
