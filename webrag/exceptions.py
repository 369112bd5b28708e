"""Application exception hierarchy.

All custom exceptions inherit from WebRAGError.
Each exception has an error code for structured error handling.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error handling."""

    # General errors (1xxx)
    INTERNAL_ERROR = "WRG-1000"
    CONFIGURATION_ERROR = "WRG-1001"

    # Scraping errors (2xxx)
    PAGE_NAVIGATION_ERROR = "WRG-2000"
    PAGE_TIMEOUT = "WRG-2001"
    PAGE_EXTRACTION_ERROR = "WRG-2002"

    # Embedding errors (3xxx)
    EMBEDDING_SERVICE_ERROR = "WRG-3000"
    EMBEDDING_INVALID_RESPONSE = "WRG-3001"

    # Vector store errors (4xxx)
    VECTOR_STORE_ERROR = "WRG-4000"
    COLLECTION_NOT_FOUND = "WRG-4001"
    COLLECTION_EXISTS = "WRG-4002"

    # LLM errors (5xxx)
    LLM_SERVICE_ERROR = "WRG-5000"
    LLM_TIMEOUT = "WRG-5001"
    LLM_RATE_LIMIT = "WRG-5002"
    LLM_CONTENT_BLOCKED = "WRG-5003"


class WebRAGError(Exception):
    """Base exception for all webrag errors.

    Attributes:
        message: Human-readable error message.
        code: Structured error code.
        details: Additional error context.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for structured output."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "details": self.details,
            }
        }


class ConfigurationError(WebRAGError):
    """Configuration or environment error."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)


class ScrapeError(WebRAGError):
    """Page navigation or extraction error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.PAGE_NAVIGATION_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class EmbeddingError(WebRAGError):
    """Embedding service error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.EMBEDDING_SERVICE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class VectorStoreError(WebRAGError):
    """Vector store operation error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.VECTOR_STORE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class LLMError(WebRAGError):
    """LLM service error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.LLM_SERVICE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)

