"""LLM client interface and Gemini implementation."""

import time
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

import httpx

from webrag.config import GeminiSettings
from webrag.exceptions import ErrorCode, LLMError
from webrag.llm.models import GenerationResult, SafetySetting
from webrag.logging_config import get_logger
from webrag.observability.metrics import track_llm_request

logger = get_logger(__name__)


class LLMClient(ABC):
    """Abstract base class for LLM clients.

    Defines the interface for generating text with LLMs.
    """

    @abstractmethod
    async def generate_text(
        self,
        prompt: str,
        safety_settings: Sequence[SafetySetting] = (),
    ) -> GenerationResult:
        """Generate text from a single prompt.

        Args:
            prompt: User prompt.
            safety_settings: Per-request safety overrides.

        Returns:
            GenerationResult with generated text.

        Raises:
            LLMError: If generation fails.
        """
        ...

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Get the model name."""
        ...


class GeminiClient(LLMClient):
    """LLM client for the Gemini `generateContent` REST method."""

    def __init__(
        self,
        settings: GeminiSettings,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the Gemini client.

        Args:
            settings: Gemini configuration.
            client: HTTP client (for testing).
        """
        self._settings = settings
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._settings.timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def model_name(self) -> str:
        """Get the model name."""
        return self._settings.generation_model

    def _build_payload(
        self,
        prompt: str,
        safety_settings: Sequence[SafetySetting],
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        }
        if safety_settings:
            payload["safetySettings"] = [s.to_request() for s in safety_settings]

        generation_config: dict[str, Any] = {}
        if self._settings.temperature is not None:
            generation_config["temperature"] = self._settings.temperature
        if self._settings.max_output_tokens is not None:
            generation_config["maxOutputTokens"] = self._settings.max_output_tokens
        if generation_config:
            payload["generationConfig"] = generation_config

        return payload

    async def generate_text(
        self,
        prompt: str,
        safety_settings: Sequence[SafetySetting] = (),
    ) -> GenerationResult:
        """Generate text for a prompt and return the first candidate verbatim."""
        start = time.perf_counter()
        try:
            result = await self._generate(prompt, safety_settings)
        except LLMError:
            track_llm_request(
                self.model_name,
                time.perf_counter() - start,
                prompt_tokens=0,
                completion_tokens=0,
                success=False,
            )
            raise

        track_llm_request(
            self.model_name,
            time.perf_counter() - start,
            prompt_tokens=result.prompt_tokens,
            completion_tokens=result.completion_tokens,
        )
        return result

    async def _generate(
        self,
        prompt: str,
        safety_settings: Sequence[SafetySetting],
    ) -> GenerationResult:
        client = await self._get_client()
        url = f"{self._settings.base_url}/models/{self.model_name}:generateContent"
        headers = {"x-goog-api-key": self._settings.api_key.get_secret_value()}
        payload = self._build_payload(prompt, safety_settings)

        try:
            response = await client.post(url, json=payload, headers=headers)
            response.raise_for_status()

        except httpx.TimeoutException as e:
            logger.error(f"LLM request timed out: {e}")
            raise LLMError(
                "LLM request timed out",
                code=ErrorCode.LLM_TIMEOUT,
                details={"timeout": self._settings.timeout},
            ) from e

        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f"LLM request failed: {status}")

            if status == 429:
                raise LLMError(
                    "Rate limit exceeded",
                    code=ErrorCode.LLM_RATE_LIMIT,
                    details={"status_code": status},
                ) from e

            raise LLMError(
                f"LLM service returned {status}",
                code=ErrorCode.LLM_SERVICE_ERROR,
                details={"status_code": status},
            ) from e

        except httpx.RequestError as e:
            logger.error(f"LLM connection error: {e}")
            raise LLMError(
                f"Failed to connect to LLM service: {e}",
                code=ErrorCode.LLM_SERVICE_ERROR,
                details={"model": self.model_name},
            ) from e

        try:
            data = response.json()
        except ValueError as e:
            raise LLMError(
                f"Invalid JSON from LLM service: {e}",
                code=ErrorCode.LLM_SERVICE_ERROR,
            ) from e

        return self._parse_response(data)

    def _parse_response(self, data: Any) -> GenerationResult:
        if not isinstance(data, dict):
            raise LLMError(
                f"Invalid response from LLM: expected an object, got {type(data).__name__}",
                code=ErrorCode.LLM_SERVICE_ERROR,
            )

        candidates = data.get("candidates") or []
        if not candidates:
            feedback = data.get("promptFeedback") or {}
            block_reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
            raise LLMError(
                f"Prompt was blocked: {block_reason or 'no candidates returned'}",
                code=ErrorCode.LLM_CONTENT_BLOCKED,
                details={"block_reason": block_reason},
            )

        finish_reason = None
        try:
            candidate = candidates[0]
            finish_reason = candidate.get("finishReason")
            parts = candidate["content"]["parts"]
            content = "".join(part.get("text", "") for part in parts)
            usage = data.get("usageMetadata") or {}
            return GenerationResult(
                content=content,
                model=data.get("modelVersion", self.model_name),
                finish_reason=finish_reason,
                prompt_tokens=usage.get("promptTokenCount", 0),
                completion_tokens=usage.get("candidatesTokenCount", 0),
                total_tokens=usage.get("totalTokenCount", 0),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            code = ErrorCode.LLM_SERVICE_ERROR
            if finish_reason == "SAFETY":
                code = ErrorCode.LLM_CONTENT_BLOCKED
            raise LLMError(
                f"Invalid response from LLM: {e}",
                code=code,
                details={"finish_reason": finish_reason},
            ) from e
