"""Application configuration using Pydantic Settings.

All configuration is loaded from environment variables or a .env file.
No secrets are hardcoded.
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


class GeminiSettings(BaseSettings):
    """Google Gemini API configuration.

    Used by both the embedding service and the answer generator.
    """

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Gemini API key (GOOGLE_API_KEY)",
    )
    base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Gemini REST API base URL",
    )
    embedding_model: str = Field(
        default="embedding-001",
        description="Model used for text embeddings",
    )
    generation_model: str = Field(
        default="gemini-pro",
        description="Model used for answer generation",
    )
    timeout: float = Field(
        default=60.0,
        description="Request timeout in seconds",
    )
    temperature: float | None = Field(
        default=None,
        description="Sampling temperature (model default when unset)",
    )
    max_output_tokens: int | None = Field(
        default=None,
        description="Maximum tokens in response (model default when unset)",
    )


class BrowserSettings(BaseSettings):
    """Headless browser configuration for page scraping."""

    model_config = SettingsConfigDict(
        env_prefix="BROWSER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    headless: bool = Field(
        default=True,
        description="Run Chromium without a window",
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        description="User-Agent header sent by the browser",
    )
    navigation_timeout_ms: float = Field(
        default=30_000,
        description="Navigation timeout in milliseconds",
    )
    wait_until: str = Field(
        default="networkidle",
        description="Navigation is complete once this load state is reached",
    )
    launch_args: list[str] = Field(
        default_factory=lambda: ["--no-sandbox", "--disable-setuid-sandbox"],
        description="Extra Chromium command-line arguments",
    )


class QdrantSettings(BaseSettings):
    """Qdrant vector database configuration."""

    model_config = SettingsConfigDict(
        env_prefix="QDRANT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    url: str = Field(
        default="http://localhost:6333",
        description="Qdrant server URL",
    )
    api_key: SecretStr | None = Field(
        default=None,
        description="Qdrant API key (optional for local)",
    )
    collection_name: str = Field(
        default="web_scraped_data_collection",
        description="Reserved collection shared by ingestion and querying",
    )


class PipelineSettings(BaseSettings):
    """Inputs and limits for a single pipeline run."""

    model_config = SettingsConfigDict(
        env_prefix="PIPELINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    target_url: str = Field(
        default="http://books.toscrape.com/",
        description="Page to scrape and ingest",
    )
    question: str = Field(
        default="Give me 550 words on this site?",
        description="Question answered from the ingested page",
    )
    result_count: int = Field(
        default=1,
        ge=1,
        description="Number of documents retrieved per question",
    )
    context_char_budget: int = Field(
        default=3000,
        ge=1,
        description="Characters of document body passed to the model",
    )


class Settings(BaseSettings):
    """Main application settings.

    Aggregates all configuration sections.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    # Nested settings
    gemini: GeminiSettings = Field(default_factory=GeminiSettings)
    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    qdrant: QdrantSettings = Field(default_factory=QdrantSettings)
    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()
