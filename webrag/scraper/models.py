"""Scraped page data models."""

import re

from pydantic import BaseModel, ConfigDict, Field

_WHITESPACE_RUN = re.compile(r"\s+")


def normalize_whitespace(text: str) -> str:
    """Collapse every run of whitespace to one space and trim both ends."""
    return _WHITESPACE_RUN.sub(" ", text).strip()


class ScrapedPage(BaseModel):
    """Content extracted from a rendered web page.

    Attributes:
        url: Address the page was fetched from.
        title: Document title.
        meta_description: Content of <meta name="description">, or "".
        body: Visible body text with whitespace normalized.
    """

    model_config = ConfigDict(frozen=True)

    url: str = Field(description="Fetched URL")
    title: str = Field(description="Document title")
    meta_description: str = Field(default="", description="Meta description")
    body: str = Field(description="Whitespace-normalized visible text")

    def to_metadata(self) -> dict[str, str]:
        """Metadata stored alongside the page embedding."""
        return {
            "title": self.title,
            "metaDescription": self.meta_description,
            "body": self.body,
        }
