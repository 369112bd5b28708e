"""Page scraping module."""

from webrag.scraper.fetcher import PageFetcher, PlaywrightPageFetcher
from webrag.scraper.models import ScrapedPage, normalize_whitespace

__all__ = [
    "PageFetcher",
    "PlaywrightPageFetcher",
    "ScrapedPage",
    "normalize_whitespace",
]
