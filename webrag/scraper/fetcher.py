"""Page fetcher interface and headless Chromium implementation."""

import time
from abc import ABC, abstractmethod

from playwright.async_api import Browser, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from webrag.config import BrowserSettings
from webrag.exceptions import ErrorCode, ScrapeError
from webrag.logging_config import get_logger
from webrag.observability.metrics import track_scrape
from webrag.scraper.models import ScrapedPage, normalize_whitespace

logger = get_logger(__name__)

META_DESCRIPTION_SELECTOR = 'meta[name="description"]'


class PageFetcher(ABC):
    """Abstract base class for page fetchers."""

    @abstractmethod
    async def fetch(self, url: str) -> ScrapedPage:
        """Fetch and extract a single page.

        Args:
            url: Page address.

        Returns:
            ScrapedPage with title, meta description and body text.

        Raises:
            ScrapeError: If navigation or extraction fails.
        """
        ...


class PlaywrightPageFetcher(PageFetcher):
    """Fetches pages with a fresh headless Chromium per call.

    The browser is always closed before fetch returns or raises.
    """

    def __init__(
        self,
        settings: BrowserSettings,
        playwright: Playwright | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            settings: Browser configuration.
            playwright: Running Playwright driver (for testing). A driver is
                started per fetch when not provided.
        """
        self._settings = settings
        self._playwright = playwright

    async def fetch(self, url: str) -> ScrapedPage:
        """Render the page and extract its content."""
        start = time.perf_counter()
        try:
            if self._playwright is not None:
                page = await self._fetch_with(self._playwright, url)
            else:
                async with async_playwright() as playwright:
                    page = await self._fetch_with(playwright, url)
        except ScrapeError:
            track_scrape(time.perf_counter() - start, 0, success=False)
            raise

        track_scrape(time.perf_counter() - start, len(page.body))
        return page

    async def _fetch_with(self, playwright: Playwright, url: str) -> ScrapedPage:
        try:
            browser = await playwright.chromium.launch(
                headless=self._settings.headless,
                args=list(self._settings.launch_args),
            )
        except PlaywrightError as e:
            raise ScrapeError(
                f"Failed to launch browser: {e}",
                code=ErrorCode.PAGE_NAVIGATION_ERROR,
                details={"url": url, "error": str(e)},
            ) from e

        try:
            try:
                context = await browser.new_context(
                    user_agent=self._settings.user_agent,
                )
                page = await context.new_page()
            except PlaywrightError as e:
                raise ScrapeError(
                    f"Failed to open page: {e}",
                    code=ErrorCode.PAGE_NAVIGATION_ERROR,
                    details={"url": url, "error": str(e)},
                ) from e
            await self._navigate(page, url)
            return await self._extract(page, url)
        finally:
            await self._close_browser(browser, url)

    async def _close_browser(self, browser: Browser, url: str) -> None:
        try:
            await browser.close()
        except PlaywrightError as e:
            logger.warning(f"Failed to close browser: {e}", extra={"url": url})

    async def _navigate(self, page: Page, url: str) -> None:
        timeout = self._settings.navigation_timeout_ms
        try:
            response = await page.goto(
                url,
                wait_until=self._settings.wait_until,  # type: ignore[arg-type]
                timeout=timeout,
            )
        except PlaywrightTimeoutError as e:
            logger.error(f"Navigation timed out: {url}")
            raise ScrapeError(
                f"Navigation timed out after {timeout:.0f} ms: {url}",
                code=ErrorCode.PAGE_TIMEOUT,
                details={"url": url, "timeout_ms": timeout},
            ) from e
        except PlaywrightError as e:
            logger.error(f"Navigation failed: {e}")
            raise ScrapeError(
                f"Failed to navigate to {url}: {e}",
                code=ErrorCode.PAGE_NAVIGATION_ERROR,
                details={"url": url, "error": str(e)},
            ) from e

        if response is not None:
            logger.debug(
                f"Loaded {url}",
                extra={"status": response.status},
            )

    async def _extract(self, page: Page, url: str) -> ScrapedPage:
        try:
            title = await page.title()
            meta_description = await self._meta_description(page)
            body = normalize_whitespace(await page.inner_text("body"))
        except PlaywrightError as e:
            raise ScrapeError(
                f"Failed to extract page content: {e}",
                code=ErrorCode.PAGE_EXTRACTION_ERROR,
                details={"url": url, "error": str(e)},
            ) from e

        return ScrapedPage(
            url=url,
            title=title,
            meta_description=meta_description,
            body=body,
        )

    async def _meta_description(self, page: Page) -> str:
        element = await page.query_selector(META_DESCRIPTION_SELECTOR)
        if element is None:
            logger.debug("Meta description not found")
            return ""
        return await element.get_attribute("content") or ""
