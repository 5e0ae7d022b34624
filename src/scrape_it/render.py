"""
Render module for scrape_it.

Fetches pages through a headless browser using Crawl4AI, for pages whose
content is produced by JavaScript.
"""

import logging
from typing import Optional

from crawl4ai import AsyncWebCrawler, BrowserConfig, CrawlerRunConfig, CacheMode

from .config import Defaults, Item
from .errors import FetchError
from .fetch import FetchedPage, build_headers

logger = logging.getLogger(__name__)


class BrowserFetcher:
    """
    Headless browser fetcher.

    Manages the AsyncWebCrawler lifecycle; use as an async context manager.
    """

    def __init__(self, defaults: Defaults):
        """
        Initialize BrowserFetcher with default configuration.

        Args:
            defaults: Default configuration values
        """
        self.defaults = defaults
        self.crawler: Optional[AsyncWebCrawler] = None
        self.browser_config = self._build_browser_config()

    def _build_browser_config(self) -> BrowserConfig:
        """Build browser configuration with performance optimizations."""
        return BrowserConfig(
            headless=True,
            verbose=False,
            user_agent=self.defaults.user_agent,
            headers=build_headers(self.defaults),
            extra_args=[
                "--disable-gpu",
                "--disable-dev-shm-usage",
                "--no-sandbox",
            ]
        )

    async def __aenter__(self):
        """Async context manager entry."""
        logger.info("Starting AsyncWebCrawler")
        self.crawler = AsyncWebCrawler(config=self.browser_config)
        await self.crawler.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self.crawler:
            logger.info("Closing AsyncWebCrawler")
            await self.crawler.close()
            self.crawler = None

    def build_run_config(self, item: Item) -> CrawlerRunConfig:
        """
        Build CrawlerRunConfig for a specific item.

        Args:
            item: Item configuration

        Returns:
            Configured CrawlerRunConfig
        """
        return CrawlerRunConfig(
            cache_mode=CacheMode.BYPASS,
            wait_for=f"css:{item.wait_for}" if item.wait_for else None,
            page_timeout=int(self.defaults.timeout * 1000),
        )

    async def fetch(self, item: Item) -> FetchedPage:
        """
        Render a page and return its final HTML.

        Args:
            item: Item configuration

        Returns:
            The rendered page

        Raises:
            FetchError: If the crawler is not started or the crawl failed
        """
        if self.crawler is None:
            raise FetchError("BrowserFetcher used outside of its context", url=item.url)

        logger.info(f"Rendering: {item.url}")
        result = await self.crawler.arun(url=item.url, config=self.build_run_config(item))

        if not result.success:
            raise FetchError(
                f"Failed to render {item.url}: {result.error_message}",
                url=item.url,
                status_code=result.status_code,
            )

        return FetchedPage(
            url=item.url,
            status_code=result.status_code,
            body=result.html or "",
            response=result,
        )
