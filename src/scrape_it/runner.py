"""
Runner module for scrape_it.

Scrapes a list of configured items concurrently and saves each record through
a persistence strategy.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .config import Defaults, Item
from .errors import FetchError
from .fetch import FetchedPage, fetch_page_async
from .persistence import PersistenceStrategy
from .render import BrowserFetcher
from .scraper import scrape_page

logger = logging.getLogger(__name__)


@dataclass
class RunStats:
    """Statistics for a batch run."""
    total: int = 0
    success: int = 0
    failed: int = 0


@dataclass
class ItemOutcome:
    """Result of scraping one item."""
    url: str
    data: Optional[Dict[str, Any]] = None
    path: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def should_render(item: Item, defaults: Defaults) -> bool:
    """Whether an item must be fetched through the headless browser."""
    return item.render if item.render is not None else defaults.render


class ScrapeRunner:
    """Handles concurrent scraping of configured items."""

    def __init__(
        self,
        defaults: Defaults,
        persistence: PersistenceStrategy,
        browser: Optional[BrowserFetcher] = None,
    ):
        """
        Initialize ScrapeRunner.

        Args:
            defaults: Default configuration
            persistence: Persistence strategy for saving records
            browser: Started BrowserFetcher, required for rendered items
        """
        self.defaults = defaults
        self.persistence = persistence
        self.browser = browser
        self.stats = RunStats()

    async def run(self, items: List[Item]) -> List[ItemOutcome]:
        """
        Scrape all items, at most ``defaults.threads`` at a time.

        A failing item is logged and counted; it does not stop the batch.

        Args:
            items: List of items to process

        Returns:
            One outcome per item, in input order
        """
        if not items:
            logger.info("No items to process")
            return []

        logger.info(f"Starting scrape of {len(items)} items")
        self.stats.total += len(items)

        semaphore = asyncio.Semaphore(max(1, self.defaults.threads))
        outcomes = await asyncio.gather(*(self._run_item(item, semaphore) for item in items))

        logger.info(f"Scrape completed: {self.stats.success} success, {self.stats.failed} failed")
        return list(outcomes)

    async def _fetch(self, item: Item) -> FetchedPage:
        if should_render(item, self.defaults):
            if self.browser is None:
                raise FetchError("Rendering requested but no browser is available", url=item.url)
            return await self.browser.fetch(item)
        return await fetch_page_async(item.url, self.defaults, item.headers)

    async def _run_item(self, item: Item, semaphore: asyncio.Semaphore) -> ItemOutcome:
        async with semaphore:
            try:
                page = await self._fetch(item)
                result = scrape_page(page, item.extraction_schema)
                path = await self.persistence.save(item.url, result.data)
            except Exception as e:
                logger.error(f"Failed to scrape {item.url}: {e}")
                self.stats.failed += 1
                return ItemOutcome(url=item.url, error=str(e))

            self.stats.success += 1
            logger.debug(f"Successfully processed: {item.url} -> {path}")
            return ItemOutcome(url=item.url, data=result.data, path=path)

    def get_stats(self) -> RunStats:
        """Get processing statistics."""
        return self.stats
