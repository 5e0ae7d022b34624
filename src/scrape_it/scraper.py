"""
Top level entry points: fetch a page and scrape it in one call.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from bs4 import BeautifulSoup

from .config import Defaults
from .dom import parse
from .extraction import scrape_html
from .fetch import FetchedPage, fetch_page
from .schema import Schema

logger = logging.getLogger(__name__)


@dataclass
class ScrapeResult:
    """Scraped data bundled with the parsed document, response and raw body."""
    data: Dict[str, Any]
    document: BeautifulSoup
    response: Any
    body: str


def scrape_page(page: FetchedPage, schema: Schema) -> ScrapeResult:
    """Parse an already fetched page and scrape it."""
    document = parse(page.body)
    data = scrape_html(document, schema)
    return ScrapeResult(data=data, document=document, response=page.response, body=page.body)


def scrape_it(
    url: str,
    schema: Schema,
    defaults: Optional[Defaults] = None,
    **request_options: Any,
) -> ScrapeResult:
    """
    Fetch ``url`` and scrape it using ``schema``.

    Args:
        url: Page URL
        schema: Mapping of field names to field definitions
        defaults: Fetch defaults (timeout, headers, retry policy)
        **request_options: Passed through to ``requests.get``

    Returns:
        The scraped data together with the document, response and body

    Raises:
        FetchError: If the page could not be downloaded
        ConfigurationError: If the schema cannot be evaluated
    """
    page = fetch_page(url, defaults, **request_options)
    result = scrape_page(page, schema)
    logger.debug(f"Scraped {len(result.data)} fields from {url}")
    return result
