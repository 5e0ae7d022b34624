"""
scrape_it - declarative HTML scraping

Describe the data you want as a schema of CSS selectors and get back plain
Python dicts and lists:
- Scalar fields with text, HTML, form value or attribute accessors
- Nested objects and lists of items, to any depth
- Positional, direct-text-node and closest-ancestor narrowing
- Page fetching with requests, or a headless browser via Crawl4AI
- Batch scraping from a JSON configuration with JSON persistence

The browser and batch helpers live in ``scrape_it.render``,
``scrape_it.runner`` and ``scrape_it.cli``.
"""

__version__ = "1.0.0"

from .config import load_config, load_schema, Config, Item, Defaults, RateLimiterConfig
from .dom import Selection, parse
from .errors import ScrapeItError, ConfigurationError, FetchError, NO_ELEMENT_SELECTED
from .extraction import SchemaExtractor, scrape_html
from .fetch import FetchedPage, fetch_page
from .persistence import PersistenceStrategy, FilePerUrlStrategy, FilePerDomainStrategy, create_persistence_strategy
from .schema import FieldDescriptor, FieldKind, normalize_field
from .scraper import ScrapeResult, scrape_it

__all__ = [
    "load_config",
    "load_schema",
    "Config",
    "Item",
    "Defaults",
    "RateLimiterConfig",
    "Selection",
    "parse",
    "ScrapeItError",
    "ConfigurationError",
    "FetchError",
    "NO_ELEMENT_SELECTED",
    "SchemaExtractor",
    "scrape_html",
    "FetchedPage",
    "fetch_page",
    "PersistenceStrategy",
    "FilePerUrlStrategy",
    "FilePerDomainStrategy",
    "create_persistence_strategy",
    "FieldDescriptor",
    "FieldKind",
    "normalize_field",
    "ScrapeResult",
    "scrape_it",
]
