"""
Configuration module for scrape_it.

Uses Pydantic models for validation and parsing of batch scrape configuration
files and standalone schema files.
"""

import json
import logging
import re
import urllib.parse
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, Field, ConfigDict

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; scrape-it/1.0)"


class RateLimiterConfig(BaseModel):
    """Configuration for retrying rate limited requests."""
    base_delay: Tuple[float, float] = Field((2.0, 4.0), alias="baseDelay")
    max_delay: float = Field(30.0, alias="maxDelay")
    max_retries: int = Field(5, alias="maxRetries")
    rate_limit_codes: List[int] = Field(default_factory=lambda: [429, 503], alias="rateLimitCodes")

    model_config = ConfigDict(populate_by_name=True)


class Defaults(BaseModel):
    """Default configuration values applied to all items."""
    threads: int = 5
    timeout: float = 30.0
    user_agent: str = Field(DEFAULT_USER_AGENT, alias="userAgent")
    headers: Dict[str, str] = Field(default_factory=dict)
    render: bool = False
    rate_limiter: RateLimiterConfig = Field(default_factory=RateLimiterConfig, alias="rateLimiter")

    model_config = ConfigDict(populate_by_name=True)


class Item(BaseModel):
    """Configuration for a single page to scrape."""
    url: str
    extraction_schema: Dict[str, Any] = Field(alias="schema")
    render: Optional[bool] = None  # Override default
    wait_for: Optional[str] = Field(None, alias="waitFor")
    headers: Dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(populate_by_name=True)


class Config(BaseModel):
    """Main configuration class."""
    persistence_strategy: str = Field("file_per_url", alias="persistenceStrategy")
    defaults: Defaults = Defaults()
    items: List[Item] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


def normalize_url(url: str, strip_utm: bool = True) -> str:
    """
    Normalize URL by removing fragments, trailing slashes, and optionally UTM parameters.

    Args:
        url: URL to normalize
        strip_utm: Whether to remove UTM tracking parameters

    Returns:
        Normalized URL
    """
    url = url.split('#', 1)[0]
    url = re.sub(r'/$', '', url)

    if strip_utm:
        parsed = urllib.parse.urlparse(url)
        query_params = [
            (key, value)
            for key, value in urllib.parse.parse_qsl(parsed.query, keep_blank_values=True)
            if not key.startswith('utm_')
        ]
        parsed = parsed._replace(query=urllib.parse.urlencode(query_params))
        url = urllib.parse.urlunparse(parsed)

    return url


def deduplicate_items(items: List[Item]) -> List[Item]:
    """
    Remove items whose URL was already seen.

    Args:
        items: List of items to deduplicate

    Returns:
        List of items with duplicates removed
    """
    seen_urls = set()
    unique_items = []

    for item in items:
        normalized_url = normalize_url(item.url)
        if normalized_url not in seen_urls:
            seen_urls.add(normalized_url)
            unique_items.append(item)
        else:
            logger.debug(f"Skipping duplicate URL: {item.url}")

    return unique_items


def _read_json(path: Union[str, Path], kind: str) -> Any:
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"{kind} file not found: {path}")

    logger.info(f"Loading {kind.lower()} from: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def load_config(config_path: Union[str, Path]) -> Config:
    """
    Load and process configuration from JSON file.

    Args:
        config_path: Path to configuration file

    Returns:
        Processed configuration object
    """
    data = _read_json(config_path, "Configuration")

    config = Config.model_validate(data)
    config.items = deduplicate_items(config.items)

    logger.info(f"Loaded {len(config.items)} items")

    return config


def load_schema(schema_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a bare extraction schema from JSON file.

    Args:
        schema_path: Path to schema file

    Returns:
        Schema mapping
    """
    data = _read_json(schema_path, "Schema")

    if not isinstance(data, dict):
        raise ValueError(f"Schema file must contain a JSON object: {schema_path}")

    return data
