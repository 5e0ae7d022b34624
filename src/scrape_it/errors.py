"""
Error types for scrape_it.

Only configuration problems are fatal during extraction; missing matches
degrade to empty values instead.
"""

from typing import Any, Optional


NO_ELEMENT_SELECTED = "NO_ELEMENT_SELECTED"
UNKNOWN_ACCESSOR = "UNKNOWN_ACCESSOR"
INVALID_FIELD = "INVALID_FIELD"


class ScrapeItError(Exception):
    """Base class for all scrape_it errors."""


class ConfigurationError(ScrapeItError):
    """
    Raised when a schema cannot be evaluated.

    Attributes:
        code: Machine readable error code (e.g. ``NO_ELEMENT_SELECTED``)
        option: The offending field descriptor or raw definition
    """

    def __init__(self, message: str, code: str, option: Optional[Any] = None):
        super().__init__(message)
        self.code = code
        self.option = option


class FetchError(ScrapeItError):
    """Raised when a page could not be fetched or rendered."""

    def __init__(self, message: str, url: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code
