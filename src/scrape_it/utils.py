"""
Utility functions for scrape_it.

Provides domain extraction, filename sanitizing and hashing used when
naming output files.
"""

import hashlib
import logging
import re
from urllib.parse import urlparse

logger = logging.getLogger(__name__)


def extract_domain(url: str) -> str:
    """
    Extract domain from URL.

    Args:
        url: URL to extract domain from

    Returns:
        Domain name or empty string if invalid
    """
    try:
        domain = urlparse(url).hostname or ""
    except ValueError as e:
        logger.warning(f"Failed to extract domain from URL {url}: {e}")
        return ""
    if domain.startswith('www.'):
        domain = domain[4:]
    return domain


def sanitize_filename(filename: str, max_length: int = 120) -> str:
    """
    Sanitize filename by removing/replacing invalid characters.

    Args:
        filename: Filename to sanitize
        max_length: Maximum length of filename

    Returns:
        Sanitized filename
    """
    sanitized = re.sub(r'[^a-zA-Z0-9\-_.]', '_', filename)
    sanitized = re.sub(r'_+', '_', sanitized)
    sanitized = sanitized.strip('_')

    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length]

    return sanitized or "unnamed"


def create_url_hash(url: str) -> str:
    """MD5 hex digest of a URL."""
    return hashlib.md5(url.encode('utf-8')).hexdigest()


def url_to_filename(url: str, extension: str = ".json", max_length: int = 120) -> str:
    """
    Build a filename from a URL path and query.

    Names that would exceed ``max_length`` are truncated and suffixed with a
    short URL hash so distinct URLs stay distinct.

    Args:
        url: URL to build a name for
        extension: File extension
        max_length: Maximum filename length including extension

    Returns:
        Filename
    """
    parsed = urlparse(url)
    name = parsed.path.lstrip('/').replace('/', '_') or "index"
    if parsed.query:
        name = f"{name}_{parsed.query}"

    name = sanitize_filename(name, max_length=10_000)

    limit = max_length - len(extension)
    if len(name) > limit:
        name = f"{name[:limit - 9]}_{create_url_hash(url)[:8]}"

    return name + extension
