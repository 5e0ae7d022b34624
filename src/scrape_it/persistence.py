"""
Persistence module for scrape_it.

Handles different persistence strategies for saving scraped records as JSON.
"""

import json
import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from .utils import extract_domain, url_to_filename

logger = logging.getLogger(__name__)


@dataclass
class SavedFileInfo:
    """Information about a saved file."""
    path: str
    size: int
    urls: List[str]


def _dump(content: Any) -> str:
    return json.dumps(content, ensure_ascii=False, indent=2, default=str)


class PersistenceStrategy(ABC):
    """Abstract base class for persistence strategies."""

    def __init__(self, output_dir: str):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self._saved_files: List[SavedFileInfo] = []

    @abstractmethod
    async def save(self, url: str, record: Dict[str, Any]) -> str:
        """
        Save the record scraped from a URL.

        Args:
            url: URL the record was scraped from
            record: Scraped data

        Returns:
            Path where the record was (or will be) saved
        """

    @abstractmethod
    async def finalize(self) -> None:
        """Finalize persistence operations (e.g., flush buffers)."""

    def get_saved_files(self) -> List[SavedFileInfo]:
        """Get list of written files."""
        return self._saved_files.copy()

    def _domain_of(self, url: str) -> str:
        return extract_domain(url) or "unknown"

    def _write(self, path: Path, content: Any, urls: List[str]) -> str:
        text = _dump(content)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(text)
        self._saved_files.append(SavedFileInfo(path=str(path), size=len(text), urls=urls))
        logger.debug(f"Saved JSON to: {path}")
        return str(path)


class FilePerUrlStrategy(PersistenceStrategy):
    """Writes one JSON file per URL inside a folder per domain."""

    async def save(self, url: str, record: Dict[str, Any]) -> str:
        path = self.output_dir / self._domain_of(url) / url_to_filename(url)
        return self._write(path, record, [url])

    async def finalize(self) -> None:
        """No finalization needed for file per URL."""
        logger.info(f"FilePerUrlStrategy completed. Saved {len(self._saved_files)} files.")


class FilePerDomainStrategy(PersistenceStrategy):
    """Collects records per domain and writes one JSON array per domain."""

    def __init__(self, output_dir: str):
        super().__init__(output_dir)
        self.buffers: Dict[str, List[Dict[str, Any]]] = defaultdict(list)

    async def save(self, url: str, record: Dict[str, Any]) -> str:
        domain = self._domain_of(url)
        self.buffers[domain].append({"url": url, "data": record})
        logger.debug(f"Buffered record for {domain}: {url}")
        return str(self.output_dir / f"{domain}.json")

    async def finalize(self) -> None:
        """Write every buffered domain to its file."""
        logger.info("Finalizing FilePerDomainStrategy - writing all buffers")

        for domain, entries in self.buffers.items():
            if entries:
                self._write(self.output_dir / f"{domain}.json", entries, [entry["url"] for entry in entries])
                logger.info(f"Wrote {len(entries)} records for domain {domain}")

        self.buffers.clear()
        logger.info(f"FilePerDomainStrategy completed. Created {len(self._saved_files)} domain files.")


def create_persistence_strategy(strategy: str, output_dir: str) -> PersistenceStrategy:
    """
    Factory function to create persistence strategy.

    Args:
        strategy: Strategy name ("file_per_url" or "file_per_domain")
        output_dir: Output directory

    Returns:
        Configured persistence strategy

    Raises:
        ValueError: If strategy is not supported
    """
    if strategy == "file_per_url":
        return FilePerUrlStrategy(output_dir)
    elif strategy == "file_per_domain":
        return FilePerDomainStrategy(output_dir)
    else:
        raise ValueError(f"Unsupported persistence strategy: {strategy}")
