"""
CLI module for scrape_it.

Provides command-line interface and orchestration logic.
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from .config import Defaults, Item, load_config, load_schema
from .errors import ScrapeItError
from .extraction import scrape_html
from .persistence import create_persistence_strategy
from .render import BrowserFetcher
from .runner import RunStats, ScrapeRunner, should_render
from .scraper import scrape_it, scrape_page

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Set up logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        stream=sys.stderr,
    )


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


async def run_scraper(
    config_path: str,
    output_dir: str,
    dry_run: bool = False,
    verbose: bool = False
) -> Optional[RunStats]:
    """
    Batch scrape orchestration function.

    Args:
        config_path: Path to configuration file
        output_dir: Output directory for scraped records
        dry_run: If True, only print URLs without scraping
        verbose: Enable verbose logging

    Returns:
        Run statistics, or None for a dry run
    """
    setup_logging(verbose)

    try:
        config = load_config(config_path)

        Path(output_dir).mkdir(parents=True, exist_ok=True)

        if dry_run:
            for item in config.items:
                mode = "render" if should_render(item, config.defaults) else "fetch"
                logger.info(f"Would scrape ({mode}): {item.url}")
            return None

        persistence = create_persistence_strategy(config.persistence_strategy, output_dir)

        if any(should_render(item, config.defaults) for item in config.items):
            async with BrowserFetcher(config.defaults) as browser:
                runner = ScrapeRunner(config.defaults, persistence, browser)
                await runner.run(config.items)
        else:
            runner = ScrapeRunner(config.defaults, persistence)
            await runner.run(config.items)

        await persistence.finalize()

        stats = runner.get_stats()
        logger.info(f"Scraping completed: {stats.success} success, {stats.failed} failed")
        return stats

    except (ScrapeItError, OSError, ValueError) as e:
        logger.error(f"Scraping failed: {e}")
        sys.exit(1)


async def run_extract(
    schema_path: str,
    source: str,
    render: bool = False,
    verbose: bool = False
) -> Dict[str, Any]:
    """
    Scrape a single URL or local HTML file and print the JSON result.

    Args:
        schema_path: Path to schema file
        source: URL or path to an HTML file
        render: Render the URL in a headless browser
        verbose: Enable verbose logging

    Returns:
        The extracted data
    """
    setup_logging(verbose)

    try:
        schema = load_schema(schema_path)

        if not is_url(source):
            data = scrape_html(Path(source).read_text(encoding='utf-8'), schema)
        elif render:
            defaults = Defaults()
            async with BrowserFetcher(defaults) as browser:
                page = await browser.fetch(Item(url=source, schema=schema))
            data = scrape_page(page, schema).data
        else:
            data = (await asyncio.to_thread(scrape_it, source, schema)).data

    except (ScrapeItError, OSError, ValueError) as e:
        logger.error(f"Extraction failed: {e}")
        sys.exit(1)

    print(json.dumps(data, ensure_ascii=False, indent=2, default=str))
    return data


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Scrape structured data from web pages using selector schemas",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  scrape-it run config.json output/
  scrape-it run config.json output/ --dry-run
  scrape-it extract schema.json https://example.com
  scrape-it extract schema.json page.html --verbose
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    run_parser = subparsers.add_parser('run', help='Scrape every item of a configuration file')
    run_parser.add_argument('config_file', help='Path to JSON configuration file')
    run_parser.add_argument('output_dir', help='Directory to store scraped records')
    run_parser.add_argument('--dry-run', action='store_true',
                            help='Print URLs only, don\'t scrape')
    run_parser.add_argument('--verbose', '-v', action='store_true',
                            help='Enable verbose logging')

    extract_parser = subparsers.add_parser('extract', help='Scrape one URL or HTML file to stdout')
    extract_parser.add_argument('schema_file', help='Path to JSON schema file')
    extract_parser.add_argument('source', help='URL or path to a local HTML file')
    extract_parser.add_argument('--render', action='store_true',
                                help='Render the page in a headless browser first')
    extract_parser.add_argument('--verbose', '-v', action='store_true',
                                help='Enable verbose logging')

    args = parser.parse_args()

    if args.command == 'run':
        asyncio.run(run_scraper(
            config_path=args.config_file,
            output_dir=args.output_dir,
            dry_run=args.dry_run,
            verbose=args.verbose
        ))
    elif args.command == 'extract':
        asyncio.run(run_extract(
            schema_path=args.schema_file,
            source=args.source,
            render=args.render,
            verbose=args.verbose
        ))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == '__main__':
    main()
