"""
Fetch module for scrape_it.

Downloads pages with requests, retrying rate limited responses with
randomized exponential backoff through tenacity.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import requests
from tenacity import AsyncRetrying, RetryCallState, Retrying, retry_if_result, stop_after_attempt, wait_random_exponential

from .config import Defaults, RateLimiterConfig
from .errors import FetchError

logger = logging.getLogger(__name__)


@dataclass
class FetchedPage:
    """A downloaded page."""
    url: str
    status_code: Optional[int]
    body: str
    response: Any


def build_headers(defaults: Defaults, headers: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """Merge default headers, the configured user agent and per-request headers."""
    merged = {"User-Agent": defaults.user_agent}
    merged.update(defaults.headers)
    if headers:
        merged.update(headers)
    return merged


def retry_policy(rate_config: RateLimiterConfig, url: str, sleep: Callable) -> Dict[str, Any]:
    """
    Tenacity arguments for retrying rate limited responses.

    The first wait falls within ``base_delay``; later waits grow
    exponentially, capped at ``max_delay``.

    Args:
        rate_config: Rate limiter configuration
        url: URL being fetched, used in messages
        sleep: Sleep function (blocking or awaitable)

    Returns:
        Keyword arguments for Retrying / AsyncRetrying
    """
    low, high = rate_config.base_delay

    def is_rate_limited(response: requests.Response) -> bool:
        return response.status_code in rate_config.rate_limit_codes

    def log_retry(retry_state: RetryCallState) -> None:
        status = retry_state.outcome.result().status_code
        logger.warning(f"Rate limited on {url} (status {status}), retrying in {retry_state.next_action.sleep:.1f}s")

    def give_up(retry_state: RetryCallState) -> None:
        status = retry_state.outcome.result().status_code
        raise FetchError(
            f"Giving up on {url} after {retry_state.attempt_number - 1} retries (status {status})",
            url=url,
            status_code=status,
        )

    return dict(
        retry=retry_if_result(is_rate_limited),
        wait=wait_random_exponential(multiplier=high, min=low, max=rate_config.max_delay),
        stop=stop_after_attempt(rate_config.max_retries + 1),
        before_sleep=log_retry,
        retry_error_callback=give_up,
        sleep=sleep,
    )


def _get(url: str, defaults: Defaults, headers: Optional[Dict[str, str]], request_options: Dict[str, Any]) -> requests.Response:
    try:
        logger.info(f"Fetching: {url}")
        return requests.get(url, headers=build_headers(defaults, headers), **request_options)
    except requests.RequestException as e:
        raise FetchError(f"Error fetching {url}: {e}", url=url) from e


def _to_page(url: str, response: requests.Response) -> FetchedPage:
    if response.status_code >= 400:
        logger.warning(f"Got status {response.status_code} for {url}")

    return FetchedPage(
        url=url,
        status_code=response.status_code,
        body=response.text,
        response=response,
    )


def fetch_page(
    url: str,
    defaults: Optional[Defaults] = None,
    headers: Optional[Dict[str, str]] = None,
    **request_options: Any,
) -> FetchedPage:
    """
    Download a page.

    HTTP error statuses are returned as-is; only transport failures and
    exhausted rate limit retries raise.

    Args:
        url: Page URL
        defaults: Defaults providing timeout, headers and retry policy
        headers: Extra request headers
        **request_options: Passed through to ``requests.get``

    Returns:
        The fetched page

    Raises:
        FetchError: If the request could not be completed
    """
    defaults = defaults or Defaults()
    request_options.setdefault("timeout", defaults.timeout)

    retrying = Retrying(**retry_policy(defaults.rate_limiter, url, time.sleep))
    response = retrying(_get, url, defaults, headers, request_options)
    return _to_page(url, response)


async def fetch_page_async(
    url: str,
    defaults: Optional[Defaults] = None,
    headers: Optional[Dict[str, str]] = None,
    **request_options: Any,
) -> FetchedPage:
    """
    Download a page without blocking the event loop.

    Each request runs in a worker thread; backoff waits happen on the event
    loop so rate limited items do not hold threads.
    """
    defaults = defaults or Defaults()
    request_options.setdefault("timeout", defaults.timeout)

    async def attempt() -> requests.Response:
        return await asyncio.to_thread(_get, url, defaults, headers, request_options)

    retrying = AsyncRetrying(**retry_policy(defaults.rate_limiter, url, asyncio.sleep))
    response = await retrying(attempt)
    return _to_page(url, response)
