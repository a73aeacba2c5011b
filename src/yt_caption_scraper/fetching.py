"""
fetching.py — HTTP retrieval with bounded retry.

Both upstream calls (the watch page and the caption track) go through
fetch_with_retry().  Any non-2xx status and any empty body count as a
failed attempt; after attempt *n* we sleep ``backoff_seconds * n`` and try
again.  There's no jitter and no distinction between status codes, so a 404
is retried exactly like a 500.
"""

from __future__ import annotations

import logging
import time

import requests

from yt_caption_scraper.config import Settings

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BACKOFF_SECONDS = 1.0


class EmptyResponseError(requests.RequestException):
    """A 2xx response whose body was empty."""


def build_session(settings: Settings) -> requests.Session:
    """Create a requests session that sends the configured User-Agent."""
    session = requests.Session()
    session.headers["User-Agent"] = settings.user_agent
    return session


def _fetch_once(
    session: requests.Session,
    url: str,
    headers: dict[str, str] | None,
    timeout: float | None,
) -> str:
    response = session.get(url, headers=headers, timeout=timeout)
    response.raise_for_status()
    body = response.text
    if not body:
        raise EmptyResponseError(f"Empty response body from {url}", response=response)
    return body


def fetch_with_retry(
    url: str,
    headers: dict[str, str] | None = None,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    backoff_seconds: float = DEFAULT_BACKOFF_SECONDS,
    timeout: float | None = None,
    session: requests.Session | None = None,
) -> str:
    """
    GET a URL and return its body text, retrying on failure.

    Args:
        url:             Absolute URL to fetch.
        headers:         Extra request headers.
        max_attempts:    Total number of attempts (at least 1).
        backoff_seconds: Base delay; the wait after attempt n is n times this.
        timeout:         Per-request timeout handed to requests (None = none).
        session:         Session to reuse.  A throwaway one is used otherwise.

    Returns:
        The response body as text.

    Raises:
        requests.RequestException: The error from the final attempt, unchanged.
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")

    http = session if session is not None else requests.Session()
    attempt = 1
    while True:
        try:
            return _fetch_once(http, url, headers, timeout)
        except requests.RequestException as exc:
            if attempt >= max_attempts:
                logger.warning(
                    "giving up on %s after %d attempt(s): %s", url, attempt, exc,
                )
                raise
            delay = backoff_seconds * attempt
            logger.info(
                "attempt %d/%d for %s failed (%s); retrying in %.1fs",
                attempt, max_attempts, url, exc, delay,
            )
            time.sleep(delay)
            attempt += 1
