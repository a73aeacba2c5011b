"""
timedtext.py — Download and decode a caption track's timed-text XML.

A caption track body looks like:

    <transcript>
      <text start="1.5" dur="2.0">Hello</text>
      <text start="3.5" dur="1.0">World</text>
    </transcript>

Each <text> element becomes one TranscriptEntry with its start offset and
duration converted from decimal seconds to whole milliseconds.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass

import requests
from bs4 import BeautifulSoup

from yt_caption_scraper.config import Settings, get_settings
from yt_caption_scraper.errors import UpstreamFetchError
from yt_caption_scraper.fetching import build_session, fetch_with_retry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TranscriptEntry:
    """One caption span; offset and duration are in milliseconds."""

    text: str
    offset: int
    duration: int

    def to_dict(self) -> dict:
        return asdict(self)


def seconds_to_ms(value: str | float | None) -> int:
    """
    Convert a decimal-seconds value to rounded integer milliseconds.

    Missing or non-numeric values count as 0 so one malformed attribute
    doesn't throw away the whole track.
    """
    if value is None:
        return 0
    try:
        seconds = float(str(value).strip().strip('"'))
    except ValueError:
        return 0
    if not math.isfinite(seconds) or seconds < 0:
        return 0
    # Halves round up, not to even.
    return math.floor(seconds * 1000 + 0.5)


def decode_transcript(xml: str) -> list[TranscriptEntry]:
    """
    Decode timed-text XML into entries, in document order.

    Pure function of its input: the same XML always gives the same list.
    """
    soup = BeautifulSoup(xml, "html.parser")
    entries = [
        TranscriptEntry(
            text=element.get_text(),
            offset=seconds_to_ms(element.get("start")),
            duration=seconds_to_ms(element.get("dur")),
        )
        for element in soup.find_all("text")
    ]
    logger.debug("decoded %d transcript entries", len(entries))
    return entries


def fetch_transcript_entries(
    caption_url: str,
    settings: Settings | None = None,
    session: requests.Session | None = None,
) -> list[TranscriptEntry]:
    """
    Download a caption track and decode it.

    Raises:
        UpstreamFetchError: The track couldn't be fetched after all retries.
    """
    settings = settings or get_settings()
    session = session or build_session(settings)

    try:
        body = fetch_with_retry(
            caption_url,
            headers={"User-Agent": settings.user_agent},
            max_attempts=settings.max_attempts,
            backoff_seconds=settings.backoff_seconds,
            timeout=settings.timeout,
            session=session,
        )
    except requests.RequestException as exc:
        raise UpstreamFetchError(caption_url, str(exc)) from exc

    return decode_transcript(body)
