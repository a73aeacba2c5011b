"""
yt_caption_scraper — Scrape timed captions from YouTube watch pages.

Public API:
    fetch_transcript()      URL or ID → list of TranscriptEntry (ms timings).
    extract()               High-level one-call interface (URL → formatted output).
    parse_video_id()        Parse a video URL or accept a bare 11-char ID.
    locate_caption_url()    Find the preferred caption track URL for a video.
    decode_transcript()     Decode timed-text XML into TranscriptEntry objects.
    fetch_with_retry()      GET with bounded, linearly backed-off retry.
    TranscriptEntry         Dataclass: text, offset, duration.
    CaptionTrack            Dataclass: one track advertised by the player.
    Settings                Environment-driven configuration.

Exception hierarchy (all importable from this package):
    TranscriptError                 Base exception for all transcript errors.
    ├── InvalidVideoReferenceError  Input isn't a video URL or ID.
    ├── CaptionEndpointNotFoundError  No caption track could be located.
    ├── UpstreamFetchError          A download failed after all retries.
    └── UnknownTranscriptError      Anything unexpected.

Usage:
    from yt_caption_scraper import fetch_transcript
    entries = fetch_transcript("https://www.youtube.com/watch?v=dQw4w9WgXcQ")
"""

from yt_caption_scraper.config import Settings, get_settings
from yt_caption_scraper.errors import (
    CaptionEndpointNotFoundError,
    InvalidVideoReferenceError,
    TranscriptError,
    UnknownTranscriptError,
    UpstreamFetchError,
)
from yt_caption_scraper.extractor import (
    extract,
    fetch_transcript,
    parse_video_id,
)
from yt_caption_scraper.fetching import fetch_with_retry
from yt_caption_scraper.locator import CaptionTrack, locate_caption_url
from yt_caption_scraper.timedtext import TranscriptEntry, decode_transcript

__all__ = [
    "extract",
    "fetch_transcript",
    "parse_video_id",
    "locate_caption_url",
    "decode_transcript",
    "fetch_with_retry",
    "TranscriptEntry",
    "CaptionTrack",
    "Settings",
    "get_settings",
    "TranscriptError",
    "InvalidVideoReferenceError",
    "CaptionEndpointNotFoundError",
    "UpstreamFetchError",
    "UnknownTranscriptError",
]
