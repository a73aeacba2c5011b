"""
extractor.py — Core transcript extraction pipeline.

Chains the three stages behind one call and exposes the output formatters:

    1. Resolving URLs / IDs            → parse_video_id()
    2. Locating + fetching the track   → fetch_transcript()
    3. Formatting output               → format_text(), format_json(),
                                         format_doc(), format_srt()
    4. One-call convenience            → extract()

Every failure leaving fetch_transcript() is a TranscriptError; raw
transport or parse exceptions never reach the caller.
"""

from __future__ import annotations

import logging
import re

import requests

from yt_caption_scraper.config import Settings, get_settings
from yt_caption_scraper.errors import (
    CaptionEndpointNotFoundError,
    InvalidVideoReferenceError,
    TranscriptError,
    UnknownTranscriptError,
)
from yt_caption_scraper.fetching import build_session
from yt_caption_scraper.locator import locate_caption_url
from yt_caption_scraper.timedtext import TranscriptEntry, fetch_transcript_entries

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# One pattern for every supported URL shape:
#   - https://www.youtube.com/watch?v=VIDEO_ID  (v= anywhere in the query)
#   - https://www.youtube.com/v/VIDEO_ID
#   - https://www.youtube.com/embed/VIDEO_ID
#   - https://www.youtube.com/e/VIDEO_ID
#   - https://www.youtube.com/shorts/VIDEO_ID
#   - https://youtu.be/VIDEO_ID
#   - https://www.youtube.com/anything/anything/VIDEO_ID
# The ID is the 11 characters after the prefix, stopping at " & ? / or space.
_URL_PATTERN = re.compile(
    r"(?:youtube\.com/(?:[^/]+/.+/|(?:v|e(?:mbed)?|shorts)/|.*[?&]v=)|youtu\.be/)([^\"&?/\s]{11})",
    re.IGNORECASE,
)

_VIDEO_ID_LENGTH = 11

_OUTPUT_FORMATS = ("text", "json", "doc", "srt")


# ---------------------------------------------------------------------------
# URL / ID parsing
# ---------------------------------------------------------------------------

def parse_video_id(url_or_id: str) -> str:
    """
    Extract a video ID from a URL string, or accept a raw 11-char ID.

    Any 11-character input is taken verbatim, without checking its
    alphabet (surrounding whitespace is trimmed first only when the raw
    input isn't already 11 characters).  Anything else must match one of
    the known URL shapes.

    Args:
        url_or_id: A video URL or a raw video ID.

    Returns:
        The 11-character video ID.

    Raises:
        InvalidVideoReferenceError: If no ID can be derived from the input.
    """
    if len(url_or_id) == _VIDEO_ID_LENGTH:
        return url_or_id

    stripped = url_or_id.strip()
    if len(stripped) == _VIDEO_ID_LENGTH:
        return stripped

    match = _URL_PATTERN.search(stripped)
    if match:
        return match.group(1)

    raise InvalidVideoReferenceError(url_or_id)


# ---------------------------------------------------------------------------
# Transcript fetching
# ---------------------------------------------------------------------------

def fetch_transcript(
    url_or_id: str,
    preferred_language: str | None = None,
    settings: Settings | None = None,
    session: requests.Session | None = None,
) -> list[TranscriptEntry]:
    """
    Fetch the timed transcript for a single video.

    The caption track whose language code contains ``preferred_language``
    is used, falling back to the first track on the page.

    Args:
        url_or_id:          A video URL or raw video ID.
        preferred_language: Language code such as "pt"; defaults to the
                            configured preferred language.
        settings:           Settings override.
        session:            requests session shared by both downloads.

    Returns:
        Transcript entries in source order.

    Raises:
        InvalidVideoReferenceError:   The input isn't a video reference.
        CaptionEndpointNotFoundError: No caption track could be located.
        UpstreamFetchError:           A download failed after all retries.
        UnknownTranscriptError:       Anything else that went wrong.
    """
    try:
        settings = settings or get_settings()
        video_id = parse_video_id(url_or_id)
        logger.info("fetching transcript for video %s", video_id)

        session = session or build_session(settings)
        caption_url = locate_caption_url(
            video_id,
            preferred_language=preferred_language,
            settings=settings,
            session=session,
        )
        if not caption_url:
            raise CaptionEndpointNotFoundError(video_id)

        entries = fetch_transcript_entries(caption_url, settings=settings, session=session)

    except TranscriptError:
        raise
    except Exception as exc:
        logger.exception("unexpected error while fetching transcript for %r", url_or_id)
        raise UnknownTranscriptError() from exc

    logger.info("fetched %d transcript entries for video %s", len(entries), video_id)
    return entries


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------

def format_text(entries: list[TranscriptEntry]) -> str:
    """Plain text, one line per entry, no timestamps."""
    return "\n".join(entry.text for entry in entries)


def format_json(entries: list[TranscriptEntry], video_id: str) -> dict:
    """
    Build a JSON-serialisable dict from transcript entries.

    Returns:
        A dict with keys: video_id, entry_count, transcriptions.
        Each transcription has: text, offset, duration (milliseconds).
    """
    transcriptions = [entry.to_dict() for entry in entries]
    return {
        "video_id": video_id,
        "entry_count": len(transcriptions),
        "transcriptions": transcriptions,
    }


# A new "doc" paragraph starts whenever an entry's offset is this far past
# the start of the current paragraph.
_DOC_PARAGRAPH_INTERVAL_MS = 30_000


def _ms_to_mmss(ms: int) -> str:
    """
    Convert a millisecond offset to a MM:SS string.

    Values above 59:59 keep counting minutes (3_661_000 → "61:01").
    """
    mins, secs = divmod(ms // 1000, 60)
    return f"{mins:02d}:{secs:02d}"


def _ms_to_srt(ms: int) -> str:
    """Convert milliseconds to an SRT timestamp (HH:MM:SS,mmm)."""
    hours, rest = divmod(ms, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    seconds, millis = divmod(rest, 1000)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d},{millis:03d}"


def format_doc(entries: list[TranscriptEntry]) -> str:
    """
    Convert transcript entries into a readable markdown document.

    Entries are joined with spaces into flowing paragraphs, with a new
    paragraph every ~30 seconds.  Each paragraph is prefixed with a bold
    **[MM:SS]** timestamp marking where it starts.

    Returns:
        A markdown string, or "" when there are no entries.
    """
    paragraphs: list[str] = []
    current_texts: list[str] = []
    paragraph_start: int | None = None

    for entry in entries:
        if paragraph_start is None:
            paragraph_start = entry.offset
            current_texts.append(entry.text)
        elif entry.offset - paragraph_start >= _DOC_PARAGRAPH_INTERVAL_MS:
            paragraphs.append(f"**[{_ms_to_mmss(paragraph_start)}]** {' '.join(current_texts)}")
            paragraph_start = entry.offset
            current_texts = [entry.text]
        else:
            current_texts.append(entry.text)

    if current_texts and paragraph_start is not None:
        paragraphs.append(f"**[{_ms_to_mmss(paragraph_start)}]** {' '.join(current_texts)}")

    return "\n\n".join(paragraphs)


def format_srt(entries: list[TranscriptEntry]) -> str:
    """SubRip subtitles, numbered from 1 in source order."""
    blocks = []
    for index, entry in enumerate(entries, start=1):
        start = _ms_to_srt(entry.offset)
        end = _ms_to_srt(entry.offset + entry.duration)
        blocks.append(f"{index}\n{start} --> {end}\n{entry.text}\n")
    return "\n".join(blocks)


# ---------------------------------------------------------------------------
# High-level convenience function (main public API)
# ---------------------------------------------------------------------------

def extract(
    url_or_id: str,
    preferred_language: str | None = None,
    fmt: str = "text",
    *,
    settings: Settings | None = None,
) -> str | dict:
    """
    One-call interface: resolve → fetch → format.

    Args:
        url_or_id:          A video URL or raw video ID.
        preferred_language: Optional language code (e.g. "pt").
        fmt:                "text", "json", "doc" or "srt".
        settings:           Settings override.

    Returns:
        A dict for fmt="json", a string otherwise.

    Raises:
        ValueError:      If fmt is not a known format.
        TranscriptError: (or subclass) on any extraction failure.
    """
    if fmt not in _OUTPUT_FORMATS:
        raise ValueError(f"Unknown format {fmt!r}; expected one of {', '.join(_OUTPUT_FORMATS)}")

    entries = fetch_transcript(url_or_id, preferred_language=preferred_language, settings=settings)

    if fmt == "json":
        return format_json(entries, parse_video_id(url_or_id))
    if fmt == "doc":
        return format_doc(entries)
    if fmt == "srt":
        return format_srt(entries)
    return format_text(entries)
