"""
locator.py — Find a caption-track URL on a video's watch page.

The watch page embeds the player response as an inline JSON object inside
a <script> tag:

    var ytInitialPlayerResponse = {...};

The caption tracks live at
``captions.playerCaptionsTracklistRenderer.captionTracks`` inside that
object.  Nothing about the page format is documented or stable, so every
parse-level problem (no script, bad JSON, no tracks) yields None instead of
an exception.  Only network failures escape, as UpstreamFetchError.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

import requests
from bs4 import BeautifulSoup

from yt_caption_scraper.config import Settings, get_settings
from yt_caption_scraper.errors import UpstreamFetchError
from yt_caption_scraper.fetching import build_session, fetch_with_retry

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"

PLAYER_RESPONSE_MARKER = "var ytInitialPlayerResponse = {"

# Regional consent cookie; without it EU visitors get an interstitial page
# that has no player response at all.
CONSENT_COOKIE = "CONSENT=YES+; PATH=/; DOMAIN=.youtube.com"


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CaptionTrack:
    """One caption track advertised by the player response."""

    language_code: str
    base_url: str
    name: str = ""
    kind: str = ""

    @property
    def is_generated(self) -> bool:
        """True for auto-generated (speech recognition) tracks."""
        return self.kind == "asr"

    @classmethod
    def from_json(cls, raw: dict[str, Any]) -> CaptionTrack:
        name = raw.get("name") or {}
        if isinstance(name, dict):
            # Track names come either as simpleText or as a list of runs.
            label = name.get("simpleText") or "".join(
                run.get("text", "") for run in name.get("runs", [])
            )
        else:
            label = str(name)
        return cls(
            language_code=str(raw.get("languageCode", "")),
            base_url=str(raw.get("baseUrl", "")),
            name=label,
            kind=str(raw.get("kind", "")),
        )


# ---------------------------------------------------------------------------
# Request building
# ---------------------------------------------------------------------------

def watch_url(video_id: str) -> str:
    return WATCH_URL.format(video_id=video_id)


def accept_language_for(language: str) -> str:
    """
    Build an Accept-Language value that puts the preferred language first.

    "pt-BR" → "pt-BR,pt;q=0.9,en-US;q=0.8,en;q=0.7".  English stays as the
    lower-priority fallback unless it's already the preferred language.
    """
    language = language.strip()
    if not language:
        return "en-US,en;q=0.9"

    base = language.split("-")[0]
    parts = [language]
    if base != language:
        parts.append(f"{base};q=0.9")
    if base.lower() != "en":
        parts.extend(["en-US;q=0.8", "en;q=0.7"])
    return ",".join(parts)


def build_page_headers(settings: Settings, preferred_language: str | None = None) -> dict[str, str]:
    """Headers sent with the watch-page request."""
    language = preferred_language if preferred_language is not None else settings.preferred_language
    return {
        "User-Agent": settings.user_agent,
        "Cookie": CONSENT_COOKIE,
        "Accept-Language": settings.accept_language or accept_language_for(language),
    }


# ---------------------------------------------------------------------------
# Page parsing
# ---------------------------------------------------------------------------

def find_player_script(html: str) -> str | None:
    """Return the text of the first <script> carrying the player response."""
    soup = BeautifulSoup(html, "html.parser")
    scripts = soup.find_all("script")
    logger.debug("parsed watch page: %d script element(s)", len(scripts))

    for script in scripts:
        text = script.string or ""
        if PLAYER_RESPONSE_MARKER in text:
            return text
    return None


def _object_end(text: str, start: int) -> int | None:
    """
    Index just past the JSON object that opens at ``text[start]``.

    Counts nested braces and skips over string literals (including escaped
    quotes), so a "};" inside a string value doesn't end the object early.
    Returns None when the braces never balance.
    """
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index + 1
    return None


def extract_player_response(script_text: str) -> dict[str, Any] | None:
    """
    Pull the player-response object out of a script's text.

    Returns:
        The decoded dict, or None if the marker is missing, the object never
        closes, or the JSON doesn't parse.
    """
    marker_at = script_text.find(PLAYER_RESPONSE_MARKER)
    if marker_at == -1:
        return None

    # The marker ends with the object's opening brace.
    start = marker_at + len(PLAYER_RESPONSE_MARKER) - 1
    end = _object_end(script_text, start)
    if end is None:
        logger.warning("player response object is never closed")
        return None

    blob = script_text[start:end]
    logger.debug("extracted player response blob: %d characters", len(blob))

    try:
        data = json.loads(blob)
    except json.JSONDecodeError as exc:
        logger.warning("could not decode player response JSON: %s", exc)
        return None

    if not isinstance(data, dict):
        return None
    return data


def caption_tracks(player_response: dict[str, Any]) -> list[CaptionTrack]:
    """Read every caption track from a decoded player response (may be empty)."""
    renderer = (player_response.get("captions") or {}).get("playerCaptionsTracklistRenderer") or {}
    raw_tracks = renderer.get("captionTracks") or []
    tracks = [CaptionTrack.from_json(raw) for raw in raw_tracks if isinstance(raw, dict)]
    logger.debug("player response lists %d caption track(s)", len(tracks))
    return tracks


def select_caption_track(
    tracks: list[CaptionTrack],
    preferred_language: str | None = None,
) -> CaptionTrack | None:
    """
    Pick the track to download.

    The first track whose language code contains ``preferred_language`` wins
    ("pt" matches "pt-BR").  Without a match, or without a preference, the
    first track is used.  An empty list gives None.
    """
    if not tracks:
        return None
    if preferred_language:
        for track in tracks:
            if preferred_language in track.language_code:
                return track
    return tracks[0]


def find_caption_url(html: str, preferred_language: str | None = None) -> str | None:
    """
    Locate the caption URL inside a watch page's HTML.

    Never raises: any failure along the way is logged and reported as None,
    which the caller turns into "transcript could not be located".
    """
    try:
        script_text = find_player_script(html)
        if script_text is None:
            logger.info("no player response script on the watch page")
            return None

        player_response = extract_player_response(script_text)
        if player_response is None:
            return None

        track = select_caption_track(caption_tracks(player_response), preferred_language)
    except Exception:
        logger.exception("unexpected error while locating the caption track")
        return None

    if track is None or not track.base_url:
        return None
    logger.debug("selected caption track language=%s", track.language_code)
    return track.base_url


# ---------------------------------------------------------------------------
# Network entry points
# ---------------------------------------------------------------------------

def fetch_watch_page(
    video_id: str,
    settings: Settings | None = None,
    session: requests.Session | None = None,
    preferred_language: str | None = None,
) -> str:
    """
    Download the watch page HTML for a video.

    Raises:
        UpstreamFetchError: The page couldn't be fetched after all retries.
    """
    settings = settings or get_settings()
    session = session or build_session(settings)
    url = watch_url(video_id)

    try:
        return fetch_with_retry(
            url,
            headers=build_page_headers(settings, preferred_language),
            max_attempts=settings.max_attempts,
            backoff_seconds=settings.backoff_seconds,
            timeout=settings.timeout,
            session=session,
        )
    except requests.RequestException as exc:
        raise UpstreamFetchError(url, str(exc)) from exc


def locate_caption_url(
    video_id: str,
    preferred_language: str | None = None,
    settings: Settings | None = None,
    session: requests.Session | None = None,
) -> str | None:
    """
    Fetch the watch page and return the preferred caption track's URL.

    Args:
        video_id:           11-character video ID.
        preferred_language: Language code to match; defaults to the setting.
        settings:           Settings override (tests, embedding).
        session:            requests session to reuse.

    Returns:
        The track's base URL, or None when no track could be located.

    Raises:
        UpstreamFetchError: The page itself couldn't be downloaded.
    """
    settings = settings or get_settings()
    language = preferred_language if preferred_language is not None else settings.preferred_language
    html = fetch_watch_page(video_id, settings, session, language)
    return find_caption_url(html, language)


def list_caption_tracks(
    video_id: str,
    settings: Settings | None = None,
    session: requests.Session | None = None,
) -> list[CaptionTrack]:
    """
    Every caption track the watch page advertises (empty if none found).

    Only a failed download raises; a page that can't be parsed lists nothing.
    """
    html = fetch_watch_page(video_id, settings, session)
    try:
        script_text = find_player_script(html)
        if script_text is None:
            return []
        player_response = extract_player_response(script_text)
        if player_response is None:
            return []
        return caption_tracks(player_response)
    except Exception:
        logger.exception("could not list caption tracks for video %s", video_id)
        return []
