"""
cli.py — Command-line interface for yt-caption-scraper.

Provides the `yt-captions` command group (registered as a console script in
pyproject.toml):

    get     Fetch a video's transcript.
    tracks  List the caption tracks a video's watch page advertises.
    serve   Run the HTTP API with uvicorn.

Usage examples:
    yt-captions get "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
    yt-captions get dQw4w9WgXcQ --lang pt --format srt -o talk.srt
    yt-captions tracks dQw4w9WgXcQ
    yt-captions --log-level debug get dQw4w9WgXcQ
"""

from __future__ import annotations

import json
import sys

import click

from yt_caption_scraper.config import get_settings
from yt_caption_scraper.errors import TranscriptError
from yt_caption_scraper.extractor import extract, parse_video_id
from yt_caption_scraper.locator import list_caption_tracks
from yt_caption_scraper.logging_config import configure_logging


# ---------------------------------------------------------------------------
# CLI group — the top-level `yt-captions` command
# ---------------------------------------------------------------------------

@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Log verbosity on stderr.  Defaults to YT_CAPTIONS_LOG_LEVEL (warning).",
)
def main(log_level: str | None) -> None:
    """
    YouTube Caption Scraper — fetch timed captions from a video's watch page.
    """
    configure_logging(log_level or get_settings().log_level)


# ---------------------------------------------------------------------------
# Subcommand: get — fetch a transcript
# ---------------------------------------------------------------------------

@main.command()
@click.argument("video", metavar="URL_OR_ID")
@click.option(
    "--format", "-f",
    "fmt",                           # avoid shadowing the builtin "format"
    type=click.Choice(["text", "json", "doc", "srt"], case_sensitive=False),
    default="text",
    show_default=True,
    help="Output format: plain text, JSON with millisecond timings, markdown document, or SRT.",
)
@click.option(
    "--lang", "-l",
    default=None,
    help="Preferred caption language code (e.g. 'pt').  Falls back to the first track.",
)
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help="Write output to a file instead of stdout.",
)
def get(video: str, fmt: str, lang: str | None, output: str | None) -> None:
    """
    Fetch a video transcript.

    VIDEO can be a full video URL or an 11-character video ID.
    """
    try:
        result = extract(video, preferred_language=lang, fmt=fmt.lower())
    except TranscriptError as exc:
        # A clean message on stderr, no traceback.
        click.echo(f"Error: {exc.message}", err=True)
        sys.exit(1)

    if isinstance(result, dict):
        text = json.dumps(result, indent=2, ensure_ascii=False)
    else:
        text = result

    if output:
        with open(output, "w", encoding="utf-8") as fh:
            fh.write(text)
            fh.write("\n")
        click.echo(f"Transcript written to {output}", err=True)
    else:
        click.echo(text)


# ---------------------------------------------------------------------------
# Subcommand: tracks — list available caption tracks
# ---------------------------------------------------------------------------

@main.command()
@click.argument("video", metavar="URL_OR_ID")
def tracks(video: str) -> None:
    """
    List the caption tracks available for a video.

    The first listed track is the one used when no language matches.
    """
    try:
        video_id = parse_video_id(video)
        track_list = list_caption_tracks(video_id)
    except TranscriptError as exc:
        click.echo(f"Error: {exc.message}", err=True)
        sys.exit(1)

    if not track_list:
        click.echo(f"No caption tracks found for video {video_id}.")
        return

    for track in track_list:
        kind = "auto-generated" if track.is_generated else "manual"
        label = f": {track.name}" if track.name else ""
        click.echo(f"{track.language_code}{label} ({kind})")


# ---------------------------------------------------------------------------
# Subcommand: serve — run the HTTP API
# ---------------------------------------------------------------------------

@main.command()
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, show_default=True, type=int)
def serve(host: str, port: int) -> None:
    """Serve the HTTP API (POST /transcribe, GET /transcript/{id})."""
    import uvicorn

    uvicorn.run("yt_caption_scraper.api:app", host=host, port=port)
