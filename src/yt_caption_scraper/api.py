"""
api.py — FastAPI REST API for yt-caption-scraper.

Endpoints:
    POST /transcribe                — Body {"url": ...} → {"transcriptions": [...]}.
    GET  /transcript/{video_id}     — Transcript as text, JSON, markdown or SRT.
    GET  /health                    — Health-check for load balancers / monitoring.

Run with:
    uvicorn yt_caption_scraper.api:app

/transcribe keeps a deliberately small contract: 400 when the URL is missing
and a generic 500 for any processing failure.  /transcript goes through the
global exception handler, which uses the status code stored on the
TranscriptError.

Blocking work runs in FastAPI's thread pool (plain ``def`` handlers, or
run_in_threadpool), so a retry back-off sleep only holds up the request
that's waiting on it.
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, PlainTextResponse

from yt_caption_scraper.config import get_settings
from yt_caption_scraper.errors import TranscriptError
from yt_caption_scraper.extractor import extract, fetch_transcript
from yt_caption_scraper.logging_config import configure_logging

logger = logging.getLogger(__name__)

_GENERIC_FAILURE = "Failed to transcribe the video"

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

@asynccontextmanager
async def app_lifespan(_: FastAPI) -> AsyncIterator[None]:
    configure_logging(get_settings().log_level)
    yield


app = FastAPI(
    title="YouTube Caption Scraper API",
    description="Extract timed caption text from YouTube videos by scraping the watch page.",
    version="0.1.0",
    lifespan=app_lifespan,
)


# ---------------------------------------------------------------------------
# Global error handler
# ---------------------------------------------------------------------------

@app.exception_handler(TranscriptError)
async def transcript_error_handler(request: Request, exc: TranscriptError) -> JSONResponse:
    """
    Translate any TranscriptError (or subclass) into an HTTP error response.

    The http_status on the exception drives the response code, so endpoint
    code only raises the right library exception.
    """
    return JSONResponse(
        status_code=exc.http_status,
        content={"error": exc.message},
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@app.post("/transcribe")
async def transcribe(request: Request) -> JSONResponse:
    """
    Fetch the timed transcript for the video at ``url``.

    Returns ``{"transcriptions": [{"text", "offset", "duration"}, ...]}``
    with offsets and durations in milliseconds.  The body is parsed here
    rather than by FastAPI so that a malformed body is a 500 like any
    other failure, never a 422.
    """
    try:
        raw = await request.body()
        payload = json.loads(raw) if raw.strip() else {}
        if not isinstance(payload, dict):
            raise ValueError("request body must be a JSON object")

        url = payload.get("url")
        if url is None or (isinstance(url, str) and not url.strip()):
            return JSONResponse(
                status_code=400,
                content={"error": "Video URL not provided"},
            )
        if not isinstance(url, str):
            raise ValueError(f"url must be a string, got {type(url).__name__}")

        # The pipeline blocks (network, back-off sleeps), so keep it off the event loop.
        entries = await run_in_threadpool(fetch_transcript, url)
    except TranscriptError as exc:
        logger.error("transcription failed: %s", exc.message)
        return JSONResponse(status_code=500, content={"error": _GENERIC_FAILURE})
    except Exception:
        logger.exception("transcription request could not be processed")
        return JSONResponse(status_code=500, content={"error": _GENERIC_FAILURE})

    return JSONResponse(content={"transcriptions": [entry.to_dict() for entry in entries]})


# response_model=None because the response class depends on ?format.
@app.get("/transcript/{video_id}", response_model=None)
def get_transcript(
    video_id: str,
    format: str = Query(
        default="json",
        description="Output format: 'text', 'json' (timed entries), 'doc' (markdown) or 'srt'.",
        pattern="^(text|json|doc|srt)$",
    ),
    lang: str = Query(
        default="",
        description="Preferred caption language code (e.g. 'pt'). Empty uses the server default.",
    ),
) -> PlainTextResponse | JSONResponse:
    """
    Fetch the transcript for a single video.

    **video_id** is the 11-character video identifier (e.g. `dQw4w9WgXcQ`).
    """
    result = extract(video_id, preferred_language=lang or None, fmt=format)

    if isinstance(result, dict):
        return JSONResponse(content=result)
    return PlainTextResponse(content=result)


@app.get("/health")
def health() -> dict:
    """Returns HTTP 200 with {"status": "ok"}."""
    return {"status": "ok"}
