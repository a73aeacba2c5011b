"""
errors.py — Exception hierarchy for yt-caption-scraper.

Every exception carries an `http_status` attribute so the FastAPI error
handler can turn a library-level failure into a response code without a
separate mapping table.

Hierarchy:
    TranscriptError (base, 500)
    ├── InvalidVideoReferenceError (400)
    ├── CaptionEndpointNotFoundError (404)
    ├── UpstreamFetchError (502)
    └── UnknownTranscriptError (500)
"""


# ---------------------------------------------------------------------------
# Base exception
# ---------------------------------------------------------------------------

class TranscriptError(Exception):
    """
    Root exception for all transcript-related errors.

    Callers of the public API only ever see this type (or a subclass); raw
    transport and parse exceptions are converted before they leave the
    package.

    Attributes:
        message:     Human-readable description of what went wrong.
        http_status: Suggested HTTP status code for the API layer.
    """

    def __init__(self, message: str, http_status: int = 500) -> None:
        super().__init__(message)
        self.message = message
        self.http_status = http_status


# ---------------------------------------------------------------------------
# Specific error cases
# ---------------------------------------------------------------------------

class InvalidVideoReferenceError(TranscriptError):
    """
    Raised when the input is neither an 11-character ID nor a video URL.

    Maps to HTTP 400: the caller sent something we can't interpret.
    """

    def __init__(self, reference: str) -> None:
        super().__init__(
            message=f"Impossible to retrieve a video ID from: {reference!r}",
            http_status=400,
        )
        self.reference = reference


class CaptionEndpointNotFoundError(TranscriptError):
    """
    Raised when the watch page was fetched but no caption track was found.

    Covers every "not found" case of the locator uniformly: no player
    script, unparseable player JSON, or an empty caption-track list.
    Maps to HTTP 404.
    """

    def __init__(self, video_id: str) -> None:
        super().__init__(
            message=f"Failed to locate a transcript for video: {video_id}",
            http_status=404,
        )
        self.video_id = video_id


class UpstreamFetchError(TranscriptError):
    """
    Raised when a request to the video site still fails after all retries.

    The failure can be a network error, a non-success status code or an
    empty body.  Maps to HTTP 502 because the problem is upstream.
    """

    def __init__(self, url: str, reason: str = "") -> None:
        detail = f": {reason}" if reason else ""
        super().__init__(
            message=f"Failed to fetch {url}{detail}",
            http_status=502,
        )
        self.url = url
        self.reason = reason


class UnknownTranscriptError(TranscriptError):
    """Anything unexpected that escaped the pipeline, with a generic message."""

    def __init__(self) -> None:
        super().__init__(
            message="Unknown error while fetching transcript",
            http_status=500,
        )
