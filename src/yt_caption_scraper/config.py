"""
config.py — Process-wide settings for yt-caption-scraper.

Values come from environment variables prefixed with ``YT_CAPTIONS_``
(e.g. ``YT_CAPTIONS_PREFERRED_LANGUAGE=pt``) or from a local ``.env`` file.
Nothing here is mutated at runtime; every request reads the same settings.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# A realistic desktop browser string.  The watch page served to unknown
# clients doesn't always embed the player response.
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)

_LOG_LEVELS: frozenset[str] = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class Settings(BaseSettings):
    """Configuration shared by the locator, the fetcher and the entry points."""

    model_config = SettingsConfigDict(
        env_prefix="YT_CAPTIONS_",
        env_file=".env",
        extra="ignore",
    )

    preferred_language: str = Field(
        default="pt",
        description="Language code matched (as a substring) against caption tracks.",
    )
    user_agent: str = Field(default=DEFAULT_USER_AGENT)
    accept_language: str | None = Field(
        default=None,
        description="Explicit Accept-Language header; derived from preferred_language when unset.",
    )
    max_attempts: int = Field(default=3, ge=1)
    backoff_seconds: float = Field(default=1.0, ge=0)
    request_timeout: float = Field(
        default=30.0,
        ge=0,
        description="Per-request timeout in seconds; 0 disables it.",
    )
    log_level: str = Field(default="WARNING")

    @field_validator("preferred_language")
    @classmethod
    def _strip_language(cls, value: str) -> str:
        return value.strip()

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level {value!r}")
        return normalized

    @property
    def timeout(self) -> float | None:
        """Timeout to hand to requests (None means wait forever)."""
        return self.request_timeout or None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
