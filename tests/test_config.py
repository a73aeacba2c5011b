"""
test_config.py — Tests for environment-driven settings and logging setup.
"""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from yt_caption_scraper.config import DEFAULT_USER_AGENT, Settings
from yt_caption_scraper.locator import build_page_headers
from yt_caption_scraper.logging_config import (
    PACKAGE_LOGGER,
    configure_logging,
    resolve_log_level,
)


class TestSettings:
    """Tests for Settings defaults and environment overrides."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("PREFERRED_LANGUAGE", "MAX_ATTEMPTS", "REQUEST_TIMEOUT", "LOG_LEVEL"):
            monkeypatch.delenv(f"YT_CAPTIONS_{name}", raising=False)

        settings = Settings(_env_file=None)

        assert settings.preferred_language == "pt"
        assert settings.user_agent == DEFAULT_USER_AGENT
        assert settings.max_attempts == 3
        assert settings.backoff_seconds == 1.0
        assert settings.timeout == 30.0
        assert settings.log_level == "WARNING"

    def test_default_language_drives_accept_language(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("YT_CAPTIONS_PREFERRED_LANGUAGE", raising=False)
        monkeypatch.delenv("YT_CAPTIONS_ACCEPT_LANGUAGE", raising=False)

        headers = build_page_headers(Settings(_env_file=None))

        assert headers["Accept-Language"].startswith("pt,")

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("YT_CAPTIONS_PREFERRED_LANGUAGE", " pt ")
        monkeypatch.setenv("YT_CAPTIONS_MAX_ATTEMPTS", "5")
        monkeypatch.setenv("YT_CAPTIONS_LOG_LEVEL", "debug")

        settings = Settings(_env_file=None)

        assert settings.preferred_language == "pt"
        assert settings.max_attempts == 5
        assert settings.log_level == "DEBUG"

    def test_zero_timeout_disables_it(self) -> None:
        assert Settings(request_timeout=0).timeout is None

    def test_rejects_zero_attempts(self) -> None:
        with pytest.raises(ValidationError):
            Settings(max_attempts=0)

    def test_rejects_unknown_log_level(self) -> None:
        with pytest.raises(ValidationError):
            Settings(log_level="chatty")


class TestLogging:
    """Tests for configure_logging()."""

    def test_resolve_log_level(self) -> None:
        assert resolve_log_level("debug") == logging.DEBUG
        assert resolve_log_level(" Info ") == logging.INFO
        assert resolve_log_level("nonsense") == logging.WARNING

    def test_configure_is_idempotent(self) -> None:
        logger = logging.getLogger(PACKAGE_LOGGER)
        before = list(logger.handlers)
        try:
            configure_logging("info")
            configure_logging("debug")

            ours = [h for h in logger.handlers if h not in before]
            assert len(ours) == 1
            assert logger.level == logging.DEBUG
        finally:
            for handler in list(logger.handlers):
                if handler not in before:
                    logger.removeHandler(handler)
            logger.setLevel(logging.NOTSET)
            logger.propagate = True
