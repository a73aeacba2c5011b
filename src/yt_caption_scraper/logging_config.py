"""
logging_config.py — Logging setup for the CLI and the API.

Library modules only ever call ``logging.getLogger(__name__)``; nothing is
printed unless an entry point calls configure_logging().  Parse diagnostics
are emitted at DEBUG, so the configured level decides whether they show up.
"""

from __future__ import annotations

import logging
import sys

PACKAGE_LOGGER = "yt_caption_scraper"

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Marks the handler we install so repeated calls replace it instead of
# stacking duplicates.
_HANDLER_NAME = "yt_caption_scraper.console"


def resolve_log_level(raw_level: str) -> int:
    """Turn a level name like "debug" into the logging constant (WARNING if unknown)."""
    level = logging.getLevelName(raw_level.strip().upper())
    if isinstance(level, int):
        return level
    return logging.WARNING


def configure_logging(level: str = "WARNING") -> logging.Logger:
    """
    Attach a stderr handler to the package logger.

    Safe to call more than once: the previous handler is swapped out and the
    new level applied.

    Args:
        level: Level name, case-insensitive (e.g. "info").

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(resolve_log_level(level))
    logger.propagate = False

    for handler in list(logger.handlers):
        if handler.get_name() == _HANDLER_NAME:
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT))
    logger.addHandler(handler)

    logger.debug("logging configured level=%s", logging.getLevelName(logger.level))
    return logger
