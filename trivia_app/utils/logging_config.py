"""Logging configuration helpers for the trivia application."""

from __future__ import annotations

import logging
from logging import Logger


def configure_logging(level: int = logging.INFO) -> Logger:
    """Configure basic logging for the application and return the package logger."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    # httpx logs every request at INFO; one line per question fetch is noise here.
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
    return logging.getLogger("trivia_app")
