"""Centralized logging configuration."""

from __future__ import annotations

import logging
import os

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(
    *,
    level: str | None = None,
    filename: str | None = None,
    format: str = DEFAULT_FORMAT,
    datefmt: str = DEFAULT_DATEFMT,
) -> logging.Logger:
    """Configure application logging.

    Args:
        level: Optional explicit log level. Falls back to
            ``WORD_RUNNER_LOG_LEVEL`` env var or INFO when not provided.
        filename: Log file. The terminal UI owns the screen, so the game
            logs to a file; ``None`` logs to stderr.
        format: Log format string.
        datefmt: Date format string.

    Returns:
        The package logger (``word_runner``).
    """

    raw_level = level if level is not None else os.getenv("WORD_RUNNER_LOG_LEVEL")
    resolved_level = (raw_level or "INFO").upper()
    logging.basicConfig(
        level=resolved_level, format=format, datefmt=datefmt, filename=filename
    )

    app_logger = logging.getLogger("word_runner")
    app_logger.setLevel(resolved_level)
    # urllib3 chatters at DEBUG on every score submission
    logging.getLogger("urllib3").setLevel(max(logging.INFO, app_logger.level))

    app_logger.debug("Logging configured", extra={"level": resolved_level})
    return app_logger
