"""Logging setup shared by the app factory and the CLI."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
ROOT_LOGGER = "home_service"


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Attach a single stdout handler to the service logger tree."""
    logger = logging.getLogger(ROOT_LOGGER)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger.setLevel(level)
    if not any(getattr(h, "_home_service", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._home_service = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger
