"""Logging setup shared by the isoml modules."""

from __future__ import annotations

import logging

from . import config


def setup_logging(level: str | None = None) -> None:
    """
    Configure console logging for the library.

    All ``isoml.*`` loggers inherit from the ``isoml`` logger configured here.
    Args:
        level: Log level name (DEBUG/INFO/WARNING/ERROR/CRITICAL).
            Defaults to config.LOG_LEVEL.
    """
    level = level or config.LOG_LEVEL
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(name)s] %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    logger = logging.getLogger("isoml")
    logger.setLevel(numeric_level)

    # Repeated calls must not stack handlers
    if not logger.handlers:
        logger.addHandler(handler)
