"""Logging configuration helpers for the quiz."""

from __future__ import annotations

import logging
from logging import Logger

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: int | str = logging.WARNING) -> Logger:
    """Configure stderr logging and return the package logger.

    The default level stays quiet so log lines do not tear through the
    full-screen view.
    """
    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
    return logging.getLogger("mathbomb")
