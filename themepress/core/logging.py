"""Logging bootstrap."""

from __future__ import annotations

import logging

from themepress.core.config import LoggingSettings


def configure_logging(settings: LoggingSettings) -> None:
    level = logging.getLevelName(settings.level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format=settings.format)
    logging.getLogger("themepress").setLevel(level)
