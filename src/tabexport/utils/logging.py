"""Logging utilities to configure the library's logger.

This module configures the global `loguru` logger for console and optional
file output. Unlike importing the library, calling `configure_logging` replaces
any handlers an application has already installed, so it is left to callers.
"""

from __future__ import annotations

import sys

from loguru import logger

from tabexport.config import settings


def configure_logging() -> None:
    """Configure the global Loguru logger for console and rotating-file output.

    This helper removes default handlers and sets up a stderr handler at
    `settings.log_level` and, when `settings.log_file` is set, a rotating file
    handler that keeps DEBUG output.
    """
    logger.remove()

    logger.add(sys.stderr, level=settings.log_level, backtrace=False, diagnose=False)

    if settings.log_file is not None:
        log_file = settings.log_file
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(str(log_file), rotation="10 MB", retention="14 days", level="DEBUG")
