"""Diagnostics setup for the goatdb package logger."""

from __future__ import annotations

import logging

from rich.logging import RichHandler

from goatdb.core.types import LogLevel

PACKAGE_LOGGER = "goatdb"


def configure_logging(level: LogLevel = LogLevel.ERROR) -> logging.Logger:
    """Set the minimum level of the goatdb logger.

    A RichHandler is attached the first time, unless the application has
    already configured its own handler on the package logger.

    Args:
        level: Minimum level to emit

    Returns:
        The package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(int(level))
    if not logger.handlers:
        handler = RichHandler(show_path=False, markup=False, rich_tracebacks=False)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)
    return logger
