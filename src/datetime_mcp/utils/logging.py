"""Logging setup that keeps diagnostics off stdout.

Stdout carries the JSON-RPC stream, so log records go to stderr (through a
:class:`rich.logging.RichHandler`) or to a file.  With no level configured the
package logger is silenced entirely.
"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "datetime_mcp"

_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _clear_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def configure_logging(level: str | int | None = None, log_file: str | Path | None = None) -> logging.Logger:
    """Configure the ``datetime_mcp`` logger and return it.

    Args:
        level: Level name or number.  ``None`` disables logging.
        log_file: Write records to this file instead of stderr.

    Raises:
        ValueError: If *level* is not a known logging level.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    _clear_handlers(logger)
    logger.propagate = False

    if level is None:
        logger.addHandler(logging.NullHandler())
        logger.setLevel(logging.CRITICAL + 1)
        return logger

    numeric = level if isinstance(level, int) else logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        msg = f"Unknown log level: {level}"
        raise ValueError(msg)

    handler: logging.Handler
    if log_file is not None:
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter(_FILE_FORMAT))
    else:
        handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=False)

    logger.addHandler(handler)
    logger.setLevel(numeric)
    return logger
