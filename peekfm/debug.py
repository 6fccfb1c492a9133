"""Logging setup.

The TUI owns stdout, so log records only ever go to a file.
"""

from __future__ import annotations

import logging
import os
import tempfile

LOGGER_NAME = "peekfm"
DEBUG_ENV = "PEEKFM_DEBUG"
LOG_PATH_ENV = "PEEKFM_LOG"

_LOGGER: logging.Logger | None = None


def _debug_requested() -> bool:
    return os.environ.get(DEBUG_ENV, "0").strip().lower() in {"1", "true", "yes", "on", "debug"}


def default_log_path() -> str:
    return os.environ.get(LOG_PATH_ENV, os.path.join(tempfile.gettempdir(), "peekfm.log"))


def configure_logging(debug: bool = False, log_path: str | None = None) -> logging.Logger:
    """Attach the file handler to the package logger.

    Safe to call more than once; only the first call installs a handler.
    """
    global _LOGGER

    logger = logging.getLogger(LOGGER_NAME)
    level = logging.DEBUG if debug or _debug_requested() else logging.INFO
    logger.setLevel(level)
    if not any(isinstance(handler, logging.FileHandler) for handler in logger.handlers):
        file_handler = logging.FileHandler(log_path or default_log_path(), encoding="utf-8", delay=True)
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        logger.addHandler(file_handler)
    logger.propagate = False
    _LOGGER = logger
    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Return a child of the package logger.

    Modules call this at import time; records are only emitted once
    ``configure_logging`` has run.
    """
    base = _LOGGER if _LOGGER is not None else logging.getLogger(LOGGER_NAME)
    if name == LOGGER_NAME:
        return base
    return base.getChild(name)
