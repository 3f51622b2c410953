"""Rotating file logging for the TUI session.

The terminal belongs to the UI, so records go to a file under the user log
directory instead of stderr. Setup is idempotent and never fatal.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from platformdirs import user_log_dir

from .config import APP_NAME

LOG_PATH = Path(user_log_dir(APP_NAME, appauthor=False)) / f"{APP_NAME}.log"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_BYTES = 2 * 1024 * 1024
BACKUP_COUNT = 3

_HANDLER_TAG = "_lazytree_handler"


def _is_our_handler(handler: logging.Handler) -> bool:
    return bool(getattr(handler, _HANDLER_TAG, False))


def configure_logging(level: str = "WARNING", log_path: Path | None = None) -> logging.Logger:
    """Attach one tagged file handler to the ``lazytree`` logger.

    Repeated calls replace the previous handler. If the log file cannot be
    opened a ``NullHandler`` is installed so the UI still starts.
    """
    target = log_path or LOG_PATH
    logger = logging.getLogger(APP_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    logger.propagate = False

    for handler in list(logger.handlers):
        if _is_our_handler(handler):
            logger.removeHandler(handler)
            handler.close()

    handler: logging.Handler
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            target,
            maxBytes=MAX_BYTES,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
            delay=True,
        )
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    except OSError:
        handler = logging.NullHandler()
    setattr(handler, _HANDLER_TAG, True)
    logger.addHandler(handler)
    return logger


__all__ = ["LOG_PATH", "LOG_FORMAT", "configure_logging"]
