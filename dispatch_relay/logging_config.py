"""Logging setup for the relay process.

Call ``setup_logging()`` once at startup.  All modules use ``logging.getLogger(__name__)``.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from dispatch_relay.log_context import ContextFilter

LOG_FILE_NAME = "relay.log"
MAX_BYTES = 2 * 1024 * 1024
BACKUP_COUNT = 2

LOG_FMT = "%(asctime)s %(levelname)-8s %(name)s: %(ctx)s%(message)s"
DATE_FMT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that only add noise at INFO.
_QUIET_LOGGERS = ("aiohttp.access", "asyncio")

logger = logging.getLogger(__name__)


def resolve_level(name: str, default: int = logging.INFO) -> int:
    """Map a level name like ``"debug"`` to its numeric value."""
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else default


def _handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.addFilter(ContextFilter())
    handler.setFormatter(logging.Formatter(LOG_FMT, datefmt=DATE_FMT))
    return handler


def setup_logging(
    level: int = logging.INFO,
    verbose: bool = False,
    log_dir: Path | None = None,
) -> None:
    """Route all records to stderr, and to ``<log_dir>/relay.log`` when *log_dir* is set.

    Replaces any handlers already on the root logger, so calling it twice is safe.
    """
    if verbose:
        level = logging.DEBUG

    root = logging.getLogger()
    for old in root.handlers:
        if isinstance(old, RotatingFileHandler):
            old.close()
    root.handlers.clear()
    root.setLevel(level)

    root.addHandler(_handler(logging.StreamHandler(sys.stderr), level))

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_dir / LOG_FILE_NAME,
            maxBytes=MAX_BYTES,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
        root.addHandler(_handler(file_handler, level))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.info("Logging initialized (level=%s)", logging.getLevelName(level))
