"""File logging for the lazydbm process.

The TUI owns the terminal, so log records never go to stdout/stderr while it
runs. ``setup_logging`` installs a file handler on the ``lazydbm`` logger and
returns a :class:`LogSession`; the caller owns it and must ``close()`` it.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

LOG_ENV_VAR = "LAZYDBM_LOG"
LOG_FILENAME = "lazydbm.log"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": logging.DEBUG,
}


def level_from_env(value: str | None = None) -> int:
    """Resolve a log level name (``$LAZYDBM_LOG`` by default), falling back to INFO."""
    if value is None:
        value = os.environ.get(LOG_ENV_VAR, "")
    return _LEVELS.get(value.strip().lower(), logging.INFO)


@dataclass
class LogSession:
    """An installed file handler. ``close()`` detaches and flushes it."""

    path: Path
    handler: logging.Handler
    logger: logging.Logger

    def close(self) -> None:
        self.logger.removeHandler(self.handler)
        self.handler.close()

    def __enter__(self) -> LogSession:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def setup_logging(log_path: Path, level: int | None = None) -> LogSession:
    """Attach an append-mode file handler for the ``lazydbm`` logger hierarchy."""
    log_path.parent.mkdir(parents=True, exist_ok=True)
    if level is None:
        level = level_from_env()

    handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger = logging.getLogger("lazydbm")
    logger.setLevel(level)
    logger.addHandler(handler)
    logger.info("logging initialized: %s", os.fspath(log_path))
    return LogSession(path=log_path, handler=handler, logger=logger)
