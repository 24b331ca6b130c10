"""Application-wide logger writing to platformdirs user_log_dir."""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from platformdirs import user_log_dir

_APP_NAME = "studytrack"
_LOG_FILE = "studytrack.log"
_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
_BACKUP_COUNT = 3

_logger: logging.Logger | None = None


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the application logger, initialising it on first call.

    With *name*, a child logger (``studytrack.<name>``) sharing the same
    rotating file handler is returned instead.
    """
    global _logger
    if _logger is None:
        logger = logging.getLogger(_APP_NAME)
        logger.setLevel(logging.DEBUG)

        # Other handlers (e.g. test log capture) may already be attached
        if not any(
            isinstance(h, logging.handlers.RotatingFileHandler) for h in logger.handlers
        ):
            log_dir = Path(user_log_dir(_APP_NAME))
            log_dir.mkdir(parents=True, exist_ok=True)

            handler = logging.handlers.RotatingFileHandler(
                log_dir / _LOG_FILE,
                maxBytes=_MAX_BYTES,
                backupCount=_BACKUP_COUNT,
                encoding="utf-8",
            )
            handler.setFormatter(
                logging.Formatter(
                    fmt="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
                    datefmt="%Y-%m-%dT%H:%M:%S",
                )
            )
            logger.addHandler(handler)
        logger.propagate = False

        _logger = logger

    if name:
        return _logger.getChild(name)
    return _logger
