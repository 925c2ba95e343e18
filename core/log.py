from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from core.settings import LOGGING


ROOT_LOGGER = "dashboard"


def _ensure_root() -> logging.Logger:
    logger = logging.getLogger(ROOT_LOGGER)
    if not logger.handlers:
        try:
            LOGGING.path.parent.mkdir(parents=True, exist_ok=True)
            handler: logging.Handler = RotatingFileHandler(
                LOGGING.path,
                maxBytes=LOGGING.max_bytes,
                backupCount=LOGGING.backup_count,
                encoding="utf-8",
            )
        except OSError:
            handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOGGING.format))
        logger.addHandler(handler)
        logger.setLevel(LOGGING.level)
    return logger


def get_logger(area: str) -> logging.Logger:
    """Return the ``dashboard.<area>`` logger, configuring the file handler once."""

    _ensure_root()
    return logging.getLogger(f"{ROOT_LOGGER}.{area}")


__all__ = ["get_logger"]
