"""Logging setup for the kiosk app."""

from __future__ import annotations

import logging
from pathlib import Path

from kiosk.config import LOG_LEVEL, LOG_PATH

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(log_path: str | Path | None = None, log_level: str | None = None) -> logging.Logger:
    """Attach a single file handler to the ``kiosk`` logger.

    The terminal belongs to the TUI, so records go to a file only. Calling
    this again keeps the existing handler.
    """
    logger = logging.getLogger("kiosk")
    logger.setLevel(getattr(logging, (log_level or LOG_LEVEL).upper(), logging.INFO))
    if logger.handlers:
        return logger

    path = Path(log_path or LOG_PATH)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
