"""Logging setup for applications embedding themeicons."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

PACKAGE_LOGGER = "themeicons"
LOG_FILENAME = "themeicons.log"


def configure_file_logging(log_dir: Path, level: int = logging.INFO) -> logging.Logger:
    """Send package logs to a rotating file in ``log_dir``. Safe to call twice."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    for handler in logger.handlers:
        if isinstance(handler, RotatingFileHandler):
            return logger

    log_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_dir / LOG_FILENAME,
        maxBytes=512_000,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    return logger
