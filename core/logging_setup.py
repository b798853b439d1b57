"""
core/logging_setup.py
─────────────────────
Rotating file log under the data directory plus stdout.
"""
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from core.config import Settings

LOGGER_NAME = "core"

FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
STREAM_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def setup_logging(settings: Settings, level: int = logging.INFO) -> logging.Logger:
    """
    Configure the package logger once per process.
    Max size: 5MB, backup count: 5 files.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        return logger

    # 1. File logger (skipped when the data dir is read-only)
    file_error: OSError | None = None
    try:
        settings.log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            settings.log_dir / "app.log",
            maxBytes=5 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        file_handler.setLevel(level)
        logger.addHandler(file_handler)
    except OSError as e:
        file_error = e

    # 2. Stdout logger
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(logging.Formatter(STREAM_FORMAT))
    stream_handler.setLevel(level)
    logger.addHandler(stream_handler)

    logger.setLevel(level)
    if file_error is not None:
        logger.warning("File logging disabled, using stdout only: %s", file_error)
    logger.info("Vet supply desk startup (data dir: %s)", settings.data_dir)
    return logger
