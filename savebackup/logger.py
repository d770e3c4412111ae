"""Loguru sinks for the console menu and the log file."""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

LOG_FILE_NAME = "save-backup-manager.log"

# The menu prints to the same terminal; console records carry no timestamp.
_CONSOLE_FORMAT = "<level>{level:<7}</level> | {message}"
_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level:<7} | {name}:{line} | {message}"


def setup_logger(log_dir: Path | None = None, level: str = "INFO") -> None:
    """
    Route log records to stderr at *level* and, when *log_dir* is given,
    to a rotating DEBUG file there.
    """
    logger.remove()
    logger.add(sys.stderr, level=level, format=_CONSOLE_FORMAT, colorize=True)

    if log_dir is None:
        return
    log_dir.mkdir(parents=True, exist_ok=True)
    logger.add(
        str(log_dir / LOG_FILE_NAME),
        level="DEBUG",
        format=_FILE_FORMAT,
        rotation="5 MB",
        retention="7 days",
        encoding="utf-8",
    )
