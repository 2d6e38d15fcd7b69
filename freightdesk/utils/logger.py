"""Logging setup: freightdesk.log with rotation, mirrored to stdout."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final

LOG_FORMAT: Final[str] = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
LOG_FILE_NAME: Final[str] = "freightdesk.log"

# urllib3 logs every pooled connection; keep it out of DEBUG sessions
QUIET_LOGGERS: Final = ("urllib3",)


def resolve_log_level(level_name: str) -> int:
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {level_name}")
    return level


def configure_logging(
    log_dir: Path,
    *,
    log_file_name: str = LOG_FILE_NAME,
    level_name: str = "INFO",
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> RotatingFileHandler:
    """Replaces the root logger's handlers and returns the file handler."""

    log_dir.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(LOG_FORMAT)

    file_handler = RotatingFileHandler(
        log_dir / log_file_name,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    console_handler = logging.StreamHandler(sys.stdout)
    for handler in (file_handler, console_handler):
        handler.setFormatter(formatter)

    logging.basicConfig(
        level=resolve_log_level(level_name),
        handlers=[file_handler, console_handler],
        force=True,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return file_handler


def set_log_level(level_name: str) -> None:
    logging.getLogger().setLevel(resolve_log_level(level_name))
