"""Utilities shared by the ropdfx pipeline."""

from __future__ import annotations

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
    if level is not None:
        logger.setLevel(level)
    return logger


def resolve_path(path: str | Path | None) -> Path:
    if path is None:
        raise ValueError("Path must not be None")
    return Path(path).expanduser().resolve()


def ensure_output_dir(directory: str | Path) -> Path:
    resolved = resolve_path(directory)
    resolved.mkdir(parents=True, exist_ok=True)
    return resolved


def format_timestamp(moment: datetime) -> str:
    """Return the footer timestamp literal, e.g. ``October 19, 2026 at 02:30 PM``."""

    return f"{format_long_date(moment)} at {moment.strftime('%I:%M %p')}"


def format_long_date(moment: date) -> str:
    return f"{moment.strftime('%B')} {moment.day}, {moment.year}"


def format_short_date(moment: date) -> str:
    return f"{moment.strftime('%b')} {moment.day}, {moment.year}"


def format_file_size(size_bytes: float) -> str:
    """
    Format file size in human-readable format.

    Args:
        size_bytes: File size in bytes

    Returns:
        Formatted string (e.g., "1.5 MB", "500 KB")
    """
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if size_bytes < 1024.0:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024.0
    return f"{size_bytes:.1f} PB"
