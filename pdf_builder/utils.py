"""Utility helpers for PDF Builder."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator


def configure_logging(level: int = logging.INFO) -> None:
    """Configure package-wide logging."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@contextmanager
def time_block(logger: logging.Logger, message: str) -> Iterator[None]:
    """Context manager that logs the execution time of a code block."""
    start = datetime.now(tz=timezone.utc)
    logger.debug("Starting %s", message)
    try:
        yield
    finally:
        elapsed = (datetime.now(tz=timezone.utc) - start).total_seconds()
        logger.info("%s completed in %.2fs", message, elapsed)


def format_file_size(size_bytes: float) -> str:
    """
    Format file size in human-readable format.

    Args:
        size_bytes: File size in bytes

    Returns:
        Formatted string (e.g., "1.5 MB", "500 KB")
    """
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size_bytes < 1024.0:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024.0
    return f"{size_bytes:.1f} PB"
