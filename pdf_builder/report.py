"""Plain-text build reports."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from .paths import PathLike
from .types import BuildLog

LOGGER = logging.getLogger(__name__)

ERROR_HEADER = "========== ERROR LOG =========="
PROCESS_HEADER = "========== PROCESS LOG =========="


def format_build_report(log: BuildLog, *, load_file: Optional[PathLike] = None) -> str:
    """Render ``log`` as the text written to the report file."""

    source = load_file or log.documents.source
    name = Path(source).name if source else "<collection>"
    lines: List[str] = [
        "The file {name} with {docs} documents and {images} images was processed in {minutes:.1f} minutes.".format(
            name=name,
            docs=log.document_count,
            images=log.image_count,
            minutes=log.elapsed_seconds / 60,
        ),
        "",
    ]

    if log.errors:
        lines.append(ERROR_HEADER)
        lines.extend(log.errors)
        lines.append("")

    if log.skipped:
        lines.append(f"Cancelled before building {len(log.skipped)} document(s):")
        lines.extend(log.skipped)
        lines.append("")

    lines.append(PROCESS_HEADER)
    lines.extend(log.messages)
    return "\n".join(lines) + "\n"


def write_build_report(
    log: BuildLog,
    path: PathLike,
    *,
    load_file: Optional[PathLike] = None,
    encoding: str = "utf-8",
) -> Path:
    """Write the report for ``log`` to ``path`` and return the path."""

    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(format_build_report(log, load_file=load_file), encoding=encoding)
    LOGGER.info("Build report written to %s", destination)
    return destination


__all__ = ["format_build_report", "write_build_report", "ERROR_HEADER", "PROCESS_HEADER"]
