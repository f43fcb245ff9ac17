"""Build settings and defaults for PDF Builder."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .exceptions import ConfigurationError

DEFAULT_ENCODING = "cp1252"
MAX_PARALLELISM = 16
REPORT_FILENAME = "pdf-builder.log"

ENV_PARALLELISM = "PDF_BUILDER_PARALLELISM"
ENV_ENCODING = "PDF_BUILDER_ENCODING"


def validate_parallelism(parallelism: object) -> int:
    """Return ``parallelism`` if it is a positive integer."""

    if isinstance(parallelism, bool) or not isinstance(parallelism, int):
        raise ConfigurationError(
            f"Parallelism must be a positive integer, got {parallelism!r}"
        )
    if parallelism < 1:
        raise ConfigurationError(f"Parallelism must be >= 1, got {parallelism}")
    return parallelism


def default_parallelism() -> int:
    """Number of CPUs, capped at :data:`MAX_PARALLELISM`."""
    return max(1, min(os.cpu_count() or 1, MAX_PARALLELISM))


@dataclass
class BuildSettings:
    """
    Settings for one build run.

    Attributes:
        load_file: Opticon or IPRO load file listing the documents
        output_dir: Directory receiving the PDFs
        parallelism: Maximum number of documents built at once
        encoding: Text encoding of the load file
        report_path: Where the build report is written, ``None`` to skip it
    """
    load_file: Path
    output_dir: Path
    parallelism: int = 1
    encoding: str = DEFAULT_ENCODING
    report_path: Optional[Path] = None

    @property
    def input_root(self) -> Path:
        return self.load_file.resolve().parent

    def validate(self) -> "BuildSettings":
        validate_parallelism(self.parallelism)
        if self.output_dir.exists() and not self.output_dir.is_dir():
            raise ConfigurationError(f"Output path is not a directory: {self.output_dir}")
        return self
