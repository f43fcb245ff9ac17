"""
Type definitions and dataclasses for PDF Builder.

This module defines data structures used throughout the library.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional, Tuple

POINTS_PER_INCH = 72


@dataclass(frozen=True)
class Document:
    """
    A single logical document from a load file.

    Attributes:
        key: Image key of the first page, used to identify the document
        image_paths: Raw image paths from the load file, in page order
    """
    key: str
    image_paths: Tuple[str, ...] = ()

    @property
    def image_count(self) -> int:
        return len(self.image_paths)


@dataclass(frozen=True)
class DocumentCollection:
    """
    Ordered, read-only set of documents imported from a load file.

    Attributes:
        documents: Documents in load file order
        source: Load file the collection was imported from
    """
    documents: Tuple[Document, ...] = ()
    source: Optional[Path] = None

    def __len__(self) -> int:
        return len(self.documents)

    def __iter__(self) -> Iterator[Document]:
        return iter(self.documents)

    @property
    def document_count(self) -> int:
        return len(self.documents)

    @property
    def image_count(self) -> int:
        return sum(doc.image_count for doc in self.documents)


@dataclass(frozen=True)
class BuildTask:
    """A document paired with its resolved output path."""
    document: Document
    output_path: Path


@dataclass(frozen=True)
class PageDescriptor:
    """
    Page geometry computed for one image.

    Attributes:
        image_path: Source image file
        dpi_x: Horizontal resolution
        dpi_y: Vertical resolution
        pixel_width: Image width in pixels
        pixel_height: Image height in pixels
        width: Page width in points
        height: Page height in points
    """
    image_path: Path
    dpi_x: float
    dpi_y: float
    pixel_width: int
    pixel_height: int
    width: float
    height: float

    @property
    def width_inches(self) -> float:
        return self.width / POINTS_PER_INCH

    @property
    def height_inches(self) -> float:
        return self.height / POINTS_PER_INCH

    def message(self) -> str:
        """Diagnostic line reported for this image in the build log."""
        return "Processing image: {name}, DPI: {dpi:g}, Size: {w:.1f} x {h:.1f}".format(
            name=self.image_path.name,
            dpi=self.dpi_x,
            w=self.width_inches,
            h=self.height_inches,
        )


@dataclass(frozen=True)
class DocumentResult:
    """Result of building one document."""
    output_path: Path
    messages: Tuple[str, ...] = ()


@dataclass(frozen=True)
class BuildLog:
    """
    Immutable report of a build run.

    Attributes:
        documents: The collection that was built
        pdfs: Paths of the PDFs that were written
        messages: Per-image diagnostics, in arrival order
        errors: Per-document error messages, in arrival order
        skipped: Keys of documents never started because the run was cancelled
        elapsed_seconds: Wall-clock duration of the run
    """
    documents: DocumentCollection
    pdfs: frozenset = field(default_factory=frozenset)
    messages: Tuple[str, ...] = ()
    errors: Tuple[str, ...] = ()
    skipped: Tuple[str, ...] = ()
    elapsed_seconds: float = 0.0

    @property
    def document_count(self) -> int:
        return self.documents.document_count

    @property
    def image_count(self) -> int:
        return self.documents.image_count

    @property
    def succeeded(self) -> bool:
        return not self.errors and not self.skipped

    def summary(self) -> str:
        return (
            "BuildLog(documents={documents}, images={images}, pdfs={pdfs}, "
            "errors={errors}, skipped={skipped})"
        ).format(
            documents=self.document_count,
            images=self.image_count,
            pdfs=len(self.pdfs),
            errors=len(self.errors),
            skipped=len(self.skipped),
        )

    def __str__(self) -> str:
        return self.summary()
