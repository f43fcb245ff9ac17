"""Encoder protocol and page geometry shared by PDF Builder backends."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Sequence, Tuple

from ..types import POINTS_PER_INCH, PageDescriptor

DEFAULT_DPI = 96.0


def normalize_dpi(dpi: Optional[Tuple[float, float]]) -> Tuple[float, float]:
    """Return a usable ``(dpi_x, dpi_y)`` pair, falling back to :data:`DEFAULT_DPI`."""

    if not dpi:
        return DEFAULT_DPI, DEFAULT_DPI
    dpi_x, dpi_y = (float(round(value)) for value in dpi[:2])
    if dpi_x <= 0 or dpi_y <= 0:
        return DEFAULT_DPI, DEFAULT_DPI
    return dpi_x, dpi_y


def page_size(pixel_width: int, pixel_height: int, dpi: Tuple[float, float]) -> Tuple[float, float]:
    """Return the ``(width, height)`` in points of a page that exactly fits an image."""

    dpi_x, dpi_y = normalize_dpi(dpi)
    return (
        pixel_width / dpi_x * POINTS_PER_INCH,
        pixel_height / dpi_y * POINTS_PER_INCH,
    )


@dataclass
class EncodedPages:
    """PDF bytes produced by an encoder plus the geometry of each page."""

    data: bytes
    pages: Tuple[PageDescriptor, ...]

    @property
    def messages(self) -> Tuple[str, ...]:
        return tuple(page.message() for page in self.pages)


class PageEncoder(Protocol):
    """Protocol for turning an ordered set of images into a PDF."""

    def encode_pages(
        self,
        image_paths: Sequence[Path],
        *,
        title: Optional[str] = None,
    ) -> EncodedPages:
        """Return PDF bytes with one page per image, in the given order."""
