"""img2pdf backend implementation for PDF Builder."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import img2pdf
from PIL import Image, ImageSequence, UnidentifiedImageError
from pypdf import PdfReader, PdfWriter

from ..exceptions import EncodingError, ImageReadError
from ..types import PageDescriptor
from .base import EncodedPages, PageEncoder, normalize_dpi, page_size

LOGGER = logging.getLogger(__name__)

PRODUCER = "PDF Builder"


def describe_frames(image_path: Path) -> List[PageDescriptor]:
    """Read the pixel size and resolution of every frame in ``image_path``.

    Multi-page files such as TIFFs yield one descriptor per frame, matching
    the pages img2pdf emits for them.
    """

    if not image_path.is_file():
        raise ImageReadError(f"Image file not found: {image_path}")

    frames: List[PageDescriptor] = []
    try:
        with Image.open(image_path) as image:
            for frame in ImageSequence.Iterator(image):
                pixel_width, pixel_height = frame.size
                dpi = normalize_dpi(frame.info.get("dpi"))
                width, height = page_size(pixel_width, pixel_height, dpi)
                frames.append(
                    PageDescriptor(
                        image_path=image_path,
                        dpi_x=dpi[0],
                        dpi_y=dpi[1],
                        pixel_width=pixel_width,
                        pixel_height=pixel_height,
                        width=width,
                        height=height,
                    )
                )
    except UnidentifiedImageError as exc:
        raise ImageReadError(f"Unsupported or corrupted image: {image_path}") from exc
    except OSError as exc:
        raise ImageReadError(f"Unable to read image: {image_path}. Error: {exc}") from exc
    return frames


def describe_image(image_path: Path) -> PageDescriptor:
    """Read the pixel size and resolution of the first frame of ``image_path``."""

    return describe_frames(image_path)[0]


def _fit_page(imgwidthpx: int, imgheightpx: int, ndpi: Tuple[float, float]) -> Tuple[float, float, float, float]:
    # Page and image share the same box: zero margins, no scaling beyond DPI.
    width, height = page_size(imgwidthpx, imgheightpx, ndpi)
    return width, height, width, height


class Img2PdfEncoder(PageEncoder):
    """Encoder that embeds images with `img2pdf` and compresses with `pypdf`."""

    def __init__(self, *, compression_level: int = 9) -> None:
        self.compression_level = compression_level

    def encode_pages(
        self,
        image_paths: Sequence[Path],
        *,
        title: Optional[str] = None,
    ) -> EncodedPages:
        if not image_paths:
            raise EncodingError("No images supplied to encode.")

        pages: List[PageDescriptor] = []
        for image_path in image_paths:
            for descriptor in describe_frames(Path(image_path)):
                LOGGER.debug(
                    "Page %s: %sx%s px at %sx%s dpi -> %.2fx%.2f pt",
                    descriptor.image_path.name,
                    descriptor.pixel_width,
                    descriptor.pixel_height,
                    descriptor.dpi_x,
                    descriptor.dpi_y,
                    descriptor.width,
                    descriptor.height,
                )
                pages.append(descriptor)

        try:
            raw = img2pdf.convert(
                [str(image_path) for image_path in image_paths],
                layout_fun=_fit_page,
            )
        except Exception as exc:
            raise EncodingError(f"img2pdf failed to encode pages. Error: {exc}") from exc

        return EncodedPages(data=self._compress(raw, title=title), pages=tuple(pages))

    def _compress(self, data: bytes, *, title: Optional[str] = None) -> bytes:
        try:
            writer = PdfWriter(clone_from=PdfReader(io.BytesIO(data)))
            for page in writer.pages:
                page.compress_content_streams(level=self.compression_level)
            writer.compress_identical_objects()

            metadata = {"/Producer": PRODUCER}
            if title:
                metadata["/Title"] = title
            writer.add_metadata(metadata)

            buffer = io.BytesIO()
            writer.write(buffer)
        except Exception as exc:
            raise EncodingError(f"Failed to compress PDF streams. Error: {exc}") from exc
        return buffer.getvalue()


__all__ = ["Img2PdfEncoder", "describe_frames", "describe_image", "PRODUCER"]
