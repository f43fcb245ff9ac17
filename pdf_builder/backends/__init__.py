"""Page encoder backends for PDF Builder."""

from .base import DEFAULT_DPI, EncodedPages, PageEncoder, normalize_dpi, page_size
from .img2pdf_backend import Img2PdfEncoder

__all__ = [
    "DEFAULT_DPI",
    "EncodedPages",
    "PageEncoder",
    "Img2PdfEncoder",
    "normalize_dpi",
    "page_size",
]
