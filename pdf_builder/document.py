"""Build a single load-file document into a PDF."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Callable, Optional

from .backends import Img2PdfEncoder, PageEncoder
from .exceptions import DocumentBuildError, EncodingError
from .paths import PathLike, resolve_image_path, resolve_output_path
from .types import BuildTask, Document, DocumentResult

LOGGER = logging.getLogger(__name__)


def write_atomic(data: bytes, destination: Path) -> None:
    """Write ``data`` to ``destination`` through a temporary file and rename.

    A reader never observes a partially written PDF at ``destination``.
    """

    handle = tempfile.NamedTemporaryFile(
        "wb", delete=False, dir=destination.parent, prefix=f".{destination.stem}.", suffix=".tmp"
    )
    temp_path = Path(handle.name)
    try:
        with handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        temp_path.replace(destination)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise


class DocumentBuilder:
    """Convert the images of one :class:`Document` into a single PDF."""

    def __init__(self, encoder: Optional[PageEncoder] = None) -> None:
        self.encoder: PageEncoder = encoder or Img2PdfEncoder()

    def plan(self, document: Document, input_root: PathLike, output_root: PathLike) -> BuildTask:
        output_path = resolve_output_path(document.image_paths, input_root, output_root)
        return BuildTask(document=document, output_path=output_path)

    def build(
        self,
        document: Document,
        input_root: PathLike,
        output_root: PathLike,
        *,
        claim: Optional[Callable[[Path, str], None]] = None,
    ) -> DocumentResult:
        """Build ``document`` and return the written path and its diagnostics.

        ``claim`` is called with the resolved output path and the document key
        before any image is read; raising from it fails the document.

        Raises:
            DocumentBuildError: Wrapping any failure for this document, with
                the document key in the message.
        """
        try:
            task = self.plan(document, input_root, output_root)
            if claim is not None:
                claim(task.output_path, document.key)
            image_paths = [resolve_image_path(raw, input_root) for raw in document.image_paths]
            encoded = self.encoder.encode_pages(image_paths, title=document.key)
            self._write(encoded.data, task.output_path)
        except DocumentBuildError as exc:
            raise type(exc)(f"Document {document.key}: {exc.message}") from exc
        except Exception as exc:
            raise DocumentBuildError(
                f"Document {document.key}: unexpected error. Error: {exc}"
            ) from exc

        LOGGER.debug(
            "Built %s (%d page(s)) -> %s", document.key, len(encoded.pages), task.output_path
        )
        return DocumentResult(output_path=task.output_path, messages=encoded.messages)

    @staticmethod
    def _write(data: bytes, destination: Path) -> None:
        try:
            write_atomic(data, destination)
        except OSError as exc:
            raise EncodingError(f"Unable to write PDF: {destination}. Error: {exc}") from exc


__all__ = ["DocumentBuilder", "write_atomic"]
