"""Concurrent batch conversion of a document collection."""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .config import validate_parallelism
from .document import DocumentBuilder
from .exceptions import DocumentBuildError, PathResolutionError
from .paths import PathLike
from .types import BuildLog, Document, DocumentCollection

LOGGER = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]


class BuildCoordinator:
    """Run :class:`DocumentBuilder` over a collection with bounded parallelism.

    Outcomes are appended to three lock-guarded sinks (written PDFs,
    diagnostics, errors) as documents finish. After every document,
    successful or not, the progress callback receives the completed
    percentage. Progress is delivered while holding the sink lock so
    observers see non-decreasing values ending at 100. A failing callback
    is logged and does not affect the build.

    Each output path is claimed by the first document that resolves to it;
    a later document resolving to the same PDF fails instead of overwriting.
    """

    def __init__(
        self,
        builder: Optional[DocumentBuilder] = None,
        *,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> None:
        self.builder = builder or DocumentBuilder()
        self.progress_callback = progress_callback

    def run(
        self,
        collection: DocumentCollection,
        input_root: PathLike,
        output_root: PathLike,
        parallelism: int,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> BuildLog:
        """Build every document in ``collection`` and return the build log.

        Args:
            collection: Documents to build.
            input_root: Directory the image paths are relative to.
            output_root: Directory receiving the PDFs.
            parallelism: Maximum number of documents built at once.
            cancel_event: When set, documents not yet started are skipped.

        Raises:
            ConfigurationError: If ``parallelism`` is not a positive integer.
        """
        parallelism = validate_parallelism(parallelism)
        if cancel_event is None:
            cancel_event = threading.Event()
        total = collection.document_count

        lock = threading.Lock()
        pdfs: List[Path] = []
        messages: List[str] = []
        errors: List[str] = []
        skipped: List[str] = []
        claimed: Dict[Path, str] = {}

        def report_progress() -> None:
            # Caller holds ``lock``.
            if self.progress_callback is None or total == 0:
                return
            completed = len(pdfs) + len(errors)
            try:
                self.progress_callback(int(round(100 * completed / total)))
            except Exception:
                LOGGER.exception("Progress callback failed at %d of %d document(s)", completed, total)

        def claim(output_path: Path, key: str) -> None:
            with lock:
                owner = claimed.get(output_path)
                if owner is None:
                    claimed[output_path] = key
            if owner is not None:
                raise PathResolutionError(
                    f"Output path {output_path} already used by document {owner}."
                )

        def process(document: Document) -> None:
            if cancel_event.is_set():
                with lock:
                    skipped.append(document.key)
                return

            try:
                result = self.builder.build(document, input_root, output_root, claim=claim)
            except DocumentBuildError as exc:
                LOGGER.warning("%s", exc)
                with lock:
                    errors.append(str(exc))
                    report_progress()
                return
            except Exception as exc:  # pragma: no cover - builder wraps errors
                LOGGER.exception("Unexpected failure building %s", document.key)
                with lock:
                    errors.append(f"Document {document.key}: {exc}")
                    report_progress()
                return

            with lock:
                pdfs.append(result.output_path)
                messages.extend(result.messages)
                report_progress()

        LOGGER.info(
            "Building %d document(s) (%d image(s)) into %s with parallelism %d",
            total,
            collection.image_count,
            output_root,
            parallelism,
        )
        started = time.monotonic()
        with ThreadPoolExecutor(max_workers=parallelism, thread_name_prefix="pdf-builder") as executor:
            futures = [executor.submit(process, document) for document in collection]
            for future in as_completed(futures):
                future.result()
        elapsed = time.monotonic() - started

        log = BuildLog(
            documents=collection,
            pdfs=frozenset(pdfs),
            messages=tuple(messages),
            errors=tuple(errors),
            skipped=tuple(skipped),
            elapsed_seconds=elapsed,
        )
        LOGGER.info("Build finished in %.2fs: %s", elapsed, log.summary())
        return log


def build_collection(
    collection: DocumentCollection,
    input_root: PathLike,
    output_root: PathLike,
    parallelism: int,
    *,
    progress_callback: Optional[ProgressCallback] = None,
    cancel_event: Optional[threading.Event] = None,
) -> BuildLog:
    """Convenience wrapper around :meth:`BuildCoordinator.run`."""

    coordinator = BuildCoordinator(progress_callback=progress_callback)
    return coordinator.run(
        collection, input_root, output_root, parallelism, cancel_event=cancel_event
    )


__all__ = ["BuildCoordinator", "build_collection", "validate_parallelism", "ProgressCallback"]
