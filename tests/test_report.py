from __future__ import annotations

from pathlib import Path

from pdf_builder.report import ERROR_HEADER, PROCESS_HEADER, format_build_report, write_build_report
from pdf_builder.types import BuildLog, Document, DocumentCollection


def _log(**kwargs) -> BuildLog:
    collection = DocumentCollection(
        documents=(Document("A", ("a1.tif", "a2.tif")), Document("B", ("b1.tif",))),
        source=Path("/exports/VOL001.opt"),
    )
    return BuildLog(documents=collection, elapsed_seconds=90, **kwargs)


def test_report_without_errors() -> None:
    text = format_build_report(_log(messages=("Processing image: a1.tif, DPI: 300, Size: 8.5 x 11.0",)))

    lines = text.splitlines()
    assert lines[0] == "The file VOL001.opt with 2 documents and 3 images was processed in 1.5 minutes."
    assert ERROR_HEADER not in text
    assert lines[-2:] == [PROCESS_HEADER, "Processing image: a1.tif, DPI: 300, Size: 8.5 x 11.0"]


def test_report_lists_errors_before_process_log() -> None:
    text = format_build_report(_log(errors=("Document B: Image file not found: b1.tif",)))

    assert text.index(ERROR_HEADER) < text.index("Document B") < text.index(PROCESS_HEADER)


def test_report_lists_cancelled_documents() -> None:
    text = format_build_report(_log(skipped=("B",)))

    assert "Cancelled before building 1 document(s):" in text


def test_write_build_report(tmp_path: Path) -> None:
    destination = tmp_path / "logs" / "build.log"

    written = write_build_report(_log(), destination, load_file=tmp_path / "other.lfp")

    assert written == destination
    assert destination.read_text(encoding="utf-8").startswith("The file other.lfp with 2 documents")
