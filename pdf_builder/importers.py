"""Importers for Opticon (``.opt``) and IPRO (``.lfp``) image load files."""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

from .config import DEFAULT_ENCODING
from .exceptions import LoadFileError, UnsupportedLoadFileError
from .paths import PathLike
from .types import Document, DocumentCollection

LOGGER = logging.getLogger(__name__)


class _DocumentAccumulator:
    """Group consecutive image rows into documents at each break."""

    def __init__(self) -> None:
        self.documents: List[Document] = []
        self._key: Optional[str] = None
        self._paths: List[str] = []

    def add(self, key: str, path: str, starts_document: bool) -> None:
        if starts_document or self._key is None:
            self.flush()
            self._key = key
        self._paths.append(path)

    def flush(self) -> None:
        if self._key is not None and self._paths:
            self.documents.append(Document(key=self._key, image_paths=tuple(self._paths)))
        self._key = None
        self._paths = []


def parse_opt(lines: Iterable[str]) -> List[Document]:
    """Parse Opticon rows: ``key,volume,path,Y,folder,box,pages``."""

    accumulator = _DocumentAccumulator()
    for line_number, row in enumerate(csv.reader(lines), start=1):
        if not row or not any(cell.strip() for cell in row):
            continue
        if len(row) < 4:
            raise LoadFileError(
                f"Line {line_number}: expected at least 4 fields, got {len(row)}."
            )
        key, path = row[0].strip(), row[2].strip()
        if not key or not path:
            raise LoadFileError(f"Line {line_number}: image key and path are required.")
        accumulator.add(key, path, row[3].strip().upper() == "Y")
    accumulator.flush()
    return accumulator.documents


def parse_lfp(lines: Iterable[str]) -> List[Document]:
    """Parse IPRO image rows: ``IM,key,break,offset,@volume;dir;file;type``."""

    accumulator = _DocumentAccumulator()
    last_path: Optional[str] = None
    for line_number, line in enumerate(lines, start=1):
        line = line.strip()
        if not line:
            continue
        fields = line.split(",", 4)
        if fields[0].strip().upper() != "IM":
            continue
        if len(fields) < 5:
            raise LoadFileError(
                f"Line {line_number}: expected 5 comma-separated fields, got {len(fields)}."
            )
        key = fields[1].strip()
        flag = fields[2].strip().upper()
        offset = fields[3].strip() or "0"
        location = fields[4].strip().lstrip("@").split(";")
        if len(location) < 3 or not key:
            raise LoadFileError(f"Line {line_number}: malformed image entry '{line}'.")
        directory, filename = location[1].strip().strip("\\/"), location[2].strip()
        path = f"{directory}\\{filename}" if directory else filename

        starts_document = flag in ("D", "C")
        # Later pages of a multi-page file repeat the path with a non-zero offset.
        if not starts_document and path == last_path and offset not in ("0", "1"):
            continue
        accumulator.add(key, path, starts_document)
        last_path = path
    accumulator.flush()
    return accumulator.documents


_PARSERS: Dict[str, Callable[[Iterable[str]], List[Document]]] = {
    ".opt": parse_opt,
    ".lfp": parse_lfp,
}


def supported_extensions() -> List[str]:
    return sorted(_PARSERS)


def load_collection(load_file: PathLike, encoding: str = DEFAULT_ENCODING) -> DocumentCollection:
    """Import the documents listed in ``load_file``.

    The format is chosen by file extension (case-insensitive).

    Raises:
        UnsupportedLoadFileError: For extensions other than ``.opt``/``.lfp``.
        LoadFileError: If the file is missing, unreadable or malformed.
    """

    path = Path(load_file)
    parser = _PARSERS.get(path.suffix.lower())
    if parser is None:
        raise UnsupportedLoadFileError(
            f"Unsupported file type '{path.suffix}'. Expected one of: {', '.join(supported_extensions())}"
        )
    if not path.is_file():
        raise LoadFileError(f"Load file not found: {path}")

    try:
        with path.open("r", encoding=encoding, newline="") as handle:
            documents = parser(handle)
    except LoadFileError as exc:
        raise LoadFileError(f"{path.name}: {exc.message}") from exc
    except LookupError as exc:
        raise LoadFileError(f"Unknown text encoding: {encoding}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise LoadFileError(f"Unable to read load file: {path}. Error: {exc}") from exc

    collection = DocumentCollection(documents=tuple(documents), source=path)
    LOGGER.info(
        "Imported %s: %d document(s), %d image(s)",
        path.name,
        collection.document_count,
        collection.image_count,
    )
    return collection


__all__ = ["load_collection", "parse_lfp", "parse_opt", "supported_extensions"]
