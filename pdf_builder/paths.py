"""Output and image path resolution for load-file documents."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path, PurePath, PureWindowsPath
from typing import List, Sequence, Union

from .exceptions import PathResolutionError

LOGGER = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]

_SEPARATORS = re.compile(r"[\\/]+")
_DRIVE = re.compile(r"^[A-Za-z]:[\\/]")


def is_unc_path(raw: str) -> bool:
    """Return ``True`` for network-share paths such as ``\\\\server\\share``."""

    return raw.startswith("\\\\") or raw.startswith("//")


def is_absolute_image_path(raw: str) -> bool:
    """Return ``True`` when a load-file path is absolute (UNC or drive-qualified)."""

    return is_unc_path(raw) or bool(_DRIVE.match(raw))


def _relative_segments(raw: str) -> List[str]:
    # A single leading separator marks a path relative to the load file.
    if raw[:1] in ("\\", "/"):
        raw = raw[1:]
    return [segment for segment in _SEPARATORS.split(raw) if segment and segment != "."]


def _is_within(path: Path, root: Path) -> bool:
    try:
        path.relative_to(root)
    except ValueError:
        return False
    return True


def _normalize(path: PurePath) -> Path:
    return Path(os.path.normpath(str(path)))


def resolve_image_path(raw: str, input_root: PathLike) -> Path:
    """Return the on-disk location of a load-file image path."""

    if is_absolute_image_path(raw):
        return Path(raw)
    return _normalize(Path(input_root).joinpath(*_relative_segments(raw)))


def _absolute_relative_to_input(raw: str, input_root: Path) -> PurePath:
    image = PureWindowsPath(raw)
    try:
        return image.relative_to(PureWindowsPath(str(input_root)))
    except ValueError:
        pass
    try:
        return Path(raw).relative_to(input_root)
    except ValueError as exc:
        raise PathResolutionError(
            f"Image path '{raw}' is outside the input directory {input_root}."
        ) from exc


def resolve_output_path(
    image_paths: Sequence[str],
    input_root: PathLike,
    output_root: PathLike,
    *,
    create_dirs: bool = True,
) -> Path:
    """Compute the PDF path for a document.

    The first image of the document names the output file; its directory
    structure relative to ``input_root`` is mirrored under ``output_root``
    and the extension is replaced with ``.pdf``. The returned path is always
    inside ``output_root``.

    Args:
        image_paths: Raw image paths of the document in page order.
        input_root: Directory the load file paths are relative to.
        output_root: Directory receiving the PDFs.
        create_dirs: Create the destination directory if it is missing.

    Raises:
        PathResolutionError: If the document has no images or its first image
            cannot be placed inside ``output_root``.
    """

    if not image_paths:
        raise PathResolutionError("Document has no image files to build a PDF from.")

    input_root = _normalize(Path(input_root).absolute())
    output_root = _normalize(Path(output_root).absolute())
    first = image_paths[0]

    if is_absolute_image_path(first):
        relative = _absolute_relative_to_input(first, input_root)
        candidate = _normalize(output_root.joinpath(*relative.parts))
        LOGGER.debug("Output path for '%s' resolved via input root: %s", first, candidate)
    else:
        segments = _relative_segments(first)
        if not segments:
            raise PathResolutionError(f"Image path '{first}' has no file name.")
        # Relative paths that climb out of the output root climb out of the
        # input root by the same segments, so they are rejected here.
        candidate = _normalize(output_root.joinpath(*segments))

    if candidate == output_root or not _is_within(candidate, output_root):
        raise PathResolutionError(
            f"Image path '{first}' does not map inside the output directory."
        )

    if create_dirs:
        try:
            candidate.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PathResolutionError(
                f"Cannot create output directory {candidate.parent}. Error: {exc}"
            ) from exc

    return candidate.with_suffix(".pdf")


__all__ = [
    "is_unc_path",
    "is_absolute_image_path",
    "resolve_image_path",
    "resolve_output_path",
]
