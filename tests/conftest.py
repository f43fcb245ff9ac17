from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence, Tuple
import sys

import pytest
from PIL import Image

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pdf_builder.backends import EncodedPages, page_size  # noqa: E402
from pdf_builder.types import Document, DocumentCollection, PageDescriptor  # noqa: E402

ImageFactory = Callable[..., Path]


@pytest.fixture()
def input_root(tmp_path: Path) -> Path:
    root = tmp_path / "export"
    root.mkdir()
    return root


@pytest.fixture()
def output_root(tmp_path: Path) -> Path:
    return tmp_path / "pdfs"


@pytest.fixture()
def image_factory(input_root: Path) -> ImageFactory:
    def _create(
        relative: str,
        size: Tuple[int, int] = (200, 300),
        dpi: Optional[Tuple[int, int]] = (100, 100),
        mode: str = "L",
    ) -> Path:
        path = input_root.joinpath(*relative.replace("\\", "/").split("/"))
        path.parent.mkdir(parents=True, exist_ok=True)
        image = Image.new(mode, size, color=255 if mode == "L" else "white")
        if dpi is None:
            image.save(path)
        else:
            image.save(path, dpi=dpi)
        return path

    return _create


@pytest.fixture()
def opt_factory(input_root: Path) -> Callable[[Iterable[Sequence[str]], str], Path]:
    """Write an Opticon file from ``(key, path, break)`` rows."""

    def _create(rows: Iterable[Sequence[str]], name: str = "export.opt") -> Path:
        lines = [f"{key},VOL001,{path},{brk},,," for key, path, brk in rows]
        load_file = input_root / name
        load_file.write_text("\r\n".join(lines) + "\r\n", encoding="cp1252")
        return load_file

    return _create


@pytest.fixture()
def three_documents(image_factory: ImageFactory) -> DocumentCollection:
    documents = []
    for index in range(1, 4):
        key = f"DOC{index:04d}"
        image_factory(f"IMAGES\\0001\\{key}.png")
        documents.append(Document(key=key, image_paths=(f"IMAGES\\0001\\{key}.png",)))
    return DocumentCollection(documents=tuple(documents))


class FakeEncoder:
    """Encoder that checks the images exist and returns placeholder bytes."""

    def __init__(self, on_encode: Optional[Callable[[Sequence[Path]], None]] = None) -> None:
        self.on_encode = on_encode
        self.calls = []

    def encode_pages(self, image_paths, *, title=None) -> EncodedPages:
        self.calls.append(title)
        if self.on_encode is not None:
            self.on_encode(image_paths)
        pages = []
        for image_path in image_paths:
            if not Path(image_path).exists():
                from pdf_builder.exceptions import ImageReadError

                raise ImageReadError(f"Image file not found: {image_path}")
            width, height = page_size(850, 1100, (100, 100))
            pages.append(
                PageDescriptor(
                    image_path=Path(image_path),
                    dpi_x=100.0,
                    dpi_y=100.0,
                    pixel_width=850,
                    pixel_height=1100,
                    width=width,
                    height=height,
                )
            )
        return EncodedPages(data=b"%PDF-1.4\n%fake\n", pages=tuple(pages))


@pytest.fixture()
def fake_encoder() -> FakeEncoder:
    return FakeEncoder()
