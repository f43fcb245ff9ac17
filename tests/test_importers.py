from __future__ import annotations

from pathlib import Path

import pytest

from pdf_builder.exceptions import LoadFileError, UnsupportedLoadFileError
from pdf_builder.importers import load_collection, parse_lfp, parse_opt, supported_extensions


OPT_ROWS = [
    "ABC0001,VOL001,IMAGES\\0001\\ABC0001.tif,Y,,,3",
    "ABC0002,VOL001,IMAGES\\0001\\ABC0002.tif,,,,",
    "ABC0003,VOL001,IMAGES\\0001\\ABC0003.tif,,,,",
    "ABC0004,VOL001,IMAGES\\0001\\ABC0004.tif,Y,,,1",
    "",
    "ABC0005,VOL001,IMAGES\\0002\\ABC0005.tif,Y,,,1",
]

LFP_ROWS = [
    "IM,ABC0001,D,0,@VOL001;IMAGES\\0001;ABC0001.tif;2",
    "IM,ABC0002, ,0,@VOL001;IMAGES\\0001;ABC0002.tif;2",
    "OF,ABC0002,ignored",
    "IM,ABC0003,D,1,@VOL001;IMAGES\\0001;ABC0003.tif;2",
    "IM,ABC0004, ,2,@VOL001;IMAGES\\0001;ABC0003.tif;2",
    "IM,ABC0005, ,3,@VOL001;IMAGES\\0001;ABC0003.tif;2",
    "IM,ABC0006,C,0,@VOL001;IMAGES\\0002;ABC0006.jpg;4",
]


def test_parse_opt_groups_pages_at_breaks() -> None:
    documents = parse_opt(OPT_ROWS)

    assert [doc.key for doc in documents] == ["ABC0001", "ABC0004", "ABC0005"]
    assert documents[0].image_paths == (
        "IMAGES\\0001\\ABC0001.tif",
        "IMAGES\\0001\\ABC0002.tif",
        "IMAGES\\0001\\ABC0003.tif",
    )
    assert documents[2].image_count == 1


def test_parse_opt_first_row_without_break_starts_document() -> None:
    documents = parse_opt(["A1,VOL,IMG\\A1.tif,,,,", "A2,VOL,IMG\\A2.tif,,,,"])

    assert len(documents) == 1
    assert documents[0].key == "A1"
    assert documents[0].image_count == 2


def test_parse_opt_rejects_short_rows() -> None:
    with pytest.raises(LoadFileError, match="Line 2"):
        parse_opt(["A1,VOL,IMG\\A1.tif,Y,,,", "garbage"])


def test_parse_lfp_groups_and_collapses_multipage_files() -> None:
    documents = parse_lfp(LFP_ROWS)

    assert [doc.key for doc in documents] == ["ABC0001", "ABC0003", "ABC0006"]
    assert documents[0].image_paths == ("IMAGES\\0001\\ABC0001.tif", "IMAGES\\0001\\ABC0002.tif")
    assert documents[1].image_paths == ("IMAGES\\0001\\ABC0003.tif",)
    assert documents[2].image_paths == ("IMAGES\\0002\\ABC0006.jpg",)


def test_parse_lfp_rejects_malformed_image_rows() -> None:
    with pytest.raises(LoadFileError, match="Line 1"):
        parse_lfp(["IM,ABC0001,D,0,@VOL001"])


def test_load_collection_opt(input_root: Path) -> None:
    load_file = input_root / "export.OPT"
    load_file.write_text("\r\n".join(OPT_ROWS) + "\r\n", encoding="cp1252")

    collection = load_collection(load_file)

    assert collection.document_count == 3
    assert collection.image_count == 5
    assert len(collection) == 3
    assert collection.source == load_file


def test_load_collection_lfp(input_root: Path) -> None:
    load_file = input_root / "export.lfp"
    load_file.write_text("\n".join(LFP_ROWS), encoding="cp1252")

    collection = load_collection(load_file)

    assert collection.document_count == 3
    assert collection.image_count == 4


def test_load_collection_uses_requested_encoding(input_root: Path) -> None:
    load_file = input_root / "export.opt"
    load_file.write_bytes("Ä1,VOL,IMÄGES\\Ä1.tif,Y,,,1\r\n".encode("utf-8"))

    collection = load_collection(load_file, encoding="utf-8")

    assert collection.documents[0].image_paths == ("IMÄGES\\Ä1.tif",)


def test_load_collection_bad_bytes_for_encoding(input_root: Path) -> None:
    load_file = input_root / "export.opt"
    load_file.write_bytes(b"\xff\xfe\xfa,VOL,IMG\\A.tif,Y,,,1\r\n")

    with pytest.raises(LoadFileError):
        load_collection(load_file, encoding="utf-8")


def test_load_collection_unknown_encoding(input_root: Path) -> None:
    load_file = input_root / "export.opt"
    load_file.write_text("A,VOL,IMG\\A.tif,Y,,,1\r\n")

    with pytest.raises(LoadFileError, match="Unknown text encoding"):
        load_collection(load_file, encoding="no-such-codec")


def test_unsupported_extension(input_root: Path) -> None:
    load_file = input_root / "export.dat"
    load_file.write_text("anything")

    with pytest.raises(UnsupportedLoadFileError, match="Unsupported file type"):
        load_collection(load_file)


def test_missing_load_file(input_root: Path) -> None:
    with pytest.raises(LoadFileError, match="not found"):
        load_collection(input_root / "missing.opt")


def test_malformed_load_file_names_file(input_root: Path) -> None:
    load_file = input_root / "broken.opt"
    load_file.write_text("A1,VOL\r\n")

    with pytest.raises(LoadFileError, match="broken.opt: Line 1"):
        load_collection(load_file)


def test_supported_extensions() -> None:
    assert supported_extensions() == [".lfp", ".opt"]
