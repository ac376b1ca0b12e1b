from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest
from pypdf import PdfReader, PdfWriter

from pdf_handouts.exceptions import PdfHandoutsError, PdfMergeError, PdfValidationError
from pdf_handouts.merge import load_reader, merge_documents, merge_pdfs, write_document
from pdf_handouts import utils


def test_merge_pdfs_creates_output(tmp_path: Path, sample_pdfs: list[Path]) -> None:
    output = tmp_path / "merged.pdf"

    result = merge_pdfs(sample_pdfs, output)

    assert result == output.resolve()
    assert output.exists()

    reader = PdfReader(str(output))
    assert len(reader.pages) == 3
    assert reader.metadata.get("/Title") == "Document One"


def test_merge_keeps_input_order(tmp_path: Path, pdf_factory: Callable[..., Path]) -> None:
    wide = pdf_factory("wide.pdf")
    small = tmp_path / "small.pdf"
    writer = PdfWriter()
    writer.add_blank_page(width=200, height=100)
    with small.open("wb") as handle:
        writer.write(handle)

    merged = merge_documents([small, wide])

    assert [float(page.mediabox.width) for page in merged.pages] == [200.0, 612.0]


def test_merge_without_metadata(sample_pdfs: list[Path]) -> None:
    merged = merge_documents(sample_pdfs, metadata=False)
    assert merged.metadata is None or merged.metadata.get("/Title") is None


def test_merge_pdfs_no_inputs(tmp_path: Path) -> None:
    with pytest.raises(PdfMergeError, match="No input PDFs"):
        merge_pdfs([], tmp_path / "out.pdf")


def test_merge_rejects_invalid_input(tmp_path: Path, sample_pdfs: list[Path]) -> None:
    invalid_path = tmp_path / "not.pdf"
    invalid_path.write_text("not a pdf")
    with pytest.raises(PdfMergeError, match="Invalid PDF"):
        merge_documents([*sample_pdfs, invalid_path])


def test_merge_rejects_missing_input(tmp_path: Path) -> None:
    with pytest.raises(PdfMergeError, match="File not found"):
        merge_documents([tmp_path / "missing.pdf"])


def test_load_reader_empty_document(tmp_path: Path) -> None:
    empty = tmp_path / "empty.pdf"
    writer = PdfWriter()
    with empty.open("wb") as handle:
        writer.write(handle)

    with pytest.raises(PdfValidationError, match="no pages"):
        load_reader(empty)


def test_load_reader_handles_encrypted(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    sample = tmp_path / "sample.pdf"
    sample.write_bytes(b"%PDF-1.4\n")

    class DummyReader:
        def __init__(self, *_: object, **__: object) -> None:
            self.is_encrypted = True
            self.pages = [object()]

        def decrypt(self, password: str) -> None:
            self.decrypt_called = password  # type: ignore[attr-defined]

    monkeypatch.setattr("pdf_handouts.merge.PdfReader", lambda path: DummyReader())

    reader = load_reader(sample)
    assert isinstance(reader, DummyReader)
    assert getattr(reader, "decrypt_called") == ""


def test_write_document_creates_parents(tmp_path: Path) -> None:
    writer = PdfWriter()
    writer.add_blank_page(width=100, height=100)
    target = write_document(writer, tmp_path / "a" / "b" / "out.pdf")
    assert target.exists()


def test_write_document_reports_failure(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.mkdir()
    writer = PdfWriter()
    writer.add_blank_page(width=100, height=100)
    with pytest.raises(PdfHandoutsError, match="Failed to write"):
        write_document(writer, blocker)


def test_path_helpers(tmp_path: Path) -> None:
    resolved = utils.ensure_path("~/../")
    assert isinstance(resolved, Path)
    assert resolved.is_absolute()

    paths = utils.ensure_iterable([tmp_path, str(tmp_path / "other.pdf")])
    assert all(isinstance(p, Path) for p in paths)


def test_expand_inputs_sorts_glob_matches(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("02-body.pdf", "10-end.pdf", "01-intro.pdf", "notes.txt"):
        (tmp_path / name).write_bytes(b"")
    monkeypatch.chdir(tmp_path)

    assert utils.expand_inputs(["[0-9]*.pdf"]) == [
        Path("01-intro.pdf"),
        Path("02-body.pdf"),
        Path("10-end.pdf"),
    ]
    assert utils.expand_inputs(["notes.txt"]) == [Path("notes.txt")]


def test_expand_inputs_unmatched_pattern(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    with pytest.raises(FileNotFoundError):
        utils.expand_inputs(["*.pdf"])


@pytest.mark.parametrize(
    "value, expected",
    [(0, "0"), (1.0, "1"), (12.5, "12.5"), (0.123456, "0.1235"), (-0.00001, "0"), (-3.25, "-3.25")],
)
def test_format_number(value: float, expected: str) -> None:
    assert utils.format_number(value) == expected
