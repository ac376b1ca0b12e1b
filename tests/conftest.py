from __future__ import annotations

from pathlib import Path
from typing import Callable, NamedTuple
import sys

import pytest
from pypdf import PageObject, PdfWriter
from pypdf.generic import DecodedStreamObject, NameObject

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pdf_handouts.fonts import FontResource, embed_font  # noqa: E402


class DrawnRun(NamedTuple):
    text: str
    x: float
    y: float
    size: float
    shear: float
    mode: int
    color: tuple[float, float, float]


def decode_runs(content: bytes, font: FontResource) -> list[DrawnRun]:
    """Read back the text runs a stamp content stream draws."""

    runs: list[DrawnRun] = []
    size = shear = x = y = 0.0
    mode = 0
    color = (0.0, 0.0, 0.0)
    for line in content.decode("latin-1").splitlines():
        parts = line.split()
        if not parts:
            continue
        operator = parts[-1]
        if operator == "Tf":
            size = float(parts[1])
        elif operator == "rg":
            color = (float(parts[0]), float(parts[1]), float(parts[2]))
        elif operator == "Tm":
            shear, x, y = float(parts[2]), float(parts[4]), float(parts[5])
        elif operator == "Tr":
            mode = int(parts[0])
        elif operator == "Tj":
            codes = bytes.fromhex(line.split("<", 1)[1].split(">", 1)[0])
            text = "".join(chr(font.code_points[code]) for code in codes)
            runs.append(DrawnRun(text, x, y, size, shear, mode, color))
    return runs


@pytest.fixture(scope="session")
def default_font() -> FontResource:
    return embed_font()


@pytest.fixture()
def writer_factory() -> Callable[..., PdfWriter]:
    def _create(pages: int = 3, width: float = 612, height: float = 792) -> PdfWriter:
        writer = PdfWriter()
        for _ in range(pages):
            writer.add_blank_page(width=width, height=height)
        return writer

    return _create


@pytest.fixture()
def set_content() -> Callable[[PdfWriter, PageObject, bytes], None]:
    def _set(writer: PdfWriter, page: PageObject, data: bytes) -> None:
        stream = DecodedStreamObject()
        stream.set_data(data)
        page[NameObject("/Contents")] = writer._add_object(stream)

    return _set


@pytest.fixture()
def pdf_factory(tmp_path: Path) -> Callable[..., Path]:
    def _create(filename: str, title: str | None = None, pages: int = 1) -> Path:
        path = tmp_path / filename
        writer = PdfWriter()
        for _ in range(pages):
            writer.add_blank_page(width=612, height=792)
        if title is not None:
            writer.add_metadata({"/Title": title, "/Author": "Handout Tests"})
        with path.open("wb") as handle:
            writer.write(handle)
        return path

    return _create


@pytest.fixture()
def sample_pdfs(pdf_factory: Callable[..., Path]) -> list[Path]:
    pdf1 = pdf_factory("01-intro.pdf", title="Document One", pages=2)
    pdf2 = pdf_factory("02-body.pdf", pages=1)
    return [pdf1, pdf2]


@pytest.fixture()
def runs_of() -> Callable[[bytes, FontResource], list[DrawnRun]]:
    return decode_runs
