from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from pdf_handouts.exceptions import PdfValidationError
from pdf_handouts.geometry import Length, Margins, PageDimensions, calculate_safe_area
from pdf_handouts.metadata import extract_metadata


def test_length_conversions() -> None:
    inch = Length.from_inches(1.0)
    assert inch.mm == pytest.approx(25.4)
    assert inch.pt == pytest.approx(72.0)
    assert Length.from_points(36).inches == pytest.approx(0.5)
    assert (inch + Length.from_mm(4.6)).mm == pytest.approx(30.0)
    assert (inch - Length.from_mm(5.4)).mm == pytest.approx(20.0)
    assert Length.from_mm(1) < Length.from_mm(2)


def test_standard_page_sizes() -> None:
    assert PageDimensions.letter().to_points() == (612.0, 792.0)
    assert PageDimensions.a4().to_points() == (595.276, 841.89)
    assert PageDimensions.from_points(612, 792).width.mm == pytest.approx(215.9)


def test_margins() -> None:
    standard = Margins.standard()
    assert standard.top.pt == pytest.approx(72.0)
    assert standard.left == standard.right == standard.bottom == standard.top
    assert Margins.narrow().left.inches == pytest.approx(0.5)


def test_safe_area() -> None:
    area = calculate_safe_area(PageDimensions.letter(), Length.from_mm(20), Length.from_mm(15))
    assert area.left.mm == 0
    assert area.right.mm == pytest.approx(215.9)
    assert area.top.mm == pytest.approx(259.4)
    assert area.bottom.mm == pytest.approx(15)


def test_extract_metadata(sample_pdfs: list[Path]) -> None:
    info = extract_metadata(sample_pdfs[0])
    assert info.page_count == 2
    assert info.title == "Document One"
    assert info.author == "Handout Tests"
    assert info.page_size_mm == (215.9, 279.4)


def test_extract_metadata_without_info(pdf_factory: Callable[..., Path]) -> None:
    info = extract_metadata(pdf_factory("plain.pdf"))
    assert info.page_count == 1
    assert info.title is None
    assert info.author is None


def test_extract_metadata_rejects_garbage(tmp_path: Path) -> None:
    bad = tmp_path / "bad.pdf"
    bad.write_text("not a pdf")
    with pytest.raises(PdfValidationError):
        extract_metadata(bad)
