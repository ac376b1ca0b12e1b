"""Read basic document information from a PDF."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Optional, Tuple

from .geometry import PageDimensions
from .merge import load_reader
from .utils import PathLike, ensure_path

LOGGER = logging.getLogger("pdf_handouts.metadata")


@dataclass(frozen=True)
class PdfMetadata:
    path: Path
    page_count: int
    title: Optional[str] = None
    author: Optional[str] = None
    first_page: Optional[PageDimensions] = None

    @property
    def page_size_mm(self) -> Optional[Tuple[float, float]]:
        if self.first_page is None:
            return None
        return round(self.first_page.width.mm, 1), round(self.first_page.height.mm, 1)


def _clean(value: object) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def extract_metadata(path: PathLike) -> PdfMetadata:
    """Return page count, title, author and first page size of *path*.

    Raises:
        PdfValidationError: If the file is missing or not a readable PDF.
    """

    pdf_path = ensure_path(path)
    LOGGER.debug("Gathering PDF info for %s", pdf_path)
    reader = load_reader(pdf_path)
    info = reader.metadata
    box = reader.pages[0].mediabox
    result = PdfMetadata(
        path=pdf_path,
        page_count=len(reader.pages),
        title=_clean(info.title) if info else None,
        author=_clean(info.author) if info else None,
        first_page=PageDimensions.from_points(float(box.width), float(box.height)),
    )
    LOGGER.info("PDF info: path=%s, pages=%s", result.path, result.page_count)
    return result


__all__ = ["PdfMetadata", "extract_metadata"]
