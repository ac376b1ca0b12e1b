"""Page geometry helpers: lengths, standard page sizes and margins."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

MM_PER_INCH = 25.4
POINTS_PER_INCH = 72.0


@dataclass(frozen=True, order=True)
class Length:
    """A length stored in millimetres."""

    mm: float

    @classmethod
    def from_mm(cls, mm: float) -> "Length":
        return cls(mm)

    @classmethod
    def from_inches(cls, inches: float) -> "Length":
        return cls(inches * MM_PER_INCH)

    @classmethod
    def from_points(cls, points: float) -> "Length":
        return cls(points * MM_PER_INCH / POINTS_PER_INCH)

    @property
    def inches(self) -> float:
        return self.mm / MM_PER_INCH

    @property
    def pt(self) -> float:
        return self.mm * POINTS_PER_INCH / MM_PER_INCH

    def __add__(self, other: "Length") -> "Length":
        return Length(self.mm + other.mm)

    def __sub__(self, other: "Length") -> "Length":
        return Length(self.mm - other.mm)


@dataclass(frozen=True)
class PageDimensions:
    width: Length
    height: Length

    @classmethod
    def letter(cls) -> "PageDimensions":
        return cls(Length.from_mm(215.9), Length.from_mm(279.4))

    @classmethod
    def a4(cls) -> "PageDimensions":
        return cls(Length.from_mm(210.0), Length.from_mm(297.0))

    @classmethod
    def from_points(cls, width: float, height: float) -> "PageDimensions":
        return cls(Length.from_points(width), Length.from_points(height))

    def to_points(self) -> Tuple[float, float]:
        """Return ``(width, height)`` in points, rounded to 1/1000 pt."""

        return round(self.width.pt, 3), round(self.height.pt, 3)


@dataclass(frozen=True)
class Margins:
    top: Length
    bottom: Length
    left: Length
    right: Length

    @classmethod
    def uniform(cls, margin: Length) -> "Margins":
        return cls(margin, margin, margin, margin)

    @classmethod
    def standard(cls) -> "Margins":
        """One inch on every side."""

        return cls.uniform(Length.from_inches(1.0))

    @classmethod
    def narrow(cls) -> "Margins":
        return cls.uniform(Length.from_inches(0.5))


@dataclass(frozen=True)
class SafeArea:
    left: Length
    top: Length
    right: Length
    bottom: Length


def calculate_safe_area(
    page: PageDimensions, header_height: Length, footer_height: Length
) -> SafeArea:
    """Return the part of *page* not covered by the header and footer bands."""

    return SafeArea(
        left=Length(0.0),
        top=page.height - header_height,
        right=page.width,
        bottom=footer_height,
    )


__all__ = [
    "Length",
    "PageDimensions",
    "Margins",
    "SafeArea",
    "calculate_safe_area",
]
