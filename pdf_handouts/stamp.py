"""Build the per-page stamp: a Form XObject holding the header/footer text.

The stamp has its own coordinate space (identity matrix, bounding box equal
to the page box) and its own resource table, so it draws in absolute page
coordinates no matter what the page content did to the graphics state.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import ClassVar, Optional, Sequence, Tuple

from pypdf import PageObject
from pypdf.generic import (
    ArrayObject,
    DecodedStreamObject,
    DictionaryObject,
    FloatObject,
    IndirectObject,
    NameObject,
    NumberObject,
)

from .fonts import FontResource
from .geometry import PageDimensions
from .layout import LayoutLine, OverlayLayout, SectionLayout, TextRun, column_bounds
from .styles import BLACK
from .utils import format_number

LOGGER = logging.getLogger("pdf_handouts.stamp")

Box = Tuple[float, float, float, float]

HEADER_TOP_OFFSET = 50.0
FOOTER_BOTTOM_OFFSET = 30.0
SIDE_MARGIN = 50.0
LEADING = 1.2
ITALIC_SHEAR = 0.21
BOLD_STROKE = 0.03


@dataclass(frozen=True)
class Stamp:
    """A self-contained drawing object for one page.

    ``content`` is empty when there is nothing to draw; such a stamp needs no
    font in its resources.
    """

    bbox: Box
    content: bytes
    font: Optional[FontResource] = None

    IDENTITY_MATRIX: ClassVar[Tuple[int, ...]] = (1, 0, 0, 1, 0, 0)
    FONT_NAME: ClassVar[str] = "/F1"

    @property
    def matrix(self) -> Tuple[int, ...]:
        return self.IDENTITY_MATRIX

    @property
    def is_empty(self) -> bool:
        return not self.content

    @property
    def operators(self) -> list[str]:
        """The content split into instruction lines."""

        return self.content.decode("latin-1").splitlines()


def letter_box() -> Box:
    width, height = PageDimensions.letter().to_points()
    return (0.0, 0.0, width, height)


def page_box(page: PageObject) -> Box:
    """Return the page's media box, or US Letter when it declares none."""

    try:
        box = page.mediabox
    except (KeyError, ValueError):
        LOGGER.warning("Page has no media box; assuming US Letter")
        return letter_box()
    return (float(box.left), float(box.bottom), float(box.right), float(box.top))


def _rgb(color: Optional[Sequence[float]]) -> str:
    return " ".join(format_number(channel) for channel in (color or BLACK))


def _run_operators(run: TextRun, x: float, y: float, font: FontResource) -> list[str]:
    style = run.style
    size = style.size
    shear = ITALIC_SHEAR if style.italic else 0
    rgb = _rgb(style.color)
    ops = [
        "BT",
        f"{Stamp.FONT_NAME} {format_number(size)} Tf",
        f"{rgb} rg",
        f"{rgb} RG",
        f"1 0 {format_number(shear)} 1 {format_number(x)} {format_number(y)} Tm",
    ]
    if style.bold:
        ops.append(f"{format_number(size * BOLD_STROKE)} w")
        ops.append("2 Tr")
    else:
        ops.append("0 Tr")
    ops.append(f"<{font.encode(run.text).hex().upper()}> Tj")
    ops.append("ET")
    return ops


def line_width(line: LayoutLine, font: FontResource) -> float:
    return sum(font.text_width(run.text, run.style.size) for run in line.runs)


def _baselines(section: SectionLayout, box: Box, footer: bool) -> list[float]:
    lines = section.lines
    baselines = [0.0] * len(lines)
    if footer:
        # Stack upward so the last line sits on the bottom offset.
        y = box[1] + FOOTER_BOTTOM_OFFSET
        for index in range(len(lines) - 1, -1, -1):
            baselines[index] = y
            y += LEADING * lines[index].size
    else:
        y = box[3] - HEADER_TOP_OFFSET
        for index, line in enumerate(lines):
            if index:
                y -= LEADING * line.size
            baselines[index] = y
    return baselines


def _line_start(section: SectionLayout, width: float, box: Box) -> float:
    left, right = column_bounds(section.column, box[2] - box[0])
    left += box[0]
    right += box[0]
    align = section.column.align
    if align == "left":
        return left + SIDE_MARGIN
    if align == "right":
        return right - SIDE_MARGIN - width
    return (left + right - width) / 2.0


def _section_operators(
    section: SectionLayout, box: Box, font: FontResource, footer: bool
) -> list[str]:
    ops: list[str] = []
    column_left, column_right = column_bounds(section.column, box[2] - box[0])
    for line, y in zip(section.lines, _baselines(section, box, footer)):
        if line.is_blank:
            continue
        width = line_width(line, font)
        if width > column_right - column_left:
            LOGGER.debug(
                "Line %r overflows the %s column (%.1fpt > %.1fpt)",
                line.text,
                section.column.name,
                width,
                column_right - column_left,
            )
        missing = font.unsupported(line.text)
        if missing:
            LOGGER.warning(
                "Characters %s in %s are not in the embedded font and will be drawn as '?'",
                "".join(sorted(missing)),
                section.name,
            )
        x = _line_start(section, width, box)
        for run in line.runs:
            ops.extend(_run_operators(run, x, y, font))
            x += font.text_width(run.text, run.style.size)
    return ops


def build_stamp(layout: OverlayLayout, font: FontResource, box: Box) -> Stamp:
    """Build the stamp for one page from its laid out header and footer.

    Header lines run downward from the top offset, footer lines upward from
    the bottom offset, each section in reading order. Lines wider than their
    column are drawn at natural width.
    """

    ops: list[str] = []
    for section in layout.header:
        ops.extend(_section_operators(section, box, font, footer=False))
    for section in layout.footer:
        ops.extend(_section_operators(section, box, font, footer=True))

    if not ops:
        return Stamp(bbox=box, content=b"")
    content = ("\n".join(ops) + "\n").encode("latin-1")
    return Stamp(bbox=box, content=content, font=font)


def stamp_xobject(stamp: Stamp, font_ref: Optional[IndirectObject]) -> DecodedStreamObject:
    """Return *stamp* as a Form XObject whose resources point at *font_ref*."""

    resources = DictionaryObject()
    if not stamp.is_empty:
        if font_ref is None:
            raise ValueError("A non-empty stamp needs a font reference")
        resources[NameObject("/Font")] = DictionaryObject(
            {NameObject(Stamp.FONT_NAME): font_ref}
        )

    xobject = DecodedStreamObject()
    xobject.set_data(stamp.content)
    xobject.update(
        {
            NameObject("/Type"): NameObject("/XObject"),
            NameObject("/Subtype"): NameObject("/Form"),
            NameObject("/FormType"): NumberObject(1),
            NameObject("/BBox"): ArrayObject(FloatObject(v) for v in stamp.bbox),
            NameObject("/Matrix"): ArrayObject(NumberObject(v) for v in stamp.matrix),
            NameObject("/Resources"): resources,
        }
    )
    return xobject


__all__ = [
    "Box",
    "Stamp",
    "letter_box",
    "page_box",
    "line_width",
    "build_stamp",
    "stamp_xobject",
]
