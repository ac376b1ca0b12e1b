"""Text layout for header/footer overlays.

Turns an :class:`OverlayConfig` and a per-page :class:`PlaceholderContext`
into sections of styled lines. Section text supports three kinds of markup:

* placeholders ``[page]``, ``[pages]`` and ``[date]``;
* line breaks ``|``, ``[br]``, ``<br>``, ``<br/>`` and newlines;
* inline style spans ``[font <spec>]...[/font]`` where ``<spec>`` uses the
  font-spec syntax of :func:`pdf_handouts.styles.parse_font_spec`.

Spans do not nest. Markup is checked by a single left-to-right scan and any
malformed tag raises :class:`LayoutMarkupError` instead of leaking into the
drawn text. Placeholder values are inserted after the markup is read and
are never treated as markup themselves.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import re
from typing import Iterator, Optional, Tuple

from .exceptions import LayoutMarkupError
from .styles import FOOTER_DEFAULT, HEADER_DEFAULT, StyleSpec, parse_font_spec

LOGGER = logging.getLogger("pdf_handouts.layout")

_PLACEHOLDER_RE = re.compile(r"\[(pages|page|date)\]", re.IGNORECASE)
_TOKEN_RE = re.compile(
    r"(?P<br>\r?\n|\||\[br\]|<br\s*/?>)"
    r"|(?P<open>\[font\s+(?P<spec>[^\[\]]*?)\s*\])"
    r"|(?P<close>\[/font\])",
    re.IGNORECASE,
)
_STRAY_TAG_RE = re.compile(r"\[/?font\b", re.IGNORECASE)


@dataclass(frozen=True)
class Column:
    """A horizontal band of the page, as fractions of the page width."""

    name: str
    start: float
    end: float
    align: str


TITLE_COLUMN = Column("title", 0.0, 1.0, "center")
FOOTER_LEFT = Column("left", 0.0, 0.25, "left")
FOOTER_CENTER = Column("center", 0.25, 0.75, "center")
FOOTER_RIGHT = Column("right", 0.75, 1.0, "right")
FOOTER_COLUMNS = (FOOTER_LEFT, FOOTER_CENTER, FOOTER_RIGHT)


def column_bounds(column: Column, page_width: float) -> Tuple[float, float]:
    """Return the ``(left, right)`` edges of *column* on a page *page_width* wide."""

    return column.start * page_width, column.end * page_width


@dataclass(frozen=True)
class OverlayConfig:
    """What to draw on every page.

    ``None`` and ``""`` both leave a section out entirely. ``date`` is the
    already formatted value for the ``[date]`` placeholder.
    """

    title: Optional[str] = None
    footer_left: Optional[str] = None
    footer_center: Optional[str] = None
    footer_right: Optional[str] = None
    date: Optional[str] = None
    header_style: Optional[StyleSpec] = None
    footer_style: Optional[StyleSpec] = None

    def sections(self) -> Iterator[Tuple[str, Optional[str]]]:
        yield "title", self.title
        yield "footer_left", self.footer_left
        yield "footer_center", self.footer_center
        yield "footer_right", self.footer_right

    @property
    def is_empty(self) -> bool:
        return not any(text for _, text in self.sections())

    def all_text(self) -> str:
        """Every character the overlay may draw, for font subsetting."""

        parts = [text for _, text in self.sections() if text]
        if self.date:
            parts.append(self.date)
        return "".join(parts)


@dataclass(frozen=True)
class PlaceholderContext:
    """Per-page values for placeholder substitution (1-based page numbers)."""

    page_number: int
    total_pages: int
    date: Optional[str] = None

    def __post_init__(self) -> None:
        if self.total_pages < 1 or not 1 <= self.page_number <= self.total_pages:
            raise ValueError(
                f"Page {self.page_number} is outside a document of {self.total_pages} pages"
            )


@dataclass(frozen=True)
class TextRun:
    text: str
    style: StyleSpec


@dataclass(frozen=True)
class LayoutLine:
    """One baseline worth of runs. ``size`` is the tallest run (or the section size)."""

    runs: Tuple[TextRun, ...]
    size: float

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)

    @property
    def is_blank(self) -> bool:
        return not self.runs


@dataclass(frozen=True)
class SectionLayout:
    name: str
    column: Column
    lines: Tuple[LayoutLine, ...]


@dataclass(frozen=True)
class OverlayLayout:
    header: Tuple[SectionLayout, ...]
    footer: Tuple[SectionLayout, ...]

    @property
    def is_empty(self) -> bool:
        return not self.header and not self.footer


def substitute_placeholders(text: str, context: PlaceholderContext) -> str:
    """Replace ``[page]``, ``[pages]`` and ``[date]`` in *text*.

    A missing date substitutes the empty string so the token never reaches
    the page.
    """

    values = {
        "page": str(context.page_number),
        "pages": str(context.total_pages),
        "date": context.date or "",
    }
    return _PLACEHOLDER_RE.sub(lambda match: values[match.group(1).lower()], text)


def role_styles(config: OverlayConfig) -> Tuple[StyleSpec, StyleSpec]:
    """Return the resolved ``(header, footer)`` base styles.

    Footer fields left unset fall back to the header style's size, family and
    colour before the footer system default. Bold and italic never cascade
    between roles.
    """

    header = HEADER_DEFAULT.merged(config.header_style)
    footer_parent = FOOTER_DEFAULT
    if config.header_style is not None:
        footer_parent = FOOTER_DEFAULT.merged(
            StyleSpec(
                size=config.header_style.size,
                family=config.header_style.family,
                color=config.header_style.color,
            )
        )
    footer = footer_parent.merged(config.footer_style)
    return header, footer


def parse_section(
    text: str,
    base: StyleSpec,
    section: str = "section",
    context: Optional[PlaceholderContext] = None,
) -> list[LayoutLine]:
    """Split *text* into lines of styled runs.

    With a *context*, placeholders are substituted in each text chunk after
    the markup has been read, so substituted values are always drawn
    literally.

    Raises:
        LayoutMarkupError: On nested, unmatched, unterminated or malformed
            ``[font]`` tags.
    """

    lines: list[list[TextRun]] = [[]]
    span: Optional[StyleSpec] = None
    span_start = 0

    def emit(chunk: str, offset: int) -> None:
        if not chunk:
            return
        stray = _STRAY_TAG_RE.search(chunk)
        if stray is not None:
            raise LayoutMarkupError(
                f"Malformed style tag in {section} at position {offset + stray.start()}",
                section=section,
                position=offset + stray.start(),
            )
        if context is not None:
            chunk = substitute_placeholders(chunk, context)
            if not chunk:
                return
        style = base.merged(span)
        current = lines[-1]
        if current and current[-1].style == style:
            current[-1] = TextRun(current[-1].text + chunk, style)
        else:
            current.append(TextRun(chunk, style))

    pos = 0
    for match in _TOKEN_RE.finditer(text):
        emit(text[pos:match.start()], pos)
        if match.group("br"):
            lines.append([])
        elif match.group("open"):
            if span is not None:
                raise LayoutMarkupError(
                    f"Nested style tag in {section} at position {match.start()}",
                    section=section,
                    position=match.start(),
                )
            span = parse_font_spec(match.group("spec"))
            span_start = match.start()
        else:
            if span is None:
                raise LayoutMarkupError(
                    f"Closing [/font] without an opening tag in {section} at position {match.start()}",
                    section=section,
                    position=match.start(),
                )
            span = None
        pos = match.end()
    emit(text[pos:], pos)

    if span is not None:
        raise LayoutMarkupError(
            f"Unterminated style tag in {section} at position {span_start}",
            section=section,
            position=span_start,
        )

    return [
        LayoutLine(
            runs=tuple(runs),
            size=max((run.style.size for run in runs), default=base.size),
        )
        for runs in lines
    ]


def validate_config(config: OverlayConfig) -> None:
    """Check the markup of every section once, before any page is touched."""

    header, footer = role_styles(config)
    for name, text in config.sections():
        if text:
            parse_section(text, header if name == "title" else footer, name)
    LOGGER.debug("Overlay markup validated")


def _layout_section(
    name: str,
    text: Optional[str],
    column: Column,
    base: StyleSpec,
    context: PlaceholderContext,
) -> Optional[SectionLayout]:
    if not text:
        return None
    lines = parse_section(text, base, name, context)
    return SectionLayout(name=name, column=column, lines=tuple(lines))


def layout_overlay(config: OverlayConfig, context: PlaceholderContext) -> OverlayLayout:
    """Lay out the header and footer for the page described by *context*.

    The title is laid out on the first page only.
    """

    header_style, footer_style = role_styles(config)
    header: list[SectionLayout] = []
    if context.page_number == 1:
        title = _layout_section("title", config.title, TITLE_COLUMN, header_style, context)
        if title is not None:
            header.append(title)

    footer = [
        section
        for section in (
            _layout_section("footer_left", config.footer_left, FOOTER_LEFT, footer_style, context),
            _layout_section("footer_center", config.footer_center, FOOTER_CENTER, footer_style, context),
            _layout_section("footer_right", config.footer_right, FOOTER_RIGHT, footer_style, context),
        )
        if section is not None
    ]
    return OverlayLayout(header=tuple(header), footer=tuple(footer))


__all__ = [
    "Column",
    "TITLE_COLUMN",
    "FOOTER_LEFT",
    "FOOTER_CENTER",
    "FOOTER_RIGHT",
    "FOOTER_COLUMNS",
    "column_bounds",
    "OverlayConfig",
    "PlaceholderContext",
    "TextRun",
    "LayoutLine",
    "SectionLayout",
    "OverlayLayout",
    "substitute_placeholders",
    "role_styles",
    "parse_section",
    "validate_config",
    "layout_overlay",
]
