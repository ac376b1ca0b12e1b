"""Apply header/footer overlays to every page of a document."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import List, Optional, Union

from pypdf import PdfReader, PdfWriter

from .exceptions import PageStructureError
from .fonts import FontResource, add_font_objects, embed_font
from .layout import OverlayConfig, PlaceholderContext, layout_overlay, validate_config
from .merge import load_reader, write_document
from .splice import preflight, splice_stamp
from .stamp import Stamp, build_stamp, page_box, stamp_xobject
from .utils import PathLike, ensure_path

LOGGER = logging.getLogger("pdf_handouts.overlay")

Document = Union[PdfWriter, PdfReader]


@dataclass(frozen=True)
class SkippedPage:
    index: int
    reason: str


@dataclass
class OverlayResult:
    """Outcome of :func:`apply`.

    ``stamped`` and ``skipped`` hold zero-based page indices. Skipped pages
    are left exactly as they were.
    """

    document: PdfWriter
    stamped: List[int] = field(default_factory=list)
    skipped: List[SkippedPage] = field(default_factory=list)
    resource_names: dict[int, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.skipped


def _as_writer(document: Document) -> PdfWriter:
    if isinstance(document, PdfWriter):
        return document
    return PdfWriter(clone_from=document)


def _font_family(config: OverlayConfig) -> Optional[str]:
    header = config.header_style.family if config.header_style else None
    footer = config.footer_style.family if config.footer_style else None
    if header and footer and header.lower() != footer.lower():
        LOGGER.warning(
            "Header and footer request different families (%r, %r); using %r for both",
            header,
            footer,
            header,
        )
    return header or footer


def apply(
    document: Document,
    config: OverlayConfig,
    *,
    font_file: Optional[PathLike] = None,
) -> OverlayResult:
    """Draw the configured header and footer on every page of *document*.

    Markup is validated and the font embedded before any page is touched.
    Pages whose content cannot be isolated are skipped and reported in the
    result; every other page is stamped. A :class:`PdfReader` is cloned into
    a new writer, a :class:`PdfWriter` is modified in place.

    Raises:
        LayoutMarkupError: If any section has malformed style markup.
        FontUnavailable: If no font face can be loaded.
    """

    validate_config(config)
    writer = _as_writer(document)
    result = OverlayResult(document=writer)
    total = len(writer.pages)
    if total == 0:
        LOGGER.warning("Document has no pages; nothing to overlay")
        return result
    if config.is_empty:
        LOGGER.info("Overlay configuration is empty; pages left unchanged")
        return result

    font = embed_font(_font_family(config), text=config.all_text(), font_file=font_file)

    prepared: list[tuple[int, Stamp]] = []
    for index, page in enumerate(writer.pages):
        try:
            preflight(page, index)
        except PageStructureError as exc:
            LOGGER.warning("Skipping page %d: %s", index + 1, exc.message)
            result.skipped.append(SkippedPage(index=index, reason=exc.message))
            continue
        context = PlaceholderContext(page_number=index + 1, total_pages=total, date=config.date)
        stamp = build_stamp(layout_overlay(config, context), font, page_box(page))
        prepared.append((index, stamp))

    _register(writer, font, prepared, result)
    LOGGER.info(
        "Stamped %d of %d pages (%d skipped)", len(result.stamped), total, len(result.skipped)
    )
    return result


def _register(
    writer: PdfWriter,
    font: FontResource,
    prepared: list[tuple[int, Stamp]],
    result: OverlayResult,
) -> None:
    # All new objects are numbered here, after every stamp has been built.
    font_ref = None
    for index, stamp in prepared:
        if font_ref is None and not stamp.is_empty:
            font_ref = add_font_objects(writer, font)
        stamp_ref = writer._add_object(stamp_xobject(stamp, font_ref))
        name = splice_stamp(writer, writer.pages[index], stamp_ref)
        result.stamped.append(index)
        result.resource_names[index] = name


def apply_to_file(
    input_path: PathLike,
    output_path: PathLike,
    config: OverlayConfig,
    *,
    font_file: Optional[PathLike] = None,
) -> OverlayResult:
    """Read *input_path*, apply the overlay and write *output_path*."""

    source = ensure_path(input_path)
    LOGGER.debug("Applying overlay to %s", source)
    result = apply(load_reader(source), config, font_file=font_file)
    target = write_document(result.document, output_path)
    LOGGER.info("Wrote overlaid PDF to %s", target)
    return result


__all__ = ["SkippedPage", "OverlayResult", "apply", "apply_to_file"]
