"""Font resource embedding for header/footer overlays.

A document gets exactly one :class:`FontResource`: a single-byte encoded
TrueType subset built from a bundled face. Bold and italic are synthesized
when the text is drawn, so one face serves every style. The resource is an
immutable value; :func:`add_font_objects` is the only place it meets a
document.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple
import zlib

from pypdf import PdfWriter
from pypdf.generic import (
    ArrayObject,
    DecodedStreamObject,
    DictionaryObject,
    FloatObject,
    IndirectObject,
    NameObject,
    NumberObject,
)
import reportlab
from reportlab.pdfbase.ttfonts import (
    FF_NONSYMBOLIC,
    FF_SYMBOLIC,
    SUBSETN,
    TTFError,
    TTFontFile,
    makeToUnicodeCMap,
)

from .exceptions import FontUnavailable
from .utils import PathLike

LOGGER = logging.getLogger("pdf_handouts.fonts")

FONT_DIR = Path(reportlab.__file__).resolve().parent / "fonts"
DEFAULT_FACE = "Vera.ttf"
BUNDLED_FAMILIES: Mapping[str, str] = MappingProxyType(
    {
        "vera": "Vera.ttf",
        "bitstream vera": "Vera.ttf",
        "bitstream vera sans": "Vera.ttf",
    }
)

CODE_COUNT = 256
ASCII_CODES = range(32, 127)
EXTENDED_CODES = range(128, 256)
REPLACEMENT = "?"

# Filled into the upper half of the code table before any text-specific characters.
COMMON_PUNCTUATION = (
    "\u2013\u2014\u2018\u2019\u201c\u201d\u2022\u2026"
    "\u00a0\u00a9\u00ae\u00b0\u00b7\u2122\u20ac\u00a7"
)


@dataclass(frozen=True)
class FontMetrics:
    """Font descriptor values in glyph space (1/1000 em)."""

    ascent: float
    descent: float
    cap_height: float
    bbox: Tuple[float, float, float, float]
    italic_angle: float
    stem_v: int
    flags: int
    missing_width: float


@dataclass(frozen=True)
class FontResource:
    """An embedded, single-byte encoded TrueType subset.

    ``code_points[code]`` is the character drawn for byte ``code`` (0 when
    the code is unused), ``code_to_glyph[code]`` is its glyph id in
    ``program`` and ``glyph_widths[gid]`` its advance in 1/1000 em.
    """

    base_font: str
    family: str
    program: bytes
    code_points: Tuple[int, ...]
    code_to_glyph: Tuple[int, ...]
    glyph_widths: Tuple[float, ...]
    metrics: FontMetrics
    char_to_code: Mapping[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        mapping = {chr(cp): code for code, cp in enumerate(self.code_points) if cp}
        object.__setattr__(self, "char_to_code", MappingProxyType(mapping))

    def unsupported(self, text: str) -> set[str]:
        """Return the characters of *text* this resource cannot draw."""

        return {char for char in text if char not in self.char_to_code}

    def encode(self, text: str) -> bytes:
        """Encode *text*, drawing unsupported characters as ``?``."""

        fallback = self.char_to_code[REPLACEMENT]
        return bytes(self.char_to_code.get(char, fallback) for char in text)

    def code_width(self, code: int) -> float:
        return self.glyph_widths[self.code_to_glyph[code]]

    def text_width(self, text: str, size: float) -> float:
        """Return the advance width of *text* at *size* points."""

        return sum(self.code_width(code) for code in self.encode(text)) * size / 1000.0

    @property
    def widths(self) -> list[float]:
        """Advance widths for codes 0..255, as listed in the font dictionary."""

        return [self.code_width(code) for code in range(CODE_COUNT)]

    def to_unicode_cmap(self) -> str:
        return makeToUnicodeCMap(self.base_font, list(self.code_points))


def resolve_face(family: Optional[str]) -> Path:
    """Return the bundled face file for *family*.

    Unknown families fall back to the default face with a warning; host
    font directories are never searched.
    """

    if family:
        filename = BUNDLED_FAMILIES.get(family.strip().lower())
        if filename is not None:
            return FONT_DIR / filename
        LOGGER.warning(
            "Font family %r is not bundled; falling back to %s", family, DEFAULT_FACE
        )
    return FONT_DIR / DEFAULT_FACE


def _load_face(path: Path) -> TTFontFile:
    LOGGER.debug("Loading TrueType face from %s", path)
    return TTFontFile(str(path))


def _assign_codes(face: TTFontFile, text: str) -> list[int]:
    code_points = [0] * CODE_COUNT
    for code in ASCII_CODES:
        if code in face.charToGlyph:
            code_points[code] = code

    assigned = {cp for cp in code_points if cp}
    free = iter(EXTENDED_CODES)
    overflow: list[str] = []
    for char in COMMON_PUNCTUATION + text:
        cp = ord(char)
        if cp in assigned or cp not in face.charToGlyph:
            continue
        code = next(free, None)
        if code is None:
            overflow.append(char)
            continue
        code_points[code] = cp
        assigned.add(cp)

    if overflow:
        LOGGER.warning(
            "Font code table is full; %d characters will be drawn as %r",
            len(overflow),
            REPLACEMENT,
        )
    return code_points


def _glyph_tables(face: TTFontFile, code_points: Iterable[int]) -> tuple[list[int], list[float]]:
    # Mirrors the glyph numbering TTFontFile.makeSubset uses for the same code list.
    glyph_set = {0: 0}
    widths: list[float] = [round(face.defaultWidth)]
    code_to_glyph: list[int] = []
    for cp in code_points:
        original = face.charToGlyph.get(cp, 0)
        if original not in glyph_set:
            glyph_set[original] = len(widths)
            widths.append(round(face.charWidths.get(cp, face.defaultWidth)))
        code_to_glyph.append(glyph_set[original])
    return code_to_glyph, widths


def _build_resource(face: TTFontFile, text: str) -> FontResource:
    code_points = _assign_codes(face, text)
    if not code_points[ord(REPLACEMENT)]:
        raise FontUnavailable(
            f"Font {bytes(face.name).decode('latin-1')} has no glyph for {REPLACEMENT!r}"
        )

    code_to_glyph, widths = _glyph_tables(face, code_points)
    program = face.makeSubset(code_points)

    digest = zlib.crc32(",".join(map(str, code_points)).encode("ascii") + bytes(face.name))
    tag = SUBSETN(digest % 1000000)
    base_font = (tag + b"+" + bytes(face.name)).decode("latin-1")
    metrics = FontMetrics(
        ascent=face.ascent,
        descent=face.descent,
        cap_height=face.capHeight,
        bbox=tuple(face.bbox),
        italic_angle=face.italicAngle,
        stem_v=face.stemV,
        flags=(face.flags & ~FF_NONSYMBOLIC) | FF_SYMBOLIC,
        missing_width=round(face.defaultWidth),
    )
    return FontResource(
        base_font=base_font,
        family=face.familyName.decode("utf-8", "replace"),
        program=program,
        code_points=tuple(code_points),
        code_to_glyph=tuple(code_to_glyph),
        glyph_widths=tuple(widths),
        metrics=metrics,
    )


def embed_font(
    family: Optional[str] = None,
    *,
    text: str = "",
    font_file: Optional[PathLike] = None,
) -> FontResource:
    """Build the shared font resource for one document.

    Args:
        family: Requested family name. Only bundled families are honoured.
        text: All overlay text that will be drawn; its non-ASCII characters
            are given codes when the face has glyphs for them.
        font_file: Explicit TrueType file to use instead of a bundled face.

    Raises:
        FontUnavailable: If neither the requested nor the default face can
            be loaded.
    """

    candidates: list[Path] = []
    if font_file is not None:
        candidates.append(Path(font_file))
    candidates.append(resolve_face(family))
    if candidates[-1].name != DEFAULT_FACE:
        candidates.append(FONT_DIR / DEFAULT_FACE)

    failures: list[str] = []
    for path in candidates:
        try:
            face = _load_face(path)
        except (OSError, TTFError, ValueError) as exc:
            LOGGER.warning("Unable to load font %s: %s", path, exc)
            failures.append(f"{path}: {exc}")
            continue
        try:
            resource = _build_resource(face, text)
        except (FontUnavailable, TTFError) as exc:
            LOGGER.warning("Unable to use font %s: %s", path, exc)
            failures.append(f"{path}: {exc}")
            continue
        LOGGER.info(
            "Embedded font %s (%d glyphs, %d bytes)",
            resource.base_font,
            len(resource.glyph_widths),
            len(resource.program),
        )
        return resource

    raise FontUnavailable("No usable font face: " + "; ".join(failures))


def _number(value: float) -> NumberObject | FloatObject:
    if float(value).is_integer():
        return NumberObject(int(value))
    return FloatObject(value)


def add_font_objects(writer: PdfWriter, font: FontResource) -> IndirectObject:
    """Add *font* to *writer* as a TrueType font and return its reference.

    The program, descriptor and ToUnicode CMap are written once; every stamp
    refers to the returned object.
    """

    program = DecodedStreamObject()
    program.set_data(font.program)
    program[NameObject("/Length1")] = NumberObject(len(font.program))
    program_ref = writer._add_object(program.flate_encode())

    metrics = font.metrics
    descriptor = DictionaryObject(
        {
            NameObject("/Type"): NameObject("/FontDescriptor"),
            NameObject("/FontName"): NameObject("/" + font.base_font),
            NameObject("/Flags"): NumberObject(metrics.flags),
            NameObject("/FontBBox"): ArrayObject(_number(v) for v in metrics.bbox),
            NameObject("/ItalicAngle"): _number(metrics.italic_angle),
            NameObject("/Ascent"): _number(metrics.ascent),
            NameObject("/Descent"): _number(metrics.descent),
            NameObject("/CapHeight"): _number(metrics.cap_height),
            NameObject("/StemV"): NumberObject(metrics.stem_v),
            NameObject("/MissingWidth"): _number(metrics.missing_width),
            NameObject("/FontFile2"): program_ref,
        }
    )
    descriptor_ref = writer._add_object(descriptor)

    cmap = DecodedStreamObject()
    cmap.set_data(font.to_unicode_cmap().encode("latin-1"))
    cmap_ref = writer._add_object(cmap.flate_encode())

    font_dict = DictionaryObject(
        {
            NameObject("/Type"): NameObject("/Font"),
            NameObject("/Subtype"): NameObject("/TrueType"),
            NameObject("/BaseFont"): NameObject("/" + font.base_font),
            NameObject("/FirstChar"): NumberObject(0),
            NameObject("/LastChar"): NumberObject(CODE_COUNT - 1),
            NameObject("/Widths"): ArrayObject(_number(w) for w in font.widths),
            NameObject("/FontDescriptor"): descriptor_ref,
            NameObject("/ToUnicode"): cmap_ref,
        }
    )
    font_ref = writer._add_object(font_dict)
    LOGGER.debug("Added font objects for %s as %s", font.base_font, font_ref)
    return font_ref


__all__ = [
    "FontMetrics",
    "FontResource",
    "DEFAULT_FACE",
    "BUNDLED_FAMILIES",
    "resolve_face",
    "embed_font",
    "add_font_objects",
]
