"""Text style values and the compact font-spec syntax used to describe them."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import re
from typing import Optional, Tuple

LOGGER = logging.getLogger("pdf_handouts.styles")

RGB = Tuple[float, float, float]

BLACK: RGB = (0.0, 0.0, 0.0)
HEADER_DEFAULT_SIZE = 24.0
FOOTER_DEFAULT_SIZE = 14.0

_SIZE_RE = re.compile(r"^(\d+(?:\.\d+)?|\.\d+)(?:pt)?$", re.IGNORECASE)


@dataclass(frozen=True)
class StyleSpec:
    """Style applied to a run of overlay text.

    ``None`` fields are unset and inherit from the enclosing style. ``bold``
    and ``italic`` are additive: an enclosing bold style stays bold inside an
    italic span.
    """

    bold: bool = False
    italic: bool = False
    size: Optional[float] = None
    family: Optional[str] = None
    color: Optional[RGB] = None

    def __post_init__(self) -> None:
        if self.color is None:
            return
        channels = tuple(float(channel) for channel in self.color)
        if len(channels) != 3 or not all(0.0 <= channel <= 1.0 for channel in channels):
            raise ValueError(
                f"Colour must be three channels between 0 and 1, got {self.color!r}"
            )
        object.__setattr__(self, "color", channels)

    def inherit(self, parent: "StyleSpec") -> "StyleSpec":
        """Return this style with unset fields taken from *parent*."""

        return StyleSpec(
            bold=self.bold or parent.bold,
            italic=self.italic or parent.italic,
            size=self.size if self.size is not None else parent.size,
            family=self.family if self.family is not None else parent.family,
            color=self.color if self.color is not None else parent.color,
        )

    def merged(self, override: Optional["StyleSpec"]) -> "StyleSpec":
        """Return *override* layered on top of this style."""

        if override is None:
            return self
        return override.inherit(self)


def default_style(size: float) -> StyleSpec:
    """Return the system default style at *size* points."""

    return StyleSpec(size=size, color=BLACK)


HEADER_DEFAULT = default_style(HEADER_DEFAULT_SIZE)
FOOTER_DEFAULT = default_style(FOOTER_DEFAULT_SIZE)


def parse_hex_color(token: str) -> Optional[RGB]:
    """Parse ``#rrggbb`` or ``#rgb`` into unit-interval channels.

    Returns ``None`` for anything else.
    """

    digits = token.lstrip("#")
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    if len(digits) != 6:
        return None
    try:
        channels = [int(digits[i:i + 2], 16) for i in (0, 2, 4)]
    except ValueError:
        return None
    return (channels[0] / 255.0, channels[1] / 255.0, channels[2] / 255.0)


def parse_size(token: str) -> Optional[float]:
    """Parse ``14``, ``14pt`` or ``10.5pt`` into points."""

    match = _SIZE_RE.match(token)
    if match is None:
        return None
    size = float(match.group(1))
    return size if size > 0 else None


def parse_font_spec(spec: str) -> StyleSpec:
    """Parse ``"[bold] [italic] [size[pt]] [family] [#rrggbb]"`` into a style.

    Every component is optional and keywords are case-insensitive.
    Underscores in the family name stand for spaces, so
    ``"bold 16pt Times_New_Roman #333"`` is a complete spec. A colour token
    that does not parse is ignored with a warning; any other unrecognised
    token is taken as the family name.
    """

    bold = False
    italic = False
    size: Optional[float] = None
    family: Optional[str] = None
    color: Optional[RGB] = None

    for token in spec.split():
        lower = token.lower()
        if lower == "bold":
            bold = True
        elif lower == "italic":
            italic = True
        elif lower.startswith("#"):
            parsed = parse_hex_color(lower)
            if parsed is None:
                LOGGER.warning("Ignoring invalid colour %r in font spec %r", token, spec)
            else:
                color = parsed
        elif parse_size(lower) is not None:
            size = parse_size(lower)
        else:
            family = token.replace("_", " ")

    return StyleSpec(bold=bold, italic=italic, size=size, family=family, color=color)


__all__ = [
    "RGB",
    "BLACK",
    "StyleSpec",
    "HEADER_DEFAULT",
    "FOOTER_DEFAULT",
    "HEADER_DEFAULT_SIZE",
    "FOOTER_DEFAULT_SIZE",
    "default_style",
    "parse_hex_color",
    "parse_size",
    "parse_font_spec",
]
