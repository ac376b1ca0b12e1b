"""
PDF Handouts - merge PDFs and stamp them with headers and footers.

The overlay core lives in :mod:`pdf_handouts.overlay`; merging, metadata
and date expressions are small helpers around it.
"""

__version__ = "0.1.0"

from pdf_handouts.exceptions import (
    DateExpressionError,
    FontUnavailable,
    LayoutMarkupError,
    PageStructureError,
    PdfHandoutsError,
    PdfMergeError,
    PdfValidationError,
)
from pdf_handouts.fonts import FontResource, embed_font
from pdf_handouts.layout import OverlayConfig, PlaceholderContext, layout_overlay
from pdf_handouts.overlay import OverlayResult, SkippedPage, apply, apply_to_file
from pdf_handouts.stamp import Stamp, build_stamp
from pdf_handouts.styles import StyleSpec, parse_font_spec

__all__ = [
    "__version__",
    "apply",
    "apply_to_file",
    "OverlayConfig",
    "OverlayResult",
    "SkippedPage",
    "PlaceholderContext",
    "StyleSpec",
    "parse_font_spec",
    "FontResource",
    "embed_font",
    "layout_overlay",
    "Stamp",
    "build_stamp",
    "PdfHandoutsError",
    "FontUnavailable",
    "PageStructureError",
    "LayoutMarkupError",
    "PdfMergeError",
    "PdfValidationError",
    "DateExpressionError",
]
