"""
Custom exceptions for PDF Handouts.

Overlay errors follow a simple policy: font and markup problems abort the
whole run, page structure problems only skip the offending page.
"""

from __future__ import annotations


class PdfHandoutsError(Exception):
    """Base exception for all PDF Handouts errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "An unknown PDF handouts error occurred."


class FontUnavailable(PdfHandoutsError):
    """Raised when no usable font face can be loaded."""

    @property
    def default_message(self) -> str:
        return "No usable font face could be loaded."


class PageStructureError(PdfHandoutsError):
    """Raised when a page's content cannot be isolated safely."""

    def __init__(self, message: str = "", page_index: int | None = None) -> None:
        super().__init__(message)
        self.page_index = page_index

    @property
    def default_message(self) -> str:
        return "Page content has an unbalanced graphics state stack."


class LayoutMarkupError(PdfHandoutsError):
    """Raised when inline style markup in overlay text is malformed."""

    def __init__(
        self,
        message: str = "",
        section: str | None = None,
        position: int | None = None,
    ) -> None:
        super().__init__(message)
        self.section = section
        self.position = position

    @property
    def default_message(self) -> str:
        return "Malformed inline style markup."


class PdfValidationError(PdfHandoutsError):
    """Raised when an input PDF cannot be read or has no pages."""

    @property
    def default_message(self) -> str:
        return "Invalid or unreadable PDF file."


class PdfMergeError(PdfHandoutsError):
    """Raised when merging input PDFs fails."""

    @property
    def default_message(self) -> str:
        return "Failed to merge PDF files."


class DateExpressionError(PdfHandoutsError):
    """Raised when a date expression cannot be parsed."""

    @property
    def default_message(self) -> str:
        return "Invalid date expression."
