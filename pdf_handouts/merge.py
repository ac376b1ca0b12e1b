"""Concatenate several PDFs into one document."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from pypdf import PdfReader, PdfWriter

from .exceptions import PdfHandoutsError, PdfMergeError, PdfValidationError
from .utils import PathLike, ensure_iterable, ensure_path

LOGGER = logging.getLogger("pdf_handouts.merge")


def load_reader(path: Path) -> PdfReader:
    """Open *path*, decrypting with an empty password when needed.

    Raises:
        PdfValidationError: If the file is missing, unreadable, encrypted
            with a real password, or has no pages.
    """

    if not path.is_file():
        raise PdfValidationError(f"File not found: {path}")
    try:
        reader = PdfReader(str(path))
    except Exception as exc:  # pragma: no cover - dependency exceptions vary
        LOGGER.error("Failed to read PDF %s: %s", path, exc)
        raise PdfValidationError(f"Unable to read PDF: {path}") from exc

    if reader.is_encrypted:
        LOGGER.debug("Attempting to decrypt encrypted PDF %s", path)
        try:
            reader.decrypt("")
        except Exception as exc:  # pragma: no cover - decrypt errors vary
            LOGGER.error("Failed to decrypt PDF %s: %s", path, exc)
            raise PdfValidationError(f"Unable to decrypt encrypted PDF: {path}") from exc

    if len(reader.pages) == 0:
        LOGGER.error("PDF %s contains no pages", path)
        raise PdfValidationError(f"PDF has no pages: {path}")
    return reader


def merge_documents(inputs: Iterable[PathLike], *, metadata: bool = True) -> PdfWriter:
    """Return a writer holding the pages of every input, in order.

    When *metadata* is true the document information of the first input is
    copied to the result.

    Raises:
        PdfMergeError: If no inputs are given or any input is invalid.
    """

    pdf_paths = ensure_iterable(inputs)
    if not pdf_paths:
        raise PdfMergeError("No input PDFs provided")

    writer = PdfWriter()
    first_metadata: Optional[dict[str, str]] = None
    for pdf_path in pdf_paths:
        LOGGER.debug("Processing input PDF %s", pdf_path)
        try:
            reader = load_reader(pdf_path)
        except PdfValidationError as exc:
            raise PdfMergeError(f"Invalid PDF: {exc.message}") from exc

        for page_index, page in enumerate(reader.pages):
            LOGGER.debug("Adding page %s from %s", page_index, pdf_path)
            writer.add_page(page)

        if metadata and first_metadata is None and reader.metadata:
            first_metadata = {
                key: str(value)
                for key, value in reader.metadata.items()
                if isinstance(key, str) and value is not None
            }

    if metadata and first_metadata:
        LOGGER.debug("Setting metadata on merged PDF: %s", first_metadata)
        writer.add_metadata(first_metadata)

    LOGGER.info("Merged %d PDFs (%d pages)", len(pdf_paths), len(writer.pages))
    return writer


def write_document(writer: PdfWriter, output: PathLike) -> Path:
    """Write *writer* to *output*, creating parent directories."""

    output_path = ensure_path(output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        with output_path.open("wb") as output_handle:
            writer.write(output_handle)
    except OSError as exc:
        LOGGER.error("Failed to write PDF to %s: %s", output_path, exc)
        raise PdfHandoutsError(f"Failed to write PDF to {output_path}") from exc
    return output_path


def merge_pdfs(
    inputs: Iterable[PathLike],
    output: PathLike,
    *,
    metadata: bool = True,
) -> Path:
    """Merge *inputs* into *output* and return the resulting path.

    Raises:
        PdfMergeError: If merging or writing fails.
    """

    writer = merge_documents(inputs, metadata=metadata)
    output_path = write_document(writer, output)
    LOGGER.info("Merged PDF written to %s", output_path)
    return output_path


__all__ = ["load_reader", "merge_documents", "write_document", "merge_pdfs"]
