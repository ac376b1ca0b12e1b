"""Splice a stamp into a page's content.

The page's existing content streams are bracketed by ``q``/``Q`` so any
transform they set up is discarded before the stamp runs, and the stamp is
invoked under an explicit identity ``cm``::

    q
    <original streams, untouched>
    Q
    q 1 0 0 1 0 0 cm /HeaderFooter Do Q

Pages whose own ``q``/``Q`` operators do not balance cannot be isolated this
way and are rejected with :class:`PageStructureError`.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence, Tuple

from pypdf import PageObject, PdfWriter
from pypdf.generic import (
    ArrayObject,
    DecodedStreamObject,
    DictionaryObject,
    IndirectObject,
    NameObject,
)

from .exceptions import PageStructureError

LOGGER = logging.getLogger("pdf_handouts.splice")

STAMP_RESOURCE_BASE = "HeaderFooter"
OPEN_BRACKET = b"q\n"

Operation = Tuple[Sequence[object], bytes]


def unique_resource_name(existing: Iterable[str], base: str = STAMP_RESOURCE_BASE) -> str:
    """Return *base*, or *base* with the smallest counter suffix not in *existing*.

    Names may be given with or without the leading ``/``; the result never
    has one.
    """

    taken = {str(name).lstrip("/") for name in existing}
    if base not in taken:
        return base
    counter = 1
    while f"{base}{counter}" in taken:
        counter += 1
    return f"{base}{counter}"


def check_balance(operations: Iterable[Operation], page_index: Optional[int] = None) -> int:
    """Verify ``q``/``Q`` nesting in *operations* and return the deepest level.

    Raises:
        PageStructureError: If a ``Q`` has no matching ``q`` or a ``q`` is
            left open at the end.
    """

    depth = 0
    deepest = 0
    for position, (_, operator) in enumerate(operations):
        if operator == b"q":
            depth += 1
            deepest = max(deepest, depth)
        elif operator == b"Q":
            depth -= 1
            if depth < 0:
                raise PageStructureError(
                    f"Restore without a matching save at operation {position}",
                    page_index=page_index,
                )
    if depth:
        raise PageStructureError(
            f"{depth} graphics state save(s) left open", page_index=page_index
        )
    return deepest


def preflight(page: PageObject, page_index: Optional[int] = None) -> int:
    """Check that *page*'s content can be isolated; return its nesting depth.

    Does not modify the page.
    """

    try:
        content = page.get_contents()
        operations = content.operations if content is not None else []
    except Exception as exc:
        raise PageStructureError(
            f"Unable to parse page content: {exc}", page_index=page_index
        ) from exc
    depth = check_balance(operations, page_index)
    LOGGER.debug("Page %s content balanced (max depth %d)", page_index, depth)
    return depth


def invocation_bytes(name: str) -> bytes:
    """Content that closes the isolation bracket and draws XObject *name*."""

    return f"\nQ\nq\n1 0 0 1 0 0 cm\n/{name} Do\nQ\n".encode("ascii")


def _stream_ref(writer: PdfWriter, data: bytes) -> IndirectObject:
    stream = DecodedStreamObject()
    stream.set_data(data)
    return writer._add_object(stream)


def _content_refs(writer: PdfWriter, page: PageObject) -> list:
    contents = page.get("/Contents")
    if contents is None:
        return []
    resolved = contents.get_object()
    if resolved is None:
        return []
    if isinstance(resolved, ArrayObject):
        return list(resolved)
    if isinstance(contents, IndirectObject):
        return [contents]
    return [writer._add_object(resolved)]


def _own_dictionary(value: object) -> DictionaryObject:
    # Pages may share resource dictionaries; copy before adding names.
    if value is None:
        return DictionaryObject()
    return DictionaryObject(value.get_object())


def splice_stamp(
    writer: PdfWriter,
    page: PageObject,
    stamp_ref: IndirectObject,
    base: str = STAMP_RESOURCE_BASE,
) -> str:
    """Wrap *page*'s content and append an invocation of *stamp_ref*.

    Registers the stamp in the page's ``/XObject`` resources under a fresh
    name and returns that name. Page size and rotation are not touched.
    """

    resources = _own_dictionary(page.get("/Resources"))
    xobjects = _own_dictionary(resources.get("/XObject"))
    name = unique_resource_name(xobjects.keys(), base)
    xobjects[NameObject("/" + name)] = stamp_ref
    resources[NameObject("/XObject")] = xobjects
    page[NameObject("/Resources")] = resources

    original = _content_refs(writer, page)
    contents = ArrayObject(
        [
            _stream_ref(writer, OPEN_BRACKET),
            *original,
            _stream_ref(writer, invocation_bytes(name)),
        ]
    )
    page[NameObject("/Contents")] = contents
    LOGGER.debug("Spliced stamp /%s around %d content stream(s)", name, len(original))
    return name


__all__ = [
    "STAMP_RESOURCE_BASE",
    "unique_resource_name",
    "check_balance",
    "preflight",
    "invocation_bytes",
    "splice_stamp",
]
