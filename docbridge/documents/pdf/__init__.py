"""PDF document kind — pypdf."""

from __future__ import annotations

from pypdf import PdfWriter

from docbridge.core.registry import HandlerRegistry
from docbridge.documents.pdf.handlers import HANDLERS

# US Letter, in points.
_DEFAULT_PAGE_SIZE = (612, 792)


def create_registry(list_valid_operations: bool = True) -> HandlerRegistry[PdfWriter]:
    return HandlerRegistry.build(
        "pdf",
        HANDLERS,
        aliases={"get": "get_pages"},
        list_valid_operations=list_valid_operations,
    )


def new_document() -> PdfWriter:
    writer = PdfWriter()
    writer.add_blank_page(*_DEFAULT_PAGE_SIZE)
    return writer


def load(path: str) -> PdfWriter:
    return PdfWriter(clone_from=path)


def save(document: PdfWriter, path: str) -> None:
    with open(path, "wb") as f:
        document.write(f)


__all__ = ["create_registry", "new_document", "load", "save"]
