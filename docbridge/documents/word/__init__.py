"""Word document kind — python-docx."""

from __future__ import annotations

from docx import Document as open_document
from docx.document import Document

from docbridge.core.registry import HandlerRegistry
from docbridge.documents.word.handlers import HANDLERS


def create_registry(list_valid_operations: bool = True) -> HandlerRegistry[Document]:
    return HandlerRegistry.build(
        "word",
        HANDLERS,
        aliases={"get": "get_paragraphs", "add": "add_paragraph"},
        list_valid_operations=list_valid_operations,
    )


def new_document() -> Document:
    return open_document()


def load(path: str) -> Document:
    return open_document(path)


def save(document: Document, path: str) -> None:
    document.save(path)


__all__ = ["create_registry", "new_document", "load", "save"]
