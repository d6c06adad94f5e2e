"""Document kinds — one handler family per supported document library.

Each kind lives in its own sub-package exposing:

  - ``create_registry(list_valid_operations=True)`` → frozen :class:`HandlerRegistry`
  - ``new_document()`` → an empty in-memory document
  - ``load(path)`` / ``save(document, path)`` → file I/O, kept out of the core

Sub-packages are imported lazily so a missing document library only affects
its own kind.
"""

from __future__ import annotations

import importlib
from dataclasses import dataclass
from enum import Enum
from types import ModuleType
from typing import Any, Callable

from docbridge.core.registry import HandlerRegistry
from docbridge.exceptions import UnknownDocumentKindError


class DocumentKind(str, Enum):
    WORD = "word"
    EXCEL = "excel"
    POWERPOINT = "powerpoint"
    PDF = "pdf"


@dataclass(frozen=True)
class DocumentKindInfo:
    """Static description of a document kind."""

    kind: DocumentKind
    module: str
    library: str
    suffixes: tuple[str, ...]

    def _load_module(self) -> ModuleType:
        return importlib.import_module(self.module)

    def create_registry(self, list_valid_operations: bool = True) -> HandlerRegistry[Any]:
        return self._load_module().create_registry(list_valid_operations=list_valid_operations)

    @property
    def loader(self) -> Callable[[str], Any]:
        return self._load_module().load

    @property
    def saver(self) -> Callable[[Any, str], None]:
        return self._load_module().save

    def new_document(self) -> Any:
        return self._load_module().new_document()


DOCUMENT_KINDS: dict[DocumentKind, DocumentKindInfo] = {
    DocumentKind.WORD: DocumentKindInfo(
        DocumentKind.WORD, "docbridge.documents.word", "python-docx", (".docx",)
    ),
    DocumentKind.EXCEL: DocumentKindInfo(
        DocumentKind.EXCEL, "docbridge.documents.excel", "openpyxl", (".xlsx", ".xlsm")
    ),
    DocumentKind.POWERPOINT: DocumentKindInfo(
        DocumentKind.POWERPOINT, "docbridge.documents.powerpoint", "python-pptx", (".pptx",)
    ),
    DocumentKind.PDF: DocumentKindInfo(
        DocumentKind.PDF, "docbridge.documents.pdf", "pypdf", (".pdf",)
    ),
}


def get_kind_info(kind: str | DocumentKind) -> DocumentKindInfo:
    """Return the info for *kind* (case-insensitive name)."""
    try:
        key = DocumentKind(kind.strip().lower() if isinstance(kind, str) else kind)
    except ValueError:
        raise UnknownDocumentKindError(str(kind), [k.value for k in DocumentKind]) from None
    return DOCUMENT_KINDS[key]


def kind_for_path(path: str) -> DocumentKind | None:
    """Guess the document kind from a file suffix."""
    lowered = path.lower()
    for info in DOCUMENT_KINDS.values():
        if lowered.endswith(info.suffixes):
            return info.kind
    return None


__all__ = [
    "DocumentKind",
    "DocumentKindInfo",
    "DOCUMENT_KINDS",
    "get_kind_info",
    "kind_for_path",
]
