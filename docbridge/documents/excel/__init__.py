"""Excel document kind — openpyxl."""

from __future__ import annotations

import openpyxl
from openpyxl.workbook.workbook import Workbook

from docbridge.core.registry import HandlerRegistry
from docbridge.documents.excel.handlers import HANDLERS


def create_registry(list_valid_operations: bool = True) -> HandlerRegistry[Workbook]:
    return HandlerRegistry.build(
        "excel",
        HANDLERS,
        aliases={"get": "get_cell", "write": "write_cell"},
        list_valid_operations=list_valid_operations,
    )


def new_document() -> Workbook:
    return openpyxl.Workbook()


def load(path: str) -> Workbook:
    return openpyxl.load_workbook(path)


def save(document: Workbook, path: str) -> None:
    document.save(path)


__all__ = ["create_registry", "new_document", "load", "save"]
