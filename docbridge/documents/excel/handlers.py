"""Excel handlers — openpyxl sheet and cell operations."""

from __future__ import annotations

from typing import Any

from openpyxl.utils.cell import coordinate_from_string
from openpyxl.utils.exceptions import CellCoordinatesException
from openpyxl.workbook.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from docbridge.core.context import OperationContext
from docbridge.core.handler import DataResult, MessageResult, OperationHandler
from docbridge.core.params import ParameterBag
from docbridge.exceptions import DomainOperationError, InvalidParameterValueError

# Excel's own limit on worksheet title length.
_MAX_TITLE_LENGTH = 31
_INVALID_TITLE_CHARS = set("\\/*?:[]")


def _get_sheet(wb: Workbook, params: ParameterBag) -> Worksheet:
    index = params.get_index("sheet_index", len(wb.worksheets), default=0)
    return wb.worksheets[index]


def _check_title(
    operation: str, wb: Workbook, name: str, param: str, exclude: str | None = None
) -> None:
    if not name.strip():
        raise InvalidParameterValueError(param, name, "sheet name cannot be empty")
    if len(name) > _MAX_TITLE_LENGTH:
        raise InvalidParameterValueError(
            param, name, f"sheet name longer than {_MAX_TITLE_LENGTH} characters"
        )
    bad = sorted(_INVALID_TITLE_CHARS.intersection(name))
    if bad:
        raise InvalidParameterValueError(param, name, f"invalid characters {''.join(bad)}")
    taken = (title.lower() for title in wb.sheetnames if title != exclude)
    if name.lower() in taken:
        raise DomainOperationError(operation, f"a sheet named '{name}' already exists")


def _check_cell(params: ParameterBag) -> str:
    ref = params.get_required("cell", str).strip().upper()
    try:
        coordinate_from_string(ref)
    except CellCoordinatesException:
        raise InvalidParameterValueError(
            "cell", ref, "not an A1-style cell reference", valid="e.g. A1, B12, AA3"
        ) from None
    return ref


class ListSheetsHandler(OperationHandler[Workbook]):
    OPERATION = "list_sheets"
    DESCRIPTION = "List worksheets with their index, name and used range."
    READ_ONLY = True

    def execute(self, context: OperationContext[Workbook], params: ParameterBag) -> DataResult:
        wb = context.document
        sheets = [
            {
                "index": index,
                "name": ws.title,
                "dimensions": ws.dimensions,
                "max_row": ws.max_row,
                "max_column": ws.max_column,
                "state": ws.sheet_state,
            }
            for index, ws in enumerate(wb.worksheets)
        ]
        return self.data({"sheets": sheets, "active": wb.active.title if wb.active else None})


class AddSheetHandler(OperationHandler[Workbook]):
    OPERATION = "add_sheet"
    DESCRIPTION = "Create a worksheet, optionally at a given position."

    def execute(self, context: OperationContext[Workbook], params: ParameterBag) -> MessageResult:
        wb = context.document
        name = params.get_required("name", str)
        position = params.get_optional("position", int)
        if position is not None and not 0 <= position <= len(wb.worksheets):
            raise InvalidParameterValueError(
                "position", position, "position out of range", valid=f"0..{len(wb.worksheets)}"
            )
        _check_title(self.OPERATION, wb, name, "name")

        wb.create_sheet(title=name, index=position)
        context.mark_modified()
        return self.success(f"Sheet '{name}' added.")


class RenameSheetHandler(OperationHandler[Workbook]):
    OPERATION = "rename_sheet"
    DESCRIPTION = "Rename a worksheet."

    def execute(self, context: OperationContext[Workbook], params: ParameterBag) -> MessageResult:
        wb = context.document
        index = params.get_index("sheet_index", len(wb.worksheets))
        new_name = params.get_required("new_name", str)
        ws = wb.worksheets[index]
        if ws.title == new_name:
            return self.success(f"Sheet {index} is already named '{new_name}'.")
        _check_title(self.OPERATION, wb, new_name, "new_name", exclude=ws.title)

        old_name = ws.title
        ws.title = new_name
        context.mark_modified()
        return self.success(f"Sheet '{old_name}' renamed to '{new_name}'.")


class DeleteSheetHandler(OperationHandler[Workbook]):
    OPERATION = "delete_sheet"
    DESCRIPTION = "Remove a worksheet. The last remaining sheet cannot be removed."

    def execute(self, context: OperationContext[Workbook], params: ParameterBag) -> MessageResult:
        wb = context.document
        index = params.get_index("sheet_index", len(wb.worksheets))
        if len(wb.worksheets) == 1:
            raise DomainOperationError(self.OPERATION, "a workbook must keep at least one sheet")

        ws = wb.worksheets[index]
        name = ws.title
        wb.remove(ws)
        context.mark_modified()
        return self.success(f"Sheet '{name}' deleted.")


class GetCellHandler(OperationHandler[Workbook]):
    OPERATION = "get_cell"
    DESCRIPTION = "Read a single cell value, type and number format."
    READ_ONLY = True

    def execute(self, context: OperationContext[Workbook], params: ParameterBag) -> DataResult:
        ws = _get_sheet(context.document, params)
        ref = _check_cell(params)
        cell = ws[ref]
        value: Any = cell.value
        if value is not None and not isinstance(value, (str, int, float, bool)):
            value = str(value)
        return self.data(
            {
                "sheet": ws.title,
                "cell": ref,
                "value": value,
                "data_type": cell.data_type,
                "number_format": cell.number_format,
            }
        )


class WriteCellHandler(OperationHandler[Workbook]):
    OPERATION = "write_cell"
    DESCRIPTION = "Write a value (or a formula starting with '=') into a cell."

    def execute(self, context: OperationContext[Workbook], params: ParameterBag) -> MessageResult:
        ws = _get_sheet(context.document, params)
        ref = _check_cell(params)
        value = params.get_required("value")
        if isinstance(value, (list, dict)):
            raise InvalidParameterValueError(
                "value", value, "cells hold scalars only", valid="string, number, boolean"
            )
        number_format = params.get_optional("number_format", str)

        cell = ws[ref]
        cell.value = value
        if number_format:
            cell.number_format = number_format
        context.mark_modified()
        return self.success(f"Cell {ws.title}!{ref} written.")


HANDLERS: list[OperationHandler[Workbook]] = [
    ListSheetsHandler(),
    AddSheetHandler(),
    RenameSheetHandler(),
    DeleteSheetHandler(),
    GetCellHandler(),
    WriteCellHandler(),
]
