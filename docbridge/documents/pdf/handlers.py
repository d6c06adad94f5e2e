"""PDF handlers — pypdf page and metadata operations.

The document handle is a :class:`pypdf.PdfWriter` (cloned from the source
file on load) so every operation edits the same object in place.
"""

from __future__ import annotations

from pypdf import PdfWriter

from docbridge.core.context import OperationContext
from docbridge.core.handler import DataResult, MessageResult, OperationHandler
from docbridge.core.params import ParameterBag
from docbridge.exceptions import DomainOperationError, InvalidParameterValueError

_METADATA_FIELDS = {
    "title": "/Title",
    "author": "/Author",
    "subject": "/Subject",
    "keywords": "/Keywords",
    "creator": "/Creator",
}


class GetPagesHandler(OperationHandler[PdfWriter]):
    OPERATION = "get_pages"
    DESCRIPTION = "List pages with their size in points and rotation."
    READ_ONLY = True

    def execute(self, context: OperationContext[PdfWriter], params: ParameterBag) -> DataResult:
        pages = [
            {
                "index": index,
                "width": round(float(page.mediabox.width), 2),
                "height": round(float(page.mediabox.height), 2),
                "rotation": page.rotation,
            }
            for index, page in enumerate(context.document.pages)
        ]
        return self.data({"pages": pages, "count": len(pages)})


class DeletePageHandler(OperationHandler[PdfWriter]):
    OPERATION = "delete_page"
    DESCRIPTION = "Remove a page. The last remaining page cannot be removed."

    def execute(self, context: OperationContext[PdfWriter], params: ParameterBag) -> MessageResult:
        writer = context.document
        index = params.get_index("page_index", len(writer.pages))
        if len(writer.pages) == 1:
            raise DomainOperationError(self.OPERATION, "a document must keep at least one page")

        del writer.pages[index]
        context.mark_modified()
        return self.success(f"Page {index} deleted ({len(writer.pages)} remaining).")


class RotatePageHandler(OperationHandler[PdfWriter]):
    OPERATION = "rotate_page"
    DESCRIPTION = "Rotate a page clockwise by a multiple of 90 degrees."

    def execute(self, context: OperationContext[PdfWriter], params: ParameterBag) -> MessageResult:
        writer = context.document
        index = params.get_index("page_index", len(writer.pages))
        angle = params.get_required("angle", int)
        if angle % 90 != 0:
            raise InvalidParameterValueError(
                "angle", angle, "must be a multiple of 90", valid="90, 180, 270, -90"
            )

        page = writer.pages[index]
        page.rotate(angle)
        context.mark_modified()
        return self.success(f"Page {index} rotated to {page.rotation} degrees.")


class GetPropertiesHandler(OperationHandler[PdfWriter]):
    OPERATION = "get_properties"
    DESCRIPTION = "Read the document information dictionary."
    READ_ONLY = True

    def execute(self, context: OperationContext[PdfWriter], params: ParameterBag) -> DataResult:
        metadata = context.document.metadata or {}
        return self.data({key.lstrip("/").lower(): str(value) for key, value in metadata.items()})


class SetPropertiesHandler(OperationHandler[PdfWriter]):
    OPERATION = "set_properties"
    DESCRIPTION = "Set title, author, subject, keywords or creator."

    def execute(self, context: OperationContext[PdfWriter], params: ParameterBag) -> MessageResult:
        changes = {
            key: params.get_required(name, str)
            for name, key in _METADATA_FIELDS.items()
            if params.has(name)
        }
        if not changes:
            raise InvalidParameterValueError(
                "title", None, "nothing to change", valid=list(_METADATA_FIELDS)
            )

        context.document.add_metadata(changes)
        context.mark_modified()
        names = sorted(key.lstrip("/").lower() for key in changes)
        return self.success(f"Properties updated: {', '.join(names)}.")


HANDLERS: list[OperationHandler[PdfWriter]] = [
    GetPagesHandler(),
    DeletePageHandler(),
    RotatePageHandler(),
    GetPropertiesHandler(),
    SetPropertiesHandler(),
]
