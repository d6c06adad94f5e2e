"""Word handlers — python-docx paragraph, statistics and property operations."""

from __future__ import annotations

from typing import Any

from docx.document import Document
from docx.enum.style import WD_STYLE_TYPE
from docx.text.paragraph import Paragraph
from pydantic import BaseModel, Field, model_validator

from docbridge.core.context import OperationContext
from docbridge.core.handler import DataResult, MessageResult, OperationHandler
from docbridge.core.params import ParameterBag
from docbridge.exceptions import InvalidParameterValueError


def _paragraph_info(index: int, paragraph: Paragraph) -> dict[str, Any]:
    return {
        "index": index,
        "text": paragraph.text,
        "style": paragraph.style.name if paragraph.style is not None else None,
    }


def _check_style(doc: Document, name: str, param: str = "style") -> None:
    try:
        style = doc.styles[name]
    except KeyError:
        raise InvalidParameterValueError(param, name, "style not defined in document") from None
    if style.type != WD_STYLE_TYPE.PARAGRAPH:
        raise InvalidParameterValueError(param, name, "not a paragraph style")


class GetParagraphsHandler(OperationHandler[Document]):
    OPERATION = "get_paragraphs"
    DESCRIPTION = "List body paragraphs with their index, text and style."
    READ_ONLY = True

    def execute(self, context: OperationContext[Document], params: ParameterBag) -> DataResult:
        include_empty = params.get_optional("include_empty", bool, False)
        style_filter = params.get_optional("style", str)

        paragraphs = []
        for index, paragraph in enumerate(context.document.paragraphs):
            if not include_empty and not paragraph.text.strip():
                continue
            info = _paragraph_info(index, paragraph)
            if style_filter and info["style"] != style_filter:
                continue
            paragraphs.append(info)
        return self.data(
            {"paragraphs": paragraphs, "total": len(context.document.paragraphs)}
        )


class AddParagraphHandler(OperationHandler[Document]):
    OPERATION = "add_paragraph"
    DESCRIPTION = "Append a paragraph, or insert it after a given paragraph index."

    def execute(self, context: OperationContext[Document], params: ParameterBag) -> MessageResult:
        doc = context.document
        text = params.get_required("text", str)
        style = params.get_optional("style", str)
        anchor: Paragraph | None = None
        if params.has("insert_after"):
            index = params.get_index("insert_after", len(doc.paragraphs))
            anchor = doc.paragraphs[index]
        if style:
            _check_style(doc, style)

        paragraph = doc.add_paragraph(text, style=style)
        if anchor is not None:
            anchor._p.addnext(paragraph._p)
        context.mark_modified()

        position = "at end" if anchor is None else f"after paragraph {params.get_raw('insert_after')}"
        return self.success(f"Paragraph added {position}.")


class EditParagraphHandler(OperationHandler[Document]):
    OPERATION = "edit_paragraph"
    DESCRIPTION = "Replace the text and/or style of a paragraph."

    def execute(self, context: OperationContext[Document], params: ParameterBag) -> MessageResult:
        doc = context.document
        index = params.get_index("paragraph_index", len(doc.paragraphs))
        text = params.get_optional("text", str)
        style = params.get_optional("style", str)
        if text is None and style is None:
            raise InvalidParameterValueError(
                "text", None, "nothing to change", valid="text, style"
            )
        if style is not None:
            _check_style(doc, style)

        paragraph = doc.paragraphs[index]
        if text is not None:
            paragraph.text = text
        if style is not None:
            paragraph.style = doc.styles[style]
        context.mark_modified()
        return self.success(f"Paragraph {index} updated.")


class DeleteParagraphHandler(OperationHandler[Document]):
    OPERATION = "delete_paragraph"
    DESCRIPTION = "Remove a paragraph from the document body."

    def execute(self, context: OperationContext[Document], params: ParameterBag) -> MessageResult:
        doc = context.document
        index = params.get_index("paragraph_index", len(doc.paragraphs))
        element = doc.paragraphs[index]._p
        element.getparent().remove(element)
        context.mark_modified()
        return self.success(f"Paragraph {index} deleted.")


class GetStatisticsHandler(OperationHandler[Document]):
    OPERATION = "get_statistics"
    DESCRIPTION = "Count paragraphs, words, characters and tables."
    READ_ONLY = True

    def execute(self, context: OperationContext[Document], params: ParameterBag) -> DataResult:
        doc = context.document
        include_tables = params.get_optional("include_tables", bool, True)

        texts = [p.text for p in doc.paragraphs]
        if include_tables:
            for table in doc.tables:
                for row in table.rows:
                    texts.extend(cell.text for cell in row.cells)

        return self.data(
            {
                "paragraphs": len(doc.paragraphs),
                "non_empty_paragraphs": sum(1 for p in doc.paragraphs if p.text.strip()),
                "tables": len(doc.tables),
                "words": sum(len(t.split()) for t in texts),
                "characters": sum(len(t) for t in texts),
                "sections": len(doc.sections),
            }
        )


class SetPropertiesParams(BaseModel):
    title: str | None = None
    author: str | None = None
    subject: str | None = None
    keywords: str | None = None
    comments: str | None = None
    category: str | None = None
    revision: int | None = Field(default=None, ge=1)

    @model_validator(mode="after")
    def _at_least_one(self) -> "SetPropertiesParams":
        if not self.model_dump(exclude_none=True):
            raise ValueError("supply at least one property")
        return self


class SetPropertiesHandler(OperationHandler[Document]):
    OPERATION = "set_properties"
    DESCRIPTION = "Set core document properties (title, author, subject, ...)."
    params_model = SetPropertiesParams

    def execute(self, context: OperationContext[Document], params: ParameterBag) -> MessageResult:
        p: SetPropertiesParams = self.parse(params)
        props = context.document.core_properties
        changed = p.model_dump(exclude_none=True)
        for name, value in changed.items():
            setattr(props, name, value)
        context.mark_modified()
        return self.success(f"Properties updated: {', '.join(sorted(changed))}.")


HANDLERS: list[OperationHandler[Document]] = [
    GetParagraphsHandler(),
    AddParagraphHandler(),
    EditParagraphHandler(),
    DeleteParagraphHandler(),
    GetStatisticsHandler(),
    SetPropertiesHandler(),
]
