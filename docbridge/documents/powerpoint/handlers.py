"""PowerPoint handlers — python-pptx slide and shape operations."""

from __future__ import annotations

from typing import Any

from pptx.enum.shapes import PP_PLACEHOLDER
from pptx.presentation import Presentation
from pptx.shapes.base import BaseShape
from pptx.slide import Slide
from pptx.util import Pt

from docbridge.core.context import OperationContext
from docbridge.core.handler import DataResult, MessageResult, OperationHandler
from docbridge.core.params import ParameterBag
from docbridge.core.providers import ProviderSelector
from docbridge.documents.powerpoint.details import create_shape_selector
from docbridge.exceptions import DomainOperationError, InvalidParameterValueError

_R_ID = "{http://schemas.openxmlformats.org/officeDocument/2006/relationships}id"
_TITLE_PLACEHOLDERS = (PP_PLACEHOLDER.TITLE, PP_PLACEHOLDER.CENTER_TITLE, PP_PLACEHOLDER.VERTICAL_TITLE)


def _get_slide(prs: Presentation, params: ParameterBag) -> tuple[int, Slide]:
    index = params.get_index("slide_index", len(prs.slides))
    return index, prs.slides[index]


def _get_shape(slide: Slide, params: ParameterBag) -> tuple[int, BaseShape]:
    index = params.get_index("shape_index", len(slide.shapes))
    return index, slide.shapes[index]


def _slide_title(slide: Slide) -> str | None:
    title = slide.shapes.title
    return title.text_frame.text if title is not None and title.has_text_frame else None


def _shape_summary(index: int, shape: BaseShape) -> dict[str, Any]:
    return {
        "index": index,
        "name": shape.name,
        "shape_id": shape.shape_id,
        "x": round((shape.left or 0) / 12700, 2),
        "y": round((shape.top or 0) / 12700, 2),
        "width": round((shape.width or 0) / 12700, 2),
        "height": round((shape.height or 0) / 12700, 2),
    }


class GetSlidesHandler(OperationHandler[Presentation]):
    OPERATION = "get_slides"
    DESCRIPTION = "List slides with their layout, title and shape count."
    READ_ONLY = True

    def execute(self, context: OperationContext[Presentation], params: ParameterBag) -> DataResult:
        prs = context.document
        slides = [
            {
                "index": index,
                "layout": slide.slide_layout.name,
                "title": _slide_title(slide),
                "shape_count": len(slide.shapes),
            }
            for index, slide in enumerate(prs.slides)
        ]
        return self.data({"slides": slides, "count": len(slides)})


class AddSlideHandler(OperationHandler[Presentation]):
    OPERATION = "add_slide"
    DESCRIPTION = "Append a slide using a layout index (default 6, blank)."

    def execute(self, context: OperationContext[Presentation], params: ParameterBag) -> MessageResult:
        prs = context.document
        layouts = prs.slide_layouts
        layout_index = params.get_index("layout_index", len(layouts), default=min(6, len(layouts) - 1))
        title = params.get_optional("title", str)
        layout = layouts[layout_index]
        if title is not None and not any(
            ph.placeholder_format.type in _TITLE_PLACEHOLDERS for ph in layout.placeholders
        ):
            raise InvalidParameterValueError(
                "title", title, f"layout '{layout.name}' has no title placeholder"
            )

        slide = prs.slides.add_slide(layout)
        if title is not None:
            slide.shapes.title.text = title
        context.mark_modified()
        return self.success(f"Slide {len(prs.slides) - 1} added with layout '{layout.name}'.")


class DeleteSlideHandler(OperationHandler[Presentation]):
    OPERATION = "delete_slide"
    DESCRIPTION = "Remove a slide."

    def execute(self, context: OperationContext[Presentation], params: ParameterBag) -> MessageResult:
        prs = context.document
        index = params.get_index("slide_index", len(prs.slides))
        xml_slides = prs.slides._sldIdLst
        slide_elem = xml_slides[index]
        r_id = slide_elem.get(_R_ID)

        xml_slides.remove(slide_elem)
        if r_id:
            prs.part.drop_rel(r_id)
        context.mark_modified()
        return self.success(f"Slide {index} deleted ({len(prs.slides)} remaining).")


class GetShapesHandler(OperationHandler[Presentation]):
    OPERATION = "get_shapes"
    DESCRIPTION = "List the shapes of a slide with their type and details."
    READ_ONLY = True

    def __init__(self, selector: ProviderSelector[BaseShape, Presentation] | None = None) -> None:
        self._selector = selector or create_shape_selector()

    def execute(self, context: OperationContext[Presentation], params: ParameterBag) -> DataResult:
        prs = context.document
        slide_index, slide = _get_slide(prs, params)
        include_details = params.get_optional("include_details", bool, False)

        shapes = list(slide.shapes)
        rows = [_shape_summary(i, shape) for i, shape in enumerate(shapes)]
        for row, outcome in zip(rows, self._selector.describe_many(shapes, prs)):
            if outcome.error is not None:
                row["type"] = None
                row["error"] = str(outcome.error)
                continue
            row["type"] = outcome.details.type_name if outcome.details else None
            if include_details and outcome.details is not None:
                row["details"] = outcome.details.to_dict()["details"]
        return self.data({"slide_index": slide_index, "shapes": rows, "count": len(rows)})


class GetShapeDetailsHandler(OperationHandler[Presentation]):
    OPERATION = "get_shape_details"
    DESCRIPTION = "Describe one shape with the provider matching its variant."
    READ_ONLY = True

    def __init__(self, selector: ProviderSelector[BaseShape, Presentation] | None = None) -> None:
        self._selector = selector or create_shape_selector()

    def execute(self, context: OperationContext[Presentation], params: ParameterBag) -> DataResult:
        prs = context.document
        slide_index, slide = _get_slide(prs, params)
        shape_index, shape = _get_shape(slide, params)

        info = _shape_summary(shape_index, shape)
        info["slide_index"] = slide_index
        details = self._selector.describe(shape, prs)
        info["type"] = details.type_name if details else None
        info["details"] = details.to_dict()["details"] if details else None
        return self.data(info)


class EditShapeHandler(OperationHandler[Presentation]):
    OPERATION = "edit_shape"
    DESCRIPTION = "Move, resize, rotate a shape or replace its text. Units are points."

    def execute(self, context: OperationContext[Presentation], params: ParameterBag) -> MessageResult:
        prs = context.document
        _, slide = _get_slide(prs, params)
        shape_index, shape = _get_shape(slide, params)

        geometry = {
            attr: params.get_optional(attr, float)
            for attr in ("x", "y", "width", "height")
        }
        for attr in ("width", "height"):
            if geometry[attr] is not None and geometry[attr] <= 0:
                raise InvalidParameterValueError(attr, geometry[attr], "must be positive")
        rotation = params.get_optional("rotation", float)
        text = params.get_optional("text", str)
        if all(v is None for v in geometry.values()) and rotation is None and text is None:
            raise InvalidParameterValueError(
                "shape_index",
                shape_index,
                "nothing to change",
                valid="x, y, width, height, rotation, text",
            )
        if text is not None and not shape.has_text_frame:
            raise DomainOperationError(self.OPERATION, f"shape '{shape.name}' has no text frame")

        targets = {"x": "left", "y": "top", "width": "width", "height": "height"}
        for attr, value in geometry.items():
            if value is not None:
                setattr(shape, targets[attr], Pt(value))
        if rotation is not None:
            shape.rotation = rotation % 360
        if text is not None:
            shape.text_frame.text = text
        context.mark_modified()
        return self.success(f"Shape {shape_index} ('{shape.name}') updated.")


class DeleteShapeHandler(OperationHandler[Presentation]):
    OPERATION = "delete_shape"
    DESCRIPTION = "Remove a shape from a slide."

    def execute(self, context: OperationContext[Presentation], params: ParameterBag) -> MessageResult:
        prs = context.document
        slide_index, slide = _get_slide(prs, params)
        shape_index, shape = _get_shape(slide, params)
        name = shape.name
        element = shape._element
        element.getparent().remove(element)
        context.mark_modified()
        return self.success(f"Shape {shape_index} ('{name}') deleted from slide {slide_index}.")


def create_handlers() -> list[OperationHandler[Presentation]]:
    selector = create_shape_selector()
    return [
        GetSlidesHandler(),
        AddSlideHandler(),
        DeleteSlideHandler(),
        GetShapesHandler(selector),
        GetShapeDetailsHandler(selector),
        EditShapeHandler(),
        DeleteShapeHandler(),
    ]
