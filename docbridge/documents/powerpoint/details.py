"""PowerPoint shape details — capability providers over python-pptx shapes.

A slide shape is one of a closed set of variants (table, chart, picture,
media, connector, group, generic graphic frame, auto shape).  Each variant
has a provider producing its own detail record; :func:`create_shape_selector`
wires them in the order below.

Order matters: table and chart frames are also graphic frames, so their
providers must precede :class:`GraphicFrameDetailProvider`.
"""

from __future__ import annotations

from typing import Any

from pptx.enum.shapes import MSO_SHAPE_TYPE
from pptx.presentation import Presentation
from pptx.shapes.autoshape import Shape
from pptx.shapes.base import BaseShape
from pptx.shapes.connector import Connector
from pptx.shapes.graphfrm import GraphicFrame
from pptx.shapes.group import GroupShape
from pptx.shapes.picture import Movie, Picture
from pydantic import BaseModel, Field

from docbridge.core.providers import CapabilityProvider, ProviderSelector


def _enum_name(value: Any) -> str | None:
    if value is None:
        return None
    return getattr(value, "name", None) or str(value)


def _pt(emu: int | None) -> float:
    """Convert EMU to points (rounded to 2 dp)."""
    return round((emu or 0) / 12700, 2)


# ---------------------------------------------------------------------------
# Detail records
# ---------------------------------------------------------------------------


class TableDetails(BaseModel):
    rows: int
    columns: int
    cells: list[list[str]]
    first_row_header: bool


class ChartDetails(BaseModel):
    chart_type: str | None
    title: str | None
    series: list[str]
    category_count: int
    has_legend: bool


class PictureDetails(BaseModel):
    content_type: str
    filename: str | None
    pixel_size: tuple[int, int]
    crop: dict[str, float]


class MediaDetails(BaseModel):
    media_type: str | None
    content_type: str | None = None


class ConnectorDetails(BaseModel):
    begin: tuple[float, float]
    end: tuple[float, float]
    line_width_pt: float | None = None


class ChildDetails(BaseModel):
    index: int
    name: str
    type: str | None = None
    details: dict[str, Any] | None = None
    error: str | None = None


class GroupDetails(BaseModel):
    child_count: int
    children: list[ChildDetails] = Field(default_factory=list)


class GraphicFrameDetails(BaseModel):
    content: str | None
    has_ole_object: bool


class AutoShapeDetails(BaseModel):
    auto_shape_type: str | None
    text: str | None
    is_placeholder: bool
    paragraph_count: int


# ---------------------------------------------------------------------------
# Providers
# ---------------------------------------------------------------------------


class TableDetailProvider(CapabilityProvider[BaseShape, Presentation]):
    type_name = "Table"

    def can_handle(self, element: BaseShape) -> bool:
        return isinstance(element, GraphicFrame) and element.has_table

    def describe(self, element: BaseShape, document: Presentation) -> TableDetails | None:
        if not self.can_handle(element):
            return None
        table = element.table
        return TableDetails(
            rows=len(table.rows),
            columns=len(table.columns),
            cells=[[cell.text for cell in row.cells] for row in table.rows],
            first_row_header=table.first_row,
        )


class ChartDetailProvider(CapabilityProvider[BaseShape, Presentation]):
    type_name = "Chart"

    def can_handle(self, element: BaseShape) -> bool:
        return isinstance(element, GraphicFrame) and element.has_chart

    def describe(self, element: BaseShape, document: Presentation) -> ChartDetails | None:
        if not self.can_handle(element):
            return None
        chart = element.chart
        title = chart.chart_title.text_frame.text if chart.has_title else None
        categories = chart.plots[0].categories if len(chart.plots) else []
        return ChartDetails(
            chart_type=_enum_name(chart.chart_type),
            title=title,
            series=[s.name for s in chart.series],
            category_count=len(categories),
            has_legend=chart.has_legend,
        )


class PictureDetailProvider(CapabilityProvider[BaseShape, Presentation]):
    type_name = "Picture"

    def can_handle(self, element: BaseShape) -> bool:
        return isinstance(element, Picture)

    def describe(self, element: BaseShape, document: Presentation) -> PictureDetails | None:
        if not self.can_handle(element):
            return None
        image = element.image
        return PictureDetails(
            content_type=image.content_type,
            filename=image.filename,
            pixel_size=image.size,
            crop={
                "left": element.crop_left,
                "top": element.crop_top,
                "right": element.crop_right,
                "bottom": element.crop_bottom,
            },
        )


class MediaDetailProvider(CapabilityProvider[BaseShape, Presentation]):
    type_name = "Media"

    def can_handle(self, element: BaseShape) -> bool:
        return isinstance(element, Movie)

    def describe(self, element: BaseShape, document: Presentation) -> MediaDetails | None:
        if not self.can_handle(element):
            return None
        return MediaDetails(media_type=_enum_name(element.media_type))


class ConnectorDetailProvider(CapabilityProvider[BaseShape, Presentation]):
    type_name = "Connector"

    def can_handle(self, element: BaseShape) -> bool:
        return isinstance(element, Connector)

    def describe(self, element: BaseShape, document: Presentation) -> ConnectorDetails | None:
        if not self.can_handle(element):
            return None
        width = element.line.width
        return ConnectorDetails(
            begin=(_pt(element.begin_x), _pt(element.begin_y)),
            end=(_pt(element.end_x), _pt(element.end_y)),
            line_width_pt=_pt(width) if width else None,
        )


class GroupDetailProvider(CapabilityProvider[BaseShape, Presentation]):
    """Describes a group and, recursively, every shape inside it."""

    type_name = "Group"

    def __init__(self) -> None:
        self._selector: ProviderSelector[BaseShape, Presentation] | None = None

    def attach(self, selector: ProviderSelector[BaseShape, Presentation]) -> None:
        self._selector = selector

    def can_handle(self, element: BaseShape) -> bool:
        return isinstance(element, GroupShape)

    def describe(self, element: BaseShape, document: Presentation) -> GroupDetails | None:
        if not self.can_handle(element):
            return None
        children = list(element.shapes)
        records: list[ChildDetails] = []
        if self._selector is not None:
            for outcome in self._selector.describe_many(children, document):
                child = children[outcome.index]
                record = ChildDetails(index=outcome.index, name=child.name)
                if outcome.error is not None:
                    record.error = str(outcome.error)
                elif outcome.details is not None:
                    record.type = outcome.details.type_name
                    record.details = outcome.details.to_dict()["details"]
                records.append(record)
        return GroupDetails(child_count=len(children), children=records)


class GraphicFrameDetailProvider(CapabilityProvider[BaseShape, Presentation]):
    """Fallback for graphic frames that are neither tables nor charts (SmartArt, OLE)."""

    type_name = "GraphicFrame"

    def can_handle(self, element: BaseShape) -> bool:
        return isinstance(element, GraphicFrame)

    def describe(self, element: BaseShape, document: Presentation) -> GraphicFrameDetails | None:
        if not self.can_handle(element):
            return None
        shape_type = element.shape_type
        return GraphicFrameDetails(
            content=_enum_name(shape_type),
            has_ole_object=shape_type
            in (MSO_SHAPE_TYPE.EMBEDDED_OLE_OBJECT, MSO_SHAPE_TYPE.LINKED_OLE_OBJECT),
        )


class AutoShapeDetailProvider(CapabilityProvider[BaseShape, Presentation]):
    type_name = "AutoShape"

    def can_handle(self, element: BaseShape) -> bool:
        return isinstance(element, Shape)

    def describe(self, element: BaseShape, document: Presentation) -> AutoShapeDetails | None:
        if not self.can_handle(element):
            return None
        auto_type = None
        if element.shape_type == MSO_SHAPE_TYPE.AUTO_SHAPE:
            auto_type = _enum_name(element.auto_shape_type)
        text = None
        paragraphs = 0
        if element.has_text_frame:
            text = element.text_frame.text or None
            paragraphs = len(element.text_frame.paragraphs)
        return AutoShapeDetails(
            auto_shape_type=auto_type,
            text=text,
            is_placeholder=element.is_placeholder,
            paragraph_count=paragraphs,
        )


def create_shape_selector() -> ProviderSelector[BaseShape, Presentation]:
    """Build the shape selector.  Specialised providers come first."""
    return ProviderSelector(
        [
            TableDetailProvider(),
            ChartDetailProvider(),
            PictureDetailProvider(),
            MediaDetailProvider(),
            ConnectorDetailProvider(),
            GroupDetailProvider(),
            GraphicFrameDetailProvider(),
            AutoShapeDetailProvider(),
        ]
    )
