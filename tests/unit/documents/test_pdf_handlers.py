"""Unit tests — PDF handlers against an in-memory pypdf writer."""

from __future__ import annotations

import pytest

from docbridge.core.context import OperationContext
from docbridge.documents.pdf import create_registry
from docbridge.exceptions import (
    DomainOperationError,
    InvalidParameterValueError,
    MissingParameterError,
)


@pytest.fixture
def registry():
    return create_registry()


@pytest.mark.unit
class TestPages:
    def test_get_pages(self, registry, pdf_context: OperationContext) -> None:
        data = registry.dispatch("get_pages", pdf_context, {}).data
        assert data["count"] == 2
        assert data["pages"][0] == {"index": 0, "width": 612.0, "height": 792.0, "rotation": 0}
        assert data["pages"][1]["width"] == 595.0
        assert pdf_context.modified is False

    def test_get_alias(self, registry, pdf_context: OperationContext) -> None:
        assert registry.resolve("get") is registry.resolve("get_pages")

    def test_delete_page(self, registry, pdf_context: OperationContext) -> None:
        result = registry.dispatch("delete_page", pdf_context, {"page_index": 0})
        assert len(pdf_context.document.pages) == 1
        assert float(pdf_context.document.pages[0].mediabox.width) == 595.0
        assert "1 remaining" in result.message
        assert pdf_context.modified is True

    def test_cannot_delete_last_page(self, registry, pdf_context: OperationContext) -> None:
        registry.dispatch("delete_page", pdf_context, {"page_index": 1})
        with pytest.raises(DomainOperationError):
            registry.dispatch("delete_page", pdf_context, {"page_index": 0})
        assert len(pdf_context.document.pages) == 1

    def test_page_index_out_of_range(self, registry, pdf_context: OperationContext) -> None:
        with pytest.raises(InvalidParameterValueError) as exc_info:
            registry.dispatch("delete_page", pdf_context, {"page_index": 2})
        assert "0..1" in exc_info.value.message
        assert pdf_context.modified is False

    def test_rotate_page(self, registry, pdf_context: OperationContext) -> None:
        registry.dispatch("rotate_page", pdf_context, {"page_index": 1, "angle": "90"})
        assert pdf_context.document.pages[1].rotation == 90
        assert pdf_context.document.pages[0].rotation == 0
        assert pdf_context.modified is True

    def test_rotate_rejects_odd_angles(self, registry, pdf_context: OperationContext) -> None:
        with pytest.raises(InvalidParameterValueError) as exc_info:
            registry.dispatch("rotate_page", pdf_context, {"page_index": 0, "angle": 45})
        assert exc_info.value.name == "angle"
        assert pdf_context.modified is False

    def test_rotate_requires_angle(self, registry, pdf_context: OperationContext) -> None:
        with pytest.raises(MissingParameterError):
            registry.dispatch("rotate_page", pdf_context, {"page_index": 0})


@pytest.mark.unit
class TestProperties:
    def test_set_then_get(self, registry, pdf_context: OperationContext) -> None:
        result = registry.dispatch(
            "set_properties", pdf_context, {"title": "Quarterly report", "author": "Finance"}
        )
        assert result.message == "Properties updated: author, title."
        assert pdf_context.modified is True

        props = registry.dispatch("get_properties", pdf_context, {}).data
        assert props["title"] == "Quarterly report"
        assert props["author"] == "Finance"

    def test_set_requires_a_field(self, registry, pdf_context: OperationContext) -> None:
        with pytest.raises(InvalidParameterValueError):
            registry.dispatch("set_properties", pdf_context, {"unrelated": "x"})
        assert pdf_context.modified is False

    def test_get_properties_is_read_only(self, registry, pdf_context: OperationContext) -> None:
        registry.dispatch("get_properties", pdf_context, {})
        assert pdf_context.modified is False
