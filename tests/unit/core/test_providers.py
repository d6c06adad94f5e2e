"""Unit tests — CapabilityProvider ordering and ProviderSelector failure isolation."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from docbridge.core.providers import CapabilityProvider, ProviderSelector
from docbridge.exceptions import DetailExtractionError


@dataclass
class Element:
    name: str
    tags: tuple[str, ...] = ()


class TaggedProvider(CapabilityProvider[Element, None]):
    """Handles elements carrying ``tag``; describes them as ``{"by": type_name}``."""

    def __init__(self, type_name: str, tag: str) -> None:
        self.type_name = type_name
        self.tag = tag

    def can_handle(self, element: Element) -> bool:
        return self.tag in element.tags

    def describe(self, element: Element, document: None) -> dict[str, str]:
        return {"by": self.type_name, "name": element.name}


class EmptyProvider(TaggedProvider):
    def describe(self, element: Element, document: None) -> None:
        return None


class BrokenProvider(TaggedProvider):
    def describe(self, element: Element, document: None) -> dict[str, str]:
        raise RuntimeError("corrupt element")


@pytest.mark.unit
class TestSelectionOrder:
    def test_specialised_registered_first_wins(self) -> None:
        specialised = TaggedProvider("Table", "table")
        generic = TaggedProvider("Frame", "frame")
        selector = ProviderSelector([specialised, generic])
        element = Element("t1", ("table", "frame"))
        assert selector.select(element) is specialised
        assert selector.describe(element, None).record["by"] == "Table"

    def test_reversed_order_changes_the_winner(self) -> None:
        specialised = TaggedProvider("Table", "table")
        generic = TaggedProvider("Frame", "frame")
        selector = ProviderSelector([generic, specialised])
        assert selector.select(Element("t1", ("table", "frame"))) is generic

    def test_generic_still_handles_plain_elements(self) -> None:
        selector = ProviderSelector([TaggedProvider("Table", "table"), TaggedProvider("Frame", "frame")])
        assert selector.describe(Element("f1", ("frame",)), None).type_name == "Frame"

    def test_providers_are_fixed(self) -> None:
        providers = [TaggedProvider("A", "a")]
        selector = ProviderSelector(providers)
        providers.append(TaggedProvider("B", "b"))
        assert len(selector.providers) == 1


@pytest.mark.unit
class TestNoDetail:
    def test_no_matching_provider_returns_none(self) -> None:
        selector = ProviderSelector([TaggedProvider("Table", "table")])
        assert selector.select(Element("x")) is None
        assert selector.describe(Element("x"), None) is None

    def test_provider_without_record_returns_none(self) -> None:
        selector = ProviderSelector([EmptyProvider("Empty", "e")])
        assert selector.describe(Element("x", ("e",)), None) is None

    def test_to_dict_tags_the_record(self) -> None:
        selector = ProviderSelector([TaggedProvider("Table", "table")])
        details = selector.describe(Element("t", ("table",)), None)
        assert details.to_dict() == {"type": "Table", "details": {"by": "Table", "name": "t"}}


@pytest.mark.unit
class TestFailureIsolation:
    def test_describe_wraps_provider_errors(self) -> None:
        selector = ProviderSelector([BrokenProvider("Broken", "b")])
        with pytest.raises(DetailExtractionError) as exc_info:
            selector.describe(Element("bad", ("b",)), None)
        err = exc_info.value
        assert err.provider == "Broken"
        assert isinstance(err.cause, RuntimeError)
        assert "bad" in err.message
        assert err.kind == "domain"

    def test_describe_many_isolates_siblings(self) -> None:
        selector = ProviderSelector([BrokenProvider("Broken", "b"), TaggedProvider("Ok", "ok")])
        outcomes = selector.describe_many(
            [Element("one", ("ok",)), Element("two", ("b",)), Element("three"), Element("four", ("ok",))],
            None,
        )
        assert [o.index for o in outcomes] == [0, 1, 2, 3]
        assert outcomes[0].ok and outcomes[0].details.type_name == "Ok"
        assert not outcomes[1].ok and isinstance(outcomes[1].error, DetailExtractionError)
        assert outcomes[2].ok and outcomes[2].details is None
        assert outcomes[3].details.record["name"] == "four"


class Container(Element):
    def __init__(self, name: str, children: list[Element]) -> None:
        super().__init__(name, ("container",))
        self.children = children


class ContainerProvider(CapabilityProvider[Element, None]):
    type_name = "Container"

    def attach(self, selector: ProviderSelector[Element, None]) -> None:
        self.selector = selector

    def can_handle(self, element: Element) -> bool:
        return isinstance(element, Container)

    def describe(self, element: Element, document: None) -> dict[str, object]:
        return {
            "children": [
                o.details.to_dict() if o.details else None
                for o in self.selector.describe_many(element.children, document)
            ]
        }


@pytest.mark.unit
class TestRecursion:
    def test_nested_containers_have_no_depth_cap(self) -> None:
        selector = ProviderSelector([ContainerProvider(), TaggedProvider("Leaf", "leaf")])
        element: Element = Element("leaf", ("leaf",))
        for depth in range(25):
            element = Container(f"level{depth}", [element])

        record = selector.describe(element, None).record
        for _ in range(25):
            child = record["children"][0]
            if child["type"] == "Leaf":
                break
            record = child["details"]
        assert record["children"][0]["details"]["name"] == "leaf"
