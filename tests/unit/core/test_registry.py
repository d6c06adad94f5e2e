"""Unit tests — HandlerRegistry registration, lookup and dispatch."""

from __future__ import annotations

import pytest

from docbridge.core.context import OperationContext
from docbridge.core.handler import DataResult, MessageResult, OperationHandler
from docbridge.core.params import ParameterBag
from docbridge.core.registry import HandlerRegistry
from docbridge.exceptions import (
    DomainOperationError,
    DuplicateOperationError,
    RegistryFrozenError,
    UnknownOperationError,
)


class AppendHandler(OperationHandler[list]):
    OPERATION = "Append_Item"

    def execute(self, context: OperationContext[list], params: ParameterBag) -> MessageResult:
        context.document.append(params.get_required("item"))
        context.mark_modified()
        return self.success("appended")


class CountHandler(OperationHandler[list]):
    OPERATION = "count_items"
    READ_ONLY = True

    def execute(self, context: OperationContext[list], params: ParameterBag) -> DataResult:
        return self.data({"count": len(context.document)})


class ExplodingHandler(OperationHandler[list]):
    OPERATION = "explode"

    def execute(self, context: OperationContext[list], params: ParameterBag) -> MessageResult:
        context.document.append("partial")
        context.mark_modified()
        raise DomainOperationError(self.OPERATION, "library refused")


class NamelessHandler(OperationHandler[list]):
    def execute(self, context: OperationContext[list], params: ParameterBag) -> MessageResult:
        return self.success("")


@pytest.fixture
def registry() -> HandlerRegistry[list]:
    return HandlerRegistry.build(
        "list",
        [AppendHandler(), CountHandler(), ExplodingHandler()],
        aliases={"add": "append_item"},
    )


@pytest.mark.unit
class TestRegistration:
    def test_register_and_resolve(self) -> None:
        reg: HandlerRegistry[list] = HandlerRegistry("list")
        handler = CountHandler()
        reg.register(handler)
        assert reg.resolve("count_items") is handler

    def test_duplicate_rejected(self) -> None:
        reg: HandlerRegistry[list] = HandlerRegistry("list")
        reg.register(CountHandler())
        with pytest.raises(DuplicateOperationError) as exc_info:
            reg.register(CountHandler())
        assert exc_info.value.kind == "conflict"

    def test_duplicate_detected_after_normalisation(self) -> None:
        class Shouting(AppendHandler):
            OPERATION = "  APPEND_ITEM "

        reg: HandlerRegistry[list] = HandlerRegistry("list")
        reg.register(AppendHandler())
        with pytest.raises(DuplicateOperationError):
            reg.register(Shouting())

    def test_nameless_handler_rejected(self) -> None:
        with pytest.raises(ValueError):
            HandlerRegistry("list").register(NamelessHandler())

    def test_frozen_registry_rejects_registration(self, registry: HandlerRegistry[list]) -> None:
        assert registry.frozen
        with pytest.raises(RegistryFrozenError):
            registry.register(CountHandler())

    def test_alias_to_unknown_target(self) -> None:
        with pytest.raises(UnknownOperationError):
            HandlerRegistry("list").alias("get", "missing")

    def test_alias_cannot_shadow_handler(self) -> None:
        reg: HandlerRegistry[list] = HandlerRegistry("list")
        reg.register(AppendHandler())
        reg.register(CountHandler())
        with pytest.raises(DuplicateOperationError):
            reg.alias("count_items", "append_item")

    def test_operations_excludes_aliases(self, registry: HandlerRegistry[list]) -> None:
        assert registry.operations() == ["append_item", "count_items", "explode"]
        assert registry.aliases() == {"add": "append_item"}
        assert len(registry) == 3


@pytest.mark.unit
class TestResolve:
    @pytest.mark.parametrize("name", ["count_items", "COUNT_ITEMS", "Count_Items", "  count_items  "])
    def test_case_insensitive(self, registry: HandlerRegistry[list], name: str) -> None:
        assert registry.resolve(name) is registry.resolve("count_items")

    def test_alias_resolves_to_target(self, registry: HandlerRegistry[list]) -> None:
        assert registry.resolve("ADD") is registry.resolve("append_item")
        assert "add" in registry

    def test_unknown_raises_with_valid_names(self, registry: HandlerRegistry[list]) -> None:
        with pytest.raises(UnknownOperationError) as exc_info:
            registry.resolve("remove_item")
        err = exc_info.value
        assert err.kind == "not_found"
        assert "remove_item" in err.message
        assert "append_item" in err.message
        assert err.valid_operations == ["add", "append_item", "count_items", "explode"]

    def test_valid_names_can_be_omitted(self) -> None:
        reg = HandlerRegistry.build("list", [CountHandler()], list_valid_operations=False)
        with pytest.raises(UnknownOperationError) as exc_info:
            reg.resolve("nope")
        assert "count_items" not in exc_info.value.message
        assert exc_info.value.valid_operations == []

    def test_non_string_not_contained(self, registry: HandlerRegistry[list]) -> None:
        assert 42 not in registry


@pytest.mark.unit
class TestDispatch:
    def test_mutating_handler_marks_modified(self, registry: HandlerRegistry[list]) -> None:
        ctx: OperationContext[list] = OperationContext(document=[])
        result = registry.dispatch("append_item", ctx, {"item": "a"})
        assert isinstance(result, MessageResult)
        assert ctx.document == ["a"]
        assert ctx.modified is True

    def test_read_only_handler_leaves_context_clean(self, registry: HandlerRegistry[list]) -> None:
        ctx: OperationContext[list] = OperationContext(document=[1, 2])
        result = registry.dispatch("count_items", ctx)
        assert isinstance(result, DataResult)
        assert result.data == {"count": 2}
        assert ctx.modified is False

    def test_accepts_parameter_bag(self, registry: HandlerRegistry[list]) -> None:
        ctx: OperationContext[list] = OperationContext(document=[])
        registry.dispatch("add", ctx, ParameterBag.of(item=1))
        assert ctx.document == [1]

    def test_handler_errors_propagate_unchanged(self, registry: HandlerRegistry[list]) -> None:
        ctx: OperationContext[list] = OperationContext(document=[])
        with pytest.raises(DomainOperationError) as exc_info:
            registry.dispatch("explode", ctx, {})
        assert exc_info.value.reason == "library refused"
        # No rollback: partial state and the modified flag survive.
        assert ctx.document == ["partial"]
        assert ctx.modified is True

    def test_result_kinds_are_distinguishable(self, registry: HandlerRegistry[list]) -> None:
        ctx: OperationContext[list] = OperationContext(document=[])
        assert registry.dispatch("add", ctx, {"item": 1}).to_dict() == {"kind": "message", "message": "appended"}
        assert registry.dispatch("count_items", ctx).to_dict() == {"kind": "data", "data": {"count": 1}}


@pytest.mark.unit
class TestDescribe:
    def test_describe_includes_read_only_flag(self) -> None:
        info = CountHandler().describe()
        assert info == {"name": "count_items", "description": "", "read_only": True}

    def test_parse_without_model_is_a_programming_error(self) -> None:
        with pytest.raises(TypeError):
            CountHandler().parse(ParameterBag())
