"""Core layer — Handler registry.

One registry exists per document kind.  It maps a normalised operation name
(stripped, lower-cased) to exactly one :class:`OperationHandler` and invokes
it.  The registry is built once at startup, frozen, and read-only afterwards.

The registry is not a failure boundary: exceptions raised by a handler reach
the caller untouched.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Generic

from docbridge.core.context import OperationContext, TDocument
from docbridge.core.handler import HandlerResult, OperationHandler
from docbridge.core.params import ParameterBag
from docbridge.exceptions import (
    DuplicateOperationError,
    RegistryFrozenError,
    UnknownOperationError,
)
from docbridge.logging import get_logger

log = get_logger(__name__)


def normalise_operation(name: str) -> str:
    return name.strip().lower()


class HandlerRegistry(Generic[TDocument]):
    """Runtime registry of operation handlers for one document kind.

    Usage::

        registry = HandlerRegistry.build("powerpoint", [AddSlideHandler(), GetSlidesHandler()])
        ctx = OperationContext(document=Presentation())
        result = registry.dispatch("add_slide", ctx, {"layout_index": 6})
        assert ctx.modified
    """

    def __init__(self, document_kind: str = "", list_valid_operations: bool = True) -> None:
        self.document_kind = document_kind
        self._handlers: dict[str, OperationHandler[TDocument]] = {}
        self._aliases: dict[str, str] = {}
        self._frozen = False
        self._list_valid = list_valid_operations

    @classmethod
    def build(
        cls,
        document_kind: str,
        handlers: Iterable[OperationHandler[TDocument]],
        aliases: Mapping[str, str] | None = None,
        list_valid_operations: bool = True,
    ) -> "HandlerRegistry[TDocument]":
        """Register *handlers* (and *aliases*) and return the frozen registry."""
        registry: HandlerRegistry[TDocument] = cls(document_kind, list_valid_operations)
        for handler in handlers:
            registry.register(handler)
        for alias, target in (aliases or {}).items():
            registry.alias(alias, target)
        registry.freeze()
        return registry

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def register(self, handler: OperationHandler[TDocument]) -> None:
        """Register *handler* under its normalised operation name.

        Raises:
            ValueError:              The handler declares no operation name.
            RegistryFrozenError:     The registry has been frozen.
            DuplicateOperationError: The name (or an alias) is already taken.
        """
        name = handler.operation_name
        if not name or not name.strip():
            raise ValueError(f"Handler {type(handler).__name__} has no OPERATION.")
        key = normalise_operation(name)
        self._check_writable(key)
        self._handlers[key] = handler
        log.debug(
            "handler_registered",
            document_kind=self.document_kind,
            operation=key,
            handler=type(handler).__name__,
        )

    def alias(self, alias: str, target: str) -> None:
        """Expose the handler registered as *target* under a second name."""
        key = normalise_operation(alias)
        target_key = normalise_operation(target)
        if target_key not in self._handlers:
            raise UnknownOperationError(target, self.document_kind, self._valid_names())
        self._check_writable(key)
        self._aliases[key] = target_key

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_writable(self, key: str) -> None:
        if self._frozen:
            raise RegistryFrozenError(key, self.document_kind)
        if key in self._handlers or key in self._aliases:
            raise DuplicateOperationError(key, self.document_kind)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def resolve(self, operation: str) -> OperationHandler[TDocument]:
        """Return the handler for *operation* (case-insensitive).

        Raises:
            UnknownOperationError: No handler or alias matches.
        """
        key = normalise_operation(operation)
        key = self._aliases.get(key, key)
        handler = self._handlers.get(key)
        if handler is None:
            raise UnknownOperationError(
                operation,
                self.document_kind or None,
                self._valid_names() if self._list_valid else None,
            )
        return handler

    def dispatch(
        self,
        operation: str,
        context: OperationContext[TDocument],
        params: ParameterBag | Mapping[str, Any] | None = None,
    ) -> HandlerResult:
        """Resolve *operation* and invoke its handler.

        Raw mappings are wrapped into a :class:`ParameterBag`.  Handler
        exceptions propagate unchanged.
        """
        handler = self.resolve(operation)
        bag = params if isinstance(params, ParameterBag) else ParameterBag(params)
        log.debug(
            "operation_dispatched",
            document_kind=self.document_kind,
            operation=handler.operation_name,
            params=bag.names(),
        )
        result = handler.execute(context, bag)
        log.info(
            "operation_completed",
            document_kind=self.document_kind,
            operation=handler.operation_name,
            result_kind=result.kind,
            modified=context.modified,
        )
        return result

    def operations(self) -> list[str]:
        """Return the sorted list of registered operation names (without aliases)."""
        return sorted(self._handlers)

    def aliases(self) -> dict[str, str]:
        return dict(self._aliases)

    def handlers(self) -> list[OperationHandler[TDocument]]:
        return [self._handlers[name] for name in self.operations()]

    def _valid_names(self) -> list[str]:
        return sorted([*self._handlers, *self._aliases])

    def __contains__(self, operation: object) -> bool:
        if not isinstance(operation, str):
            return False
        key = normalise_operation(operation)
        return key in self._handlers or key in self._aliases

    def __len__(self) -> int:
        return len(self._handlers)

    def __repr__(self) -> str:
        return f"HandlerRegistry({self.document_kind!r}, operations={self.operations()})"
