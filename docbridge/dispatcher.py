"""Dispatcher — the entry point the wider system calls.

Owns one frozen :class:`HandlerRegistry` per enabled document kind and routes
``(document_kind, operation, raw_params)`` to the right handler.

``run_file`` adds the file round trip around a dispatch: load, dispatch,
persist only when the handler marked the context modified.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from docbridge.config import Settings, get_settings
from docbridge.core.context import OperationContext
from docbridge.core.handler import HandlerResult
from docbridge.core.params import ParameterBag
from docbridge.core.registry import HandlerRegistry
from docbridge.documents import DocumentKind, DocumentKindInfo, get_kind_info
from docbridge.exceptions import DocumentLoadError, UnknownDocumentKindError
from docbridge.logging import get_logger, operation_log_context

log = get_logger(__name__)


@dataclass
class FileRunResult:
    """Outcome of :meth:`Dispatcher.run_file`."""

    result: HandlerResult
    context: OperationContext[Any]
    saved_to: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.result.to_dict(),
            "modified": self.context.modified,
            "saved_to": self.saved_to,
        }


class Dispatcher:
    """Routes operations to the registry of their document kind.

    Usage::

        dispatcher = Dispatcher()
        ctx = OperationContext(document=docx.Document())
        dispatcher.dispatch("word", "add_paragraph", {"text": "Hello"}, ctx)
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._registries: dict[DocumentKind, HandlerRegistry[Any]] = {}
        list_valid = self._settings.dispatch.list_valid_operations
        for name in self._settings.active_document_kinds():
            info = get_kind_info(name)
            self._registries[info.kind] = info.create_registry(list_valid_operations=list_valid)
            log.debug("registry_built", document_kind=name, operations=len(self._registries[info.kind]))

    def kinds(self) -> list[str]:
        return [kind.value for kind in self._registries]

    def _kind_info(self, document_kind: str | DocumentKind) -> DocumentKindInfo:
        info = get_kind_info(document_kind)
        if info.kind not in self._registries:
            raise UnknownDocumentKindError(str(document_kind), self.kinds())
        return info

    def registry(self, document_kind: str | DocumentKind) -> HandlerRegistry[Any]:
        """Return the registry for *document_kind*.

        Raises:
            UnknownDocumentKindError: The kind is unknown or disabled.
        """
        return self._registries[self._kind_info(document_kind).kind]

    def dispatch(
        self,
        document_kind: str | DocumentKind,
        operation: str,
        raw_params: Mapping[str, Any] | None,
        context: OperationContext[Any],
    ) -> HandlerResult:
        """Dispatch one operation.  Errors propagate to the caller unchanged."""
        registry = self.registry(document_kind)
        with operation_log_context(registry.document_kind, operation, context.session_id):
            return registry.dispatch(operation, context, ParameterBag(raw_params))

    def run_file(
        self,
        document_kind: str | DocumentKind,
        path: str,
        operation: str,
        raw_params: Mapping[str, Any] | None = None,
        output_path: str | None = None,
    ) -> FileRunResult:
        """Load *path*, dispatch *operation*, save when modified.

        The document is saved to *output_path* when given, else in place.
        Nothing is written when the operation fails or does not modify.
        """
        info = self._kind_info(document_kind)
        # An unknown operation fails before the document is loaded.
        self.registry(info.kind).resolve(operation)
        try:
            document = info.loader(path)
        except Exception as exc:
            log.warning(
                "document_load_failed", document_kind=info.kind.value, path=path, error=str(exc)
            )
            raise DocumentLoadError(info.kind.value, path, exc) from exc
        context: OperationContext[Any] = OperationContext(
            document=document, source_path=path, output_path=output_path
        )
        result = self.dispatch(info.kind, operation, raw_params, context)

        saved_to = None
        if context.modified:
            saved_to = output_path or path
            info.saver(document, saved_to)
            log.info("document_saved", document_kind=info.kind.value, path=saved_to)
        return FileRunResult(result=result, context=context, saved_to=saved_to)
