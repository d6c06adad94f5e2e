"""DocBridge — Exception hierarchy.

All exceptions raised by the dispatch core inherit from DocBridgeError so that
callers can catch the full family with a single except clause when needed.

Every error carries a ``kind`` that tells the caller which family it belongs
to (``validation``, ``not_found``, ``conflict``, ``domain``) and a
human-readable message.

Hierarchy:
    DocBridgeError
    ├── ParameterError
    │   ├── MissingParameterError
    │   ├── TypeMismatchError
    │   └── InvalidParameterValueError
    ├── RegistryError
    │   ├── UnknownOperationError
    │   ├── UnknownDocumentKindError
    │   ├── DuplicateOperationError
    │   └── RegistryFrozenError
    ├── DomainOperationError
    ├── DetailExtractionError
    └── DocumentLoadError
"""

from __future__ import annotations

from typing import Any, Iterable


class DocBridgeError(Exception):
    """Base exception for all DocBridge errors."""

    kind: str = "domain"

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = context or {}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, context={self.context})"

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "kind": self.kind,
            "message": self.message,
            "context": self.context,
        }


# ---------------------------------------------------------------------------
# Parameter layer
# ---------------------------------------------------------------------------


class ParameterError(DocBridgeError):
    """Base for all parameter validation errors."""

    kind = "validation"

    def __init__(self, message: str, name: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message, context={"parameter": name, **(context or {})})
        self.name = name


class MissingParameterError(ParameterError):
    """A required parameter was not supplied (or was supplied as null)."""

    def __init__(self, name: str, operation: str | None = None) -> None:
        suffix = f" for operation '{operation}'" if operation else ""
        super().__init__(
            f"Parameter '{name}' is required{suffix}",
            name,
            context={"operation": operation} if operation else None,
        )
        self.operation = operation


class TypeMismatchError(ParameterError):
    """A parameter is present but cannot be converted to the expected type."""

    def __init__(self, name: str, expected: str, value: Any, reason: str = "") -> None:
        detail = f": {reason}" if reason else ""
        super().__init__(
            f"Cannot convert parameter '{name}' (value {value!r}) to {expected}{detail}",
            name,
            context={"expected": expected, "value": repr(value)},
        )
        self.expected = expected
        self.value = value


class InvalidParameterValueError(ParameterError):
    """A parameter has the right type but a value outside its valid range or set."""

    def __init__(
        self,
        name: str,
        value: Any,
        reason: str,
        valid: Iterable[Any] | str | None = None,
    ) -> None:
        context: dict[str, Any] = {"value": repr(value)}
        message = f"Invalid value {value!r} for parameter '{name}': {reason}"
        if valid is not None:
            valid_text = valid if isinstance(valid, str) else ", ".join(str(v) for v in valid)
            context["valid"] = valid_text
            message = f"{message} (valid: {valid_text})"
        super().__init__(message, name, context=context)
        self.value = value


# ---------------------------------------------------------------------------
# Registry layer
# ---------------------------------------------------------------------------


class RegistryError(DocBridgeError):
    """Base for handler registry errors."""

    kind = "conflict"


class UnknownOperationError(RegistryError):
    """No handler is registered under the requested operation name."""

    kind = "not_found"

    def __init__(
        self,
        operation: str,
        document_kind: str | None = None,
        valid_operations: list[str] | None = None,
    ) -> None:
        where = f" for document kind '{document_kind}'" if document_kind else ""
        message = f"Unknown operation '{operation}'{where}"
        if valid_operations:
            message = f"{message}. Valid operations: {', '.join(valid_operations)}"
        super().__init__(
            message,
            context={
                "operation": operation,
                "document_kind": document_kind,
                "valid_operations": valid_operations or [],
            },
        )
        self.operation = operation
        self.document_kind = document_kind
        self.valid_operations = valid_operations or []


class UnknownDocumentKindError(RegistryError):
    """The requested document kind is not known or not enabled."""

    kind = "not_found"

    def __init__(self, document_kind: str, available: list[str] | None = None) -> None:
        message = f"Unknown document kind '{document_kind}'"
        if available:
            message = f"{message}. Available kinds: {', '.join(available)}"
        super().__init__(
            message,
            context={"document_kind": document_kind, "available": available or []},
        )
        self.document_kind = document_kind


class DuplicateOperationError(RegistryError):
    """Two handlers were registered under the same normalised operation name."""

    def __init__(self, operation: str, document_kind: str | None = None) -> None:
        where = f" in the '{document_kind}' registry" if document_kind else ""
        super().__init__(
            f"Operation '{operation}' is already registered{where}",
            context={"operation": operation, "document_kind": document_kind},
        )
        self.operation = operation


class RegistryFrozenError(RegistryError):
    """A registration was attempted after the registry was frozen."""

    def __init__(self, operation: str, document_kind: str | None = None) -> None:
        super().__init__(
            f"Cannot register '{operation}': registry '{document_kind or '?'}' is frozen",
            context={"operation": operation, "document_kind": document_kind},
        )
        self.operation = operation


# ---------------------------------------------------------------------------
# Document layer
# ---------------------------------------------------------------------------


class DomainOperationError(DocBridgeError):
    """The document mutation itself failed against the live document."""

    kind = "domain"

    def __init__(self, operation: str, reason: str, cause: Exception | None = None) -> None:
        super().__init__(
            f"Operation '{operation}' failed: {reason}",
            context={"operation": operation, "reason": reason},
        )
        self.operation = operation
        self.reason = reason
        self.cause = cause


class DetailExtractionError(DocBridgeError):
    """A capability provider raised while describing a single element."""

    kind = "domain"

    def __init__(self, provider: str, element: str, cause: Exception) -> None:
        super().__init__(
            f"Provider '{provider}' failed to describe {element}: {cause}",
            context={"provider": provider, "element": element, "cause": str(cause)},
        )
        self.provider = provider
        self.element = element
        self.cause = cause


class DocumentLoadError(DocBridgeError):
    """A document file could not be opened by its document library."""

    kind = "domain"

    def __init__(self, document_kind: str, path: str, cause: Exception) -> None:
        super().__init__(
            f"Cannot open {document_kind} document '{path}': {cause}",
            context={"document_kind": document_kind, "path": path, "cause": str(cause)},
        )
        self.document_kind = document_kind
        self.path = path
        self.cause = cause
