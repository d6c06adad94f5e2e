"""Core layer — OperationHandler interface and result types.

Every operation — for every document kind — is a subclass of
``OperationHandler`` registered in that kind's :class:`HandlerRegistry`.

Design principles:
  - Handlers are stateless; the only per-class state is the constant
    ``OPERATION`` name.  One instance is reused across many calls.
  - Handlers read arguments exclusively through :class:`ParameterBag`.
  - Handlers validate before mutating.  There is no rollback.
  - Mutating handlers call ``context.mark_modified()`` before returning;
    read-only handlers never do.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar, Generic, Literal, Union

from pydantic import BaseModel

from docbridge.core.context import OperationContext, TDocument
from docbridge.core.params import ParameterBag


@dataclass(frozen=True)
class MessageResult:
    """Human-readable success message returned by mutating operations."""

    message: str
    kind: Literal["message"] = field(default="message", init=False)

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "message": self.message}

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class DataResult:
    """Structured payload returned by read operations.

    ``data`` is any JSON-serialisable value or a pydantic model.
    """

    data: Any
    kind: Literal["data"] = field(default="data", init=False)

    def to_dict(self) -> dict[str, Any]:
        payload = self.data.model_dump() if isinstance(self.data, BaseModel) else self.data
        return {"kind": self.kind, "data": payload}


HandlerResult = Union[MessageResult, DataResult]


class OperationHandler(ABC, Generic[TDocument]):
    """Abstract base class for a single named document operation.

    Subclasses must:
      1. Set the ``OPERATION`` class attribute (snake_case, e.g. ``"add_slide"``)
      2. Implement :meth:`execute`
      3. Optionally set ``params_model`` to validate the whole bag at once
         through :meth:`parse`
    """

    OPERATION: ClassVar[str] = ""
    DESCRIPTION: ClassVar[str] = ""
    READ_ONLY: ClassVar[bool] = False
    params_model: ClassVar[type[BaseModel] | None] = None

    @property
    def operation_name(self) -> str:
        return self.OPERATION

    @abstractmethod
    def execute(
        self, context: OperationContext[TDocument], params: ParameterBag
    ) -> HandlerResult:
        """Run the operation against ``context.document``.

        Raises:
            ParameterError:       Malformed or missing input.
            DomainOperationError: The document library rejected the change.
        """
        ...

    def parse(self, params: ParameterBag) -> Any:
        """Validate *params* into ``params_model``."""
        if self.params_model is None:
            raise TypeError(f"{type(self).__name__} declares no params_model")
        return params.validate(self.params_model, operation=self.OPERATION)

    def describe(self) -> dict[str, Any]:
        """Return a manifest-style description of this operation."""
        info: dict[str, Any] = {
            "name": self.OPERATION,
            "description": self.DESCRIPTION,
            "read_only": self.READ_ONLY,
        }
        if self.params_model is not None:
            info["params_schema"] = self.params_model.model_json_schema()
        return info

    @staticmethod
    def success(message: str) -> MessageResult:
        return MessageResult(message)

    @staticmethod
    def data(payload: Any) -> DataResult:
        return DataResult(payload)
