"""Core layer — ParameterBag.

A read-only, typed view over the raw arguments of one operation call.

Raw parameters arrive from a loosely-typed transport (JSON-like scalars,
lists and objects).  Handlers never touch the raw mapping directly; they go
through :meth:`ParameterBag.get_required` / :meth:`ParameterBag.get_optional`
so every operation reports malformed input with the same error types and the
same messages.

Coercion is delegated to pydantic ``TypeAdapter`` in lax mode:

  - numeric strings convert to ``int`` / ``float``
  - ``"true"`` / ``"false"`` convert to ``bool``
  - lists and dicts pass through structurally (``list[int]`` coerces items)
  - objects never coerce to scalars, scalars never coerce to lists

Enums additionally accept a member name (case-insensitive) or an ordinal.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from enum import Enum
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Iterable, TypeVar, overload

from pydantic import BaseModel, TypeAdapter, ValidationError

from docbridge.exceptions import (
    InvalidParameterValueError,
    MissingParameterError,
    TypeMismatchError,
)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


@lru_cache(maxsize=256)
def _cached_adapter(type_: Any) -> TypeAdapter[Any]:
    return TypeAdapter(type_)


def _adapter(type_: Any) -> TypeAdapter[Any]:
    try:
        hash(type_)
    except TypeError:
        # Unhashable type forms, e.g. Annotated[int, Field(ge=0)].
        return TypeAdapter(type_)
    return _cached_adapter(type_)


def _type_name(type_: Any) -> str:
    if isinstance(type_, type):
        return type_.__name__
    return str(type_)


def _coerce_enum(name: str, enum_cls: type[Enum], value: Any) -> Enum:
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, bool):
        for member in enum_cls:
            if member.value == value:
                return member
    if isinstance(value, str):
        wanted = value.strip().lower()
        for member in enum_cls:
            if member.name.lower() == wanted or str(member.value).lower() == wanted:
                return member
    if isinstance(value, int) and not isinstance(value, bool):
        members = list(enum_cls)
        if 0 <= value < len(members):
            return members[value]
    raise TypeMismatchError(
        name,
        _type_name(enum_cls),
        value,
        reason=f"expected one of {', '.join(m.name for m in enum_cls)}",
    )


def coerce(name: str, value: Any, type_: Any) -> Any:
    """Convert *value* to *type_* or raise :class:`TypeMismatchError`."""
    if type_ is Any or type_ is object:
        return value
    if isinstance(type_, type) and issubclass(type_, Enum):
        return _coerce_enum(name, type_, value)
    if type_ is str and isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    try:
        return _adapter(type_).validate_python(value)
    except ValidationError as exc:
        reason = exc.errors()[0]["msg"] if exc.errors() else ""
        raise TypeMismatchError(name, _type_name(type_), value, reason=reason) from exc


class ParameterBag(Mapping[str, Any]):
    """Immutable collection of named call arguments with typed accessors.

    Parameter names are case-sensitive.  A value of ``None`` is treated as
    absent, mirroring a JSON ``null`` meaning "not supplied".

    Usage::

        params = ParameterBag({"slide_index": "2", "text": "Hello"})
        index = params.get_required("slide_index", int)     # 2
        bold = params.get_optional("bold", bool, False)      # False
    """

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        self._values: Mapping[str, Any] = MappingProxyType(dict(values or {}))

    @classmethod
    def of(cls, **values: Any) -> "ParameterBag":
        return cls(values)

    # ------------------------------------------------------------------
    # Mapping protocol (read-only)
    # ------------------------------------------------------------------

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ParameterBag({dict(self._values)!r})"

    # ------------------------------------------------------------------
    # Raw access
    # ------------------------------------------------------------------

    def has(self, name: str) -> bool:
        """Return True if *name* was supplied with a non-null value."""
        return self._values.get(name) is not None

    def get_raw(self, name: str) -> Any:
        """Return the unconverted value, or None when absent."""
        return self._values.get(name)

    def names(self) -> list[str]:
        return [k for k, v in self._values.items() if v is not None]

    def to_dict(self) -> dict[str, Any]:
        return dict(self._values)

    # ------------------------------------------------------------------
    # Typed access
    # ------------------------------------------------------------------

    def get_required(self, name: str, type_: type[T] | Any = Any) -> T:
        """Return *name* coerced to *type_*.

        Raises:
            MissingParameterError: The parameter is absent or null.
            TypeMismatchError:     The value cannot be coerced to *type_*.
        """
        if not self.has(name):
            raise MissingParameterError(name)
        return coerce(name, self._values[name], type_)

    @overload
    def get_optional(self, name: str, type_: type[T], default: T) -> T: ...

    @overload
    def get_optional(self, name: str, type_: type[T] | Any = ..., default: None = ...) -> T | None: ...

    def get_optional(self, name: str, type_: Any = Any, default: Any = None) -> Any:
        """Return *name* coerced to *type_*, or *default* when absent.

        Absence never raises.  A present value that cannot be coerced still
        raises :class:`TypeMismatchError`.
        """
        if not self.has(name):
            return default
        return coerce(name, self._values[name], type_)

    def get_index(
        self,
        name: str,
        count: int,
        default: int | None = None,
    ) -> int:
        """Return a 0-based index checked against a collection of *count* items.

        When *default* is None the parameter is required.
        """
        if default is None:
            index = self.get_required(name, int)
        else:
            index = self.get_optional(name, int, default)
        if not 0 <= index < count:
            valid = f"0..{count - 1}" if count else "none, the collection is empty"
            raise InvalidParameterValueError(name, index, "index out of range", valid=valid)
        return index

    def get_choice(
        self,
        name: str,
        choices: Iterable[str],
        default: str | None = None,
    ) -> str:
        """Return a case-insensitive member of *choices* in its canonical spelling.

        When *default* is None the parameter is required.
        """
        options = list(choices)
        if default is None:
            raw = self.get_required(name, str)
        else:
            raw = self.get_optional(name, str, default)
        wanted = raw.strip().lower()
        for option in options:
            if option.lower() == wanted:
                return option
        raise InvalidParameterValueError(name, raw, "unsupported value", valid=options)

    def validate(self, model: type[M], operation: str | None = None) -> M:
        """Validate the whole bag into a pydantic *model*.

        Null values are dropped first so model defaults apply.  The first
        pydantic error is translated into the matching parameter error:
        missing fields, wrong types, then everything else (ranges, literals,
        model validators) as an invalid value.
        """
        data = {k: v for k, v in self._values.items() if v is not None}
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            error = exc.errors()[0]
            field = ".".join(str(part) for part in error["loc"]) or model.__name__
            kind = error["type"]
            if kind == "missing":
                raise MissingParameterError(field, operation=operation) from exc
            if kind.endswith(("_type", "_parsing")) or kind == "int_from_float":
                raise TypeMismatchError(
                    field, kind, error.get("input"), reason=error["msg"]
                ) from exc
            raise InvalidParameterValueError(field, error.get("input"), error["msg"]) from exc
