"""Core layer — Capability providers and ordered provider selection.

Describing an arbitrary element (a slide shape, say) means picking, from a
closed set of element variants, the one extractor that understands it.  Each
variant gets a :class:`CapabilityProvider`; a :class:`ProviderSelector` scans
them in registration order and returns the first whose ``can_handle``
succeeds.

Ordering contract:
  Specialised providers MUST be registered before generic ones.  A table
  frame is also a graphic frame; if the generic provider came first it would
  capture tables and silently produce degraded details.  Registration order is
  the tie-break, so reordering providers is a behaviour change.

"No provider matched" is not an error.  Many elements legitimately carry no
extra detail, and :meth:`ProviderSelector.describe` returns ``None`` for them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from docbridge.exceptions import DetailExtractionError
from docbridge.logging import get_logger

log = get_logger(__name__)

TElement = TypeVar("TElement")
TDoc = TypeVar("TDoc")


@dataclass(frozen=True)
class ElementDetails:
    """The detail record for one element, tagged with the provider's type name."""

    type_name: str
    record: Any

    def to_dict(self) -> dict[str, Any]:
        record = self.record.model_dump() if hasattr(self.record, "model_dump") else self.record
        return {"type": self.type_name, "details": record}


@dataclass(frozen=True)
class DetailOutcome:
    """Result of describing one element inside a batch.

    Exactly one of ``details`` / ``error`` is meaningful; both are None when
    no provider matched.
    """

    index: int
    details: ElementDetails | None = None
    error: DetailExtractionError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class CapabilityProvider(ABC, Generic[TElement, TDoc]):
    """Classifier + extractor for one element variant."""

    type_name: str = ""

    @abstractmethod
    def can_handle(self, element: TElement) -> bool:
        """Return True when *element* is the variant this provider describes."""
        ...

    @abstractmethod
    def describe(self, element: TElement, document: TDoc) -> Any | None:
        """Return the detail record for *element*, or None when it has none."""
        ...

    def attach(self, selector: "ProviderSelector[TElement, TDoc]") -> None:
        """Called once by the owning selector.

        Providers that describe containers override this to keep a reference
        and re-dispatch children through the same selector.
        """


class ProviderSelector(Generic[TElement, TDoc]):
    """Ordered first-match dispatcher over capability providers.

    The provider sequence is fixed at construction.
    """

    def __init__(self, providers: Sequence[CapabilityProvider[TElement, TDoc]]) -> None:
        self._providers: tuple[CapabilityProvider[TElement, TDoc], ...] = tuple(providers)
        for provider in self._providers:
            provider.attach(self)

    @property
    def providers(self) -> tuple[CapabilityProvider[TElement, TDoc], ...]:
        return self._providers

    def select(self, element: TElement) -> CapabilityProvider[TElement, TDoc] | None:
        """Return the first provider that can handle *element*, or None."""
        for provider in self._providers:
            if provider.can_handle(element):
                return provider
        return None

    def describe(self, element: TElement, document: TDoc) -> ElementDetails | None:
        """Describe *element* with the selected provider.

        Returns None when no provider matches or the provider has no record.

        Raises:
            DetailExtractionError: The selected provider raised.
        """
        provider = self.select(element)
        if provider is None:
            return None
        try:
            record = provider.describe(element, document)
        except DetailExtractionError:
            raise
        except Exception as exc:
            raise DetailExtractionError(
                provider=provider.type_name or type(provider).__name__,
                element=_element_label(element),
                cause=exc,
            ) from exc
        if record is None:
            return None
        return ElementDetails(type_name=provider.type_name, record=record)

    def describe_many(
        self, elements: Iterable[TElement], document: TDoc
    ) -> list[DetailOutcome]:
        """Describe every element, isolating failures per element."""
        outcomes: list[DetailOutcome] = []
        for index, element in enumerate(elements):
            try:
                outcomes.append(DetailOutcome(index, details=self.describe(element, document)))
            except DetailExtractionError as exc:
                log.warning(
                    "detail_extraction_failed",
                    index=index,
                    provider=exc.provider,
                    error=str(exc.cause),
                )
                outcomes.append(DetailOutcome(index, error=exc))
        return outcomes


def _element_label(element: Any) -> str:
    name = getattr(element, "name", None)
    if isinstance(name, str) and name:
        return f"{type(element).__name__} '{name}'"
    return type(element).__name__
