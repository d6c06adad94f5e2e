"""Core layer — parameter bag, operation context, handlers, registry, providers."""

from docbridge.core.context import OperationContext
from docbridge.core.handler import DataResult, HandlerResult, MessageResult, OperationHandler
from docbridge.core.params import ParameterBag
from docbridge.core.providers import (
    CapabilityProvider,
    DetailOutcome,
    ElementDetails,
    ProviderSelector,
)
from docbridge.core.registry import HandlerRegistry

__all__ = [
    "ParameterBag",
    "OperationContext",
    "OperationHandler",
    "MessageResult",
    "DataResult",
    "HandlerResult",
    "HandlerRegistry",
    "CapabilityProvider",
    "ProviderSelector",
    "ElementDetails",
    "DetailOutcome",
]
