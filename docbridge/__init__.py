"""DocBridge — typed operation dispatch for office documents.

DocBridge routes named operations (``add_slide``, ``write_cell`` ...) to
handlers for four document kinds: Word, Excel, PowerPoint and PDF.

Architecture layers (bottom to top):
    1. Core       — ParameterBag, OperationContext, OperationHandler,
                    HandlerRegistry, CapabilityProvider / ProviderSelector
    2. Documents  — per-kind handler families over python-docx, openpyxl,
                    python-pptx and pypdf
    3. Dispatcher — one frozen registry per enabled kind, file round trip
    4. CLI        — typer + rich front end
"""

__version__ = "0.1.0"
__license__ = "Apache-2.0"

from docbridge.core import (
    CapabilityProvider,
    DataResult,
    HandlerRegistry,
    MessageResult,
    OperationContext,
    OperationHandler,
    ParameterBag,
    ProviderSelector,
)

__all__ = [
    "__version__",
    "ParameterBag",
    "OperationContext",
    "OperationHandler",
    "MessageResult",
    "DataResult",
    "HandlerRegistry",
    "CapabilityProvider",
    "ProviderSelector",
]
