"""Core layer — OperationContext.

Wraps the document handle a single operation works on, plus the bookkeeping
the caller needs afterwards to decide whether the document must be persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

TDocument = TypeVar("TDocument")


@dataclass
class OperationContext(Generic[TDocument]):
    """Per-call wrapper around a mutable document.

    ``modified`` is monotonic: handlers can only set it through
    :meth:`mark_modified` and nothing in the core resets it.  A fresh context
    is the only way back to ``False``.
    """

    document: TDocument
    source_path: str | None = None
    output_path: str | None = None
    session_id: str | None = None
    _modified: bool = field(default=False, init=False, repr=False)

    @property
    def modified(self) -> bool:
        return self._modified

    def mark_modified(self) -> None:
        """Flag the document as changed.  Mutating handlers must call this."""
        self._modified = True

    def output_message(self, output_path: str | None = None) -> str:
        """Return a human-readable persistence hint for the caller."""
        target = output_path or self.output_path or self.source_path
        if self.session_id and not target:
            return f"Session '{self.session_id}' updated (not saved to disk)."
        if target is None:
            return "Document updated in memory."
        return f"Output: {target}"
