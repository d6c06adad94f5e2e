"""DocBridge — structlog setup.

Log records go to stderr (plus an optional file) so that ``docbridge run
--json`` keeps stdout for the result payload.  While a handler runs, the
dispatcher wraps it in :func:`operation_log_context`; every record emitted
inside that block, from structlog or from a plain stdlib logger such as
pypdf's, carries ``document_kind``, ``operation`` and ``session_id``.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from docbridge.config import LoggingConfig

# Document libraries log parsing chatter at debug level.
_QUIET_LIBRARIES = ("pypdf", "PIL", "openpyxl")


@contextmanager
def operation_log_context(
    document_kind: str, operation: str, session_id: str | None = None
) -> Iterator[None]:
    """Tag every record logged inside the block with the dispatch coordinates.

    Bindings are restored on exit, including when the handler raises, so a
    failed operation never leaks its coordinates into the next one.
    """
    fields: dict[str, str] = {"document_kind": document_kind, "operation": operation}
    if session_id is not None:
        fields["session_id"] = session_id
    with structlog.contextvars.bound_contextvars(**fields):
        yield


def _build_formatter(fmt: str, pre_chain: list[Any]) -> logging.Formatter:
    if fmt == "json":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    )


def configure_logging(config: LoggingConfig) -> None:
    """Route structlog through the stdlib root logger as *config* describes.

    The CLI calls this once per invocation with ``settings.logging``.
    Calling it again replaces the previous handlers.
    """
    pre_chain: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = _build_formatter(config.format, pre_chain)
    sinks: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.file is not None:
        sinks.append(logging.FileHandler(config.file, encoding="utf-8"))
    for sink in sinks:
        sink.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = sinks
    root.setLevel(config.level.upper())
    for name in _QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(max(root.level, logging.WARNING))


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
