"""PowerPoint document kind — python-pptx."""

from __future__ import annotations

from pptx import Presentation as open_presentation
from pptx.presentation import Presentation

from docbridge.core.registry import HandlerRegistry
from docbridge.documents.powerpoint.details import create_shape_selector
from docbridge.documents.powerpoint.handlers import create_handlers


def create_registry(list_valid_operations: bool = True) -> HandlerRegistry[Presentation]:
    return HandlerRegistry.build(
        "powerpoint",
        create_handlers(),
        aliases={"get": "get_shapes", "get_details": "get_shape_details"},
        list_valid_operations=list_valid_operations,
    )


def new_document() -> Presentation:
    return open_presentation()


def load(path: str) -> Presentation:
    return open_presentation(path)


def save(document: Presentation, path: str) -> None:
    document.save(path)


__all__ = ["create_registry", "create_shape_selector", "new_document", "load", "save"]
