"""Shared pytest fixtures for the docbridge test suite."""

from __future__ import annotations

import base64
import logging
from collections.abc import Generator
from pathlib import Path

import docx
import openpyxl
import pptx
import pytest
from pptx.presentation import Presentation
from pypdf import PdfWriter

from docbridge.config import Settings, override_settings
from docbridge.core.context import OperationContext
from docbridge.dispatcher import Dispatcher

# 1x1 PNG, enough for python-pptx to size a picture.
PNG_1X1 = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _restore_root_logging() -> Generator[None, None, None]:
    """Undo configure_logging() calls made by a test (the CLI makes one per invocation)."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@pytest.fixture
def test_settings() -> Generator[Settings, None, None]:
    settings = Settings(logging={"level": "debug", "format": "console", "file": None})
    override_settings(settings)
    yield settings
    override_settings(None)


@pytest.fixture
def dispatcher(test_settings: Settings) -> Dispatcher:
    return Dispatcher(test_settings)


# ---------------------------------------------------------------------------
# In-memory documents
# ---------------------------------------------------------------------------


@pytest.fixture
def word_context() -> OperationContext:
    doc = docx.Document()
    doc.add_paragraph("First paragraph")
    doc.add_paragraph("")
    doc.add_paragraph("Third paragraph", style="Heading 1")
    return OperationContext(document=doc, source_path="memo.docx")


@pytest.fixture
def excel_context() -> OperationContext:
    wb = openpyxl.Workbook()
    wb.active.title = "Data"
    wb.active["A1"] = "Name"
    wb.active["B2"] = 42
    wb.create_sheet("Summary")
    return OperationContext(document=wb, source_path="book.xlsx")


@pytest.fixture
def presentation() -> Presentation:
    prs = pptx.Presentation()
    prs.slides.add_slide(prs.slide_layouts[0]).shapes.title.text = "Welcome"
    prs.slides.add_slide(prs.slide_layouts[6])
    return prs


@pytest.fixture
def powerpoint_context(presentation: Presentation) -> OperationContext:
    return OperationContext(document=presentation, source_path="deck.pptx")


@pytest.fixture
def pdf_context() -> OperationContext:
    writer = PdfWriter()
    writer.add_blank_page(612, 792)
    writer.add_blank_page(595, 842)
    return OperationContext(document=writer, source_path="report.pdf")


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


@pytest.fixture
def docx_file(tmp_path: Path) -> Path:
    path = tmp_path / "memo.docx"
    doc = docx.Document()
    doc.add_paragraph("Hello")
    doc.save(str(path))
    return path


@pytest.fixture
def xlsx_file(tmp_path: Path) -> Path:
    path = tmp_path / "book.xlsx"
    wb = openpyxl.Workbook()
    wb.active["A1"] = "Name"
    wb.save(str(path))
    return path


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_1X1
