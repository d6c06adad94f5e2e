"""Unit tests — document kind lookup."""

from __future__ import annotations

import pytest

from docbridge.documents import DOCUMENT_KINDS, DocumentKind, get_kind_info, kind_for_path
from docbridge.exceptions import UnknownDocumentKindError


@pytest.mark.unit
class TestDocumentKinds:
    @pytest.mark.parametrize("name", ["word", "WORD", " Word "])
    def test_lookup_is_case_insensitive(self, name: str) -> None:
        assert get_kind_info(name).kind is DocumentKind.WORD

    def test_lookup_by_enum(self) -> None:
        assert get_kind_info(DocumentKind.PDF).library == "pypdf"

    def test_unknown_kind(self) -> None:
        with pytest.raises(UnknownDocumentKindError) as exc_info:
            get_kind_info("visio")
        assert exc_info.value.kind == "not_found"
        assert "powerpoint" in exc_info.value.message

    @pytest.mark.parametrize(
        "path, kind",
        [
            ("report.DOCX", DocumentKind.WORD),
            ("book.xlsm", DocumentKind.EXCEL),
            ("deck.pptx", DocumentKind.POWERPOINT),
            ("scan.pdf", DocumentKind.PDF),
            ("notes.txt", None),
        ],
    )
    def test_kind_for_path(self, path: str, kind: DocumentKind | None) -> None:
        assert kind_for_path(path) is kind

    @pytest.mark.parametrize("kind", list(DocumentKind))
    def test_every_kind_builds_a_frozen_registry(self, kind: DocumentKind) -> None:
        registry = DOCUMENT_KINDS[kind].create_registry()
        assert registry.frozen
        assert registry.document_kind == kind.value
        assert len(registry) >= 5

    @pytest.mark.parametrize("kind", list(DocumentKind))
    def test_read_only_handlers_are_named_as_reads(self, kind: DocumentKind) -> None:
        for handler in DOCUMENT_KINDS[kind].create_registry().handlers():
            is_read = handler.operation_name.startswith(("get_", "list_"))
            assert handler.READ_ONLY is is_read, handler.operation_name
