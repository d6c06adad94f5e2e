"""Unit tests — CLI operation catalogue commands."""

from __future__ import annotations

import pytest
from typer.testing import CliRunner

from docbridge.cli.commands.operations import app

runner = CliRunner()


@pytest.mark.unit
class TestOperationsList:
    def test_list_all(self, test_settings) -> None:
        result = runner.invoke(app, ["list"])
        assert result.exit_code == 0
        assert "Registered Operations" in result.output
        assert "add_slide" in result.output
        assert "rotate_page" in result.output

    def test_list_one_kind(self, test_settings) -> None:
        result = runner.invoke(app, ["list", "--kind", "excel"])
        assert result.exit_code == 0
        assert "write_cell" in result.output
        assert "add_slide" not in result.output

    def test_list_unknown_kind(self, test_settings) -> None:
        result = runner.invoke(app, ["list", "--kind", "visio"])
        assert result.exit_code == 1
        assert "Unknown document kind" in result.output


@pytest.mark.unit
class TestOperationsInspect:
    def test_inspect_by_alias(self, test_settings) -> None:
        result = runner.invoke(app, ["inspect", "powerpoint", "get_details"])
        assert result.exit_code == 0
        assert "get_shape_details" in result.output

    def test_inspect_includes_params_schema(self, test_settings) -> None:
        result = runner.invoke(app, ["inspect", "word", "set_properties"])
        assert result.exit_code == 0
        assert "params_schema" in result.output

    def test_inspect_unknown_operation(self, test_settings) -> None:
        result = runner.invoke(app, ["inspect", "word", "explode"])
        assert result.exit_code == 1
        assert "Unknown operation" in result.output
