"""DocBridge CLI — Entry point.

Usage:
    docbridge operations list [--kind word]
    docbridge operations inspect <kind> <operation>
    docbridge run <kind> <path> <operation> [--params JSON] [--output PATH]
    docbridge new <kind> <path>
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from docbridge import __version__
from docbridge.cli.commands import documents, operations
from docbridge.config import Settings, get_settings, override_settings
from docbridge.logging import configure_logging

app = typer.Typer(
    name="docbridge",
    help="DocBridge — typed operation dispatch for Word, Excel, PowerPoint and PDF documents.",
    no_args_is_help=True,
    pretty_exceptions_enable=False,
)

console = Console()

app.add_typer(operations.app, name="operations")
app.command("run")(documents.run_operation)
app.command("new")(documents.new_document)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"docbridge {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    config: Path | None = typer.Option(
        None, "--config", "-c", help="YAML config file layered over the default locations."
    ),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show the version."
    ),
) -> None:
    if config is not None:
        if not config.exists():
            console.print(f"[red]Config file not found: {config}[/red]")
            raise typer.Exit(1)
        try:
            override_settings(Settings.load(config))
        except ValueError as exc:
            console.print(f"[red]Invalid config file {config}: {escape(str(exc))}[/red]")
            raise typer.Exit(1)

    configure_logging(get_settings().logging)


if __name__ == "__main__":
    app()
