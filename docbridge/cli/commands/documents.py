"""CLI — Run operations against document files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax

from docbridge.core.handler import MessageResult
from docbridge.dispatcher import Dispatcher
from docbridge.documents import get_kind_info
from docbridge.exceptions import DocBridgeError

console = Console()


def _parse_params(raw: str | None) -> dict[str, Any]:
    if not raw:
        return {}
    try:
        params = json.loads(raw)
    except json.JSONDecodeError as exc:
        console.print(f"[red]Error: --params is not valid JSON: {escape(str(exc))}[/red]")
        raise typer.Exit(1)
    if not isinstance(params, dict):
        console.print("[red]Error: --params must be a JSON object.[/red]")
        raise typer.Exit(1)
    return params


def run_operation(
    kind: str = typer.Argument(help="Document kind (word, excel, powerpoint, pdf)."),
    path: Path = typer.Argument(help="Document file to operate on."),
    operation: str = typer.Argument(help="Operation name or alias."),
    params: str | None = typer.Option(None, "--params", "-p", help="Parameters as a JSON object."),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Save to this path instead of overwriting the source."
    ),
    json_output: bool = typer.Option(False, "--json", help="Output the raw JSON result."),
) -> None:
    """Run one operation against a document file."""
    raw_params = _parse_params(params)
    if not path.exists():
        console.print(f"[red]Error: file not found: {path}[/red]")
        raise typer.Exit(1)

    try:
        outcome = Dispatcher().run_file(
            kind,
            str(path),
            operation,
            raw_params,
            output_path=str(output) if output else None,
        )
    except DocBridgeError as exc:
        if json_output:
            typer.echo(json.dumps({"error": exc.to_dict()}, default=str))
        else:
            console.print(f"[red]Error: {escape(exc.message)}[/red]")
        raise typer.Exit(1)

    if json_output:
        typer.echo(json.dumps(outcome.to_dict(), default=str))
        return

    if isinstance(outcome.result, MessageResult):
        console.print(f"[green]{escape(outcome.result.message)}[/green]")
    else:
        payload = outcome.result.to_dict()["data"]
        console.print(Syntax(json.dumps(payload, indent=2, default=str), "json"))
    if outcome.saved_to:
        console.print(escape(outcome.context.output_message(outcome.saved_to)))


def new_document(
    kind: str = typer.Argument(help="Document kind (word, excel, powerpoint, pdf)."),
    path: Path = typer.Argument(help="Where to write the empty document."),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file."),
) -> None:
    """Create an empty document of the given kind."""
    try:
        info = get_kind_info(kind)
    except DocBridgeError as exc:
        console.print(f"[red]Error: {escape(exc.message)}[/red]")
        raise typer.Exit(1)

    if path.exists() and not force:
        console.print(f"[red]Error: refusing to overwrite an existing file (use --force): {path}[/red]")
        raise typer.Exit(1)

    info.saver(info.new_document(), str(path))
    console.print(f"[green]Created {info.kind.value} document at {path}[/green]")
