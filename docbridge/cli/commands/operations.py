"""CLI — Operation catalogue commands."""

from __future__ import annotations

import json

import typer
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from docbridge.dispatcher import Dispatcher
from docbridge.exceptions import DocBridgeError

app = typer.Typer(help="List and inspect the operations each document kind supports.")
console = Console()


@app.command("list")
def list_operations(
    kind: str | None = typer.Option(None, "--kind", "-k", help="Only list this document kind."),
) -> None:
    """List every registered operation."""
    dispatcher = Dispatcher()
    try:
        kinds = [dispatcher.registry(kind).document_kind] if kind else dispatcher.kinds()
    except DocBridgeError as exc:
        console.print(f"[red]Error: {escape(exc.message)}[/red]")
        raise typer.Exit(1)

    table = Table(title="Registered Operations")
    table.add_column("Kind", style="cyan")
    table.add_column("Operation")
    table.add_column("Read-only", style="green")
    table.add_column("Aliases")
    table.add_column("Description")

    for name in kinds:
        registry = dispatcher.registry(name)
        aliases = registry.aliases()
        for handler in registry.handlers():
            table.add_row(
                name,
                handler.operation_name,
                "yes" if handler.READ_ONLY else "no",
                ", ".join(sorted(a for a, target in aliases.items() if target == handler.operation_name)),
                handler.DESCRIPTION,
            )
    console.print(table)


@app.command("inspect")
def inspect_operation(
    kind: str = typer.Argument(help="Document kind (word, excel, powerpoint, pdf)."),
    operation: str = typer.Argument(help="Operation name or alias."),
) -> None:
    """Show the description of one operation as JSON."""
    try:
        handler = Dispatcher().registry(kind).resolve(operation)
    except DocBridgeError as exc:
        console.print(f"[red]Error: {escape(exc.message)}[/red]")
        raise typer.Exit(1)

    console.print(Syntax(json.dumps(handler.describe(), indent=2, default=str), "json"))
