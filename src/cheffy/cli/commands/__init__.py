"""Command registration utilities for the Cheffy CLI."""

from __future__ import annotations

import typer
from rich.console import Console

from cheffy.cli.commands import parse_youtube


def register_commands(app: typer.Typer, console: Console) -> None:
    """Attach command groups to the provided Typer application."""

    parse_youtube.register(app, console)

    @app.callback(invoke_without_command=True)
    def main_callback(ctx: typer.Context) -> None:
        """Display a default message when no subcommand is provided."""

        if ctx.invoked_subcommand is None:
            console.print("[bold green]Cheffy CLI ready for commands.[/bold green]")


__all__ = ["register_commands"]
