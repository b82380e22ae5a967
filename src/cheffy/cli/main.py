"""CLI entry point and application wiring."""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console

from cheffy.cli.commands import register_commands

APP_HELP = "Extract timestamped recipe steps from YouTube cooking videos."


def build_console() -> Console:
    """Console for command output.

    Highlighting is off so quantities inside instructions ("2 cups", "180 degrees") keep the
    table's styling instead of rich's number colouring.
    """

    return Console(highlight=False)


class CLIApplication:
    """Central orchestrator for the Cheffy Typer application."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or build_console()
        self._app = typer.Typer(add_completion=False, rich_markup_mode="rich", help=APP_HELP)
        register_commands(self._app, self.console)

    @property
    def app(self) -> typer.Typer:
        """Return the underlying Typer application instance."""

        return self._app

    def run(self, *, prog_name: Optional[str] = "cheffy", args: Optional[list[str]] = None) -> None:
        """Invoke the Typer application with optional overrides."""

        self._app(prog_name=prog_name, args=args)


def create_app(console: Optional[Console] = None) -> typer.Typer:
    """Factory helper that returns the configured Typer application."""

    return CLIApplication(console=console).app


def main() -> None:
    """Console script entry point for `python -m cheffy` or the installed ``cheffy`` command."""

    CLIApplication().run()


__all__ = ["APP_HELP", "CLIApplication", "build_console", "create_app", "main"]
