"""Command-line interface package for Cheffy."""

from cheffy.cli.main import CLIApplication, create_app

__all__ = ["CLIApplication", "create_app"]
