"""CLI package for adbfleet.

This package contains the Typer application and all subcommands.
"""

from adbfleet.cli.main import app

__all__ = ["app"]
