"""CLI commands for adbfleet.

This package contains all subcommand implementations.
"""

from adbfleet.cli.commands import bugreport, config, install, uninstall

__all__ = ["bugreport", "config", "install", "uninstall"]
