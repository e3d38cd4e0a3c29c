"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

import sys

import typer
from rich.console import Console
from rich.markup import escape

from adbfleet.core.theme import get_theme


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def print_line(message: str, style: str | None = None) -> None:
    """Print a log line verbatim, keeping its tabs.

    Rich expands tabs to spaces, so the line is written with typer.echo. The
    theme style is applied as ANSI codes only when stdout is a terminal.
    """
    if style and console.is_terminal:
        message = console.get_style(style).render(message)
    typer.echo(message)


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{escape(message)}[/]", soft_wrap=True)


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {escape(message)}", soft_wrap=True)


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{escape(message)}[/]", soft_wrap=True)
