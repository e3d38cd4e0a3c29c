"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.logging import RichHandler

from adbfleet import __version__
from adbfleet.cli.commands import bugreport, config, install, uninstall
from adbfleet.utils.formatting import err_console

# Create main Typer app
app = typer.Typer(
    name="adbfleet",
    help="Install, uninstall and capture bug reports on all attached Android devices.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"adbfleet version {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Only print the summary, prompts and errors.",
        ),
    ] = False,
    debug: Annotated[
        bool,
        typer.Option(
            "--debug",
            help="Print the history of executed adb commands.",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Show what would be done without issuing any changes.",
        ),
    ] = False,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Skip the preview and confirmation prompt.",
        ),
    ] = False,
    device: Annotated[
        str | None,
        typer.Option(
            "--device",
            "-s",
            help="Only operate on the device with this serial.",
        ),
    ] = None,
    skip_emulators: Annotated[
        bool,
        typer.Option(
            "--skip-emulators",
            "-e",
            help="Ignore emulator devices.",
        ),
    ] = False,
    adb_path: Annotated[
        Path | None,
        typer.Option(
            "--adb",
            help="adb executable or platform-tools directory.",
        ),
    ] = None,
) -> None:
    """adbfleet - batch operations across all attached Android devices.

    Every command runs against all ready devices (or the one selected
    with --device) and previews destructive changes before applying them.
    """
    _configure_logging(verbose)

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["dry_run"] = dry_run
    ctx.obj["force"] = force
    ctx.obj["device"] = device
    ctx.obj["skip_emulators"] = skip_emulators
    ctx.obj["adb_path"] = str(adb_path) if adb_path else None


# Register commands
app.command(name="install")(install.install_apps)
app.command(name="uninstall")(uninstall.uninstall_apps)
app.command(name="bugreport")(bugreport.create_bugreports)
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
