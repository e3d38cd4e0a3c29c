"""Config command implementation.

Shows and initializes the user settings file.
"""

from typing import Annotated

import typer
from rich.table import Table

from adbfleet.cli.types import get_settings
from adbfleet.core.config import FleetSettings, save_settings
from adbfleet.core.errors import ConfigError
from adbfleet.core.paths import get_config_path
from adbfleet.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show or create the settings file.",
    no_args_is_help=True,
)


@app.command()
def show() -> None:
    """Show the effective settings."""
    settings = get_settings()
    config_path = get_config_path()

    table = Table(
        title="Settings",
        show_header=True,
        header_style="header",
    )
    table.add_column("Key", no_wrap=True)
    table.add_column("Value")

    table.add_row("adb_path", settings.adb_path or "[muted](search PATH and SDK)[/muted]")
    table.add_row("report_dir", str(settings.effective_report_dir))
    table.add_row("skip_emulators", str(settings.skip_emulators).lower())
    table.add_row("keep_data", str(settings.keep_data).lower())

    console.print(table)
    if not config_path.exists():
        print_info(f"No settings file at {config_path}, showing defaults.")


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite an existing settings file.",
        ),
    ] = False,
) -> None:
    """Create a settings file with default values."""
    config_path = get_config_path()
    if config_path.exists() and not force:
        print_error(f"Settings file already exists: {config_path}")
        print_info("Use '--force' to overwrite it.")
        raise typer.Exit(code=1)

    try:
        saved = save_settings(FleetSettings(), config_path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Settings written to {saved}")


@app.command()
def path() -> None:
    """Print the settings file location."""
    typer.echo(str(get_config_path()))
