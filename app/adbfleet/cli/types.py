"""Shared helpers for fleet CLI commands.

Merges global options, command options and user settings into the
FleetArgs record consumed by the engine.
"""

from pathlib import Path

import typer

from adbfleet.core.config import FleetSettings, load_settings
from adbfleet.core.errors import ConfigError
from adbfleet.models.action import FleetMode
from adbfleet.models.arguments import FleetArgs
from adbfleet.utils.formatting import print_error


def get_settings() -> FleetSettings:
    """Load user settings, exiting with code 1 if they are invalid."""
    try:
        return load_settings()
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def build_args(
    ctx: typer.Context,
    mode: FleetMode,
    main_argument: str,
    *,
    filter_string: str = "",
    keep_data: bool = False,
    report_dir: Path | None = None,
) -> FleetArgs:
    """Build the engine arguments for a command invocation.

    Command-line values take precedence over settings from config.toml.

    Args:
        ctx: Typer context carrying the global options in ``ctx.obj``.
        mode: Batch operation of the command.
        main_argument: APK path for install, filter text otherwise.
        filter_string: Package filter expression.
        keep_data: Value of the command's keep-data flag.
        report_dir: Bug report directory given on the command line.

    Returns:
        FleetArgs for the engine.
    """
    options: dict[str, object] = ctx.ensure_object(dict)
    settings = get_settings()

    adb_path = options.get("adb_path") or settings.adb_path

    return FleetArgs(
        mode=mode,
        main_argument=main_argument,
        device=options.get("device"),  # type: ignore[arg-type]
        filter_string=filter_string,
        keep_data=keep_data or settings.keep_data,
        dry_run=bool(options.get("dry_run", False)),
        force=bool(options.get("force", False)),
        skip_emulators=bool(options.get("skip_emulators", False)) or settings.skip_emulators,
        quiet=bool(options.get("quiet", False)),
        debug=bool(options.get("debug", False)),
        adb_path=str(adb_path) if adb_path else None,
        report_dir=report_dir.expanduser() if report_dir else settings.effective_report_dir,
    )


def exit_with(code: int) -> None:
    """Exit the command with a non-zero code, return normally otherwise."""
    if code != 0:
        raise typer.Exit(code=code)
