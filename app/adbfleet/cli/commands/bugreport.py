"""Bug report command implementation.

Captures a screenshot and logcat from every attached device, once per
package matching a filter.
"""

from pathlib import Path
from typing import Annotated

import typer

from adbfleet.cli.types import build_args, exit_with
from adbfleet.core.executor import execute_fleet
from adbfleet.models.action import FleetMode


def create_bugreports(
    ctx: typer.Context,
    package_filter: Annotated[
        str,
        typer.Argument(
            metavar="FILTER",
            help="Comma-separated package names; '*' matches anything, '!' excludes.",
            show_default=False,
        ),
    ],
    output_dir: Annotated[
        Path | None,
        typer.Option(
            "--output-dir",
            "-o",
            help="Directory for screenshots and logcat dumps.",
            file_okay=False,
        ),
    ] = None,
) -> None:
    """Capture a screenshot and logcat for matching apps on every device.

    Artifacts are written to a per-device subdirectory of the output
    directory (default: ~/.local/state/adbfleet/bugreports).

    Examples:
        adbfleet bugreport com.example.app
        adbfleet --force bugreport 'com.example.*' -o ./reports
    """
    args = build_args(
        ctx,
        FleetMode.BUGREPORT,
        package_filter,
        filter_string=package_filter,
        report_dir=output_dir,
    )
    exit_with(execute_fleet(args))
