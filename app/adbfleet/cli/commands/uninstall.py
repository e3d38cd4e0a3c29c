"""Uninstall command implementation.

Uninstalls every package matching a filter on all attached devices.
"""

from typing import Annotated

import typer

from adbfleet.cli.types import build_args, exit_with
from adbfleet.core.executor import execute_fleet
from adbfleet.models.action import FleetMode


def uninstall_apps(
    ctx: typer.Context,
    package_filter: Annotated[
        str,
        typer.Argument(
            metavar="FILTER",
            help="Comma-separated package names; '*' matches anything, '!' excludes.",
            show_default=False,
        ),
    ],
    keep_data: Annotated[
        bool,
        typer.Option(
            "--keep-data",
            "-k",
            help="Keep the app's data and cache directories.",
        ),
    ] = False,
) -> None:
    """Uninstall matching packages from every attached device.

    A preview of the affected packages is shown and must be confirmed
    unless --force or --dry-run is given.

    Examples:
        adbfleet uninstall com.example.app
        adbfleet uninstall 'com.example.*,!com.example.keep'
        adbfleet --force uninstall -k 'com.example.*'
    """
    args = build_args(
        ctx,
        FleetMode.UNINSTALL,
        package_filter,
        filter_string=package_filter,
        keep_data=keep_data,
    )
    exit_with(execute_fleet(args))
