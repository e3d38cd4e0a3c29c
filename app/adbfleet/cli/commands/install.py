"""Install command implementation.

Installs one APK, or every APK in a directory, on all attached devices.
"""

from typing import Annotated

import typer

from adbfleet.cli.types import build_args, exit_with
from adbfleet.core.executor import execute_fleet
from adbfleet.models.action import FleetMode


def install_apps(
    ctx: typer.Context,
    path: Annotated[
        str,
        typer.Argument(
            help="APK file, or directory whose .apk files are installed.",
            show_default=False,
        ),
    ],
    keep_data: Annotated[
        bool,
        typer.Option(
            "--keep-data",
            "-r",
            help="Reinstall existing apps, keeping their data (adb install -r).",
        ),
    ] = False,
) -> None:
    """Install APK files on every attached device.

    Examples:
        adbfleet install app-debug.apk
        adbfleet --dry-run install build/outputs/apk/
        adbfleet --device emulator-5554 install -r app.apk
    """
    args = build_args(ctx, FleetMode.INSTALL, path, keep_data=keep_data)
    exit_with(execute_fleet(args))
