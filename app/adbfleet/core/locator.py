"""Locating the adb executable.

Search order: an explicit path, ``adb`` on PATH, the SDK pointed to by
ANDROID_HOME / ANDROID_SDK_ROOT, then the platform's default SDK
location used by Android Studio.
"""

import logging
import os
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from adbfleet.core.errors import AdbNotFoundError
from adbfleet.utils.shell import which

logger = logging.getLogger(__name__)

_SDK_ENV_VARS: tuple[str, ...] = ("ANDROID_HOME", "ANDROID_SDK_ROOT")


class LocationKind(Enum):
    """Where the adb executable was found."""

    CUSTOM = "custom"
    PATH = "path"
    SDK_ENV = "sdk-env"
    WIN_DEFAULT = "win-default"
    MAC_DEFAULT = "mac-default"
    LINUX_DEFAULT = "linux-default"

    @property
    def is_default_location(self) -> bool:
        """Check if adb came from a platform default SDK directory."""
        return self in (
            LocationKind.WIN_DEFAULT,
            LocationKind.MAC_DEFAULT,
            LocationKind.LINUX_DEFAULT,
        )


@dataclass(frozen=True, slots=True)
class AdbLocation:
    """Resolved adb invocation.

    Attributes:
        args: argv prefix prepended to every adb command.
        kind: Where the executable was found.
    """

    args: tuple[str, ...]
    kind: LocationKind

    @property
    def executable(self) -> str:
        """Path or name of the adb executable."""
        return self.args[-1]

    def command(self, adb_args: list[str]) -> list[str]:
        """Build a full argv for an adb subcommand."""
        return [*self.args, *adb_args]


def _executable_name() -> str:
    return "adb.exe" if sys.platform.startswith("win") else "adb"


def _platform_default() -> tuple[Path, LocationKind] | None:
    """Return the default SDK adb path for the running platform."""
    name = _executable_name()
    if sys.platform.startswith("win"):
        local_app_data = os.environ.get("LOCALAPPDATA")
        if not local_app_data:
            return None
        base = Path(local_app_data) / "Android" / "sdk"
        return base / "platform-tools" / name, LocationKind.WIN_DEFAULT
    if sys.platform == "darwin":
        base = Path.home() / "Library" / "Android" / "sdk"
        return base / "platform-tools" / name, LocationKind.MAC_DEFAULT
    base = Path.home() / "Android" / "Sdk"
    return base / "platform-tools" / name, LocationKind.LINUX_DEFAULT


def _resolve_explicit(explicit_path: str) -> Path:
    """Resolve a user-supplied adb file or platform-tools directory."""
    candidate = Path(explicit_path).expanduser()
    if candidate.is_dir():
        candidate = candidate / _executable_name()
    if not candidate.is_file():
        msg = f"Could not find adb at '{explicit_path}'"
        raise AdbNotFoundError(msg)
    return candidate


def find_adb(explicit_path: str | None = None) -> AdbLocation:
    """Locate the adb executable.

    Args:
        explicit_path: adb executable or directory containing it. When given,
            no other location is searched.

    Returns:
        AdbLocation with the argv prefix and where it was found.

    Raises:
        AdbNotFoundError: If adb cannot be found.
    """
    if explicit_path:
        path = _resolve_explicit(explicit_path)
        logger.debug("Using adb from explicit path %s", path)
        return AdbLocation(args=(str(path),), kind=LocationKind.CUSTOM)

    on_path = which("adb")
    if on_path is not None:
        logger.debug("Using adb from PATH: %s", on_path)
        return AdbLocation(args=("adb",), kind=LocationKind.PATH)

    for env_var in _SDK_ENV_VARS:
        sdk_root = os.environ.get(env_var)
        if not sdk_root:
            continue
        candidate = Path(sdk_root) / "platform-tools" / _executable_name()
        if candidate.is_file():
            logger.debug("Using adb from %s: %s", env_var, candidate)
            return AdbLocation(args=(str(candidate),), kind=LocationKind.SDK_ENV)

    default = _platform_default()
    if default is not None and default[0].is_file():
        logger.debug("Using adb from default SDK location: %s", default[0])
        return AdbLocation(args=(str(default[0]),), kind=default[1])

    msg = (
        "Could not find adb. Install Android SDK platform-tools, add adb to PATH "
        "or pass its location with '--adb'."
    )
    raise AdbNotFoundError(msg)
