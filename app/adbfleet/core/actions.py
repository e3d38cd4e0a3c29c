"""Action command templates and install artifact discovery.

Each fleet mode maps to a fixed adb command template. These are pure
functions so the engine and tests can inspect exactly what would run.
"""

import re
from pathlib import Path

from adbfleet.core.errors import InstallSourceError

APK_SUFFIX = ".apk"

# On-device scratch files for bug report capture
DEVICE_SCREENSHOT_PATH = "/sdcard/bugreport.png"
DEVICE_LOGCAT_PATH = "/sdcard/bugreport_logcat.txt"

_UNSAFE_PATH_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def _is_apk(path: Path) -> bool:
    return path.is_file() and path.name.lower().endswith(APK_SUFFIX)


def collect_install_files(source: str | Path) -> list[Path]:
    """Resolve the APK files to install.

    Args:
        source: An APK file, or a directory whose direct children are scanned.

    Returns:
        Absolute APK paths, sorted by file name for directories.

    Raises:
        InstallSourceError: If the path does not exist, cannot be read or
            holds no APK files.
    """
    path = Path(source).expanduser()
    try:
        if not path.exists():
            msg = f"Could not find {source} for install"
            raise InstallSourceError(msg)

        if path.is_dir():
            files = sorted((p for p in path.iterdir() if _is_apk(p)), key=lambda p: p.name)
        else:
            files = [path] if _is_apk(path) else []

        if not files:
            msg = f"Could not find any apk files in {source} to install"
            raise InstallSourceError(msg)

        return [f.resolve() for f in files]
    except OSError as e:
        msg = f"Could not read {source} for install: {e}"
        raise InstallSourceError(msg) from e


def install_command(serial: str, apk: Path, keep_data: bool = False) -> list[str]:
    """Build the adb arguments installing an APK.

    Args:
        serial: Target device serial.
        apk: APK file on the host.
        keep_data: Reinstall, keeping the existing app data (``-r``).
    """
    args = ["-s", serial, "install"]
    if keep_data:
        args.append("-r")
    args.append(str(apk))
    return args


def uninstall_command(serial: str, package: str, keep_data: bool = False) -> list[str]:
    """Build the adb arguments uninstalling a package.

    ``pm uninstall`` has no keep-data switch, so keeping data goes
    through the package service instead.

    Args:
        serial: Target device serial.
        package: Package identifier.
        keep_data: Keep the app's data and cache directories (``-k``).
    """
    if keep_data:
        return ["-s", serial, "shell", "cmd", "package", "uninstall", "-k", package]
    return ["-s", serial, "shell", "pm", "uninstall", package]


def report_dir_for(report_root: Path, serial: str) -> Path:
    """Directory receiving bug report artifacts for one device."""
    return report_root / _UNSAFE_PATH_CHARS.sub("_", serial)


def bugreport_commands(serial: str, package: str, report_dir: Path) -> list[list[str]]:
    """Build the four-command bug report capture sequence.

    Takes a screenshot, pulls it, dumps logcat to a file and pulls that.

    Args:
        serial: Target device serial.
        package: Package the report is named after.
        report_dir: Host directory receiving the artifacts.

    Returns:
        adb argument lists in execution order.
    """
    screenshot = report_dir / f"{package}.png"
    logcat = report_dir / f"logcat_{package}.txt"
    return [
        ["-s", serial, "shell", "screencap", DEVICE_SCREENSHOT_PATH],
        ["-s", serial, "pull", DEVICE_SCREENSHOT_PATH, str(screenshot)],
        ["-s", serial, "shell", "logcat", "-d", "-f", DEVICE_LOGCAT_PATH],
        ["-s", serial, "pull", DEVICE_LOGCAT_PATH, str(logcat)],
    ]
