"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from collections.abc import Callable
from pathlib import Path

import pytest
from adbfleet.core.locator import AdbLocation, LocationKind
from adbfleet.utils.shell import CommandResult

PACKAGE_LISTING_ARGS = ["shell", "pm", "list", "packages", "-f"]


class FakeAdb:
    """Command runner standing in for the adb executable.

    Answers enumeration and listing commands from canned output and
    records every argv it receives. Action output is keyed by the last
    argument, pull output by the host file name.
    """

    def __init__(
        self,
        devices_output: str,
        packages: dict[str, list[str]] | None = None,
        *,
        action_output: str = "Success",
        action_outputs: dict[str, str] | None = None,
        pull_outputs: dict[str, str] | None = None,
        server_returncode: int = 0,
    ) -> None:
        self.devices_output = devices_output
        self.packages = packages or {}
        self.action_output = action_output
        self.action_outputs = action_outputs or {}
        self.pull_outputs = pull_outputs or {}
        self.server_returncode = server_returncode
        self.calls: list[list[str]] = []

    def __call__(self, argv: list[str]) -> CommandResult:
        self.calls.append(list(argv))
        args = list(argv[1:])

        if args == ["start-server"]:
            stderr = "" if self.server_returncode == 0 else "cannot bind 'tcp:5037'"
            return self._result(argv, "", stderr, self.server_returncode)
        if args == ["devices", "-l"]:
            return self._result(argv, self.devices_output)

        serial, rest = args[1], args[2:]
        if rest == PACKAGE_LISTING_ARGS:
            listing = "\n".join(
                f"package:/data/app/{name}-1/base.apk={name}"
                for name in self.packages.get(serial, [])
            )
            return self._result(argv, listing)
        if rest[0] == "pull":
            pulled = f"{rest[1]}: 1 file pulled, 0 skipped."
            return self._result(argv, self.pull_outputs.get(Path(rest[2]).name, pulled))
        if rest[:2] == ["shell", "screencap"] or rest[:2] == ["shell", "logcat"]:
            return self._result(argv, "")

        target = rest[-1]
        return self._result(argv, self.action_outputs.get(target, self.action_output))

    @staticmethod
    def _result(argv: list[str], stdout: str, stderr: str = "", code: int = 0) -> CommandResult:
        return CommandResult(stdout=stdout, stderr=stderr, returncode=code, args=tuple(argv))

    def calls_for(self, serial: str) -> list[list[str]]:
        """Commands addressed to one device."""
        return [c for c in self.calls if len(c) > 2 and c[1] == "-s" and c[2] == serial]

    @property
    def mutating_calls(self) -> list[list[str]]:
        """Commands that change device or host state."""
        return [
            c
            for c in self.calls
            if len(c) > 3
            and c[1] == "-s"
            and c[3:] != PACKAGE_LISTING_ARGS
        ]

    @property
    def listing_calls(self) -> list[list[str]]:
        """Package listing commands in issue order."""
        return [c for c in self.calls if c[3:] == PACKAGE_LISTING_ARGS]


@pytest.fixture
def fake_adb() -> type[FakeAdb]:
    """Factory for fake adb command runners."""
    return FakeAdb


@pytest.fixture
def adb_locator() -> Callable[[str | None], AdbLocation]:
    """Locator that always resolves adb from PATH."""

    def _locate(explicit_path: str | None) -> AdbLocation:
        return AdbLocation(args=("adb",), kind=LocationKind.PATH)

    return _locate


@pytest.fixture
def mock_devices_output() -> str:
    """Sample `adb devices -l` output with three devices."""
    return """List of devices attached
0123456789ABCDEF       device usb:1-1 product:walleye model:Pixel_2 device:walleye transport_id:1
emulator-5554          device product:sdk_gphone_x86 model:sdk_gphone_x86 transport_id:2
R58M123ABC             unauthorized usb:1-2 transport_id:3
"""


@pytest.fixture
def mock_packages_output() -> str:
    """Sample `pm list packages -f` output."""
    return """package:/data/app/com.example.app-1/base.apk=com.example.app
package:/system/app/Bluetooth/Bluetooth.apk=com.android.bluetooth
package:/data/app/~~3sPxV2YZ==/com.example.demo-Ab12==/base.apk=com.example.demo
package:/system/priv-app/Settings/Settings.apk=com.android.settings"""
