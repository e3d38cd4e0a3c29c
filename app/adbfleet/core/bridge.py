"""adb command bridge.

Runs adb subcommands through a command runner, records every executed
command in the run's history and parses enumeration output.
"""

import logging
from collections.abc import Callable

from adbfleet.core.errors import AdbNotFoundError, AdbServerError
from adbfleet.core.locator import AdbLocation
from adbfleet.models.device import AdbDevice
from adbfleet.models.history import CommandHistory
from adbfleet.models.package import PackageRef
from adbfleet.parsers.devices import parse_devices
from adbfleet.parsers.packages import parse_installed_packages
from adbfleet.utils.shell import CommandResult, run_command

logger = logging.getLogger(__name__)

CommandRunner = Callable[[list[str]], CommandResult]


class AdbBridge:
    """Issue adb commands for one invocation.

    Commands block until adb exits. A non-zero exit code is not an error
    at this level; callers classify the captured output.

    Example:
        >>> bridge = AdbBridge(location, CommandHistory())
        >>> bridge.start_server()
        >>> devices = bridge.list_devices()
    """

    def __init__(
        self,
        location: AdbLocation,
        history: CommandHistory,
        runner: CommandRunner = run_command,
    ) -> None:
        """Initialize the bridge.

        Args:
            location: Resolved adb invocation prefix.
            history: Run-wide command history to append to.
            runner: Function executing an argv and capturing its output.
        """
        self._location = location
        self._history = history
        self._runner = runner

    def run(self, adb_args: list[str]) -> CommandResult:
        """Run an adb subcommand and record it.

        Args:
            adb_args: Arguments following the adb executable.

        Returns:
            Captured result of the command.

        Raises:
            AdbNotFoundError: If the adb executable cannot be started.
        """
        argv = self._location.command(adb_args)
        logger.debug("Executing: %s", " ".join(argv))
        try:
            result = self._runner(argv)
        except OSError as e:
            msg = f"Could not execute adb ({self._location.executable}): {e}"
            raise AdbNotFoundError(msg) from e

        if not result.args:
            result = CommandResult(
                stdout=result.stdout,
                stderr=result.stderr,
                returncode=result.returncode,
                args=tuple(argv),
            )
        return self._history.record(result)

    def start_server(self) -> None:
        """Start the adb background server.

        Raises:
            AdbServerError: If the server does not start.
        """
        result = self.run(["start-server"])
        if not result.success:
            msg = f"Could not start adb server: {result.output or 'no output'}"
            raise AdbServerError(msg)

    def list_devices(self) -> list[AdbDevice]:
        """Enumerate attached devices in adb's order."""
        result = self.run(["devices", "-l"])
        return parse_devices(result.stdout)

    def list_packages(self, serial: str) -> list[PackageRef]:
        """List packages installed on a device in listing order."""
        result = self.run(["-s", serial, "shell", "pm", "list", "packages", "-f"])
        return parse_installed_packages(result.stdout)
