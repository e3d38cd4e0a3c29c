"""Shell execution utilities.

Provides blocking subprocess execution that captures all output and never
raises for a non-zero exit code.
"""

import shutil
import subprocess
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of a shell command execution.

    Attributes:
        stdout: Standard output from the command.
        stderr: Standard error from the command.
        returncode: Exit code of the command.
        args: The full argv that was executed.
    """

    stdout: str
    stderr: str
    returncode: int
    args: tuple[str, ...] = field(default=())

    @property
    def success(self) -> bool:
        """Check if command exited with code 0."""
        return self.returncode == 0

    @property
    def output(self) -> str:
        """Combined stdout and stderr, stripped.

        adb reports some failures on stderr and some on stdout, so
        outcome classification looks at both streams.
        """
        return "\n".join(part.strip() for part in (self.stdout, self.stderr) if part.strip())

    @property
    def command_line(self) -> str:
        """Return the argv as a single printable line."""
        return " ".join(self.args)

    def __str__(self) -> str:
        return (
            f"{self.command_line}\n"
            f"\texit: {self.returncode}\n"
            f"\tout: {self.stdout.strip()}\n"
            f"\terr: {self.stderr.strip()}\n"
        )


def run_command(args: list[str]) -> CommandResult:
    """Execute a command and return the captured result.

    Blocks until the process terminates. There is no timeout because device
    operations (installs of large APKs) can take minutes. Output that is not
    valid UTF-8 is decoded with replacement characters.

    Args:
        args: Command and arguments to execute.

    Returns:
        CommandResult with stdout, stderr, returncode and the argv.

    Raises:
        FileNotFoundError: If command executable is not found.
    """
    result = subprocess.run(
        args,
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
        check=False,
    )
    return CommandResult(
        stdout=result.stdout or "",
        stderr=result.stderr or "",
        returncode=result.returncode,
        args=tuple(args),
    )


def which(name: str) -> str | None:
    """Return the absolute path of a command found in PATH, or None."""
    return shutil.which(name)

