"""Command history for a single invocation.

Every external command issued during a run is appended here so it can
be dumped verbatim for debugging.
"""

from collections.abc import Iterator

from adbfleet.utils.shell import CommandResult

HISTORY_HEADER = "Cmd history for debugging purpose:\n-----------------------"


class CommandHistory:
    """Ordered, append-only log of executed commands.

    The history is owned by the top-level run context and passed to the
    components that issue commands; it is never global state.

    Example:
        >>> history = CommandHistory()
        >>> result = history.record(CommandResult(stdout="", stderr="", returncode=0))
        >>> len(history)
        1
    """

    def __init__(self) -> None:
        self._entries: list[CommandResult] = []

    def record(self, result: CommandResult) -> CommandResult:
        """Append a command result and return it unchanged."""
        self._entries.append(result)
        return result

    def __iter__(self) -> Iterator[CommandResult]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def format(self) -> str:
        """Render the full history for console output."""
        lines = ["", HISTORY_HEADER]
        lines.extend(str(entry) for entry in self._entries)
        return "\n".join(lines)
