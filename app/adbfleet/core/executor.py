"""Run orchestration shared by the install, uninstall and bugreport commands.

Owns the command history of one invocation, runs the engine and turns
fatal errors into a single error line plus optional debug output.
"""

import logging

from adbfleet.core.bridge import CommandRunner
from adbfleet.core.engine import Confirm, FleetEngine, Locator, read_confirmation
from adbfleet.core.errors import FleetError
from adbfleet.core.locator import find_adb
from adbfleet.models.arguments import FleetArgs
from adbfleet.models.history import CommandHistory
from adbfleet.utils.formatting import console, err_console, print_error
from adbfleet.utils.shell import run_command

logger = logging.getLogger(__name__)

DEBUG_HINT = "Run with '--debug' to get additional information."


def execute_fleet(
    args: FleetArgs,
    *,
    history: CommandHistory | None = None,
    runner: CommandRunner = run_command,
    locator: Locator = find_adb,
    confirm: Confirm = read_confirmation,
) -> int:
    """Run one fleet operation and report fatal errors.

    Per-package failures do not change the exit code; only fatal errors do.

    Args:
        args: Parsed invocation arguments.
        history: Command history to record into. A new one is created if None.
        runner: Function executing an argv and capturing its output.
        locator: Function resolving the adb location.
        confirm: Function asking the operator to confirm the batch.

    Returns:
        Process exit code: 0 on normal completion, 1 on a fatal error.
    """
    history = history if history is not None else CommandHistory()
    engine = FleetEngine(args, history, runner=runner, locator=locator, confirm=confirm)

    try:
        engine.run()
    except FleetError as e:
        logger.debug("Run aborted: %s", e, exc_info=True)
        print_error(str(e))
        if args.debug:
            err_console.print(history.format(), markup=False, highlight=False, soft_wrap=True)
        else:
            err_console.print(DEBUG_HINT, style="muted", markup=False, soft_wrap=True)
        return 1

    if args.debug:
        console.print(history.format(), markup=False, highlight=False, soft_wrap=True)
    return 0
