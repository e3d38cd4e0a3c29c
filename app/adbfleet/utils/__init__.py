"""Utility modules for adbfleet.

This module exports commonly used utility functions.
"""

from adbfleet.utils.formatting import (
    console,
    err_console,
    print_error,
    print_info,
    print_line,
    print_success,
)
from adbfleet.utils.shell import CommandResult, run_command, which

__all__ = [
    "CommandResult",
    "console",
    "err_console",
    "print_error",
    "print_info",
    "print_line",
    "print_success",
    "run_command",
    "which",
]
