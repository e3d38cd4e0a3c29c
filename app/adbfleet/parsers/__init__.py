"""Parsers for adb text output.

This module exports the device and package listing parsers and the
action outcome classifiers.
"""

from adbfleet.parsers.devices import parse_devices
from adbfleet.parsers.packages import (
    parse_installed_packages,
    short_failure_reason,
    was_successfully_installed,
    was_successfully_pulled,
    was_successfully_uninstalled,
)

__all__ = [
    "parse_devices",
    "parse_installed_packages",
    "short_failure_reason",
    "was_successfully_installed",
    "was_successfully_pulled",
    "was_successfully_uninstalled",
]
