"""Data models for adbfleet.

This module exports the core data structures used throughout the application.
"""

from adbfleet.models.action import ActionOutcome, FleetMode, OutcomeKind
from adbfleet.models.arguments import FleetArgs
from adbfleet.models.device import AdbDevice, DeviceStatus
from adbfleet.models.history import CommandHistory
from adbfleet.models.package import PackageRef

__all__ = [
    "ActionOutcome",
    "AdbDevice",
    "CommandHistory",
    "DeviceStatus",
    "FleetArgs",
    "FleetMode",
    "OutcomeKind",
    "PackageRef",
]
