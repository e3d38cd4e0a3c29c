"""Action models for fleet operations.

This module defines the batch modes (install, uninstall, bug report)
and the per-device, per-target outcome records produced by a pass.
"""

from dataclasses import dataclass, field
from enum import Enum


class FleetMode(Enum):
    """Batch operation performed on every selected device.

    Attributes:
        INSTALL: Install APK files from a file or directory.
        UNINSTALL: Uninstall packages matching a filter.
        BUGREPORT: Capture a screenshot and logcat for matching packages.
    """

    INSTALL = "install"
    UNINSTALL = "uninstall"
    BUGREPORT = "bugreport"

    @property
    def past_tense(self) -> str:
        """Verb phrase used in summaries ('N apps were <past_tense>')."""
        return _PAST_TENSE[self]

    @property
    def uses_filter(self) -> bool:
        """Check if targets are selected from the device's package list."""
        return self in (FleetMode.UNINSTALL, FleetMode.BUGREPORT)


_PAST_TENSE: dict[FleetMode, str] = {
    FleetMode.INSTALL: "installed",
    FleetMode.UNINSTALL: "uninstalled",
    FleetMode.BUGREPORT: "used for creating bug reports",
}


class OutcomeKind(Enum):
    """Classification of a single action attempt.

    Attributes:
        SUCCESS: The device reported success.
        FAILURE: The device reported an error, or the output was unrecognized.
        SKIPPED_DRY_RUN: No command issued because of dry-run mode.
        SKIPPED_PREVIEW: No command issued because this is the preview pass.
    """

    SUCCESS = "success"
    FAILURE = "failure"
    SKIPPED_DRY_RUN = "skipped-dry-run"
    SKIPPED_PREVIEW = "skipped-preview"


@dataclass(frozen=True, slots=True)
class ActionOutcome:
    """Outcome of one action on one device.

    Attributes:
        serial: Serial of the device the action targeted.
        target: Package identifier, or APK file name in install mode.
        kind: Outcome classification.
        reason: Short failure reason or success message for display.
        raw_output: Captured text of the underlying command(s).
    """

    serial: str
    target: str
    kind: OutcomeKind
    reason: str | None = field(default=None)
    raw_output: str = field(default="")

    @property
    def succeeded(self) -> bool:
        """Check if the action completed successfully."""
        return self.kind == OutcomeKind.SUCCESS

    @property
    def failed(self) -> bool:
        """Check if the action failed."""
        return self.kind == OutcomeKind.FAILURE

    @property
    def skipped(self) -> bool:
        """Check if no command was issued for this action."""
        return self.kind in (OutcomeKind.SKIPPED_DRY_RUN, OutcomeKind.SKIPPED_PREVIEW)


def create_skipped_outcome(serial: str, target: str, *, preview: bool) -> ActionOutcome:
    """Create an outcome for an action that was only simulated.

    Args:
        serial: Device serial.
        target: Package identifier or file name.
        preview: True for the preview pass, False for dry-run mode.

    Returns:
        ActionOutcome with a skipped kind.
    """
    kind = OutcomeKind.SKIPPED_PREVIEW if preview else OutcomeKind.SKIPPED_DRY_RUN
    return ActionOutcome(serial=serial, target=target, kind=kind)
