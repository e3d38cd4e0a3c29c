"""Pass counters and console report lines.

Builds the per-device header lines, per-target result lines and the
summary lines printed after the preview and commit passes.
"""

from dataclasses import dataclass, field

from adbfleet.core.locator import AdbLocation
from adbfleet.models.action import ActionOutcome, FleetMode, OutcomeKind
from adbfleet.models.arguments import FleetArgs
from adbfleet.models.device import AdbDevice, DeviceStatus

UNAUTHORIZED_HINT = (
    "Check if you authorized your computer on your Android device. "
    "See http://stackoverflow.com/questions/23081263"
)
NO_MATCHES_LINE = "\tNo apps found for given filter"


@dataclass
class PassReport:
    """Running counters of one pass over the fleet.

    Attributes:
        mode: Batch operation of the run.
        preview: True for the non-mutating preview pass.
        dry_run: True if the run issues no mutating commands.
        device_count: Ready, non-skipped devices considered.
        succeeded: Actions reported successful.
        failed: Actions reported failed.
        skipped: Actions simulated without a command.
        elapsed_seconds: Wall-clock time of the pass.
        outcomes: Every outcome in execution order.
    """

    mode: FleetMode
    preview: bool = False
    dry_run: bool = False
    device_count: int = 0
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0
    elapsed_seconds: float = 0.0
    outcomes: list[ActionOutcome] = field(default_factory=list)

    def add(self, outcome: ActionOutcome) -> None:
        """Record an outcome and update the counters."""
        self.outcomes.append(outcome)
        if outcome.succeeded:
            self.succeeded += 1
        elif outcome.failed:
            self.failed += 1
        else:
            self.skipped += 1

    @property
    def action_count(self) -> int:
        """Number of actions attempted or simulated."""
        return len(self.outcomes)


def device_header(device: AdbDevice, skipped: bool = False) -> str:
    """Header line printed before a device's results."""
    line = f"{device.display_name} [{device.serial}]"
    if device.status != DeviceStatus.READY:
        line += f": {device.status.value}"
    if skipped:
        line += " (skip)"
    return line


def outcome_line(outcome: ActionOutcome) -> str:
    """Tab-indented result line for a single target."""
    if outcome.kind == OutcomeKind.SKIPPED_PREVIEW:
        return f"\t{outcome.target}"
    if outcome.kind == OutcomeKind.SKIPPED_DRY_RUN:
        return f"\t{outcome.target}\tskip"
    return f"\t{outcome.target}\t{outcome.reason or outcome.kind.value}"


def status_line(args: FleetArgs, device_count: int, location: AdbLocation) -> str:
    """Line describing what the run is about to do."""
    parts = [f"Found {device_count} device(s)."]

    if args.mode == FleetMode.INSTALL:
        parts.append(f"Installing '{args.main_argument}'.")
    elif args.mode == FleetMode.UNINSTALL:
        parts.append(f"Uninstalling with filter '{args.filter_string}'.")
    else:
        parts.append(f"Creating bug report for apps with filter '{args.filter_string}'.")

    if args.keep_data:
        parts.append("Keep data/caches.")
    if args.dry_run:
        parts.append("Dry-run, no changes will be made.")
    elif args.force:
        parts.append("Skips user prompt.")
    if location.kind.is_default_location:
        parts.append(f"Adb not found in PATH, use default location: {location.executable}.")

    return " ".join(parts)


def confirmation_prompt(report: PassReport) -> str:
    """Question asked after a preview pass with at least one action."""
    return (
        f"{report.action_count} apps would be {report.mode.past_tense} on "
        f"{report.device_count} device(s). Use '--force' to omit this prompt. Continue? [y/n]"
    )


def no_actions_line(mode: FleetMode) -> str:
    """Line printed when the preview pass found nothing to do."""
    if mode == FleetMode.BUGREPORT:
        return "No apps found for bug report."
    return f"No apps would be {mode.past_tense}: no packages match."


def summary_line(report: PassReport) -> str:
    """Final summary of a commit or dry-run pass."""
    verb = report.mode.past_tense
    if report.dry_run:
        return (
            f"{report.skipped} apps would be {verb} on {report.device_count} device(s). "
            "Dry-run mode: no changes were made."
        )

    line = f"{report.succeeded} apps were {verb} on {report.device_count} device(s)."
    if report.failed > 0:
        line += f" {report.failed} apps could not be {verb} due to errors."
    line += f" Took {report.elapsed_seconds:.2f} seconds."
    return line


def has_unauthorized_devices(devices: list[AdbDevice]) -> bool:
    """Check if any enumerated device still awaits authorization."""
    return any(d.status == DeviceStatus.UNAUTHORIZED for d in devices)
