"""Fleet execution engine.

Drives every attached device through one batch operation:

1. Bootstrap: locate adb, start its server and enumerate devices.
2. Validation: check the requested device, filter and install source.
3. Preview: simulate the batch and ask for confirmation (skipped for
   dry-run and forced runs).
4. Commit: repeat the same iteration issuing real commands, then
   print a summary.

Package lists are fetched fresh in every pass, so device changes
between preview and commit are picked up rather than acted on stale data.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from rich.markup import escape

from adbfleet.core.actions import (
    bugreport_commands,
    collect_install_files,
    install_command,
    report_dir_for,
    uninstall_command,
)
from adbfleet.core.bridge import AdbBridge, CommandRunner
from adbfleet.core.errors import ConfirmationError, DeviceNotFoundError
from adbfleet.core.filter import PackageFilter, find_matches, parse_filter
from adbfleet.core.locator import AdbLocation, find_adb
from adbfleet.core.paths import get_default_report_dir
from adbfleet.core.report import (
    NO_MATCHES_LINE,
    UNAUTHORIZED_HINT,
    PassReport,
    confirmation_prompt,
    device_header,
    has_unauthorized_devices,
    no_actions_line,
    outcome_line,
    status_line,
    summary_line,
)
from adbfleet.models.action import (
    ActionOutcome,
    FleetMode,
    OutcomeKind,
    create_skipped_outcome,
)
from adbfleet.models.arguments import FleetArgs
from adbfleet.models.device import AdbDevice
from adbfleet.models.history import CommandHistory
from adbfleet.parsers.packages import (
    short_failure_reason,
    was_successfully_installed,
    was_successfully_pulled,
    was_successfully_uninstalled,
)
from adbfleet.utils.formatting import console, print_line
from adbfleet.utils.shell import run_command

logger = logging.getLogger(__name__)

Locator = Callable[[str | None], AdbLocation]
Confirm = Callable[[str], bool]

AFFIRMATIVE_ANSWERS: frozenset[str] = frozenset({"y", "yes"})


def read_confirmation(message: str) -> bool:
    """Ask the operator a yes/no question on the console.

    Only an affirmative answer returns True; anything else is a no.

    Raises:
        ConfirmationError: If the input stream is closed.
    """
    try:
        answer = console.input(f"{escape(message)} ")
    except EOFError as e:
        msg = "Could not read confirmation from console"
        raise ConfirmationError(msg) from e
    return answer.strip().lower() in AFFIRMATIVE_ANSWERS


@dataclass
class RunResult:
    """What happened during one invocation.

    Attributes:
        devices: Devices of the enumeration snapshot, in adb order.
        preview: Report of the preview pass, None if it was skipped.
        commit: Report of the commit pass, None if the run stopped early.
    """

    devices: list[AdbDevice] = field(default_factory=list)
    preview: PassReport | None = None
    commit: PassReport | None = None


@dataclass(frozen=True, slots=True)
class Target:
    """Something a mode acts on.

    Attributes:
        value: Package identifier, or absolute APK path in install mode.
        name: Name shown in result lines (the APK file name in install mode).
    """

    value: str
    name: str


ActionHandler = Callable[[AdbBridge, AdbDevice, Target], ActionOutcome]


class FleetEngine:
    """Runs one batch operation across the attached devices.

    Devices and targets are processed one at a time in enumeration and
    listing order. Per-target failures are counted and never abort the
    run; fatal problems raise FleetError subclasses.

    Example:
        >>> args = FleetArgs(mode=FleetMode.UNINSTALL, main_argument="com.demo",
        ...                  filter_string="com.demo", dry_run=True)
        >>> result = FleetEngine(args, CommandHistory()).run()
    """

    def __init__(
        self,
        args: FleetArgs,
        history: CommandHistory,
        *,
        runner: CommandRunner = run_command,
        locator: Locator = find_adb,
        confirm: Confirm = read_confirmation,
    ) -> None:
        """Initialize the engine.

        Args:
            args: Parsed invocation arguments.
            history: Run-wide command history.
            runner: Function executing an argv and capturing its output.
            locator: Function resolving the adb location from args.adb_path.
            confirm: Function asking the operator to confirm the batch.
        """
        self._args = args
        self._history = history
        self._runner = runner
        self._locator = locator
        self._confirm = confirm
        self._filter = PackageFilter()
        self._install_files: list[Path] = []
        self._handlers: dict[FleetMode, ActionHandler] = {
            FleetMode.INSTALL: self._install,
            FleetMode.UNINSTALL: self._uninstall,
            FleetMode.BUGREPORT: self._capture_report,
        }

    @property
    def report_root(self) -> Path:
        """Host directory receiving bug report artifacts."""
        return self._args.report_dir or get_default_report_dir()

    def run(self) -> RunResult:
        """Execute the bootstrap, validation, preview and commit phases.

        Returns:
            RunResult describing both passes.

        Raises:
            FleetError: On fatal environment or validation errors.
        """
        args = self._args
        location = self._locator(args.adb_path)
        bridge = AdbBridge(location, self._history, self._runner)

        bridge.start_server()
        devices = bridge.list_devices()
        logger.info("Enumerated %d device(s)", len(devices))

        self._validate(devices)

        if devices:
            self._log(status_line(args, len(devices), location) + "\n", style="info")

        result = RunResult(devices=devices)

        if args.needs_confirmation:
            result.preview = self._run_pass(bridge, devices, preview=True)
            if not self._confirm_preview(result.preview, devices):
                return result

        result.commit = self._run_pass(bridge, devices, preview=False)
        self._print_summary(result.commit, devices)
        return result

    def _validate(self, devices: list[AdbDevice]) -> None:
        """Check arguments against the enumerated devices.

        Raises:
            DeviceNotFoundError: If the requested device is missing or not ready.
            FilterError: If the filter expression is malformed.
            InstallSourceError: If the install path has no APK files.
        """
        args = self._args

        if args.device is not None and not any(
            d.serial == args.device and d.is_ready for d in devices
        ):
            found = ", ".join(str(d) for d in devices) or "none"
            msg = (
                f"There is no ready device attached with id '{args.device}'. "
                f"Found devices: {found}"
            )
            raise DeviceNotFoundError(msg)

        if args.mode.uses_filter:
            self._filter = parse_filter(args.filter_string)
        else:
            self._install_files = collect_install_files(args.main_argument)

    def _run_pass(self, bridge: AdbBridge, devices: list[AdbDevice], preview: bool) -> PassReport:
        """Iterate the fleet once.

        Args:
            bridge: adb bridge of this run.
            devices: Enumerated devices in adb order.
            preview: Simulate actions without issuing mutating commands.

        Returns:
            Counters and outcomes of the pass.
        """
        args = self._args
        report = PassReport(mode=args.mode, preview=preview, dry_run=args.dry_run)
        started = time.monotonic()

        for device in devices:
            if args.device is not None and device.serial != args.device:
                continue

            skipped = args.skip_emulators and device.is_emulator
            active = device.is_ready and not skipped
            header_style = "device" if active else "device_inactive"
            self._log(device_header(device, skipped), style=header_style)

            if active:
                report.device_count += 1
                self._process_device(bridge, device, report, preview)

            self._log("")

        report.elapsed_seconds = time.monotonic() - started
        logger.debug(
            "%s pass: %d device(s), %d succeeded, %d failed, %d skipped",
            "Preview" if preview else "Commit",
            report.device_count,
            report.succeeded,
            report.failed,
            report.skipped,
        )
        return report

    def _targets(self, bridge: AdbBridge, device: AdbDevice) -> list[Target]:
        """Targets of the current mode on one device, in stable order."""
        if not self._args.mode.uses_filter:
            return [Target(value=str(path), name=path.name) for path in self._install_files]
        packages = bridge.list_packages(device.serial)
        return [
            Target(value=p.identifier, name=p.identifier)
            for p in find_matches(self._filter, packages)
        ]

    def _process_device(
        self,
        bridge: AdbBridge,
        device: AdbDevice,
        report: PassReport,
        preview: bool,
    ) -> None:
        args = self._args
        targets = self._targets(bridge, device)
        handler = self._handlers[args.mode]

        for target in targets:
            if args.dry_run or preview:
                outcome = create_skipped_outcome(device.serial, target.name, preview=preview)
            else:
                outcome = handler(bridge, device, target)
            report.add(outcome)
            self._log(outcome_line(outcome), style=_outcome_style(outcome))

        if not targets:
            self._log(NO_MATCHES_LINE, style="muted")

    def _install(self, bridge: AdbBridge, device: AdbDevice, target: Target) -> ActionOutcome:
        apk = Path(target.value)
        result = bridge.run(install_command(device.serial, apk, self._args.keep_data))
        return _classified(device, target, result.output, was_successfully_installed)

    def _uninstall(self, bridge: AdbBridge, device: AdbDevice, target: Target) -> ActionOutcome:
        result = bridge.run(uninstall_command(device.serial, target.value, self._args.keep_data))
        return _classified(device, target, result.output, was_successfully_uninstalled)

    def _capture_report(
        self,
        bridge: AdbBridge,
        device: AdbDevice,
        target: Target,
    ) -> ActionOutcome:
        report_dir = report_dir_for(self.report_root, device.serial)
        try:
            report_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning("Cannot create report directory %s: %s", report_dir, e)
            return ActionOutcome(
                serial=device.serial,
                target=target.name,
                kind=OutcomeKind.FAILURE,
                reason=f"cannot create {report_dir}",
            )

        results = [
            bridge.run(cmd) for cmd in bugreport_commands(device.serial, target.value, report_dir)
        ]
        output = "\n".join(r.output for r in results if r.output)

        # Odd steps are the pulls; the on-device steps print nothing on success
        for pull in results[1::2]:
            if not was_successfully_pulled(pull.output):
                return ActionOutcome(
                    serial=device.serial,
                    target=target.name,
                    kind=OutcomeKind.FAILURE,
                    reason=short_failure_reason(pull.output),
                    raw_output=output,
                )

        return ActionOutcome(
            serial=device.serial,
            target=target.name,
            kind=OutcomeKind.SUCCESS,
            reason="report created",
            raw_output=output,
        )

    def _confirm_preview(self, preview: PassReport, devices: list[AdbDevice]) -> bool:
        """Decide whether the commit pass runs after a preview."""
        if preview.device_count == 0:
            self._print_no_ready_devices(devices)
            return False

        if preview.action_count == 0:
            self._log_loud(no_actions_line(self._args.mode))
            return False

        if self._confirm(confirmation_prompt(preview)):
            return True

        self._log_loud("Aborted.")
        return False

    def _print_summary(self, report: PassReport, devices: list[AdbDevice]) -> None:
        if report.device_count == 0:
            self._print_no_ready_devices(devices)
            return
        style = "warning" if report.failed else "success"
        self._log_loud(summary_line(report), style=style)

    def _print_no_ready_devices(self, devices: list[AdbDevice]) -> None:
        self._log_loud("No ready devices found.", style="warning")
        if has_unauthorized_devices(devices):
            self._log_loud(UNAUTHORIZED_HINT)

    def _log(self, message: str, style: str | None = None) -> None:
        if not self._args.quiet:
            print_line(message, style=style)

    def _log_loud(self, message: str, style: str | None = None) -> None:
        print_line(message, style=style)


def _classified(
    device: AdbDevice,
    target: Target,
    output: str,
    was_successful: Callable[[str], bool],
) -> ActionOutcome:
    """Build an outcome from action output; unrecognized output is a failure."""
    if was_successful(output):
        kind, reason = OutcomeKind.SUCCESS, "Success"
    else:
        kind, reason = OutcomeKind.FAILURE, short_failure_reason(output)
    return ActionOutcome(
        serial=device.serial,
        target=target.name,
        kind=kind,
        reason=reason,
        raw_output=output,
    )


def _outcome_style(outcome: ActionOutcome) -> str:
    if outcome.succeeded:
        return "success"
    if outcome.failed:
        return "error"
    return "muted"
