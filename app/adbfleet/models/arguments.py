"""Parsed invocation arguments consumed by the fleet engine."""

from dataclasses import dataclass, field
from pathlib import Path

from adbfleet.models.action import FleetMode


@dataclass(frozen=True, slots=True)
class FleetArgs:
    """Configuration record for a single invocation.

    The engine performs no argv parsing itself; the CLI builds this record
    from global options, command options and user settings.

    Attributes:
        mode: Batch operation to perform.
        main_argument: APK file/directory for install, filter text otherwise.
        device: Serial of the only device to operate on, or None for all.
        filter_string: Package filter expression (uninstall and bug report).
        keep_data: Keep app data (uninstall -k) or reinstall (install -r).
        dry_run: Log candidate actions only, never issue mutating commands.
        force: Skip the preview pass and confirmation prompt.
        skip_emulators: Ignore devices whose serial is an emulator serial.
        quiet: Print only the summary, prompt and fatal errors.
        debug: Print the command history at the end of the run.
        adb_path: Explicit adb executable or directory, None to search.
        report_dir: Directory for bug report artifacts.
    """

    mode: FleetMode
    main_argument: str
    device: str | None = field(default=None)
    filter_string: str = field(default="")
    keep_data: bool = field(default=False)
    dry_run: bool = field(default=False)
    force: bool = field(default=False)
    skip_emulators: bool = field(default=False)
    quiet: bool = field(default=False)
    debug: bool = field(default=False)
    adb_path: str | None = field(default=None)
    report_dir: Path | None = field(default=None)

    @property
    def needs_confirmation(self) -> bool:
        """Check if the preview pass and prompt should run."""
        return not (self.dry_run or self.force)
