"""Unit tests for the fleet execution engine.

The engine runs against a fake adb runner, so these tests cover the
full bootstrap, preview and commit protocol without real devices.
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from adbfleet.core.engine import FleetEngine, RunResult, read_confirmation
from adbfleet.core.errors import (
    AdbServerError,
    ConfirmationError,
    DeviceNotFoundError,
    FilterError,
    InstallSourceError,
)
from adbfleet.core.locator import AdbLocation
from adbfleet.core.report import UNAUTHORIZED_HINT
from adbfleet.models.action import FleetMode, OutcomeKind
from adbfleet.models.arguments import FleetArgs
from adbfleet.models.history import CommandHistory


Locator = Callable[[str | None], AdbLocation]

READY_AND_UNAUTHORIZED = """List of devices attached
ready1                 device usb:1-1 product:walleye model:Pixel_2 device:walleye transport_id:1
pending                unauthorized usb:1-2 transport_id:2
"""

SINGLE_READY = """List of devices attached
alpha                  device model:Pixel_6 transport_id:1
"""

TWO_READY = """List of devices attached
alpha                  device model:Pixel_6 transport_id:1
beta                   device model:Galaxy_S21 transport_id:2
"""

READY_AND_EMULATOR = """List of devices attached
ready1                 device model:Pixel_2 transport_id:1
emulator-5554          device product:sdk_gphone_x86 model:sdk_gphone transport_id:2
"""

ONLY_UNAUTHORIZED = """List of devices attached
pending                unauthorized usb:1-2 transport_id:2
"""


def _uninstall_args(filter_string: str, **kwargs: object) -> FleetArgs:
    return FleetArgs(
        mode=FleetMode.UNINSTALL,
        main_argument=filter_string,
        filter_string=filter_string,
        **kwargs,  # type: ignore[arg-type]
    )


def _run(
    args: FleetArgs,
    fake: Any,
    locator: Locator,
    confirm: Callable[[str], bool] | None = None,
) -> RunResult:
    engine = FleetEngine(
        args,
        CommandHistory(),
        runner=fake,
        locator=locator,
        confirm=confirm or MagicMock(return_value=True),
    )
    return engine.run()


class TestUninstallFlow:
    """End-to-end uninstall runs."""

    def test_preview_confirm_commit(
        self,
        fake_adb: Any,
        adb_locator: Locator,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """One ready and one unauthorized device, filter matching one package."""
        fake = fake_adb(READY_AND_UNAUTHORIZED, {"ready1": ["com.a", "com.b", "com.demo"]})
        confirm = MagicMock(return_value=True)

        result = _run(_uninstall_args("com.demo"), fake, adb_locator, confirm)

        assert result.preview is not None
        assert result.preview.action_count == 1
        assert result.preview.skipped == 1
        confirm.assert_called_once()
        prompt = confirm.call_args.args[0]
        assert prompt.startswith("1 apps would be uninstalled on 1 device(s).")
        assert fake.mutating_calls == [
            ["adb", "-s", "ready1", "shell", "pm", "uninstall", "com.demo"]
        ]

        out = capsys.readouterr().out
        assert "1 apps were uninstalled on 1 device(s)." in out
        assert "Device [pending]: Unauthorized" in out
        assert UNAUTHORIZED_HINT not in out

    def test_include_and_exclude(self, fake_adb: Any, adb_locator: Locator) -> None:
        """'com.*,!com.keep' selects only com.a."""
        fake = fake_adb(SINGLE_READY, {"alpha": ["com.a", "com.keep", "org.x"]})

        result = _run(_uninstall_args("com.*,!com.keep"), fake, adb_locator)

        assert result.commit is not None
        assert [o.target for o in result.commit.outcomes] == ["com.a"]
        assert fake.mutating_calls == [
            ["adb", "-s", "alpha", "shell", "pm", "uninstall", "com.a"]
        ]

    def test_keep_data_uses_package_service(
        self,
        fake_adb: Any,
        adb_locator: Locator,
    ) -> None:
        """keep_data uninstalls with 'cmd package uninstall -k'."""
        fake = fake_adb(TWO_READY, {"alpha": ["com.a"]})

        _run(_uninstall_args("com.a", keep_data=True, force=True), fake, adb_locator)

        assert fake.mutating_calls == [
            ["adb", "-s", "alpha", "shell", "cmd", "package", "uninstall", "-k", "com.a"]
        ]

    def test_packages_refetched_for_commit(
        self,
        fake_adb: Any,
        adb_locator: Locator,
    ) -> None:
        """The commit pass acts on a fresh listing, not the preview's."""
        fake = fake_adb(TWO_READY, {"alpha": ["com.demo"]})

        def confirm(message: str) -> bool:
            fake.packages["alpha"] = ["com.demo", "com.demo.extra"]
            return True

        result = _run(_uninstall_args("com.demo*"), fake, adb_locator, confirm)

        assert result.preview is not None and result.commit is not None
        assert result.preview.action_count == 1
        assert result.commit.action_count == 2
        assert len([c for c in fake.listing_calls if c[2] == "alpha"]) == 2

    def test_failures_are_tallied(
        self,
        fake_adb: Any,
        adb_locator: Locator,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """A failing package is counted and the run continues."""
        fake = fake_adb(
            TWO_READY,
            {"alpha": ["com.a", "com.b", "com.c"]},
            action_outputs={"com.b": "Failure [DELETE_FAILED_INTERNAL_ERROR]"},
        )

        result = _run(_uninstall_args("com.*", force=True), fake, adb_locator)

        assert result.commit is not None
        assert result.commit.succeeded == 2
        assert result.commit.failed == 1
        failed = [o for o in result.commit.outcomes if o.kind == OutcomeKind.FAILURE]
        assert failed[0].reason == "DELETE_FAILED_INTERNAL_ERROR"
        assert len(fake.mutating_calls) == 3

        out = capsys.readouterr().out
        assert "2 apps were uninstalled on 2 device(s)." in out
        assert "1 apps could not be uninstalled due to errors." in out
        assert "No apps found for given filter" in out

    def test_outcome_lines_keep_tabs(
        self,
        fake_adb: Any,
        adb_locator: Locator,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Result lines are tab-indented in the captured output."""
        fake = fake_adb(SINGLE_READY, {"alpha": ["com.demo"]})

        _run(_uninstall_args("com.demo", force=True), fake, adb_locator)

        out = capsys.readouterr().out
        assert "\tcom.demo\tSuccess" in out

    def test_unrecognized_output_is_failure(
        self,
        fake_adb: Any,
        adb_locator: Locator,
    ) -> None:
        """Empty action output counts as a failure."""
        fake = fake_adb(TWO_READY, {"alpha": ["com.a"]}, action_output="")

        result = _run(_uninstall_args("com.a", force=True), fake, adb_locator)

        assert result.commit is not None
        assert result.commit.failed == 1
        assert result.commit.outcomes[0].reason == "no output"


class TestConfirmationProtocol:
    """Tests for dry-run, forced and declined runs."""

    def test_dry_run_issues_no_mutations(
        self,
        fake_adb: Any,
        adb_locator: Locator,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Dry-run is a single non-mutating pass without a prompt."""
        fake = fake_adb(TWO_READY, {"alpha": ["com.a"], "beta": ["com.a", "com.b"]})
        confirm = MagicMock()

        result = _run(_uninstall_args("com.*", dry_run=True), fake, adb_locator, confirm)

        confirm.assert_not_called()
        assert result.preview is None
        assert result.commit is not None
        assert result.commit.skipped == 3
        assert fake.mutating_calls == []

        out = capsys.readouterr().out
        assert "skip" in out
        assert (
            "3 apps would be uninstalled on 2 device(s). Dry-run mode: no changes were made."
            in out
        )

    def test_force_skips_preview(self, fake_adb: Any, adb_locator: Locator) -> None:
        """Forced runs commit without asking."""
        fake = fake_adb(TWO_READY, {"alpha": ["com.a"]})
        confirm = MagicMock()

        result = _run(_uninstall_args("com.a", force=True), fake, adb_locator, confirm)

        confirm.assert_not_called()
        assert result.preview is None
        assert len(fake.mutating_calls) == 1

    def test_decline_aborts(
        self,
        fake_adb: Any,
        adb_locator: Locator,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Declining the prompt issues no mutating command."""
        fake = fake_adb(TWO_READY, {"alpha": ["com.a"]})

        result = _run(_uninstall_args("com.a"), fake, adb_locator, MagicMock(return_value=False))

        assert result.commit is None
        assert fake.mutating_calls == []
        assert "Aborted." in capsys.readouterr().out

    def test_zero_matches_skip_prompt(
        self,
        fake_adb: Any,
        adb_locator: Locator,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """A preview without actions ends the run without prompting."""
        fake = fake_adb(TWO_READY, {"alpha": ["com.a"]})
        confirm = MagicMock()

        result = _run(_uninstall_args("net.none"), fake, adb_locator, confirm)

        confirm.assert_not_called()
        assert result.commit is None
        assert fake.mutating_calls == []
        assert "No apps would be uninstalled" in capsys.readouterr().out

    def test_no_ready_devices(
        self,
        fake_adb: Any,
        adb_locator: Locator,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Only unauthorized devices prints the authorization hint."""
        fake = fake_adb(ONLY_UNAUTHORIZED)
        confirm = MagicMock()

        result = _run(_uninstall_args("com.a"), fake, adb_locator, confirm)

        confirm.assert_not_called()
        assert result.commit is None
        out = capsys.readouterr().out
        assert "No ready devices found." in out
        assert UNAUTHORIZED_HINT in out

    def test_quiet_prints_only_summary(
        self,
        fake_adb: Any,
        adb_locator: Locator,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Quiet mode hides device and package lines."""
        fake = fake_adb(TWO_READY, {"alpha": ["com.a"]})

        _run(_uninstall_args("com.a", force=True, quiet=True), fake, adb_locator)

        out = capsys.readouterr().out
        assert "Pixel_6" not in out
        assert "Found 2 device(s)" not in out
        assert "1 apps were uninstalled on 2 device(s)." in out


class TestValidation:
    """Tests for argument validation against the device list."""

    def test_unknown_device(self, fake_adb: Any, adb_locator: Locator) -> None:
        """A requested device that is not attached is fatal."""
        fake = fake_adb(READY_AND_UNAUTHORIZED)

        with pytest.raises(DeviceNotFoundError) as exc_info:
            _run(_uninstall_args("com.a", device="missing"), fake, adb_locator)

        message = str(exc_info.value)
        assert "no ready device attached with id 'missing'" in message
        assert "ready1 (Ready), pending (Unauthorized)" in message

    def test_unready_device(self, fake_adb: Any, adb_locator: Locator) -> None:
        """A requested device that is not ready is fatal."""
        fake = fake_adb(READY_AND_UNAUTHORIZED)

        with pytest.raises(DeviceNotFoundError):
            _run(_uninstall_args("com.a", device="pending"), fake, adb_locator)

    def test_device_selection(self, fake_adb: Any, adb_locator: Locator) -> None:
        """Only the requested device is touched."""
        fake = fake_adb(TWO_READY, {"alpha": ["com.a"], "beta": ["com.a"]})

        result = _run(_uninstall_args("com.a", device="beta", force=True), fake, adb_locator)

        assert result.commit is not None
        assert result.commit.device_count == 1
        assert fake.calls_for("alpha") == []
        assert fake.mutating_calls == [["adb", "-s", "beta", "shell", "pm", "uninstall", "com.a"]]

    def test_malformed_filter(self, fake_adb: Any, adb_locator: Locator) -> None:
        """A malformed filter is fatal before any device is touched."""
        fake = fake_adb(TWO_READY, {"alpha": ["com.a"]})

        with pytest.raises(FilterError):
            _run(_uninstall_args("com.a,!"), fake, adb_locator)

        assert fake.listing_calls == []

    def test_server_failure(self, fake_adb: Any, adb_locator: Locator) -> None:
        """A failing adb server is fatal."""
        fake = fake_adb(TWO_READY, server_returncode=1)

        with pytest.raises(AdbServerError):
            _run(_uninstall_args("com.a"), fake, adb_locator)

    def test_skip_emulators(
        self,
        fake_adb: Any,
        adb_locator: Locator,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Emulators are listed as skipped and never touched."""
        fake = fake_adb(READY_AND_EMULATOR, {"ready1": ["com.a"], "emulator-5554": ["com.a"]})

        result = _run(
            _uninstall_args("com.a", skip_emulators=True, force=True),
            fake,
            adb_locator,
        )

        assert result.commit is not None
        assert result.commit.device_count == 1
        assert fake.calls_for("emulator-5554") == []
        assert "[emulator-5554] (skip)" in capsys.readouterr().out


class TestInstallFlow:
    """End-to-end install runs."""

    def test_installs_every_apk_on_every_device(
        self,
        fake_adb: Any,
        adb_locator: Locator,
        tmp_path: Path,
    ) -> None:
        """Two APKs and one other file give two installs per device."""
        for name in ("first.apk", "second.apk", "notes.txt"):
            (tmp_path / name).write_bytes(b"PK")
        fake = fake_adb(TWO_READY, action_output="Performing Streamed Install\nSuccess")
        args = FleetArgs(mode=FleetMode.INSTALL, main_argument=str(tmp_path), force=True)

        result = _run(args, fake, adb_locator)

        assert result.commit is not None
        assert result.commit.succeeded == 4
        assert [o.target for o in result.commit.outcomes] == [
            "first.apk",
            "second.apk",
            "first.apk",
            "second.apk",
        ]
        assert fake.listing_calls == []
        assert fake.mutating_calls[0] == [
            "adb",
            "-s",
            "alpha",
            "install",
            str((tmp_path / "first.apk").resolve()),
        ]

    def test_preview_lists_files(
        self,
        fake_adb: Any,
        adb_locator: Locator,
        tmp_path: Path,
    ) -> None:
        """Install previews ask before installing."""
        (tmp_path / "app.apk").write_bytes(b"PK")
        fake = fake_adb(TWO_READY)
        confirm = MagicMock(return_value=False)
        args = FleetArgs(mode=FleetMode.INSTALL, main_argument=str(tmp_path / "app.apk"))

        result = _run(args, fake, adb_locator, confirm)

        assert result.commit is None
        assert "2 apps would be installed on 2 device(s)." in confirm.call_args.args[0]
        assert fake.mutating_calls == []

    def test_missing_source(
        self,
        fake_adb: Any,
        adb_locator: Locator,
        tmp_path: Path,
    ) -> None:
        """A missing install path is fatal even without devices."""
        fake = fake_adb("List of devices attached\n")
        args = FleetArgs(mode=FleetMode.INSTALL, main_argument=str(tmp_path / "gone"))

        with pytest.raises(InstallSourceError):
            _run(args, fake, adb_locator)


class TestBugreportFlow:
    """End-to-end bug report runs."""

    def test_captures_into_device_directory(
        self,
        fake_adb: Any,
        adb_locator: Locator,
        tmp_path: Path,
    ) -> None:
        """Each match issues the four capture commands into a device directory."""
        fake = fake_adb(TWO_READY, {"alpha": ["com.demo", "com.other"]})
        args = FleetArgs(
            mode=FleetMode.BUGREPORT,
            main_argument="com.demo",
            filter_string="com.demo",
            force=True,
            report_dir=tmp_path,
        )

        result = _run(args, fake, adb_locator)

        assert result.commit is not None
        assert result.commit.succeeded == 1
        assert result.commit.outcomes[0].reason == "report created"
        assert (tmp_path / "alpha").is_dir()

        steps = fake.mutating_calls
        assert [c[3] for c in steps] == ["shell", "pull", "shell", "pull"]
        assert steps[1][-1] == str(tmp_path / "alpha" / "com.demo.png")
        assert steps[3][-1] == str(tmp_path / "alpha" / "logcat_com.demo.txt")

    def test_failed_pull_does_not_stop_later_targets(
        self,
        fake_adb: Any,
        adb_locator: Locator,
        tmp_path: Path,
    ) -> None:
        """A pull of a missing device file fails that report only."""
        missing = "adb: error: remote object '/sdcard/bugreport.png' does not exist"
        fake = fake_adb(
            SINGLE_READY,
            {"alpha": ["com.a", "com.b"]},
            pull_outputs={"com.a.png": missing},
        )
        args = FleetArgs(
            mode=FleetMode.BUGREPORT,
            main_argument="com.*",
            filter_string="com.*",
            force=True,
            report_dir=tmp_path,
        )

        result = _run(args, fake, adb_locator)

        assert result.commit is not None
        assert result.commit.failed == 1
        assert result.commit.succeeded == 1
        first, second = result.commit.outcomes
        assert (first.target, first.kind, first.reason) == ("com.a", OutcomeKind.FAILURE, missing)
        assert (second.target, second.kind) == ("com.b", OutcomeKind.SUCCESS)
        assert len(fake.mutating_calls) == 8
        assert fake.mutating_calls[-1][-1] == str(tmp_path / "alpha" / "logcat_com.b.txt")

    def test_unwritable_report_dir_fails_each_target(
        self,
        fake_adb: Any,
        adb_locator: Locator,
        tmp_path: Path,
    ) -> None:
        """A report directory that cannot be created fails every capture."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        fake = fake_adb(TWO_READY, {"alpha": ["com.demo"], "beta": ["com.demo"]})
        args = FleetArgs(
            mode=FleetMode.BUGREPORT,
            main_argument="com.demo",
            filter_string="com.demo",
            force=True,
            report_dir=blocker,
        )

        result = _run(args, fake, adb_locator)

        assert result.commit is not None
        assert result.commit.failed == 2
        assert [o.serial for o in result.commit.outcomes] == ["alpha", "beta"]
        assert all(o.reason.startswith("cannot create") for o in result.commit.outcomes)
        assert fake.mutating_calls == []
        assert len(fake.listing_calls) == 2


class TestReadConfirmation:
    """Tests for the console confirmation prompt."""

    @pytest.mark.parametrize(
        ("answer", "expected"),
        [("y", True), (" YES ", True), ("n", False), ("", False)],
    )
    def test_answers(self, answer: str, expected: bool) -> None:
        """Only y/yes confirm."""
        with patch("adbfleet.core.engine.console.input", return_value=answer):
            assert read_confirmation("Continue? [y/n]") is expected

    def test_closed_input(self) -> None:
        """A closed input stream raises ConfirmationError."""
        with (
            patch("adbfleet.core.engine.console.input", side_effect=EOFError),
            pytest.raises(ConfirmationError),
        ):
            read_confirmation("Continue? [y/n]")
