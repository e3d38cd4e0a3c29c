"""Unit tests for console formatting helpers."""

from unittest.mock import PropertyMock, patch

import pytest
from adbfleet.utils.formatting import console, print_line


class TestPrintLine:
    """Tests for print_line function."""

    def test_keeps_tabs(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Tabs are written as-is instead of being expanded to spaces."""
        with patch.object(type(console), "is_terminal", new_callable=PropertyMock) as is_term:
            is_term.return_value = False
            print_line("\tcom.demo\tSuccess", style="success")

        assert capsys.readouterr().out == "\tcom.demo\tSuccess\n"

    def test_no_markup(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Brackets in messages are not treated as markup."""
        print_line("Device [alpha]: Pixel_6")

        assert capsys.readouterr().out == "Device [alpha]: Pixel_6\n"

    def test_style_applied_on_terminal(self, capsys: pytest.CaptureFixture[str]) -> None:
        """On a terminal the theme style wraps the line in ANSI codes."""
        with patch.object(type(console), "is_terminal", new_callable=PropertyMock) as is_term:
            is_term.return_value = True
            print_line("\tcom.demo\tSuccess", style="success")

        out = capsys.readouterr().out
        assert out.startswith("\x1b[")
        assert "\tcom.demo\tSuccess" in out
