"""Allow running adbfleet with ``python -m adbfleet``."""

from adbfleet.cli.main import app

app(prog_name="adbfleet")
