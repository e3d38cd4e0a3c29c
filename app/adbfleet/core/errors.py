"""Exception hierarchy for fatal fleet errors.

Only these exceptions unwind to the top level of a run. Per-package
failures are recorded as outcomes instead.
"""


class FleetError(Exception):
    """Base exception for errors that abort the whole run."""


class AdbNotFoundError(FleetError):
    """Raised when the adb executable cannot be located or started."""


class AdbServerError(FleetError):
    """Raised when the adb background server fails to start."""


class ConfirmationError(FleetError):
    """Raised when no confirmation can be read from the input stream."""


class DeviceNotFoundError(FleetError):
    """Raised when a requested device is not attached or not ready."""


class InstallSourceError(FleetError):
    """Raised when the install path is missing or holds no APK files."""


class FilterError(FleetError):
    """Raised when a package filter expression is malformed."""


class ConfigError(FleetError):
    """Raised when the settings file content is invalid."""


class ConfigParseError(ConfigError):
    """Raised when the settings file is not valid TOML."""
