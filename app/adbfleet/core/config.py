"""User settings for adbfleet.

Settings are stored in ~/.config/adbfleet/config.toml and provide
defaults that command-line flags override.
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from adbfleet.core.errors import ConfigError, ConfigParseError
from adbfleet.core.paths import get_config_path, get_default_report_dir

logger = logging.getLogger(__name__)


class FleetSettings(BaseModel):
    """Persisted defaults for fleet runs.

    Attributes:
        adb_path: adb executable or platform-tools directory (None = search).
        report_dir: Directory for bug report artifacts (None = state dir).
        skip_emulators: Ignore emulator devices unless overridden.
        keep_data: Keep app data on uninstall / reinstall on install.
    """

    model_config = ConfigDict(extra="forbid")

    adb_path: Annotated[
        str | None,
        Field(description="adb executable or directory (None = search PATH and SDK)"),
    ] = None
    report_dir: Annotated[
        Path | None,
        Field(description="Bug report output directory (None = default state dir)"),
    ] = None
    skip_emulators: Annotated[
        bool,
        Field(description="Skip emulator devices"),
    ] = False
    keep_data: Annotated[
        bool,
        Field(description="Keep app data and caches"),
    ] = False

    @property
    def effective_report_dir(self) -> Path:
        """Configured report directory, or the default one."""
        if self.report_dir is not None:
            return self.report_dir.expanduser()
        return get_default_report_dir()


def load_settings(path: Path | None = None) -> FleetSettings:
    """Load settings from a TOML file.

    A missing file is not an error; defaults are returned instead.

    Args:
        path: Path to the settings file. If None, uses the default path.

    Returns:
        Validated FleetSettings object.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the file cannot be read or doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        logger.debug("No settings file at %s, using defaults", config_path)
        return FleetSettings()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read settings: {e}") from e

    try:
        return FleetSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {config_path}: {e}") from e


def save_settings(settings: FleetSettings, path: Path | None = None) -> Path:
    """Save settings to a TOML file atomically.

    Args:
        settings: The settings to save.
        path: Destination. If None, uses the default path.

    Returns:
        Path where the settings were saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    data = _settings_to_dict(settings)

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write settings: {e}") from e

    return config_path


def _settings_to_dict(settings: FleetSettings) -> dict[str, object]:
    """Convert settings to a TOML-serializable dictionary.

    TOML has no null, so unset optional values are omitted.
    """
    result: dict[str, object] = {
        "skip_emulators": settings.skip_emulators,
        "keep_data": settings.keep_data,
    }
    if settings.adb_path is not None:
        result["adb_path"] = settings.adb_path
    if settings.report_dir is not None:
        result["report_dir"] = str(settings.report_dir)
    return result
