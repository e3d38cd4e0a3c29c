"""XDG-compliant path management for adbfleet.

XDG defaults:
- Config: ~/.config/adbfleet/
- State: ~/.local/state/adbfleet/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "adbfleet"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/adbfleet/ (or XDG_CONFIG_HOME/adbfleet/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_state_dir() -> Path:
    """Get the state directory path.

    Returns:
        Path to ~/.local/state/adbfleet/ (or XDG_STATE_HOME/adbfleet/).
    """
    return _get_xdg_dir("XDG_STATE_HOME", ".local/state")


def get_config_path() -> Path:
    """Get the settings file path.

    Returns:
        Path to ~/.config/adbfleet/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_theme_path() -> Path:
    """Get the user theme override path.

    Returns:
        Path to ~/.config/adbfleet/theme.toml.
    """
    return get_config_dir() / "theme.toml"


def get_default_report_dir() -> Path:
    """Get the default directory for bug report artifacts.

    Returns:
        Path to ~/.local/state/adbfleet/bugreports.
    """
    return get_state_dir() / "bugreports"
