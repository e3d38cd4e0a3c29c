"""adbfleet - batch install, uninstall and bug reports across Android devices."""

__version__ = "0.1.0"
