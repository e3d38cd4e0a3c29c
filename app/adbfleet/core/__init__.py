"""Core fleet logic: adb location, filtering, execution and settings."""
