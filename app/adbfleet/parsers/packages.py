"""Parsers for package listings and install/uninstall results.

Extracts package identifiers from ``pm list packages -f`` output and
classifies the text returned by action commands. Classification is
conservative: only a recognized success token yields success, anything
else (including empty output) is a failure.
"""

import logging
import re

from adbfleet.models.package import PackageRef

logger = logging.getLogger(__name__)

_PACKAGE_PREFIX = "package:"
_SUCCESS_TOKEN = "Success"
_FAILURE_TOKENS: tuple[str, ...] = ("Failure", "Error", "adb: failed", "Exception")
_PULL_SUCCESS_TOKENS: tuple[str, ...] = ("pulled", "bytes in")
_PULL_ERROR_TOKENS: tuple[str, ...] = ("error", "failed", "does not exist", "no such file")

# "Failure [INSTALL_FAILED_ALREADY_EXISTS: Attempt to re-install ...]"
_FAILURE_CODE_PATTERN = re.compile(r"Failure\s*\[([^\]:\s]+)")
_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z0-9_]+(\.[A-Za-z0-9_]+)*$")


def parse_installed_packages(output: str | None) -> list[PackageRef]:
    """Parse ``pm list packages -f`` output.

    Lines look like ``package:/data/app/com.example-1/base.apk=com.example``
    or, without ``-f``, ``package:com.example``. Duplicate identifiers
    collapse to their first occurrence.

    Args:
        output: Raw stdout of the listing command.

    Returns:
        Unique packages in listing order.
    """
    packages: list[PackageRef] = []
    if not output:
        return packages

    seen: set[str] = set()
    for line in output.splitlines():
        package = _parse_package_line(line)
        if package is None or package.identifier in seen:
            continue
        seen.add(package.identifier)
        packages.append(package)

    return packages


def _parse_package_line(line: str) -> PackageRef | None:
    """Parse a single listing line, None if it is not a package line."""
    stripped = line.strip()
    if not stripped.startswith(_PACKAGE_PREFIX):
        if stripped:
            logger.debug("Skipping non-package line: %r", line[:100])
        return None

    entry = stripped[len(_PACKAGE_PREFIX) :]
    # APK paths may contain '=' themselves, the identifier follows the last one
    path, sep, identifier = entry.rpartition("=")
    identifier = identifier.strip()

    if not _IDENTIFIER_PATTERN.match(identifier):
        logger.debug("Skipping package line with invalid identifier: %r", line[:100])
        return None

    apk_path = path.strip() if sep else ""
    return PackageRef(identifier=identifier, path=apk_path or None)


def _reports_success(output: str | None) -> bool:
    if not output:
        return False
    if any(token in output for token in _FAILURE_TOKENS):
        return False
    return any(line.strip() == _SUCCESS_TOKEN for line in output.splitlines())


def was_successfully_installed(output: str | None) -> bool:
    """Check whether ``adb install`` output reports success.

    Args:
        output: Combined output of the install command.

    Returns:
        True only if a line reads exactly 'Success' and no failure token appears.
    """
    return _reports_success(output)


def was_successfully_uninstalled(output: str | None) -> bool:
    """Check whether ``pm uninstall`` output reports success.

    Args:
        output: Combined output of the uninstall command.

    Returns:
        True only if a line reads exactly 'Success' and no failure token appears.
    """
    return _reports_success(output)


def was_successfully_pulled(output: str | None) -> bool:
    """Check whether ``adb pull`` output reports a transferred file."""
    if not output:
        return False
    lowered = output.lower()
    if any(token in lowered for token in _PULL_ERROR_TOKENS):
        return False
    return any(token in lowered for token in _PULL_SUCCESS_TOKENS)


def short_failure_reason(output: str | None) -> str:
    """Extract a one-line failure reason from action output.

    Args:
        output: Combined output of a failed action command.

    Returns:
        The bracketed failure code if present, else the last non-empty
        line, else 'no output'.
    """
    if not output or not output.strip():
        return "no output"

    match = _FAILURE_CODE_PATTERN.search(output)
    if match:
        return match.group(1)

    lines = [line.strip() for line in output.splitlines() if line.strip()]
    return lines[-1]
