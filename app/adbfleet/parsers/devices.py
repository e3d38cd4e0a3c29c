"""Parser for ``adb devices -l`` output.

Turns the raw enumeration text into an ordered list of device records.
The output format is not a versioned contract, so lines that do not
have the expected shape are skipped instead of raising.
"""

import logging

from adbfleet.models.device import AdbDevice, DeviceStatus, is_emulator_serial

logger = logging.getLogger(__name__)

_HEADER_PREFIX = "List of devices"

# key:value fields of `adb devices -l` mapped to AdbDevice attributes
_FIELD_NAMES: dict[str, str] = {
    "model": "model",
    "product": "product",
    "device": "device_name",
    "transport_id": "transport_id",
}


def parse_devices(output: str | None) -> list[AdbDevice]:
    """Parse ``adb devices -l`` output.

    Args:
        output: Raw stdout of the enumeration command.

    Returns:
        Devices in the order adb listed them.
    """
    devices: list[AdbDevice] = []
    if not output:
        return devices

    for line in output.splitlines():
        device = _parse_device_line(line)
        if device is not None:
            devices.append(device)

    return devices


def _parse_device_line(line: str) -> AdbDevice | None:
    """Parse a single device line.

    Args:
        line: One line of enumeration output.

    Returns:
        AdbDevice if the line describes a device, None otherwise.
    """
    stripped = line.strip()
    if not stripped or stripped.startswith(_HEADER_PREFIX) or stripped.startswith("*"):
        return None

    tokens = stripped.split()
    if len(tokens) < 2:
        logger.debug("Skipping malformed device line: %r", line[:100])
        return None

    serial = tokens[0]
    state_token: str | None = None
    fields: dict[str, str] = {}

    for token in tokens[1:]:
        key, sep, value = token.partition(":")
        if sep:
            attribute = _FIELD_NAMES.get(key)
            if attribute is not None and value:
                fields[attribute] = value
        elif state_token is None:
            state_token = token
        # Multi-word states ("no permissions ...") keep only the first word

    if state_token is None:
        logger.debug("Skipping device line without state: %r", line[:100])
        return None

    return AdbDevice(
        serial=serial,
        status=DeviceStatus.from_token(state_token),
        is_emulator=is_emulator_serial(serial),
        **fields,
    )
