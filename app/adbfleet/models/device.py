"""Device models for adb enumeration results.

This module defines the data structures representing devices reported
by ``adb devices -l``.
"""

from dataclasses import dataclass, field
from enum import Enum

# Serial prefix adb assigns to local emulator instances
EMULATOR_SERIAL_PREFIX = "emulator-"


class DeviceStatus(Enum):
    """Connection state of an attached device.

    Attributes:
        READY: Device is online and authorized (adb state ``device``).
        UNAUTHORIZED: Device has not accepted this computer's RSA key.
        OFFLINE: Device is attached but not responding.
        UNKNOWN: Any other state (recovery, sideload, no permissions, ...).
    """

    READY = "Ready"
    UNAUTHORIZED = "Unauthorized"
    OFFLINE = "Offline"
    UNKNOWN = "Unknown"

    @classmethod
    def from_token(cls, token: str) -> "DeviceStatus":
        """Map a raw adb connection-state token to a status."""
        return _STATE_TOKENS.get(token.lower(), cls.UNKNOWN)


_STATE_TOKENS: dict[str, DeviceStatus] = {
    "device": DeviceStatus.READY,
    "unauthorized": DeviceStatus.UNAUTHORIZED,
    "offline": DeviceStatus.OFFLINE,
}


@dataclass(frozen=True, slots=True)
class AdbDevice:
    """A device reported by a single enumeration snapshot.

    Attributes:
        serial: Unique device identifier, used with ``adb -s``.
        status: Connection state derived from the adb state token.
        model: Model name from the ``model:`` field, if reported.
        product: Product name from the ``product:`` field, if reported.
        device_name: Device codename from the ``device:`` field, if reported.
        transport_id: adb transport id, if reported.
        is_emulator: True if the serial has the emulator shape.
    """

    serial: str
    status: DeviceStatus
    model: str | None = field(default=None)
    product: str | None = field(default=None)
    device_name: str | None = field(default=None)
    transport_id: str | None = field(default=None)
    is_emulator: bool = field(default=False)

    def __post_init__(self) -> None:
        """Validate device data after initialization."""
        if not self.serial:
            msg = "Device serial cannot be empty"
            raise ValueError(msg)

    @property
    def is_ready(self) -> bool:
        """Check if the device accepts commands."""
        return self.status == DeviceStatus.READY

    @property
    def display_name(self) -> str:
        """Model name for console output, 'Device' if unknown."""
        return self.model or "Device"

    def __str__(self) -> str:
        return f"{self.serial} ({self.status.value})"


def is_emulator_serial(serial: str) -> bool:
    """Check whether a serial belongs to a local emulator."""
    return serial.startswith(EMULATOR_SERIAL_PREFIX)
