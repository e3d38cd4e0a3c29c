"""Package models for installed-package listings."""

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class PackageRef:
    """A package installed on a device.

    Attributes:
        identifier: Reverse-domain package name (e.g. 'com.example.app').
        path: Location of the package's APK on the device, if listed.
    """

    identifier: str
    path: str | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        """Validate package data after initialization."""
        if not self.identifier:
            msg = "Package identifier cannot be empty"
            raise ValueError(msg)

    def __str__(self) -> str:
        return self.identifier
