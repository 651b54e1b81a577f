"""
Service settings domain entity.
"""
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping


@dataclass(frozen=True)
class ServiceSettings:
    """
    Operator-editable service settings.

    Defaults apply field by field when nothing is stored.
    """

    api_enabled: bool = True
    max_devices_per_license: int = 1
    allow_hwid_change: bool = True
    auto_expire_in_days: int = 30
    maintenance_mode: bool = False

    def __post_init__(self):
        """Validate settings."""
        for f in fields(self):
            value = getattr(self, f.name)
            if f.type in (bool, "bool") and not isinstance(value, bool):
                raise ValueError(f"{f.name} must be a boolean")
            if f.type in (int, "int") and (
                not isinstance(value, int) or isinstance(value, bool)
            ):
                raise ValueError(f"{f.name} must be an integer")
        if self.max_devices_per_license < 1:
            raise ValueError("maxDevicesPerLicense must be at least 1")
        if self.auto_expire_in_days < 0:
            raise ValueError("autoExpireInDays cannot be negative")

    def updated(self, changes: Mapping[str, Any]) -> "ServiceSettings":
        """
        Create a new ServiceSettings with some fields changed.

        Args:
            changes: Field name to new value

        Returns:
            New ServiceSettings instance

        Raises:
            ValueError: If a field name is unknown or a value is invalid
        """
        known = {f.name for f in fields(self)}
        unknown = set(changes) - known
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")
        return replace(self, **changes)
