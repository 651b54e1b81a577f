"""
Settings repository port (interface).
"""
from abc import ABC, abstractmethod
from typing import Any, Mapping

from policies.domain.settings import ServiceSettings


class SettingsRepository(ABC):
    """Abstract repository for service settings."""

    @abstractmethod
    async def get(self) -> ServiceSettings:
        """
        Get current settings with defaults applied per field.

        Returns:
            ServiceSettings
        """
        pass

    @abstractmethod
    async def update(self, changes: Mapping[str, Any]) -> ServiceSettings:
        """
        Merge changes into the stored settings.

        Args:
            changes: ServiceSettings field name to new value

        Returns:
            Settings after the update
        """
        pass
