"""SettingsStorePort - abstract interface for persisted user settings."""

from abc import ABC, abstractmethod
from typing import Optional


class SettingsStorePort(ABC):
    @abstractmethod
    def get_api_url(self) -> Optional[str]:
        """Return the saved backend base URL, or None."""

    @abstractmethod
    def set_api_url(self, url: str) -> None:
        """Persist the backend base URL."""

    @abstractmethod
    def clear_api_url(self) -> None:
        """Forget the saved base URL."""
