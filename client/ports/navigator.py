"""NavigatorPort - abstract interface for moving the user to a finished result."""

from abc import ABC, abstractmethod


class NavigatorPort(ABC):
    @abstractmethod
    def go_to(self, result_id: str) -> None:
        """Show the result identified by result_id."""
