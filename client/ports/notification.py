"""NotificationPort - abstract interface for surfacing outcomes to the user."""

from abc import ABC, abstractmethod

SUCCESS = "success"
FAILURE = "failure"
STALLED = "stalled"
TRANSPORT_ERROR = "transport_error"


class NotificationPort(ABC):
    @abstractmethod
    def notify(self, kind: str, message: str) -> None:
        """Fire-and-forget. kind: success, failure, stalled, transport_error."""
