"""LogNotificationAdapter - surfaces job outcomes via logging."""

import logging
from typing import Optional

from ports.notification import NotificationPort, SUCCESS, STALLED

logger = logging.getLogger(__name__)


class LogNotificationAdapter(NotificationPort):
    def __init__(self):
        self.history: list[tuple[str, str]] = []

    @property
    def last(self) -> Optional[tuple[str, str]]:
        return self.history[-1] if self.history else None

    def notify(self, kind: str, message: str) -> None:
        self.history.append((kind, message))
        if kind == SUCCESS:
            logger.info(message)
        elif kind == STALLED:
            logger.warning(message)
        else:
            logger.error(f"[{kind}] {message}")
