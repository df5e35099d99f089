"""LogNavigatorAdapter - "navigates" to a finished briefing by logging its links."""

import logging
from typing import Optional

from mappers import briefing_path, report_url
from ports.navigator import NavigatorPort

logger = logging.getLogger(__name__)


class LogNavigatorAdapter(NavigatorPort):
    def __init__(self, base_url: str):
        self._base_url = base_url.rstrip("/")
        self.result_id: Optional[str] = None

    def briefing_url(self, result_id: str) -> str:
        return f"{self._base_url}{briefing_path(result_id)}"

    def go_to(self, result_id: str) -> None:
        self.result_id = result_id
        logger.info(f"Briefing ready: {self.briefing_url(result_id)}")
        logger.info(f"Report: {report_url(self._base_url, result_id)}")
