"""LogProgressAdapter - reports polled job progress via logging."""

import logging
from typing import Optional

from ports.progress import ProgressPort

logger = logging.getLogger(__name__)


class LogProgressAdapter(ProgressPort):
    """Logs only when stage or progress changes, so a stuck job logs once."""

    def __init__(self):
        self._last: dict[str, tuple[str, float]] = {}

    def report(
        self,
        job_id: str,
        stage: str,
        progress: float = 0.0,
        detail: Optional[str] = None,
    ) -> None:
        if self._last.get(job_id) == (stage, progress):
            return
        self._last[job_id] = (stage, progress)
        msg = f"[{job_id}] {stage.lower()}"
        if progress > 0:
            msg += f" {progress:.0f}%"
        if detail:
            msg += f" - {detail}"
        logger.info(msg)
