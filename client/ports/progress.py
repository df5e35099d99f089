"""ProgressPort - abstract interface for reporting job progress while polling."""

from abc import ABC, abstractmethod
from typing import Optional


class ProgressPort(ABC):
    @abstractmethod
    def report(
        self,
        job_id: str,
        stage: str,
        progress: float = 0.0,
        detail: Optional[str] = None,
    ) -> None:
        """Report progress (0-100). stage: the job status, e.g. PENDING, PROCESSING."""
