"""JobApiPort - abstract interface for the remote analysis job endpoints."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

from domain.models import SubmissionOptions, StatusSnapshot
from models import HealthResponse


class JobApiPort(ABC):
    @abstractmethod
    async def create_job_from_file(
        self, path: Path, options: Optional[SubmissionOptions] = None
    ) -> Any:
        """Upload a file as a new job. Returns the decoded JSON reply as-is."""

    @abstractmethod
    async def create_job_from_url(
        self, url: str, options: Optional[SubmissionOptions] = None
    ) -> Any:
        """Create a job from a remote video URL. Returns the decoded JSON reply as-is."""

    @abstractmethod
    async def get_job(self, job_id: str) -> StatusSnapshot:
        """Fetch the current status of a job."""

    @abstractmethod
    async def health(self) -> HealthResponse:
        """Probe the backend. Never raises; reports status 'unknown' on failure."""
