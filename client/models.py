from typing import Optional
from pydantic import BaseModel, field_validator

from domain.models import JobStatus


class JobStatusResponse(BaseModel):
    """Body of GET /v1/jobs/{job_id}"""
    job_id: str
    status: JobStatus
    progress: float = 0.0
    error: Optional[str] = None
    briefing_id: Optional[str] = None

    @field_validator("progress", mode="before")
    @classmethod
    def _progress_default(cls, v):
        return 0.0 if v is None else v

    @field_validator("progress")
    @classmethod
    def _clamp_progress(cls, v: float) -> float:
        return min(100.0, max(0.0, v))


class HealthResponse(BaseModel):
    """Body of GET /v1/health"""
    status: str
    timestamp: str
