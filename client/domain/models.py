"""Framework-agnostic domain models for the briefing job client.

Wire DTOs (pydantic) live in models.py; mappers convert at the boundary so
the poller and submission logic only ever see these types.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


@dataclass(frozen=True)
class JobId:
    """Opaque handle returned by job creation."""
    value: str

    def __post_init__(self):
        if not isinstance(self.value, str) or not self.value:
            raise ValueError("JobId must be a non-empty string")

    def __str__(self) -> str:
        return self.value


class JobStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.SUCCESS, JobStatus.FAILURE)


@dataclass(frozen=True)
class StatusSnapshot:
    """One observation of a job's status."""
    job_id: str
    status: JobStatus
    progress: float = 0.0
    error: Optional[str] = None
    result_id: Optional[str] = None


@dataclass(frozen=True)
class SubmissionOptions:
    """Options accepted by job creation.

    narrative_length is only sent when full_analysis is set.
    """
    full_analysis: bool = False
    narrative_length: Optional[int] = None
    fast_mode: bool = False


# Terminal outcomes

@dataclass(frozen=True)
class Succeeded:
    result_id: Optional[str]
    kind: str = field(default="success", init=False)


@dataclass(frozen=True)
class Failed:
    message: str
    kind: str = field(default="failure", init=False)


@dataclass(frozen=True)
class TransportFailed:
    message: str
    kind: str = field(default="transport_error", init=False)


@dataclass(frozen=True)
class Stalled:
    last_progress: Optional[float] = None
    kind: str = field(default="stalled", init=False)


Outcome = Union[Succeeded, Failed, TransportFailed, Stalled]


# Poller states

@dataclass(frozen=True)
class Idle:
    name: str = field(default="idle", init=False)


@dataclass(frozen=True)
class Active:
    job_id: JobId
    name: str = field(default="active", init=False)


@dataclass(frozen=True)
class Terminated:
    outcome: Outcome
    name: str = field(default="terminated", init=False)


PollerState = Union[Idle, Active, Terminated]
