"""Error taxonomy for job submission and tracking."""

from typing import Optional


class JobClientError(Exception):
    """Base class for every error raised by the job client."""


class ValidationError(JobClientError):
    """Bad caller input. Raised before any request is made."""


class ResponseShapeError(JobClientError):
    """Job creation reply carried no recognizable job identifier."""

    def __init__(self, message: str, payload: Optional[object] = None):
        super().__init__(message)
        self.payload = payload


class TransportError(JobClientError):
    """The request itself failed: network error, non-2xx status or malformed body."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RemoteJobFailure(JobClientError):
    """The backend reported FAILURE for the job."""


class StagnationTimeout(JobClientError):
    """Progress stopped changing for too long."""
