"""Domain <-> wire mappers.

The job creation endpoint is inconsistent about where it puts the job
identifier, so extraction walks a fixed list of keys in order.
"""

from typing import Any, Optional
from urllib.parse import urlencode

from domain.errors import ResponseShapeError
from domain.models import JobId, StatusSnapshot, SubmissionOptions
from models import JobStatusResponse

# Order matters: the first non-empty string wins.
JOB_ID_KEYS = ("job_id", "id", "jobId")


def extract_job_id(payload: Any) -> JobId:
    """Return the job identifier from a job creation reply.

    Raises ResponseShapeError when none of JOB_ID_KEYS holds a non-empty string.
    """
    if isinstance(payload, dict):
        for key in JOB_ID_KEYS:
            value = payload.get(key)
            if isinstance(value, int) and not isinstance(value, bool):
                value = str(value)
            if isinstance(value, str) and value.strip():
                return JobId(value.strip())
    raise ResponseShapeError("Invalid job response: missing job_id", payload=payload)


def dto_to_snapshot(dto: JobStatusResponse) -> StatusSnapshot:
    """Convert a status DTO to a domain StatusSnapshot."""
    return StatusSnapshot(
        job_id=dto.job_id,
        status=dto.status,
        progress=dto.progress,
        error=dto.error,
        result_id=dto.briefing_id,
    )


def options_to_query_params(options: Optional[SubmissionOptions]) -> dict[str, str]:
    """Build the optional creation query parameters. Unset flags are omitted."""
    params: dict[str, str] = {}
    if options is None:
        return params
    if options.full_analysis:
        params["full_llm_mode"] = "true"
        if options.narrative_length and options.narrative_length > 0:
            params["narrative_length"] = str(options.narrative_length)
    if options.fast_mode:
        params["fast_mode"] = "true"
    return params


def briefing_path(result_id: str) -> str:
    return f"/v1/briefings/{result_id}"


def report_url(base_url: str, result_id: str, params: Optional[dict[str, Any]] = None) -> str:
    """URL of a briefing's report. Empty or None parameter values are dropped."""
    url = f"{base_url}{briefing_path(result_id)}/report"
    if params:
        kept = {
            k: (str(v).lower() if isinstance(v, bool) else str(v))
            for k, v in params.items()
            if v is not None and str(v) != ""
        }
        if kept:
            url += "?" + urlencode(kept)
    return url
