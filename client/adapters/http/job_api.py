"""HttpJobApiAdapter - talks to the analysis backend over HTTP with httpx.

Both creation paths (multipart upload and URL query) return the raw JSON
reply; identifier normalization happens in the submission use case.
"""

import logging
import mimetypes
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from domain.errors import JobClientError, TransportError
from domain.models import StatusSnapshot, SubmissionOptions
from mappers import dto_to_snapshot, options_to_query_params
from models import HealthResponse, JobStatusResponse
from ports.job_api import JobApiPort

logger = logging.getLogger(__name__)

JOBS_PATH = "/v1/jobs"
HEALTH_PATH = "/v1/health"


def _error_message(response: httpx.Response) -> str:
    message = f"HTTP {response.status_code}"
    try:
        data = response.json()
    except ValueError:
        return response.reason_phrase or message
    if isinstance(data, dict):
        detail = data.get("detail") or data.get("message")
        if detail:
            return detail if isinstance(detail, str) else str(detail)
    return message


def _handle_response(response: httpx.Response) -> Any:
    if not response.is_success:
        raise TransportError(_error_message(response), status_code=response.status_code)
    try:
        return response.json()
    except ValueError:
        raise TransportError("Invalid JSON response", status_code=response.status_code)


class HttpJobApiAdapter(JobApiPort):
    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        )

    async def _send(self, method: str, path: str, **kwargs) -> Any:
        try:
            async with self._client() as client:
                response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} failed: {e!r}")
            raise TransportError(str(e) or type(e).__name__) from e
        return _handle_response(response)

    async def create_job_from_file(
        self, path: Path, options: Optional[SubmissionOptions] = None
    ) -> Any:
        path = Path(path)
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        params = options_to_query_params(options)
        logger.info(f"Uploading {path.name} ({content_type}) params={params}")
        with open(path, "rb") as fh:
            return await self._send(
                "POST", JOBS_PATH,
                params=params,
                files={"file": (path.name, fh, content_type)},
            )

    async def create_job_from_url(
        self, url: str, options: Optional[SubmissionOptions] = None
    ) -> Any:
        params = {"video_url": url, **options_to_query_params(options)}
        logger.info(f"Submitting URL job params={params}")
        return await self._send("POST", JOBS_PATH, params=params)

    async def get_job(self, job_id: str) -> StatusSnapshot:
        data = await self._send("GET", f"{JOBS_PATH}/{job_id}")
        try:
            dto = JobStatusResponse.model_validate(data)
        except PydanticValidationError as e:
            raise TransportError(f"Malformed job status response: {e.error_count()} error(s)") from e
        return dto_to_snapshot(dto)

    async def health(self) -> HealthResponse:
        try:
            data = await self._send("GET", HEALTH_PATH)
            return HealthResponse.model_validate(data)
        except (JobClientError, PydanticValidationError) as e:
            logger.warning(f"Health check against {self._base_url} failed: {e}")
            return HealthResponse(
                status="unknown",
                timestamp=datetime.now(timezone.utc).isoformat(),
            )
