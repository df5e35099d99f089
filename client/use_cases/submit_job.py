"""SubmissionClient - turns a file or URL plus options into one JobId.

Exactly one of file/url must be given. The backend reply is normalized with
extract_job_id, so callers never see which key the backend used.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from domain.errors import ValidationError
from domain.models import JobId, SubmissionOptions
from mappers import extract_job_id
from ports.job_api import JobApiPort

logger = logging.getLogger(__name__)


def _validate_options(options: SubmissionOptions) -> None:
    if not options.full_analysis or options.narrative_length is None:
        return
    length = options.narrative_length
    if isinstance(length, bool) or not isinstance(length, int) or length <= 0:
        raise ValidationError(f"narrative_length must be a positive integer, got {length!r}")


class SubmissionClient:
    def __init__(self, api: JobApiPort):
        self._api = api

    async def submit(
        self,
        file: Optional[Union[str, Path]] = None,
        url: Optional[str] = None,
        options: Optional[SubmissionOptions] = None,
    ) -> JobId:
        """Create one job. Makes exactly one request; no retries.

        Raises ValidationError before any request when both or neither of
        file/url are given, ResponseShapeError when the reply has no job
        identifier, and TransportError when the request fails.
        """
        if url is not None:
            url = url.strip() or None
        if (file is None) == (url is None):
            raise ValidationError("Exactly one of file or url must be provided")

        options = options or SubmissionOptions()
        _validate_options(options)

        if file is not None:
            path = Path(file)
            if not path.is_file():
                raise ValidationError(f"File not found: {path}")
            raw = await self._api.create_job_from_file(path, options)
        else:
            raw = await self._api.create_job_from_url(url, options)

        job_id = extract_job_id(raw)
        logger.info(f"Job submitted: {job_id}")
        return job_id
