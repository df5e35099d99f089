"""JobTracker - one tracking session: submit a job, then poll it to the end.

Owns a single JobStatusPoller, so a new submission always cancels the
previous one before the new job id exists.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from domain.errors import (
    JobClientError, RemoteJobFailure, StagnationTimeout, TransportError,
)
from domain.models import (
    Failed, JobId, Outcome, Stalled, SubmissionOptions, Succeeded, TransportFailed,
)
from use_cases.poll_job import JobStatusPoller, STALLED_MESSAGE
from use_cases.submit_job import SubmissionClient

logger = logging.getLogger(__name__)


def raise_for_outcome(outcome: Optional[Outcome]) -> Optional[str]:
    """Return the result id of a success; raise the matching error otherwise."""
    if isinstance(outcome, Succeeded):
        return outcome.result_id
    if isinstance(outcome, Failed):
        raise RemoteJobFailure(outcome.message)
    if isinstance(outcome, TransportFailed):
        raise TransportError(outcome.message)
    if isinstance(outcome, Stalled):
        raise StagnationTimeout(STALLED_MESSAGE)
    raise JobClientError("Tracking was cancelled before the job finished")


class JobTracker:
    def __init__(self, submission: SubmissionClient, poller: JobStatusPoller):
        self._submission = submission
        self._poller = poller
        self._job_id: Optional[JobId] = None

    @property
    def job_id(self) -> Optional[JobId]:
        return self._job_id

    @property
    def poller(self) -> JobStatusPoller:
        return self._poller

    async def submit_and_track(
        self,
        file: Optional[Union[str, Path]] = None,
        url: Optional[str] = None,
        options: Optional[SubmissionOptions] = None,
    ) -> JobId:
        self.abandon()
        job_id = await self._submission.submit(file=file, url=url, options=options)
        self.track(job_id)
        return job_id

    def track(self, job_id: Union[JobId, str]) -> None:
        """Poll an already created job."""
        if not isinstance(job_id, JobId):
            job_id = JobId(job_id)
        self._job_id = job_id
        self._poller.start(job_id)

    def abandon(self) -> None:
        """Drop the current job id and stop its poller."""
        if self._job_id is not None:
            logger.info(f"[{self._job_id}] Tracking abandoned")
        self._poller.cancel()
        self._job_id = None

    async def wait_for_result(self) -> Optional[str]:
        """Wait for the session to end and return the briefing id.

        Raises RemoteJobFailure, TransportError or StagnationTimeout for the
        corresponding outcome, JobClientError if tracking was cancelled.
        """
        return raise_for_outcome(await self._poller.wait())
