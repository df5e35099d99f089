"""JobStatusPoller - tracks one job until it reaches a terminal outcome.

The poller is a small state machine (Idle -> Active -> Terminated) driven by
an injected SchedulerPort, so ticks come from the event loop in production
and from a manual clock in tests.

Guarantees:
  * at most one status query is outstanding; a tick that fires while one is
    still running is skipped
  * every query is tagged with the session generation at issue time;
    results from an older generation (cancelled or restarted) are dropped
  * Terminated is absorbing: one notification, at most one navigation,
    no further queries
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Union

from domain.errors import JobClientError
from domain.models import (
    Active, Failed, Idle, JobId, JobStatus, Outcome, PollerState,
    StatusSnapshot, Stalled, Succeeded, Terminated, TransportFailed,
)
from ports.navigator import NavigatorPort
from ports.notification import (
    NotificationPort, SUCCESS, FAILURE, STALLED, TRANSPORT_ERROR,
)
from ports.progress import ProgressPort
from ports.scheduler import SchedulerPort, TimerHandle

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 2.0
DEFAULT_STALL_THRESHOLD = 30
DEFAULT_NAVIGATE_DELAY = 1.5

SUCCESS_MESSAGE = "Processing completed!"
FAILURE_MESSAGE = "Job failed"
TRANSPORT_MESSAGE = "Failed to check job status"
STALLED_MESSAGE = "Processing stalled. Please retry or check server logs."

StatusQuery = Callable[[str], Awaitable[StatusSnapshot]]


class StagnationWatchdog:
    """Counts consecutive non-terminal snapshots with an unchanged progress value.

    The first snapshot of a run counts as tick 1, so `threshold` identical
    PROCESSING snapshots in a row trip the watchdog on the last of them.
    """

    def __init__(self, threshold: int = DEFAULT_STALL_THRESHOLD):
        if threshold < 1:
            raise ValueError("stall threshold must be at least 1")
        self.threshold = threshold
        self.reset()

    def reset(self) -> None:
        self.last_progress: Optional[float] = None
        self.stagnant_ticks = 0

    def observe(self, snapshot: StatusSnapshot) -> bool:
        """Feed one non-terminal snapshot. Returns True when the watchdog trips."""
        if self.last_progress is not None and snapshot.progress == self.last_progress:
            self.stagnant_ticks += 1
        else:
            self.last_progress = snapshot.progress
            self.stagnant_ticks = 1
        return (
            self.stagnant_ticks >= self.threshold
            and snapshot.status == JobStatus.PROCESSING
        )


class JobStatusPoller:
    def __init__(
        self,
        query: StatusQuery,
        notifier: NotificationPort,
        navigator: NavigatorPort,
        scheduler: SchedulerPort,
        interval: float = DEFAULT_POLL_INTERVAL,
        stall_threshold: int = DEFAULT_STALL_THRESHOLD,
        navigate_delay: float = DEFAULT_NAVIGATE_DELAY,
        progress: Optional[ProgressPort] = None,
    ):
        self._query = query
        self._progress = progress
        self._notifier = notifier
        self._navigator = navigator
        self._scheduler = scheduler
        self._interval = interval
        self._navigate_delay = navigate_delay
        self._watchdog = StagnationWatchdog(stall_threshold)

        self._state: PollerState = Idle()
        self._generation = 0
        self._in_flight = False
        self._timer: Optional[TimerHandle] = None
        self._nav_timer: Optional[TimerHandle] = None
        self._snapshot: Optional[StatusSnapshot] = None
        self._history: list[StatusSnapshot] = []
        self._done = asyncio.Event()
        self.queries_issued = 0

    # -- inspection --------------------------------------------------------

    @property
    def state(self) -> PollerState:
        return self._state

    @property
    def is_active(self) -> bool:
        return isinstance(self._state, Active)

    @property
    def outcome(self) -> Optional[Outcome]:
        return self._state.outcome if isinstance(self._state, Terminated) else None

    @property
    def snapshot(self) -> Optional[StatusSnapshot]:
        return self._snapshot

    @property
    def history(self) -> tuple[StatusSnapshot, ...]:
        return tuple(self._history)

    @property
    def watchdog(self) -> StagnationWatchdog:
        return self._watchdog

    @property
    def navigation_pending(self) -> bool:
        return self._nav_timer is not None

    # -- control -----------------------------------------------------------

    def start(self, job_id: Union[JobId, str]) -> None:
        """Begin tracking job_id. Any current session is cancelled first."""
        if not isinstance(job_id, JobId):
            job_id = JobId(job_id)
        self.cancel()

        self._generation += 1
        self._state = Active(job_id)
        self._snapshot = None
        self._history = []
        self._watchdog.reset()
        self._done = asyncio.Event()
        logger.info(f"[{job_id}] Polling started (every {self._interval}s)")

        # First query goes out immediately; _tick arms the timer.
        self._tick()

    def cancel(self) -> None:
        """Stop tracking. Nothing from the cancelled session fires after this returns."""
        self._generation += 1
        self._stop_timer()
        self._in_flight = False

        if self._nav_timer is not None:
            self._nav_timer.cancel()
            self._nav_timer = None
            logger.info("Pending navigation cancelled")
            self._done.set()

        if isinstance(self._state, Active):
            logger.info(f"[{self._state.job_id}] Polling cancelled")
            self._state = Idle()
            self._done.set()

    async def wait(self) -> Optional[Outcome]:
        """Wait until the session ends.

        Returns the terminal outcome, or None if the session was cancelled
        while active. For a success with a result id this returns once the
        navigation has fired.
        """
        await self._done.wait()
        return self.outcome

    # -- internals ---------------------------------------------------------

    def _stop_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _tick(self) -> None:
        self._timer = None
        if not isinstance(self._state, Active):
            return
        # Period is measured between attempts, so re-arm before querying.
        self._timer = self._scheduler.call_later(self._interval, self._tick)

        if self._in_flight:
            logger.debug(f"[{self._state.job_id}] Previous status query still running, skipping tick")
            return

        self._in_flight = True
        self.queries_issued += 1
        self._scheduler.spawn(self._query_once(self._generation, self._state.job_id))

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation and isinstance(self._state, Active)

    async def _query_once(self, generation: int, job_id: JobId) -> None:
        try:
            snapshot = await self._query(str(job_id))
        except JobClientError as e:
            if not self._is_current(generation):
                logger.debug(f"[{job_id}] Dropping error from stale query: {e}")
                return
            self._in_flight = False
            logger.error(f"[{job_id}] Status query failed: {e}")
            self._terminate(TransportFailed(str(e)), TRANSPORT_ERROR, TRANSPORT_MESSAGE)
            return
        except Exception as e:
            if not self._is_current(generation):
                logger.debug(f"[{job_id}] Dropping error from stale query: {e!r}")
                return
            self._in_flight = False
            logger.exception(f"[{job_id}] Unexpected error while querying status")
            self._terminate(TransportFailed(repr(e)), TRANSPORT_ERROR, TRANSPORT_MESSAGE)
            return

        if not self._is_current(generation):
            logger.debug(f"[{job_id}] Dropping stale status {snapshot.status.value}")
            return
        self._in_flight = False
        self._apply(snapshot)

    def _apply(self, snapshot: StatusSnapshot) -> None:
        self._snapshot = snapshot
        self._history.append(snapshot)
        logger.debug(
            f"[{snapshot.job_id}] status={snapshot.status.value} progress={snapshot.progress:g}"
        )

        if snapshot.status == JobStatus.SUCCESS:
            self._terminate(Succeeded(snapshot.result_id), SUCCESS, SUCCESS_MESSAGE)
            return
        if snapshot.status == JobStatus.FAILURE:
            message = snapshot.error or FAILURE_MESSAGE
            self._terminate(Failed(message), FAILURE, message)
            return

        if self._progress is not None:
            self._progress.report(snapshot.job_id, snapshot.status.value, snapshot.progress)
        if self._watchdog.observe(snapshot):
            logger.warning(
                f"[{snapshot.job_id}] Progress stuck at {snapshot.progress:g} "
                f"for {self._watchdog.stagnant_ticks} polls, stopping"
            )
            self._terminate(Stalled(snapshot.progress), STALLED, STALLED_MESSAGE)

    def _terminate(self, outcome: Outcome, kind: str, message: str) -> None:
        self._stop_timer()
        job_id = self._state.job_id
        self._state = Terminated(outcome)
        logger.info(f"[{job_id}] Polling finished: {outcome.kind}")

        navigate_to = outcome.result_id if isinstance(outcome, Succeeded) else None
        if navigate_to:
            self._nav_timer = self._scheduler.call_later(
                self._navigate_delay, lambda: self._navigate(navigate_to)
            )
        else:
            if isinstance(outcome, Succeeded):
                logger.warning(f"[{job_id}] Job succeeded without a briefing_id, nothing to open")
            self._done.set()

        self._notifier.notify(kind, message)

    def _navigate(self, result_id: str) -> None:
        if self._nav_timer is None:
            return
        self._nav_timer = None
        self._done.set()
        self._navigator.go_to(result_id)
