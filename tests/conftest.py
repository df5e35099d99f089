"""Shared fixtures for the briefing client test suite.

Provides a manual clock for driving the poller deterministically, scripted
status queries, recording collaborators, and an in-process FastAPI fake of
the analysis backend reachable through httpx.ASGITransport.
"""

import asyncio
from typing import Any, Optional

import httpx
import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from adapters.local.log_notifier import LogNotificationAdapter
from domain.models import JobStatus, StatusSnapshot
from ports.navigator import NavigatorPort
from ports.scheduler import SchedulerPort, TimerHandle
from use_cases.poll_job import JobStatusPoller


# ---------------------------------------------------------------------------
# Manual clock
# ---------------------------------------------------------------------------

async def settle(rounds: int = 10) -> None:
    """Let spawned tasks run until they block."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class _ManualTimer(TimerHandle):
    def __init__(self, due: float, seq: int, callback):
        self.due = due
        self.seq = seq
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler(SchedulerPort):
    """Timers fire only when the test calls run_for()."""

    def __init__(self):
        self._now = 0.0
        self._seq = 0
        self._timers: list[_ManualTimer] = []
        self.tasks: list[asyncio.Future] = []

    def now(self) -> float:
        return self._now

    def call_later(self, delay, callback) -> TimerHandle:
        self._seq += 1
        timer = _ManualTimer(self._now + delay, self._seq, callback)
        self._timers.append(timer)
        return timer

    def spawn(self, coro) -> None:
        self.tasks.append(asyncio.ensure_future(coro))

    @property
    def pending_timers(self) -> list[_ManualTimer]:
        return [t for t in self._timers if not t.cancelled]

    def _next_due(self, target: float) -> Optional[_ManualTimer]:
        due = [t for t in self._timers if not t.cancelled and t.due <= target]
        return min(due, key=lambda t: (t.due, t.seq)) if due else None

    async def run_for(self, seconds: float) -> None:
        """Advance the clock, firing due timers in order.

        Spawned tasks get to run after every timer, as they would between
        real event loop callbacks.
        """
        target = self._now + seconds
        while True:
            timer = self._next_due(target)
            if timer is None:
                break
            self._timers.remove(timer)
            self._now = timer.due
            timer.callback()
            await settle()
        self._now = target
        await settle()


async def tick(scheduler: ManualScheduler, seconds: float = 2.0) -> None:
    await scheduler.run_for(seconds)


# ---------------------------------------------------------------------------
# Scripted collaborators
# ---------------------------------------------------------------------------

GATE = "gate"


def snap(status: JobStatus, progress: float = 0.0, job_id: str = "j1", **kwargs) -> StatusSnapshot:
    return StatusSnapshot(job_id=job_id, status=status, progress=progress, **kwargs)


class ScriptedQuery:
    """Async status query that replays a script.

    Items are snapshots, exceptions (raised) or GATE, which blocks the call
    on a future the test resolves through `gates`. The last item repeats.
    """

    def __init__(self, script):
        self.script = list(script)
        self.calls = 0
        self.job_ids: list[str] = []
        self.gates: list[asyncio.Future] = []

    async def __call__(self, job_id: str) -> StatusSnapshot:
        self.calls += 1
        self.job_ids.append(job_id)
        item = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        if item == GATE:
            gate = asyncio.get_running_loop().create_future()
            self.gates.append(gate)
            return await gate
        if isinstance(item, BaseException):
            raise item
        return item


class RecordingNavigator(NavigatorPort):
    def __init__(self):
        self.calls: list[str] = []

    def go_to(self, result_id: str) -> None:
        self.calls.append(result_id)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def notifier():
    return LogNotificationAdapter()


@pytest.fixture
def navigator():
    return RecordingNavigator()


@pytest.fixture
def make_poller(scheduler, notifier, navigator):
    """Build a JobStatusPoller around a ScriptedQuery."""

    def _make(script, **kwargs):
        query = ScriptedQuery(script)
        poller = JobStatusPoller(
            query=query,
            notifier=notifier,
            navigator=navigator,
            scheduler=scheduler,
            **kwargs,
        )
        return poller, query

    return _make


# ---------------------------------------------------------------------------
# Fake analysis backend
# ---------------------------------------------------------------------------

class BackendState:
    def __init__(self):
        self.requests: list[dict[str, Any]] = []
        self.create_reply: Any = {"job_id": "job-1"}
        self.create_status = 200
        self.statuses: dict[str, list[Any]] = {}
        self.health_status = 200
        self.raw_reply: Optional[str] = None


def create_fake_backend(state: BackendState) -> FastAPI:
    app = FastAPI()

    @app.post("/v1/jobs")
    async def create_job(request: Request):
        state.requests.append({
            "method": "POST",
            "query": dict(request.query_params),
            "content_type": request.headers.get("content-type", ""),
            "body": await request.body(),
        })
        if state.raw_reply is not None:
            return PlainTextResponse(state.raw_reply, status_code=state.create_status)
        return JSONResponse(state.create_reply, status_code=state.create_status)

    @app.get("/v1/jobs/{job_id}")
    async def get_job(job_id: str):
        state.requests.append({"method": "GET", "job_id": job_id})
        script = state.statuses.get(job_id)
        if not script:
            return JSONResponse({"detail": "Job not found"}, status_code=404)
        item = script.pop(0) if len(script) > 1 else script[0]
        if isinstance(item, str):
            return PlainTextResponse(item, status_code=500)
        return JSONResponse(item)

    @app.get("/v1/health")
    async def health():
        if state.health_status != 200:
            return PlainTextResponse("down", status_code=state.health_status)
        return {"status": "ok", "timestamp": "2026-01-01T00:00:00Z"}

    return app


@pytest.fixture
def backend():
    return BackendState()


@pytest.fixture
def transport(backend):
    return httpx.ASGITransport(app=create_fake_backend(backend))
