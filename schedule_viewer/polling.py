"""
Periodic polling of a solver job.

The controller runs on an asyncio event loop. Blocking HTTP calls are the
only suspension points; they run via asyncio.to_thread and their results are
applied to the session back on the loop, so no locking is needed. Stopping
means "issue no further cycles": a request already in flight is not aborted.
"""

import asyncio
import logging
from enum import Enum

from solver_client import SolverClient, SolverClientError

from .models import RefreshMode, ScheduleSnapshot
from .session import ViewerSession

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_MS = 2000


class PollState(Enum):
    IDLE = "idle"
    POLLING = "polling"


class PollingController:
    """Fetches a job's schedule every interval and feeds it to a ViewerSession."""

    def __init__(
        self,
        client: SolverClient,
        session: ViewerSession,
        refresh_mode: RefreshMode = RefreshMode.ALWAYS,
    ):
        self.client = client
        self.session = session
        self.refresh_mode = refresh_mode
        self.cycles = 0
        self._task: asyncio.Task | None = None

    @property
    def state(self) -> PollState:
        if self._task is not None and not self._task.done():
            return PollState.POLLING
        return PollState.IDLE

    def start(self, job_id: str, interval_ms: int = DEFAULT_POLL_INTERVAL_MS) -> asyncio.Task:
        """
        (Re)start polling job_id.

        Any previous polling task is cancelled first. The first cycle runs
        immediately, later ones every interval_ms. Must be called from a
        running event loop.
        """
        if interval_ms <= 0:
            raise ValueError(f"Poll interval must be positive, got {interval_ms}")
        self.stop()
        self.session.select_job(job_id)
        logger.info(f"Polling job {job_id} every {interval_ms} ms ({self.refresh_mode.value})")
        self._task = asyncio.get_running_loop().create_task(
            self._run(job_id, interval_ms / 1000)
        )
        return self._task

    def stop(self) -> None:
        """Stop polling. Safe to call when already idle."""
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            logger.info("Polling stopped")

    async def wait(self) -> None:
        """Wait until polling ends on its own or is stopped."""
        task = self._task
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run(self, job_id: str, interval_s: float) -> None:
        while True:
            if not await self.run_cycle(job_id):
                logger.info(f"Job {job_id} is not solving; polling stopped")
                return
            await asyncio.sleep(interval_s)

    def _should_stop(self, snapshot: ScheduleSnapshot | None) -> bool:
        if self.refresh_mode is not RefreshMode.ONLY_WHEN_SOLVING:
            return False
        return snapshot is None or not snapshot.is_solving

    async def run_cycle(self, job_id: str) -> bool:
        """
        Run one fetch-and-evaluate cycle.

        Returns:
            False when polling should end (only in onlyWhenSolving mode)
        """
        self.cycles += 1
        snapshot: ScheduleSnapshot | None = None
        try:
            snapshot = await asyncio.to_thread(self.client.get_schedule, job_id)
        except SolverClientError as e:
            logger.warning(f"No update for job {job_id} this cycle: {e}")

        if snapshot is not None:
            self.session.on_snapshot(job_id, snapshot)

        if self._should_stop(snapshot):
            return False

        jobs = await asyncio.to_thread(self.client.list_jobs)
        self.session.update_jobs(jobs)
        return True
