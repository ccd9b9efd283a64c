"""
Viewer session: the state one open timeline view carries between polls.

The session owns the change gate, the most recent snapshot, the frame on
screen and its analysis report. Renderers subscribe as listeners and are
called whenever the frame or the report changes.
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

from solver_client import SolverClientError

from .analysis import AnalysisReport, build_report, merge_analysis
from .change_gate import ChangeGate
from .hashing import fingerprint
from .layout import DEFAULT_ZOOM, TimelineFrame, build_timeline_frame, clamp_zoom
from .layout import zoom_in as _zoom_in
from .layout import zoom_out as _zoom_out
from .models import ScheduleSnapshot, ScoreAnalysis, ViewMode

logger = logging.getLogger(__name__)

Analyzer = Callable[[ScheduleSnapshot], ScoreAnalysis]
Listener = Callable[["ViewerSession"], None]


class ViewerSession:
    """Current job, last fetched data and the rendered view derived from it."""

    def __init__(
        self,
        view_mode: ViewMode = ViewMode.LINE,
        zoom_factor: float = DEFAULT_ZOOM,
        analyzer: Analyzer | None = None,
        gate: ChangeGate | None = None,
    ):
        self.view_mode = view_mode
        self.zoom_factor = clamp_zoom(zoom_factor)
        self.analyzer = analyzer
        self.gate = gate or ChangeGate()

        self.job_id: str | None = None
        self.jobs: list[str] = []
        self.last_snapshot: ScheduleSnapshot | None = None
        self.last_fetched_at: datetime | None = None
        self.rendered_snapshot: ScheduleSnapshot | None = None
        self.frame: TimelineFrame | None = None
        self.report: AnalysisReport | None = None
        self.render_count = 0

        self._listeners: list[Listener] = []
        self._analysis_task: asyncio.Task | None = None

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in self._listeners:
            try:
                listener(self)
            except Exception:
                # A broken renderer leaves the last good output in place
                logger.exception(f"View listener {listener!r} failed")

    @property
    def is_solving(self) -> bool:
        return self.last_snapshot is not None and self.last_snapshot.is_solving

    @property
    def can_stop(self) -> bool:
        """A job can only be stopped while the solver is working on it."""
        return self.job_id is not None and self.is_solving

    def select_job(self, job_id: str) -> None:
        """Switch to another job; its first snapshot renders immediately."""
        if job_id == self.job_id:
            return
        logger.debug(f"Switching from job {self.job_id} to {job_id}")
        self.job_id = job_id
        self.gate.reset()

    def update_jobs(self, jobs: list[str]) -> None:
        self.jobs = list(jobs)

    def on_snapshot(self, job_id: str, snapshot: ScheduleSnapshot) -> bool:
        """
        Handle a freshly fetched snapshot.

        Returns:
            True if the snapshot passed the change gate and was rendered
        """
        self.select_job(job_id)
        self.last_snapshot = snapshot
        self.last_fetched_at = datetime.now()

        if not self.gate.observe(fingerprint(snapshot)):
            logger.debug(f"Snapshot for job {job_id} not rendered (unchanged or unstable)")
            return False

        self.render(snapshot)
        self.request_analysis(snapshot)
        return True

    def render(self, snapshot: ScheduleSnapshot) -> None:
        """Rebuild frame and local statistics from a snapshot and notify listeners."""
        self.rendered_snapshot = snapshot
        self.frame = build_timeline_frame(snapshot, self.view_mode, self.zoom_factor)
        report = build_report(snapshot.orders)
        if self.report is not None and self.report.score_analysis is not None:
            # Keep the previous breakdown on screen until the new one arrives
            report = report.with_score_analysis(self.report.score_analysis)
        self.report = report
        self.render_count += 1
        logger.info(
            f"Rendered job {self.job_id}: {len(self.frame.rows)} rows, "
            f"{self.frame.bar_count} bars, status {snapshot.solver_status}"
        )
        self._notify()

    def _rerender(self) -> None:
        if self.last_snapshot is not None:
            self.render(self.last_snapshot)

    def set_view_mode(self, view_mode: ViewMode) -> None:
        self.view_mode = view_mode
        self._rerender()

    def set_zoom(self, zoom_factor: float) -> None:
        self.zoom_factor = clamp_zoom(zoom_factor)
        self._rerender()

    def zoom_in(self) -> None:
        self.set_zoom(_zoom_in(self.zoom_factor))

    def zoom_out(self) -> None:
        self.set_zoom(_zoom_out(self.zoom_factor))

    def request_analysis(self, snapshot: ScheduleSnapshot) -> asyncio.Task | None:
        """
        Ask the analyzer for a constraint breakdown of snapshot.

        Inside a running event loop this schedules a task and returns it; the
        result is applied whenever it arrives, even if a newer snapshot has
        been rendered meanwhile. Without a loop the call is made inline.
        """
        if self.analyzer is None:
            return None
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._analyze_now(snapshot)
            return None
        self._analysis_task = loop.create_task(self._analyze_async(snapshot))
        return self._analysis_task

    def _analyze_now(self, snapshot: ScheduleSnapshot) -> None:
        try:
            analysis = self.analyzer(snapshot)
        except SolverClientError as e:
            self.apply_analysis(error=e)
        except Exception as e:
            logger.exception("Analyzer raised unexpectedly")
            self.apply_analysis(error=e)
        else:
            self.apply_analysis(analysis=analysis)

    async def _analyze_async(self, snapshot: ScheduleSnapshot) -> None:
        try:
            analysis = await asyncio.to_thread(self.analyzer, snapshot)
        except SolverClientError as e:
            self.apply_analysis(error=e)
        except Exception as e:
            logger.exception("Analyzer raised unexpectedly")
            self.apply_analysis(error=e)
        else:
            self.apply_analysis(analysis=analysis)

    def apply_analysis(
        self, analysis: ScoreAnalysis | None = None, error: Exception | None = None
    ) -> None:
        """Merge an analysis result (or its failure) into the current report."""
        if self.report is None:
            return
        if error is not None:
            logger.warning(f"Score analysis failed: {error}")
        self.report = merge_analysis(self.report, analysis, error)
        self._notify()

    async def wait_for_analysis(self) -> None:
        """Wait for the most recently requested analysis to be applied."""
        if self._analysis_task is not None:
            await self._analysis_task
