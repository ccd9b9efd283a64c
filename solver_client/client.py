"""HTTP client for the schedule solver backend."""
import logging
from typing import Any, Dict, List, Optional

import requests
from pydantic import ValidationError

from schedule_viewer.models import ScheduleSnapshot, ScoreAnalysis

logger = logging.getLogger(__name__)


class SolverClientError(Exception):
    """Raised when the solver backend cannot be reached or answers badly."""

    pass


class ScheduleFetchError(SolverClientError):
    """Raised when a schedule snapshot could not be fetched."""

    pass


class AnalysisUnavailableError(SolverClientError):
    """Raised when the backend refuses to analyze a schedule."""

    def __init__(self, status_code: int, message: str = ""):
        self.status_code = status_code
        super().__init__(message or f"Score analysis unavailable: {status_code}")


def clean_job_id(raw: str) -> str:
    """Strip the quotes and whitespace the backend may wrap a job id in."""
    return raw.replace('"', "").strip()


class SolverClient:
    """Client for the /schedules endpoints of the solver backend."""

    def __init__(
        self,
        base_url: str = "http://localhost:8080",
        timeout: float = 10,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    def _url(self, path: str) -> str:
        return f"{self.base_url}/schedules/{path.lstrip('/')}"

    def start_solving(self) -> str:
        """Start a solver job on the backend's default problem and return its id."""
        try:
            response = self.session.post(self._url("solve"), timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise SolverClientError(f"Could not start solving: {e}") from e

        job_id = clean_job_id(response.text)
        if not job_id:
            raise SolverClientError("Backend returned an empty job id")
        logger.info(f"Started solver job {job_id}")
        return job_id

    def list_jobs(self) -> List[str]:
        """List known job ids. Never raises: failures yield an empty list."""
        try:
            response = self.session.get(self._url("list"), timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Could not list jobs: {e}")
            return []

        if not isinstance(data, list):
            logger.warning(f"Unexpected job list payload: {data!r}")
            return []
        return [clean_job_id(str(job_id)) for job_id in data]

    def _get_snapshot(self, path: str, job_id: str) -> ScheduleSnapshot:
        try:
            response = self.session.get(self._url(path), timeout=self.timeout)
            response.raise_for_status()
            return ScheduleSnapshot.model_validate(response.json())
        except requests.RequestException as e:
            raise ScheduleFetchError(f"Fetching schedule {job_id} failed: {e}") from e
        except (ValueError, TypeError, AttributeError, ValidationError) as e:
            raise ScheduleFetchError(f"Schedule {job_id} is not valid: {e}") from e

    def get_schedule(self, job_id: str) -> ScheduleSnapshot:
        """Fetch the current (possibly intermediate) schedule of a job."""
        return self._get_snapshot(job_id, job_id)

    def get_status(self, job_id: str) -> ScheduleSnapshot:
        """Fetch only score and solver status of a job."""
        return self._get_snapshot(f"{job_id}/status", job_id)

    def stop_solving(self, job_id: str) -> bool:
        """Ask the backend to terminate a job early. Failures are logged, not raised."""
        try:
            response = self.session.delete(self._url(job_id), timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning(f"Could not stop job {job_id}: {e}")
            return False
        logger.info(f"Stopped solver job {job_id}")
        return True

    def analyze(self, snapshot: ScheduleSnapshot | Dict[str, Any]) -> ScoreAnalysis:
        """Request the constraint breakdown for a schedule."""
        body = snapshot.to_wire() if isinstance(snapshot, ScheduleSnapshot) else snapshot
        try:
            response = self.session.put(self._url("analyze"), json=body, timeout=self.timeout)
        except requests.RequestException as e:
            raise SolverClientError(str(e)) from e

        if not response.ok:
            raise AnalysisUnavailableError(response.status_code)
        try:
            return ScoreAnalysis.model_validate(response.json())
        except (ValueError, TypeError, AttributeError, ValidationError) as e:
            raise SolverClientError(f"Invalid score analysis: {e}") from e
