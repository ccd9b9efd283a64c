"""HTTP access to the schedule solver backend."""
from .client import (
    AnalysisUnavailableError,
    ScheduleFetchError,
    SolverClient,
    SolverClientError,
    clean_job_id,
)

__all__ = [
    "AnalysisUnavailableError",
    "ScheduleFetchError",
    "SolverClient",
    "SolverClientError",
    "clean_job_id",
]
