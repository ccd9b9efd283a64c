"""Configuration for the schedule viewer."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .layout import DEFAULT_ZOOM, MAX_ZOOM, MIN_ZOOM
from .models import RefreshMode, ViewMode
from .polling import DEFAULT_POLL_INTERVAL_MS

# Load .env file if present
load_dotenv()


@dataclass
class ViewerConfig:
    """Configuration for connecting to the solver and drawing the timeline."""

    base_url: str = "http://localhost:8080"
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS
    refresh_mode: RefreshMode = RefreshMode.ALWAYS
    view_mode: ViewMode = ViewMode.LINE
    zoom_factor: float = DEFAULT_ZOOM
    request_timeout: float = 10  # Seconds per HTTP request
    output: Path = Path("schedule.html")

    def __post_init__(self) -> None:
        if self.poll_interval_ms <= 0:
            raise ValueError(f"Poll interval must be positive, got {self.poll_interval_ms}")
        if not MIN_ZOOM <= self.zoom_factor <= MAX_ZOOM:
            raise ValueError(f"Zoom must be between {MIN_ZOOM} and {MAX_ZOOM}, got {self.zoom_factor}")

    @classmethod
    def from_env(cls) -> "ViewerConfig":
        """Load configuration from environment variables."""
        return cls(
            base_url=os.getenv("SOLVER_URL", "http://localhost:8080"),
            poll_interval_ms=int(os.getenv("VIEWER_POLL_INTERVAL_MS", str(DEFAULT_POLL_INTERVAL_MS))),
            refresh_mode=RefreshMode(os.getenv("VIEWER_REFRESH_MODE", RefreshMode.ALWAYS.value)),
            view_mode=ViewMode(os.getenv("VIEWER_VIEW_MODE", ViewMode.LINE.value)),
            zoom_factor=float(os.getenv("VIEWER_ZOOM", str(DEFAULT_ZOOM))),
            request_timeout=float(os.getenv("VIEWER_REQUEST_TIMEOUT", "10")),
            output=Path(os.getenv("VIEWER_OUTPUT", "schedule.html")),
        )
