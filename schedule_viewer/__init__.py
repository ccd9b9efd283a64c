"""Live timeline viewer for schedule solver jobs."""
from .analysis import AnalysisReport, ScheduleStatistics, build_report, compute_statistics, merge_analysis
from .change_gate import ChangeGate
from .colors import ColorGradient, assign_palette, color_for, hash_color
from .hashing import fingerprint
from .layout import TimelineFrame, build_timeline_frame
from .models import Order, RefreshMode, ScheduleSnapshot, ScoreAnalysis, ViewMode

__all__ = [
    "AnalysisReport",
    "ChangeGate",
    "ColorGradient",
    "Order",
    "RefreshMode",
    "ScheduleSnapshot",
    "ScheduleStatistics",
    "ScoreAnalysis",
    "TimelineFrame",
    "ViewMode",
    "assign_palette",
    "build_report",
    "build_timeline_frame",
    "color_for",
    "compute_statistics",
    "fingerprint",
    "hash_color",
    "merge_analysis",
]
