"""
Schedule printing and formatting utilities.

Plain-text rendition of a timeline frame and its statistics for terminals.
"""

from .analysis import AnalysisReport
from .layout import TimelineFrame
from .models import ScheduleSnapshot


def format_frame_for_printing(frame: TimelineFrame) -> str:
    """Format the rows of a frame, one line per order bar in start order."""
    if frame.is_empty:
        return "No timeline to show"

    lines: list[str] = []
    lines.append(f"Timeline: {frame.start:%Y-%m-%d %H:%M} - {frame.end:%Y-%m-%d %H:%M}")
    lines.append(f"Rows by {frame.view_mode.value}, {frame.bar_count} scheduled orders")
    lines.append("-" * 80)

    for row in frame.rows:
        lines.append(f"{row.label} ({len(row.bars)})")
        for band in row.shift_bands:
            lines.append(f"    shift {band.start:%m-%d %H:%M} - {band.end:%m-%d %H:%M}")
        for bar in sorted(row.bars, key=lambda b: b.start):
            minutes = bar.detail.get("workHours", 0)
            lines.append(f"    {bar.start:%m-%d %H:%M}  {bar.label} [{bar.color_key}] {minutes:g} min")

    return "\n".join(lines)


def format_report_for_printing(report: AnalysisReport) -> str:
    """Format the summary statistics and constraint scores."""
    stats = report.statistics
    lines = [
        f"Orders: {stats.total} (assigned {stats.assigned}, unassigned {stats.unassigned})",
        f"Work: {stats.total_work_minutes:g} min total, {stats.average_work_minutes} min average",
        f"Overtime orders: {stats.overtime}",
    ]
    if report.advisory:
        lines.append(report.advisory)
    elif report.score_analysis is not None:
        for constraint in report.score_analysis.constraints:
            lines.append(
                f"  {constraint.name}: score {constraint.score}, "
                f"{constraint.display_match_count} matches"
            )
    return "\n".join(lines)


def print_schedule(
    frame: TimelineFrame,
    report: AnalysisReport,
    snapshot: ScheduleSnapshot,
    title: str = "Schedule",
) -> None:
    """Print a formatted schedule with a title."""
    print(f"\n{title}: {snapshot.solver_status or '-'} score {snapshot.score or '-'}")
    print(format_frame_for_printing(frame))
    print(format_report_for_printing(report))
