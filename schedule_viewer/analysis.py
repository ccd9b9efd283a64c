"""
Schedule statistics and score-analysis aggregation.

Local statistics are computed straight from the orders. The constraint
breakdown comes from the solver backend and is merged in when (and if) it
arrives; a failed analysis only produces an advisory message.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field, replace

from .models import ConstraintAnalysis, ConstraintMatch, Order, ScoreAnalysis
from .temporal import round_half_up, time_of_day

# Display limits for constraint matches
MAX_DISPLAYED_MATCHES = 10
MAX_JUSTIFICATION_LENGTH = 200


@dataclass(frozen=True)
class ScheduleStatistics:
    total: int = 0
    assigned: int = 0
    unassigned: int = 0
    total_work_minutes: float = 0
    average_work_minutes: int = 0
    overtime: int = 0
    per_employee: dict[str, int] = field(default_factory=dict)
    per_line: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class AnalysisReport:
    """Presentation model combining local statistics and the remote breakdown."""

    statistics: ScheduleStatistics
    score_analysis: ScoreAnalysis | None = None
    advisory: str | None = None

    def with_score_analysis(self, analysis: ScoreAnalysis) -> "AnalysisReport":
        return replace(self, score_analysis=analysis, advisory=None)

    def with_advisory(self, message: str) -> "AnalysisReport":
        return replace(self, advisory=message)


def is_overtime(order: Order) -> bool:
    """
    Check if an order is scheduled outside its employee's shift window.

    Times of day are compared as zero-padded HH:MM strings. A shift whose start
    equals its end imposes no restriction. When the start is after the end the
    shift wraps midnight and the in-shift region is [start, 24:00) plus
    [00:00, end].
    """
    if order.employee is None or order.employee.shift is None:
        return False
    at = scheduled_time_of_day(order)
    if at is None:
        return False

    start = order.employee.shift.start_time
    end = order.employee.shift.end_time
    if start is None or end is None:
        return False

    if start == end:
        return False
    if start < end:
        return not (start <= at <= end)
    return not (at >= start or at <= end)


def compute_statistics(orders: Iterable[Order]) -> ScheduleStatistics:
    """Summarize orders: assignment, work minutes, per-entity counts and overtime."""
    orders = list(orders)
    total = len(orders)
    assigned = sum(1 for o in orders if o.is_assigned)
    total_work = sum(o.work_hours or 0 for o in orders)

    per_employee: dict[str, int] = {}
    per_line: dict[str, int] = {}
    overtime = 0
    for order in orders:
        per_employee[order.employee_name] = per_employee.get(order.employee_name, 0) + 1
        per_line[order.line_name] = per_line.get(order.line_name, 0) + 1
        if is_overtime(order):
            overtime += 1

    return ScheduleStatistics(
        total=total,
        assigned=assigned,
        unassigned=total - assigned,
        total_work_minutes=total_work,
        average_work_minutes=round_half_up(total_work / total) if total else 0,
        overtime=overtime,
        per_employee=per_employee,
        per_line=per_line,
    )


def truncate_text(text: str, limit: int = MAX_JUSTIFICATION_LENGTH) -> str:
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def displayed_matches(
    constraint: ConstraintAnalysis, limit: int = MAX_DISPLAYED_MATCHES
) -> tuple[list[ConstraintMatch], int]:
    """
    Matches to show for a constraint and how many were left out.

    The constraint itself keeps the full list; this only decides presentation.
    """
    matches = constraint.matches or []
    return matches[:limit], max(0, len(matches) - limit)


def build_report(orders: Iterable[Order]) -> AnalysisReport:
    """Report with local statistics only; the remote breakdown is merged later."""
    return AnalysisReport(statistics=compute_statistics(orders))


def merge_analysis(
    report: AnalysisReport,
    analysis: ScoreAnalysis | None = None,
    error: Exception | None = None,
) -> AnalysisReport:
    """
    Merge the backend's score analysis, or the reason it is missing, into a report.

    Args:
        report: Report holding the local statistics
        analysis: Parsed PUT /schedules/analyze response
        error: Failure raised while fetching the analysis

    Returns:
        A new report; the input is left untouched
    """
    if analysis is not None:
        return report.with_score_analysis(analysis)
    if error is not None:
        status_code = getattr(error, "status_code", None)
        if status_code is not None:
            return report.with_advisory(f"Score analysis unavailable: {status_code}")
        return report.with_advisory(f"Analyze call failed: {error}")
    return report


def scheduled_time_of_day(order: Order) -> str | None:
    """HH:MM part of an order's scheduled time, if it has one."""
    return time_of_day(order.scheduled_at)
