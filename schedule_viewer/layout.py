"""
Timeline layout engine.

This module turns a ScheduleSnapshot into a TimelineFrame: rows of order bars,
employee shift bands, daily ticks and a color legend, all in pixels. The frame
is a pure function of (snapshot, view mode, zoom); renderers only position
what is computed here.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Any

from .colors import ColorGradient, assign_palette, color_for
from .models import (
    UNASSIGNED,
    UNNAMED,
    Employee,
    Line,
    Order,
    ScheduleSnapshot,
    Shift,
    ViewMode,
)
from .temporal import (
    MINUTES_PER_DAY,
    minutes_between,
    minutes_of_day,
    parse_local_datetime,
    round_half_up,
)

# Zoom limits and step
MIN_ZOOM = 0.25
MAX_ZOOM = 4.0
ZOOM_STEP = 1.25
DEFAULT_ZOOM = 4.0

# Base horizontal scale: 120px per visible day, kept within [160, 600]
PX_PER_SPAN_DAY = 120
MIN_PX_PER_DAY = 160
MAX_PX_PER_DAY = 600

MIN_BAR_MINUTES = 1
MIN_SHIFT_BAND_PX = 2


def clamp_zoom(zoom_factor: float) -> float:
    """Clamp a zoom factor to the supported range."""
    return max(MIN_ZOOM, min(MAX_ZOOM, float(zoom_factor)))


def zoom_in(zoom_factor: float) -> float:
    return min(MAX_ZOOM, clamp_zoom(zoom_factor) * ZOOM_STEP)


def zoom_out(zoom_factor: float) -> float:
    return max(MIN_ZOOM, clamp_zoom(zoom_factor) / ZOOM_STEP)


def format_zoom(zoom_factor: float) -> str:
    """Zoom as a percentage label, e.g. 400%."""
    return f"{round_half_up(zoom_factor * 100)}%"


@dataclass(frozen=True)
class DayTick:
    """Header cell for one local calendar day."""

    day: date
    left: int
    width: int

    @property
    def label(self) -> str:
        return self.day.isoformat()


@dataclass(frozen=True)
class ShiftBand:
    """Visible part of one occurrence of an employee's shift."""

    start: datetime
    end: datetime
    left: float
    width: float


@dataclass(frozen=True)
class OrderBar:
    """One scheduled order, positioned on its row."""

    left: float
    width: float
    color: ColorGradient
    color_key: str
    label: str
    start: datetime
    detail: dict[str, Any] = field(default_factory=dict)

    @property
    def detail_lines(self) -> list[str]:
        """Hover-card lines describing the order."""
        d = self.detail
        employee = (d.get("employee") or {}).get("name") or UNASSIGNED
        line = (d.get("line") or {}).get("name") or UNASSIGNED
        return [
            f"{d.get('productName') or ''} ({d.get('quantity', 0)})",
            f"Work: {d.get('workHours', 0):g} min",
            f"Scheduled: {d.get('scheduledDateTime') or '<unscheduled>'}",
            f"Employee: {employee}",
            f"Line: {line}",
            f"Required skill: {d.get('requiredSkill') or '-'}",
            f"Window: {d.get('earliestDate') or '-'} -> {d.get('latestDate') or '-'}",
        ]


@dataclass(frozen=True)
class TimelineRow:
    key: str
    label: str
    bars: tuple[OrderBar, ...] = ()
    shift_bands: tuple[ShiftBand, ...] = ()


@dataclass(frozen=True)
class LegendEntry:
    key: str
    color: ColorGradient


@dataclass(frozen=True)
class TimelineFrame:
    """Complete, renderer-ready geometry for one view of a snapshot."""

    view_mode: ViewMode
    zoom_factor: float
    start: datetime | None = None
    end: datetime | None = None
    px_per_day: float = 0
    px_per_minute: float = 0
    ticks: tuple[DayTick, ...] = ()
    rows: tuple[TimelineRow, ...] = ()
    legend: tuple[LegendEntry, ...] = ()

    @classmethod
    def empty(cls, view_mode: ViewMode, zoom_factor: float) -> "TimelineFrame":
        return cls(view_mode=view_mode, zoom_factor=zoom_factor)

    @property
    def is_empty(self) -> bool:
        return self.start is None

    @property
    def timeline_width(self) -> int:
        return sum(tick.width for tick in self.ticks)

    @property
    def bar_count(self) -> int:
        return sum(len(row.bars) for row in self.rows)

    def row(self, key: str) -> TimelineRow | None:
        return next((r for r in self.rows if r.key == key), None)


def timeline_bounds(date_times: list[str]) -> tuple[datetime, datetime] | None:
    """First and last dateTimes as naive local datetimes, or None if unusable."""
    if not date_times:
        return None
    t0 = parse_local_datetime(date_times[0])
    t1 = parse_local_datetime(date_times[-1])
    if t0 is None or t1 is None:
        return None
    return t0, t1


def pixels_per_day(t0: datetime, t1: datetime) -> int:
    days_span = max(1, round_half_up((t1 - t0).total_seconds() / 86400))
    return max(MIN_PX_PER_DAY, min(MAX_PX_PER_DAY, PX_PER_SPAN_DAY * days_span))


def _row_key(order: Order, view_mode: ViewMode) -> str:
    if view_mode is ViewMode.EMPLOYEE:
        return order.employee_name
    return order.line_name


def _legend_key(order: Order, view_mode: ViewMode) -> str:
    # Colors encode the dimension that is not used for rows
    if view_mode is ViewMode.EMPLOYEE:
        return order.line_name
    return order.employee_name


def _color_key(order: Order, view_mode: ViewMode) -> str:
    entity: Employee | Line | None = order.line if view_mode is ViewMode.EMPLOYEE else order.employee
    return (entity.name if entity else "") or order.product_name or order.id or UNASSIGNED


def _day_ticks(t0: datetime, t1: datetime, px_per_day: float, zoom: float) -> tuple[DayTick, ...]:
    width = round_half_up(px_per_day * zoom)
    ticks: list[DayTick] = []
    day = t0.date()
    while day <= t1.date():
        ticks.append(DayTick(day=day, left=len(ticks) * width, width=width))
        day += timedelta(days=1)
    return tuple(ticks)


def _shift_bands(
    shift: Shift,
    t0: datetime,
    t1: datetime,
    px_per_minute: float,
    zoom: float,
) -> tuple[ShiftBand, ...]:
    """
    Lay out every occurrence of a shift that overlaps [t0, t1].

    Occurrences are anchored on each day from the day before t0 through t1's
    date, so a night shift that began the previous evening still shows its
    early-morning tail. An end at or before the start means the shift runs
    past midnight.
    """
    start_minute = minutes_of_day(shift.start)
    end_minute = minutes_of_day(shift.end)
    if start_minute is None or end_minute is None:
        return ()

    duration = end_minute - start_minute
    if duration <= 0:
        duration += MINUTES_PER_DAY

    bands: list[ShiftBand] = []
    day = t0.date() - timedelta(days=1)
    while day <= t1.date():
        shift_start = datetime.combine(day, time(start_minute // 60, start_minute % 60))
        shift_end = shift_start + timedelta(minutes=duration)
        day += timedelta(days=1)

        if shift_end <= t0 or shift_start >= t1:
            continue
        visible_start = max(shift_start, t0)
        visible_end = min(shift_end, t1)
        if visible_end <= visible_start:
            continue

        left = minutes_between(t0, visible_start) * px_per_minute * zoom
        width = minutes_between(visible_start, visible_end) * px_per_minute * zoom
        bands.append(
            ShiftBand(
                start=visible_start,
                end=visible_end,
                left=left,
                width=max(MIN_SHIFT_BAND_PX, width),
            )
        )
    return tuple(bands)


def _order_bar(
    order: Order,
    t0: datetime,
    px_per_minute: float,
    zoom: float,
    view_mode: ViewMode,
    palette: dict[str, ColorGradient],
) -> OrderBar | None:
    start = order.scheduled_at
    if start is None:
        return None

    left_minutes = round_half_up(minutes_between(t0, start))
    width_minutes = max(MIN_BAR_MINUTES, round_half_up(order.work_hours))
    color_key = _color_key(order, view_mode)
    return OrderBar(
        left=left_minutes * px_per_minute * zoom,
        width=width_minutes * px_per_minute * zoom,
        color=color_for(color_key, palette),
        color_key=color_key,
        label=order.product_name or "",
        start=start,
        detail=order.to_wire(),
    )


def build_timeline_frame(
    snapshot: ScheduleSnapshot,
    view_mode: ViewMode = ViewMode.LINE,
    zoom_factor: float = DEFAULT_ZOOM,
) -> TimelineFrame:
    """
    Lay out a snapshot as a Gantt timeline.

    Args:
        snapshot: The schedule to draw
        view_mode: Group rows by employee or by production line
        zoom_factor: Horizontal scale multiplier, clamped to [0.25, 4.0]

    Returns:
        A TimelineFrame; empty when dateTimes is missing or unparseable
    """
    zoom = clamp_zoom(zoom_factor)
    bounds = timeline_bounds(snapshot.date_times)
    if bounds is None:
        return TimelineFrame.empty(view_mode, zoom)
    t0, t1 = bounds

    px_per_day = pixels_per_day(t0, t1)
    px_per_minute = px_per_day / MINUTES_PER_DAY

    entities: list[Employee] | list[Line]
    entities = snapshot.employees if view_mode is ViewMode.EMPLOYEE else snapshot.lines
    row_keys = [entity.name or UNNAMED for entity in entities]

    orders_by_row: dict[str, list[Order]] = {}
    for order in snapshot.orders:
        orders_by_row.setdefault(_row_key(order, view_mode), []).append(order)

    legend_source = [_legend_key(order, view_mode) for order in snapshot.orders] or row_keys
    palette = assign_palette(legend_source)

    rows: list[TimelineRow] = []
    for key, entity in zip(row_keys, entities):
        bars = []
        for order in orders_by_row.get(key, []):
            bar = _order_bar(order, t0, px_per_minute, zoom, view_mode, palette)
            if bar is not None:
                bars.append(bar)

        bands: tuple[ShiftBand, ...] = ()
        if view_mode is ViewMode.EMPLOYEE and isinstance(entity, Employee) and entity.shift:
            bands = _shift_bands(entity.shift, t0, t1, px_per_minute, zoom)

        rows.append(TimelineRow(key=key, label=key, bars=tuple(bars), shift_bands=bands))

    return TimelineFrame(
        view_mode=view_mode,
        zoom_factor=zoom,
        start=t0,
        end=t1,
        px_per_day=px_per_day,
        px_per_minute=px_per_minute,
        ticks=_day_ticks(t0, t1, px_per_day, zoom),
        rows=tuple(rows),
        legend=tuple(LegendEntry(key=k, color=c) for k, c in palette.items()),
    )
