"""
HTML timeline generator for solver schedules.

This module turns a TimelineFrame and its AnalysisReport into a standalone
HTML page: status header, color legend, day ticks, one row per employee or
line with absolutely positioned order bars and shift bands, summary boxes and
the constraint breakdown.
"""

from html import escape
from pathlib import Path

from .analysis import AnalysisReport, displayed_matches, truncate_text
from .layout import OrderBar, ShiftBand, TimelineFrame, TimelineRow, format_zoom
from .models import ScheduleSnapshot

ROW_LABEL_WIDTH_PX = 160


def generate_html_timeline(
    frame: TimelineFrame,
    report: AnalysisReport | None = None,
    snapshot: ScheduleSnapshot | None = None,
    job_id: str | None = None,
    title: str = "Schedule Timeline",
    refresh_seconds: int | None = None,
) -> str:
    """
    Generate an HTML page showing the timeline frame.

    Args:
        frame: Laid out timeline
        report: Statistics and score analysis to show below the chart
        snapshot: Snapshot the frame came from, for score and status
        job_id: Solver job shown in the header
        title: Page title
        refresh_seconds: If set, the page reloads itself at this interval

    Returns:
        Complete HTML string with embedded CSS styling
    """
    header = _format_status_header(snapshot, job_id, frame)
    analysis_html = _format_analysis(report) if report is not None else ""

    if frame.is_empty:
        chart_html = '<div class="no-orders">No timeline to show</div>'
    else:
        chart_html = _format_chart(frame)

    refresh_meta = (
        f'<meta http-equiv="refresh" content="{int(refresh_seconds)}">' if refresh_seconds else ""
    )

    return f"""<!DOCTYPE html>
<html>
<head>
    <title>{escape(title)}</title>
    <meta charset="utf-8">
    {refresh_meta}
    <style>
        {_get_css_styles()}
    </style>
</head>
<body>
    <div class="container">
        <h1>{escape(title)}</h1>
        {header}
        {chart_html}
        {analysis_html}
    </div>
</body>
</html>"""


def _format_status_header(
    snapshot: ScheduleSnapshot | None, job_id: str | None, frame: TimelineFrame
) -> str:
    status = escape(str(snapshot.solver_status or "-")) if snapshot else "-"
    score = escape(str(snapshot.score or "-")) if snapshot else "-"
    return f"""<div class="schedule-info">
            <p><strong>Job:</strong> {escape(job_id or "-")}</p>
            <p><strong>Status:</strong> {status}</p>
            <p><strong>Score:</strong> {score}</p>
            <p><strong>View:</strong> {frame.view_mode.value} &middot; <strong>Zoom:</strong> {format_zoom(frame.zoom_factor)}</p>
        </div>"""


def _format_legend(frame: TimelineFrame) -> str:
    items = "".join(
        f'<div class="legend-item"><span class="legend-swatch" style="background: {entry.color.css};"></span>'
        f'<span class="legend-label">{escape(entry.key)}</span></div>'
        for entry in frame.legend
    )
    return f'<div class="legend">{items}</div>'


def _format_chart(frame: TimelineFrame) -> str:
    width = frame.timeline_width
    ticks = "".join(
        f'<div class="tick" style="left: {tick.left}px; width: {tick.width}px;">{tick.label}</div>'
        for tick in frame.ticks
    )
    rows = "\n".join(_format_row(row, width) for row in frame.rows)
    return f"""{_format_legend(frame)}
        <div class="gantt">
            <div class="row timeline">
                <div class="label"></div>
                <div class="bars" style="width: {width}px;">{ticks}</div>
            </div>
            {rows}
        </div>"""


def _format_row(row: TimelineRow, width: int) -> str:
    bands = "".join(_format_shift_band(band) for band in row.shift_bands)
    bars = "".join(_format_bar(bar) for bar in row.bars)
    return (
        f'<div class="row"><div class="label">{escape(row.label)}</div>'
        f'<div class="bars" style="width: {width}px;">{bands}{bars}</div></div>'
    )


def _format_shift_band(band: ShiftBand) -> str:
    return f'<div class="shift-bg" style="left: {band.left:.2f}px; width: {band.width:.2f}px;"></div>'


def _format_bar(bar: OrderBar) -> str:
    tooltip = escape("\n".join(bar.detail_lines), quote=True)
    return (
        f'<div class="bar" title="{tooltip}" '
        f'style="left: {bar.left:.2f}px; width: {bar.width:.2f}px; background: {bar.color.css};">'
        f"{escape(bar.label)}</div>"
    )


def _format_analysis(report: AnalysisReport) -> str:
    stats = report.statistics
    summary = "".join(
        f'<div class="item"><strong>{value}</strong><div class="small">{label}</div></div>'
        for label, value in (
            ("Total orders", stats.total),
            ("Assigned", stats.assigned),
            ("Unassigned", stats.unassigned),
            ("Total work (min)", f"{stats.total_work_minutes:g}"),
            ("Average work (min)", stats.average_work_minutes),
            ("Overtime orders", stats.overtime),
        )
    )
    per_employee = "".join(f"<div>{escape(k)}: {v}</div>" for k, v in stats.per_employee.items())
    per_line = "".join(f"<div>{escape(k)}: {v}</div>" for k, v in stats.per_line.items())

    return f"""<div class="summary">{summary}</div>
        <div class="charts">
            <div class="panel"><strong>Orders per employee</strong><div>{per_employee}</div></div>
            <div class="panel"><strong>Orders per line</strong><div>{per_line}</div></div>
        </div>
        <div class="score-analysis">{_format_score_analysis(report)}</div>"""


def _format_score_analysis(report: AnalysisReport) -> str:
    if report.advisory:
        return f'<div class="advisory">{escape(report.advisory)}</div>'
    analysis = report.score_analysis
    if analysis is None:
        return ""

    parts = [
        f'<div class="analysis-overview"><div><strong>Score:</strong> {escape(str(analysis.score))}</div>'
        f"<div><strong>Initialized:</strong> {escape(str(analysis.initialized))}</div></div>"
    ]
    if analysis.constraints:
        parts.append('<div class="constraints">')
        for constraint in analysis.constraints:
            parts.append(
                f'<div class="constraint"><strong>{escape(constraint.name)}</strong> '
                f'<span class="muted">weight: {escape(str(constraint.weight))} &middot; '
                f"score: {escape(str(constraint.score))} &middot; "
                f"matches: {constraint.display_match_count}</span>"
            )
            shown, hidden = displayed_matches(constraint)
            if shown:
                parts.append('<ul class="matches">')
                for match in shown:
                    justification = escape(truncate_text(match.justification_text))
                    parts.append(f"<li><code>{escape(str(match.score))}</code> {justification}</li>")
                if hidden:
                    parts.append(f"<li>... {hidden} more</li>")
                parts.append("</ul>")
            parts.append("</div>")
        parts.append("</div>")
    return "".join(parts)


def _get_css_styles() -> str:
    """Return CSS styles for the timeline page."""
    return f"""
        body {{
            font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif;
            margin: 0;
            padding: 20px;
            background-color: #f5f5f5;
        }}

        .container {{
            margin: 0 auto;
            background-color: white;
            padding: 20px;
            border-radius: 8px;
            box-shadow: 0 2px 10px rgba(0,0,0,0.1);
        }}

        h1 {{
            color: #333;
            margin-bottom: 20px;
            border-bottom: 3px solid #4CAF50;
            padding-bottom: 10px;
        }}

        .schedule-info {{
            background-color: #f9f9f9;
            padding: 10px 15px;
            border-radius: 5px;
            margin-bottom: 20px;
            border-left: 4px solid #4CAF50;
            display: flex;
            gap: 24px;
        }}

        .schedule-info p {{
            margin: 5px 0;
            color: #555;
        }}

        .no-orders {{
            text-align: center;
            color: #666;
            font-size: 18px;
            padding: 40px;
        }}

        .legend {{
            display: flex;
            flex-wrap: wrap;
            gap: 12px;
            margin-bottom: 12px;
        }}

        .legend-item {{
            display: flex;
            align-items: center;
            font-size: 13px;
        }}

        .legend-swatch {{
            display: inline-block;
            width: 20px;
            height: 14px;
            border-radius: 3px;
            margin-right: 6px;
        }}

        .gantt {{
            overflow-x: auto;
            border: 1px solid #ddd;
        }}

        .row {{
            display: flex;
            border-bottom: 1px solid #eee;
            min-height: 32px;
        }}

        .row .label {{
            flex: 0 0 {ROW_LABEL_WIDTH_PX}px;
            position: sticky;
            left: 0;
            z-index: 2;
            background-color: #f8f9fa;
            font-weight: bold;
            padding: 6px;
            color: #555;
        }}

        .row .bars {{
            position: relative;
            flex: 0 0 auto;
        }}

        .tick {{
            position: absolute;
            top: 0;
            bottom: 0;
            border-left: 1px solid #ccc;
            font-size: 12px;
            padding: 6px 4px;
            color: #555;
            box-sizing: border-box;
        }}

        .shift-bg {{
            position: absolute;
            top: 0;
            bottom: 0;
            background-color: rgba(76, 175, 80, 0.12);
        }}

        .bar {{
            position: absolute;
            top: 4px;
            height: 24px;
            border-radius: 3px;
            color: white;
            font-size: 11px;
            line-height: 24px;
            overflow: hidden;
            white-space: nowrap;
            box-sizing: border-box;
            padding: 0 3px;
        }}

        .summary {{
            display: flex;
            gap: 12px;
            margin: 20px 0;
        }}

        .summary .item {{
            background-color: #f9f9f9;
            padding: 10px 15px;
            border-radius: 5px;
            text-align: center;
        }}

        .small, .muted {{
            font-size: 12px;
            color: #777;
        }}

        .charts {{
            display: flex;
            gap: 20px;
        }}

        .panel {{
            background-color: #f9f9f9;
            padding: 10px 15px;
            border-radius: 5px;
            border-left: 4px solid #2196F3;
        }}

        .score-analysis {{
            margin-top: 20px;
        }}

        .constraint {{
            margin: 8px 0;
        }}

        .advisory {{
            color: #a94442;
        }}
    """


def save_html_timeline(
    frame: TimelineFrame,
    file_path: str | Path,
    report: AnalysisReport | None = None,
    snapshot: ScheduleSnapshot | None = None,
    job_id: str | None = None,
    title: str = "Schedule Timeline",
    refresh_seconds: int | None = None,
) -> None:
    """
    Save the HTML timeline to a file.

    The page is written to a temporary file first and then moved into place,
    so a browser reloading it never sees a half-written document.
    """
    html_content = generate_html_timeline(
        frame=frame,
        report=report,
        snapshot=snapshot,
        job_id=job_id,
        title=title,
        refresh_seconds=refresh_seconds,
    )

    path = Path(file_path)
    tmp_path = path.with_name(path.name + ".tmp")
    with open(tmp_path, "w", encoding="utf-8") as f:
        f.write(html_content)
    tmp_path.replace(path)
