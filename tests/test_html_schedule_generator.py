from schedule_viewer.analysis import build_report, merge_analysis
from schedule_viewer.html_schedule_generator import generate_html_timeline, save_html_timeline
from schedule_viewer.layout import build_timeline_frame
from schedule_viewer.models import ScheduleSnapshot, ScoreAnalysis, ViewMode
from solver_client import AnalysisUnavailableError


def _analysis(match_total: int) -> ScoreAnalysis:
    return ScoreAnalysis.model_validate(
        {
            "score": "-1hard/-120soft",
            "initialized": True,
            "constraints": [
                {
                    "name": "Line overlap",
                    "weight": "1hard",
                    "score": "-1hard",
                    "matches": [
                        {"score": "-1hard", "justification": f"o{i} <overlaps>"} for i in range(match_total)
                    ],
                }
            ],
        }
    )


def test_page_contains_rows_bars_and_status(snapshot) -> None:
    frame = build_timeline_frame(snapshot, ViewMode.EMPLOYEE, zoom_factor=1)
    html = generate_html_timeline(frame, build_report(snapshot.orders), snapshot, job_id="job-1")

    assert "<!DOCTYPE html>" in html
    assert "job-1" in html
    assert "SOLVING_ACTIVE" in html
    assert 'class="label">Ann<' in html
    assert html.count('class="bar"') == 2
    assert html.count('class="shift-bg"') == 3
    assert "linear-gradient(90deg" in html
    assert "Overtime orders" in html
    assert "http-equiv" not in html


def test_empty_frame_shows_placeholder() -> None:
    frame = build_timeline_frame(ScheduleSnapshot())
    html = generate_html_timeline(frame)
    assert "No timeline to show" in html


def test_constraint_matches_are_capped_and_escaped(snapshot) -> None:
    frame = build_timeline_frame(snapshot)
    report = merge_analysis(build_report(snapshot.orders), analysis=_analysis(12))
    html = generate_html_timeline(frame, report, snapshot)

    assert "Line overlap" in html
    assert html.count("<li><code>") == 10
    assert "... 2 more" in html
    assert "&lt;overlaps&gt;" in html
    assert "<overlaps>" not in html


def test_advisory_replaces_breakdown(snapshot) -> None:
    frame = build_timeline_frame(snapshot)
    report = merge_analysis(build_report(snapshot.orders), error=AnalysisUnavailableError(503))
    html = generate_html_timeline(frame, report, snapshot)
    assert "Score analysis unavailable: 503" in html


def test_save_writes_refreshing_page(tmp_path, snapshot) -> None:
    frame = build_timeline_frame(snapshot)
    target = tmp_path / "live.html"

    save_html_timeline(frame, target, snapshot=snapshot, job_id="job-1", refresh_seconds=2)

    html = target.read_text(encoding="utf-8")
    assert '<meta http-equiv="refresh" content="2">' in html
    assert not (tmp_path / "live.html.tmp").exists()
