from schedule_viewer.models import (
    UNASSIGNED,
    ConstraintAnalysis,
    ConstraintMatch,
    Order,
    ScheduleSnapshot,
    Shift,
    is_active_status,
)


def test_snapshot_parses_camel_case_and_tolerates_nulls() -> None:
    snapshot = ScheduleSnapshot.model_validate(
        {"solverStatus": "NOT_SOLVING", "employees": None, "orders": None, "extra": 1}
    )
    assert snapshot.solver_status == "NOT_SOLVING"
    assert snapshot.employees == []
    assert snapshot.orders == []
    assert not snapshot.is_solving


def test_active_status_requires_solving_active() -> None:
    assert is_active_status("SOLVING_ACTIVE")
    assert is_active_status("solving_active")
    assert not is_active_status("NOT_SOLVING")
    assert not is_active_status("SOLVING_SCHEDULED")
    assert not is_active_status(None)


def test_order_is_assigned_only_with_all_three_references() -> None:
    full = Order.model_validate(
        {"id": 7, "employee": {"name": "Ann"}, "line": {"name": "L1"}, "scheduledDateTime": "2030-04-01T01:00:00"}
    )
    no_time = Order.model_validate({"id": "8", "employee": {"name": "Ann"}, "line": {"name": "L1"}})
    assert full.id == "7"
    assert full.is_assigned
    assert not no_time.is_assigned
    assert Order().employee_name == UNASSIGNED
    assert Order().line_name == UNASSIGNED


def test_to_wire_round_trips_to_camel_case(snapshot) -> None:
    wire = snapshot.to_wire()
    assert wire["solverStatus"] == "SOLVING_ACTIVE"
    assert wire["dateTimes"][0] == "2030-04-01T00:00:00"
    assert wire["orders"][0]["scheduledDateTime"] == "2030-04-01T10:00:00"
    assert ScheduleSnapshot.model_validate(wire) == snapshot


def test_constraint_match_count_prefers_explicit_count() -> None:
    matches = [{"score": "-1soft", "justification": "x"}] * 3
    assert ConstraintAnalysis.model_validate({"matches": matches}).display_match_count == 3
    assert ConstraintAnalysis.model_validate({"matchCount": 12, "matches": matches}).display_match_count == 12
    assert ConstraintAnalysis().display_match_count == 0


def test_structured_justification_is_shown_as_json() -> None:
    match = ConstraintMatch.model_validate({"justification": {"order": "o1"}})
    assert match.justification_text == '{"order": "o1"}'
    assert ConstraintMatch().justification_text == ""


def test_non_iso_temporal_values_are_kept_as_text() -> None:
    order = Order.model_validate(
        {"id": "o1", "scheduledDateTime": [2030, 4, 1, 10, 0], "earliestDate": 1900000000}
    )
    assert order.scheduled_date_time == "[2030, 4, 1, 10, 0]"
    assert order.scheduled_at is None
    assert order.earliest_date == "1900000000"

    shift = Shift.model_validate({"start": [9, 0], "end": "17:00"})
    assert shift.start_time is None
    assert shift.end_time == "17:00"
