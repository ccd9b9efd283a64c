import pytest

from schedule_viewer.change_gate import ChangeGate


def _renders(gate: ChangeGate, fingerprints: list[str]) -> list[bool]:
    return [gate.observe(f) for f in fingerprints]


def test_first_snapshot_always_renders() -> None:
    gate = ChangeGate()
    assert gate.observe("A") is True
    assert gate.last_rendered == "A"


def test_repeated_rendered_fingerprint_is_a_no_op() -> None:
    gate = ChangeGate()
    gate.observe("A")
    assert _renders(gate, ["A", "A"]) == [False, False]


def test_stable_change_renders_on_second_sighting() -> None:
    gate = ChangeGate()
    gate.observe("A")
    assert _renders(gate, ["B", "B"]) == [False, True]
    assert gate.last_rendered == "B"
    assert gate.pending_fingerprint is None


def test_unstable_changes_never_render() -> None:
    gate = ChangeGate()
    gate.observe("A")
    assert _renders(gate, ["B", "C"]) == [False, False]
    assert gate.last_rendered == "A"
    assert gate.pending_fingerprint == "C"
    assert gate.pending_count == 1


def test_returning_to_rendered_state_clears_pending() -> None:
    gate = ChangeGate()
    gate.observe("A")
    assert _renders(gate, ["B", "A", "B"]) == [False, False, False]
    assert gate.observe("B") is True


def test_reset_makes_next_snapshot_render_immediately() -> None:
    gate = ChangeGate()
    gate.observe("A")
    gate.reset()
    assert gate.observe("Z") is True


def test_threshold_is_tunable() -> None:
    gate = ChangeGate(required_stability=3)
    gate.observe("A")
    assert _renders(gate, ["B", "B", "B"]) == [False, False, True]
    with pytest.raises(ValueError):
        ChangeGate(required_stability=0)
