import copy

from schedule_viewer.hashing import canonical_json, fingerprint
from schedule_viewer.models import ScheduleSnapshot


def _reversed_keys(value):
    if isinstance(value, dict):
        return {k: _reversed_keys(value[k]) for k in reversed(list(value))}
    if isinstance(value, list):
        return [_reversed_keys(v) for v in value]
    return value


def test_canonical_json_sorts_keys_at_every_level() -> None:
    assert canonical_json({"b": 1, "a": {"d": 2, "c": [3, {"f": 4, "e": 5}]}}) == (
        '{"a":{"c":[3,{"e":5,"f":4}],"d":2},"b":1}'
    )


def test_fingerprint_ignores_key_order(snapshot_payload) -> None:
    assert fingerprint(snapshot_payload) == fingerprint(_reversed_keys(snapshot_payload))


def test_fingerprint_ignores_fields_outside_the_render_set(snapshot_payload) -> None:
    noisy = copy.deepcopy(snapshot_payload)
    noisy["id"] = "another-id"
    noisy["problemFactVersion"] = 42
    assert fingerprint(snapshot_payload) == fingerprint(noisy)


def test_fingerprint_changes_with_rendered_fields(snapshot_payload) -> None:
    moved = copy.deepcopy(snapshot_payload)
    moved["orders"][0]["scheduledDateTime"] = "2030-04-01T11:00:00"
    rescored = copy.deepcopy(snapshot_payload)
    rescored["score"] = "0hard/-100soft"
    assert fingerprint(snapshot_payload) != fingerprint(moved)
    assert fingerprint(snapshot_payload) != fingerprint(rescored)


def test_sequence_order_is_significant(snapshot_payload) -> None:
    swapped = copy.deepcopy(snapshot_payload)
    swapped["orders"].reverse()
    assert fingerprint(snapshot_payload) != fingerprint(swapped)


def test_model_and_payload_fingerprints_are_stable(snapshot_payload) -> None:
    model = ScheduleSnapshot.model_validate(snapshot_payload)
    assert fingerprint(model) == fingerprint(ScheduleSnapshot.model_validate(snapshot_payload))


def test_unserializable_snapshot_falls_back_instead_of_raising() -> None:
    payload = {"score": object(), "orders": [float("nan")]}
    first = fingerprint(payload)
    assert isinstance(first, str)
    assert first == fingerprint({"orders": [float("nan")], "score": payload["score"]})


def test_fallback_fingerprint_does_not_depend_on_object_identity() -> None:
    first = fingerprint({"score": object(), "orders": []})
    second = fingerprint({"score": object(), "orders": []})
    assert first == second
