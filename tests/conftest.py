import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from schedule_viewer.models import ScheduleSnapshot  # noqa: E402


def make_order(order_id, employee=None, line=None, at=None, work=30, product=None, shift=None):
    order = {
        "id": order_id,
        "productName": product or f"Product {order_id}",
        "quantity": 1,
        "workHours": work,
        "scheduledDateTime": at,
    }
    if employee is not None:
        order["employee"] = {"name": employee, "shift": shift}
    if line is not None:
        order["line"] = {"name": line}
    return order


@pytest.fixture
def snapshot_payload() -> dict:
    """Two-day schedule with a day shift, a night shift and one unassigned order."""
    day_shift = {"start": "09:00", "end": "17:00"}
    night_shift = {"start": "22:00", "end": "06:00"}
    return {
        "id": "job-1",
        "score": "0hard/-120soft",
        "solverStatus": "SOLVING_ACTIVE",
        "employees": [
            {"name": "Ann", "skills": ["weld"], "shift": day_shift},
            {"name": "Bob", "skills": ["paint"], "shift": night_shift},
        ],
        "lines": [{"name": "L1"}, {"name": "L2"}],
        "dateTimes": ["2030-04-01T00:00:00", "2030-04-02T00:00:00"],
        "orders": [
            make_order("o1", "Ann", "L1", "2030-04-01T10:00:00", work=60, shift=day_shift),
            make_order("o2", "Bob", "L2", "2030-04-01T12:00:00", work=30, shift=night_shift),
            make_order("o3", work=45),
        ],
    }


@pytest.fixture
def snapshot(snapshot_payload) -> ScheduleSnapshot:
    return ScheduleSnapshot.model_validate(snapshot_payload)
