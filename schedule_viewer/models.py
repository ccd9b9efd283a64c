"""
Pydantic models for the solver's schedule snapshots and score analysis.

Everything the backend sends goes through these models so the rest of the
viewer works with typed attributes instead of opaque dictionaries. Field names
are snake_case in Python and camelCase on the wire.
"""

import json
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .temporal import parse_local_datetime, time_of_day

# Placeholder key shared by every order missing an employee or a line
UNASSIGNED = "<unassigned>"

# Row label for entities that arrive without a name
UNNAMED = "<unnamed>"

# Substring of solverStatus that marks a job the solver is still working on
ACTIVE_STATUS_MARKER = "SOLVING_ACTIVE"


class ViewMode(Enum):
    """Which entity the timeline groups its rows by."""

    EMPLOYEE = "employee"
    LINE = "line"


class RefreshMode(Enum):
    """When the poller keeps fetching."""

    ALWAYS = "always"
    ONLY_WHEN_SOLVING = "onlyWhenSolving"


def is_active_status(status: str | None) -> bool:
    """Check if a solverStatus string means the solver is actively solving."""
    return ACTIVE_STATUS_MARKER in str(status or "").upper()


def _temporal_text(v: Any) -> str | None:
    """
    Coerce a temporal wire value to text.

    date/time objects are ISO formatted. Anything else (array dates, epoch
    numbers) is kept as its string form, which later parsing treats as
    unparseable instead of failing validation.
    """
    if v is None or isinstance(v, str):
        return v
    if hasattr(v, "isoformat"):
        return v.isoformat()
    return str(v)


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    def to_wire(self) -> dict[str, Any]:
        """Dump to the JSON-compatible camelCase shape the backend uses."""
        return self.model_dump(mode="json", by_alias=True)


class Shift(_WireModel):
    """A recurring working window. Only the time of day of start/end matters."""

    start: str | None = Field(default=None, description="Shift start (HH:MM or date-time)")
    end: str | None = Field(default=None, description="Shift end (HH:MM or date-time)")
    name: str | None = None

    @field_validator("start", "end", mode="before")
    @classmethod
    def stringify_time(cls, v: Any) -> Any:
        """Accept datetime/time objects as well as strings."""
        return _temporal_text(v)

    @property
    def start_time(self) -> str | None:
        return time_of_day(self.start)

    @property
    def end_time(self) -> str | None:
        return time_of_day(self.end)


class Employee(_WireModel):
    name: str = ""
    skills: list[str] | None = None
    shift: Shift | None = None


class Line(_WireModel):
    name: str = ""
    functions: list[str] | None = None


class Order(_WireModel):
    """
    A production order, possibly assigned by the solver.

    Employee, line and scheduled time are each optional: an order counts as
    assigned only when all three are present.
    """

    id: str | None = None
    product_name: str | None = None
    quantity: int = 0
    work_hours: float = Field(default=0, description="Estimated work in minutes")
    earliest_date: str | None = None
    latest_date: str | None = None
    required_skill: str | None = None
    required_line_function: str | None = None
    employee: Employee | None = None
    line: Line | None = None
    scheduled_date_time: str | None = None
    pinned: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v: Any) -> Any:
        """Numeric ids are kept as strings."""
        if v is None or isinstance(v, str):
            return v
        return str(v)

    @field_validator("scheduled_date_time", "earliest_date", "latest_date", mode="before")
    @classmethod
    def stringify_temporal(cls, v: Any) -> Any:
        return _temporal_text(v)

    @property
    def scheduled_at(self) -> datetime | None:
        return parse_local_datetime(self.scheduled_date_time)

    @property
    def employee_name(self) -> str:
        return (self.employee.name if self.employee else "") or UNASSIGNED

    @property
    def line_name(self) -> str:
        return (self.line.name if self.line else "") or UNASSIGNED

    @property
    def is_assigned(self) -> bool:
        return (
            self.employee is not None
            and self.line is not None
            and bool(self.scheduled_date_time)
        )


class ScheduleSnapshot(_WireModel):
    """One polled view of the solver-managed schedule."""

    id: str | None = None
    score: Any = None
    solver_status: str | None = None
    employees: list[Employee] = Field(default_factory=list)
    lines: list[Line] = Field(default_factory=list)
    date_times: list[str] = Field(default_factory=list)
    orders: list[Order] = Field(default_factory=list)

    @field_validator("employees", "lines", "date_times", "orders", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("date_times", mode="before")
    @classmethod
    def stringify_date_times(cls, v: Any) -> Any:
        if not isinstance(v, list):
            return v
        return [item if isinstance(item, str) else str(item) for item in v]

    @property
    def is_solving(self) -> bool:
        return is_active_status(self.solver_status)


class ConstraintMatch(_WireModel):
    score: Any = None
    justification: Any = None

    @property
    def justification_text(self) -> str:
        """Justification as display text; structured values are shown as JSON."""
        if self.justification is None or self.justification == "":
            return ""
        if isinstance(self.justification, str):
            return self.justification
        return json.dumps(self.justification, ensure_ascii=False)


class ConstraintAnalysis(_WireModel):
    name: str = ""
    weight: Any = None
    score: Any = None
    match_count: int | None = None
    matches: list[ConstraintMatch] | None = None

    @property
    def display_match_count(self) -> int:
        """Explicit matchCount when the backend sent one, else the list length."""
        if self.match_count is not None:
            return self.match_count
        return len(self.matches or [])


class ScoreAnalysis(_WireModel):
    """Constraint breakdown returned by PUT /schedules/analyze."""

    score: Any = None
    initialized: bool | None = None
    constraints: list[ConstraintAnalysis] = Field(default_factory=list)

    @field_validator("constraints", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v
