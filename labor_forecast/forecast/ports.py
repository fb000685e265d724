"""Read/write contracts between the forecast engine and storage.

The engine depends only on these protocols. ``repositories`` provides the
SQLAlchemy implementations; tests substitute in-memory fakes.
"""

from __future__ import annotations

from collections.abc import Collection, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Protocol, runtime_checkable

from labor_forecast.forecast.types import Role

# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PhaseRecord:
    """A project phase as seen by the demand calculator."""

    id: str
    project_id: str
    start_date: date
    end_date: date
    duration_days: int
    labor_hours: float
    requires_foreman: bool
    status: str
    project_status: str


@dataclass(frozen=True)
class EmployeeRecord:
    """An active employee as seen by the supply calculator."""

    id: str
    role: Role
    weekly_hour_cap: float | None
    availability_start: date
    availability_end: date | None = None


@dataclass(frozen=True)
class SnapshotRecord:
    """One persisted division/week row of a forecast run."""

    division: str
    week_starting: date
    forecast_date: datetime
    required_hours: float
    required_foremen_hours: float
    required_journeymen_hours: float
    required_apprentice_hours: float
    required_foremen: int
    required_journeymen: int
    required_apprentices: int
    project_count: int
    phase_count: int
    available_hours: float
    available_foremen_hours: float
    available_journeymen_hours: float
    available_apprentice_hours: float
    employee_count: int
    available_employees: int
    deficit: float
    foremen_deficit: float
    journeymen_deficit: float
    apprentice_deficit: float
    severity: str
    confidence: int
    min_confidence: float
    recommendations: tuple[str, ...] = field(default_factory=tuple)
    generated_at: datetime | None = None
    # Parameters of the run that produced the row
    horizon_start: date | None = None
    horizon_weeks: int = 0
    buffer_percentage: float = 0.0
    include_quoted_projects: bool = True

    @property
    def key(self) -> tuple[str, date, datetime]:
        return (self.division, self.week_starting, self.forecast_date)


# ---------------------------------------------------------------------------
# Protocols
# ---------------------------------------------------------------------------


@runtime_checkable
class PhaseRepository(Protocol):
    """Source of scheduled work phases."""

    async def list_active_phases(
        self,
        division: str,
        week_start: date,
        week_end: date,
        phase_statuses: Collection[str],
        project_statuses: Collection[str],
    ) -> list[PhaseRecord]:
        """Return phases in ``division`` overlapping [week_start, week_end].

        Only phases whose own status is in ``phase_statuses`` and whose
        project's status is in ``project_statuses`` are returned.
        """
        ...


@runtime_checkable
class EmployeeRepository(Protocol):
    """Source of the active workforce roster."""

    async def list_available_employees(
        self,
        division: str,
        week_start: date,
        week_end: date,
    ) -> list[EmployeeRecord]:
        """Return active employees whose availability window covers the week."""
        ...


@runtime_checkable
class AssignmentRepository(Protocol):
    """Source of hours already booked against employees."""

    async def booked_hours(
        self,
        employee_ids: Collection[str],
        start: date,
        end: date,
    ) -> dict[str, float]:
        """Return booked hours per employee id within [start, end].

        Employees without bookings may be omitted from the result.
        """
        ...


@runtime_checkable
class SnapshotStore(Protocol):
    """Persistence for forecast snapshots."""

    async def upsert_snapshots(self, rows: Sequence[SnapshotRecord]) -> None:
        """Insert or replace rows keyed by (division, week_starting, forecast_date)."""
        ...

    async def latest_snapshots(
        self,
        division: str,
        generated_since: datetime,
    ) -> list[SnapshotRecord]:
        """Return the rows of the newest run generated at or after ``generated_since``.

        Rows are ordered by week; an empty list means no fresh run exists.
        """
        ...
