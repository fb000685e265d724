"""SQLAlchemy implementations of the forecast ports.

Each call opens its own session from the factory so that per-week and
per-division tasks can query concurrently.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Collection, Sequence
from dataclasses import fields
from datetime import date, datetime

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from labor_forecast.core.models import (
    CrewAssignment,
    Division,
    Employee,
    LaborForecastSnapshot,
    Project,
    ProjectPhase,
)
from labor_forecast.forecast.errors import SnapshotPersistenceError
from labor_forecast.forecast.ports import EmployeeRecord, PhaseRecord, SnapshotRecord
from labor_forecast.forecast.types import Role

logger = logging.getLogger(__name__)

# Columns copied verbatim between SnapshotRecord and LaborForecastSnapshot
_SNAPSHOT_VALUE_FIELDS = tuple(
    f.name
    for f in fields(SnapshotRecord)
    if f.name not in ("division", "week_starting", "forecast_date", "recommendations", "generated_at")
)


class SqlPhaseRepository:
    """Phases joined with their project's status."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def list_active_phases(
        self,
        division: str,
        week_start: date,
        week_end: date,
        phase_statuses: Collection[str],
        project_statuses: Collection[str],
    ) -> list[PhaseRecord]:
        stmt = (
            select(ProjectPhase, Project.status)
            .join(Project, ProjectPhase.project_id == Project.id)
            .where(
                ProjectPhase.division == Division(division),
                ProjectPhase.status.in_(list(phase_statuses)),
                ProjectPhase.start_date <= week_end,
                ProjectPhase.end_date >= week_start,
                Project.status.in_(list(project_statuses)),
            )
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            rows = result.all()

        return [
            PhaseRecord(
                id=str(phase.id),
                project_id=str(phase.project_id),
                start_date=phase.start_date,
                end_date=phase.end_date,
                duration_days=phase.duration,
                labor_hours=phase.labor_hours,
                requires_foreman=phase.required_foreman,
                status=str(phase.status),
                project_status=str(project_status),
            )
            for phase, project_status in rows
        ]


class SqlEmployeeRepository:
    """Active employees whose availability window overlaps the week."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def list_available_employees(
        self,
        division: str,
        week_start: date,
        week_end: date,
    ) -> list[EmployeeRecord]:
        stmt = select(Employee).where(
            Employee.division == Division(division),
            Employee.is_active.is_(True),
            Employee.availability_start <= week_end,
            or_(Employee.availability_end.is_(None), Employee.availability_end >= week_start),
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            employees = list(result.scalars().all())

        return [
            EmployeeRecord(
                id=str(e.id),
                role=Role(str(e.employee_type)),
                weekly_hour_cap=e.max_hours_per_week,
                availability_start=e.availability_start,
                availability_end=e.availability_end,
            )
            for e in employees
        ]


class SqlAssignmentRepository:
    """Booked hours summed per employee."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def booked_hours(
        self,
        employee_ids: Collection[str],
        start: date,
        end: date,
    ) -> dict[str, float]:
        if not employee_ids:
            return {}
        stmt = (
            select(CrewAssignment.employee_id, func.sum(CrewAssignment.hours_allocated))
            .where(
                CrewAssignment.employee_id.in_([uuid.UUID(i) for i in employee_ids]),
                CrewAssignment.assignment_date >= start,
                CrewAssignment.assignment_date <= end,
            )
            .group_by(CrewAssignment.employee_id)
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            rows = result.all()
        return {str(employee_id): float(hours or 0.0) for employee_id, hours in rows}


class SqlSnapshotStore:
    """Forecast snapshots keyed by (division, week_starting, forecast_date)."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def upsert_snapshots(self, rows: Sequence[SnapshotRecord]) -> None:
        if not rows:
            return
        async with self._session_factory() as session:
            try:
                for row in rows:
                    await self._upsert_one(session, row)
                await session.commit()
            except SQLAlchemyError as exc:
                await session.rollback()
                raise SnapshotPersistenceError(f"Failed to write {len(rows)} forecast snapshots: {exc}") from exc
        logger.info("Stored %d forecast snapshots for %s", len(rows), rows[0].division)

    async def _upsert_one(self, session: AsyncSession, row: SnapshotRecord) -> None:
        result = await session.execute(
            select(LaborForecastSnapshot).where(
                LaborForecastSnapshot.division == Division(row.division),
                LaborForecastSnapshot.week_starting == row.week_starting,
                LaborForecastSnapshot.forecast_date == row.forecast_date,
            )
        )
        existing = result.scalar_one_or_none()
        values = {name: getattr(row, name) for name in _SNAPSHOT_VALUE_FIELDS}
        values["recommendations"] = list(row.recommendations)

        if existing is None:
            session.add(
                LaborForecastSnapshot(
                    id=uuid.uuid4(),
                    division=Division(row.division),
                    week_starting=row.week_starting,
                    forecast_date=row.forecast_date,
                    generated_at=row.generated_at or row.forecast_date,
                    **values,
                )
            )
            return
        for name, value in values.items():
            setattr(existing, name, value)

    async def latest_snapshots(
        self,
        division: str,
        generated_since: datetime,
    ) -> list[SnapshotRecord]:
        latest_run = (
            select(func.max(LaborForecastSnapshot.forecast_date))
            .where(
                LaborForecastSnapshot.division == Division(division),
                LaborForecastSnapshot.generated_at >= generated_since,
            )
            .scalar_subquery()
        )
        stmt = (
            select(LaborForecastSnapshot)
            .where(
                LaborForecastSnapshot.division == Division(division),
                LaborForecastSnapshot.forecast_date == latest_run,
            )
            .order_by(LaborForecastSnapshot.week_starting.asc())
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                snapshots = list(result.scalars().all())
        except SQLAlchemyError as exc:
            raise SnapshotPersistenceError(f"Failed to read forecast snapshots for {division}: {exc}") from exc

        return [_record_from_model(s) for s in snapshots]


def _record_from_model(s: LaborForecastSnapshot) -> SnapshotRecord:
    return SnapshotRecord(
        division=str(s.division),
        week_starting=s.week_starting,
        forecast_date=s.forecast_date,
        recommendations=tuple(s.recommendations or ()),
        generated_at=s.generated_at,
        **{name: getattr(s, name) for name in _SNAPSHOT_VALUE_FIELDS},
    )
