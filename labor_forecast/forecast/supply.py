"""Weekly labor supply from the active workforce.

Supply is tied to real individuals, so role hours are exact: each employee's
free hours for the week land in the bucket of their declared role.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from labor_forecast.forecast.policy import ForecastPolicy
from labor_forecast.forecast.ports import AssignmentRepository, EmployeeRecord, EmployeeRepository
from labor_forecast.forecast.types import (
    ROLE_HOUR_FIELDS,
    LaborSupply,
    PlannedHire,
    PlannedTermination,
    Role,
)
from labor_forecast.forecast.weeks import iter_weeks, week_window

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmployeeAvailability:
    """Free hours of one employee in one week."""

    employee_id: str
    role: Role
    available_hours: float


def employee_available_hours(
    employee: EmployeeRecord,
    booked: float,
    standard_weekly_hours: float,
) -> float:
    """Weekly cap minus booked hours, never negative.

    An unset or zero cap falls back to the standard working week.
    """
    cap = employee.weekly_hour_cap or standard_weekly_hours
    return max(0.0, cap - booked)


def supply_from_availability(
    availability: Sequence[EmployeeAvailability],
    employee_count: int,
) -> LaborSupply:
    """Fold per-employee availability into a ``LaborSupply``.

    Only employees with free hours count toward ``available_employees``.
    """
    role_hours = dict.fromkeys(Role, 0.0)
    total = 0.0
    available_employees = 0
    for entry in availability:
        if entry.available_hours <= 0:
            continue
        available_employees += 1
        role_hours[entry.role] += entry.available_hours
        total += entry.available_hours

    return LaborSupply(
        total_hours=total,
        foremen_hours=role_hours[Role.FOREMAN],
        journeymen_hours=role_hours[Role.JOURNEYMAN],
        apprentice_hours=role_hours[Role.APPRENTICE],
        employee_count=employee_count,
        available_employees=available_employees,
    )


class SupplyCalculator:
    """Converts the roster and its bookings into per-week available hours."""

    def __init__(
        self,
        employees: EmployeeRepository,
        assignments: AssignmentRepository,
        policy: ForecastPolicy | None = None,
    ) -> None:
        self._employees = employees
        self._assignments = assignments
        self._policy = policy or ForecastPolicy()

    async def _availability(
        self,
        division: str,
        week_starting: date,
    ) -> tuple[list[EmployeeAvailability], int]:
        start, end = week_window(week_starting)
        roster = await self._employees.list_available_employees(division, start, end)
        roster = [e for e in roster if _covers_week(e, start, end)]
        if not roster:
            return [], 0

        booked = await self._assignments.booked_hours([e.id for e in roster], start, end)
        availability = [
            EmployeeAvailability(
                employee_id=e.id,
                role=e.role,
                available_hours=employee_available_hours(
                    e, booked.get(e.id, 0.0), self._policy.standard_weekly_hours
                ),
            )
            for e in roster
        ]
        return availability, len(roster)

    async def calculate_weekly_supply(self, division: str, week_starting: date) -> LaborSupply:
        """Calculate labor supply for ``division`` in the week of ``week_starting``."""
        availability, employee_count = await self._availability(division, week_starting)
        supply = supply_from_availability(availability, employee_count)
        logger.debug(
            "Supply %s week %s: %.1fh from %d/%d employees",
            division,
            week_starting,
            supply.total_hours,
            supply.available_employees,
            supply.employee_count,
        )
        return supply

    async def calculate_supply_with_changes(
        self,
        division: str,
        week_starting: date,
        planned_hires: Sequence[PlannedHire] = (),
        planned_terminations: Sequence[PlannedTermination] = (),
    ) -> LaborSupply:
        """What-if supply with hypothetical hires and terminations layered on.

        Changes effective after the target week's Monday leave that week
        untouched. A terminated employee's actual contribution is removed;
        unknown employee ids are ignored.
        """
        start, _ = week_window(week_starting)
        availability, employee_count = await self._availability(division, week_starting)

        terminated = {t.employee_id for t in planned_terminations if t.effective_date <= start}
        known = {a.employee_id for a in availability}
        for employee_id in terminated - known:
            logger.info("Ignoring termination of unknown employee %s in %s", employee_id, division)

        kept = [a for a in availability if a.employee_id not in terminated]
        employee_count -= len(terminated & known)
        base = supply_from_availability(kept, employee_count)

        role_hours = {role: base.hours_for(role) for role in Role}
        total = base.total_hours
        added = 0
        for hire in planned_hires:
            if hire.start_date > start or hire.count <= 0:
                continue
            extra = hire.count * self._policy.standard_weekly_hours
            role_hours[hire.role] += extra
            total += extra
            added += hire.count

        return LaborSupply(
            total_hours=total,
            employee_count=base.employee_count + added,
            available_employees=base.available_employees + added,
            **{ROLE_HOUR_FIELDS[role]: hours for role, hours in role_hours.items()},
        )

    async def project_future_supply(
        self,
        division: str,
        weeks_ahead: int,
        start: date,
    ) -> dict[date, LaborSupply]:
        """Supply for ``weeks_ahead`` consecutive weeks from ``start``'s week."""
        return {
            week: await self.calculate_weekly_supply(division, week)
            for week in iter_weeks(start, weeks_ahead)
        }


def _covers_week(employee: EmployeeRecord, start: date, end: date) -> bool:
    if employee.availability_start > end:
        return False
    return employee.availability_end is None or employee.availability_end >= start
