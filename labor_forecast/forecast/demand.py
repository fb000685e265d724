"""Weekly labor demand from scheduled and quoted project phases.

Each active phase overlapping the target week contributes its average daily
labor hours times the working days it spends inside that week. Hours are
split across roles with a fixed allocation heuristic rather than the phase's
explicit crew composition.
"""

from __future__ import annotations

import logging
from datetime import date

from labor_forecast.forecast.policy import ForecastPolicy
from labor_forecast.forecast.ports import PhaseRecord, PhaseRepository
from labor_forecast.forecast.types import LaborDemand, Role
from labor_forecast.forecast.weeks import iter_weeks, week_window, working_days

logger = logging.getLogger(__name__)

ACTIVE_PHASE_STATUSES: frozenset[str] = frozenset({"NOT_STARTED", "IN_PROGRESS", "DELAYED"})
QUOTED_STATUS = "QUOTED"
COMMITTED_PROJECT_STATUSES: frozenset[str] = frozenset({"AWARDED", "IN_PROGRESS"})


def accepted_project_statuses(include_quoted_projects: bool) -> frozenset[str]:
    """Project statuses whose phases count toward demand."""
    if include_quoted_projects:
        return COMMITTED_PROJECT_STATUSES | {QUOTED_STATUS}
    return COMMITTED_PROJECT_STATUSES


def phase_weekly_hours(phase: PhaseRecord, week_start: date, week_end: date) -> float:
    """Hours ``phase`` needs inside [week_start, week_end].

    Daily hours are the phase budget spread over its duration; a duration
    below one day is treated as one day.
    """
    overlap_start = max(phase.start_date, week_start)
    overlap_end = min(phase.end_date, week_end)
    days = working_days(overlap_start, overlap_end)
    if days == 0:
        return 0.0
    duration = max(1, phase.duration_days)
    daily_hours = max(0.0, phase.labor_hours) / duration
    return days * daily_hours


class DemandCalculator:
    """Converts active work phases into a per-week, per-role hour requirement."""

    def __init__(self, phases: PhaseRepository, policy: ForecastPolicy | None = None) -> None:
        self._phases = phases
        self._policy = policy or ForecastPolicy()

    async def calculate_weekly_demand(
        self,
        division: str,
        week_starting: date,
        include_quoted_projects: bool = True,
    ) -> LaborDemand:
        """Calculate labor demand for ``division`` in the week of ``week_starting``."""
        start, end = week_window(week_starting)
        project_statuses = accepted_project_statuses(include_quoted_projects)
        phases = await self._phases.list_active_phases(
            division,
            start,
            end,
            ACTIVE_PHASE_STATUSES,
            project_statuses,
        )
        return self.demand_from_phases(phases, start, end, project_statuses)

    def demand_from_phases(
        self,
        phases: list[PhaseRecord],
        week_start: date,
        week_end: date,
        project_statuses: frozenset[str] | None = None,
    ) -> LaborDemand:
        """Accumulate role hours for an already-fetched set of phases."""
        policy = self._policy
        role_hours = dict.fromkeys(Role, 0.0)
        total = 0.0
        project_ids: set[str] = set()
        phase_ids: set[str] = set()

        for phase in phases:
            if phase.status not in ACTIVE_PHASE_STATUSES:
                continue
            if project_statuses is not None and phase.project_status not in project_statuses:
                continue
            if phase.end_date < week_start or phase.start_date > week_end:
                continue

            hours = phase_weekly_hours(phase, week_start, week_end)
            if phase.project_status == QUOTED_STATUS:
                hours *= policy.quoted_probability

            if phase.requires_foreman:
                role_hours[Role.FOREMAN] += hours * policy.allocation_for(Role.FOREMAN)
            role_hours[Role.JOURNEYMAN] += hours * policy.allocation_for(Role.JOURNEYMAN)
            role_hours[Role.APPRENTICE] += hours * policy.allocation_for(Role.APPRENTICE)
            total += hours

            project_ids.add(phase.project_id)
            phase_ids.add(phase.id)

        logger.debug(
            "Demand %s..%s: %.1fh across %d phases / %d projects",
            week_start,
            week_end,
            total,
            len(phase_ids),
            len(project_ids),
        )
        return LaborDemand(
            total_hours=total,
            foremen_hours=role_hours[Role.FOREMAN],
            journeymen_hours=role_hours[Role.JOURNEYMAN],
            apprentice_hours=role_hours[Role.APPRENTICE],
            project_count=len(project_ids),
            phase_count=len(phase_ids),
        )

    async def project_future_demand(
        self,
        division: str,
        weeks_ahead: int,
        start: date,
        include_quoted_projects: bool = True,
    ) -> dict[date, LaborDemand]:
        """Demand for ``weeks_ahead`` consecutive weeks from ``start``'s week."""
        return {
            week: await self.calculate_weekly_demand(division, week, include_quoted_projects)
            for week in iter_weeks(start, weeks_ahead)
        }
