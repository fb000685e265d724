"""Conversion between weekly forecasts and persisted snapshot rows."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime

from labor_forecast.forecast.ports import SnapshotRecord
from labor_forecast.forecast.recommendations import headcount
from labor_forecast.forecast.types import (
    ForecastConfig,
    LaborDeficit,
    LaborDemand,
    LaborSupply,
    Severity,
    WeeklyForecast,
)


def snapshot_from_forecast(
    forecast: WeeklyForecast,
    forecast_date: datetime,
    config: ForecastConfig,
    hours_per_head: float = 40.0,
    horizon_start: date | None = None,
) -> SnapshotRecord:
    """Flatten one week of a run into a row that also records the run's parameters."""
    demand, supply, deficit = forecast.demand, forecast.supply, forecast.deficit
    return SnapshotRecord(
        division=forecast.division,
        week_starting=forecast.week_starting,
        forecast_date=forecast_date,
        required_hours=demand.total_hours,
        required_foremen_hours=demand.foremen_hours,
        required_journeymen_hours=demand.journeymen_hours,
        required_apprentice_hours=demand.apprentice_hours,
        required_foremen=headcount(demand.foremen_hours, hours_per_head),
        required_journeymen=headcount(demand.journeymen_hours, hours_per_head),
        required_apprentices=headcount(demand.apprentice_hours, hours_per_head),
        project_count=demand.project_count,
        phase_count=demand.phase_count,
        available_hours=supply.total_hours,
        available_foremen_hours=supply.foremen_hours,
        available_journeymen_hours=supply.journeymen_hours,
        available_apprentice_hours=supply.apprentice_hours,
        employee_count=supply.employee_count,
        available_employees=supply.available_employees,
        deficit=deficit.total_deficit,
        foremen_deficit=deficit.foremen_deficit,
        journeymen_deficit=deficit.journeymen_deficit,
        apprentice_deficit=deficit.apprentice_deficit,
        severity=deficit.severity.value,
        confidence=forecast.confidence,
        min_confidence=config.min_confidence,
        recommendations=tuple(forecast.recommendations),
        generated_at=forecast_date,
        horizon_start=horizon_start or forecast.week_starting,
        horizon_weeks=config.forecast_weeks,
        buffer_percentage=config.buffer_percentage,
        include_quoted_projects=config.include_quoted_projects,
    )


def snapshots_from_forecasts(
    forecasts: Sequence[WeeklyForecast],
    forecast_date: datetime,
    config: ForecastConfig,
    hours_per_head: float = 40.0,
) -> list[SnapshotRecord]:
    start = forecasts[0].week_starting if forecasts else None
    return [snapshot_from_forecast(f, forecast_date, config, hours_per_head, start) for f in forecasts]


def run_matches(
    rows: Sequence[SnapshotRecord],
    config: ForecastConfig,
    horizon_start: date,
) -> bool:
    """Whether ``rows`` are a complete run made with ``config`` from ``horizon_start``."""
    if not rows:
        return False
    first = rows[0]
    return (
        first.horizon_start == horizon_start
        and first.horizon_weeks == config.forecast_weeks
        and len(rows) == config.forecast_weeks
        and first.buffer_percentage == config.buffer_percentage
        and first.include_quoted_projects == config.include_quoted_projects
        and first.min_confidence == config.min_confidence
    )


def forecast_from_snapshot(row: SnapshotRecord) -> WeeklyForecast:
    """Rebuild the weekly forecast a snapshot row was written from."""
    return WeeklyForecast(
        week_starting=row.week_starting,
        division=row.division,
        demand=LaborDemand(
            total_hours=row.required_hours,
            foremen_hours=row.required_foremen_hours,
            journeymen_hours=row.required_journeymen_hours,
            apprentice_hours=row.required_apprentice_hours,
            project_count=row.project_count,
            phase_count=row.phase_count,
        ),
        supply=LaborSupply(
            total_hours=row.available_hours,
            foremen_hours=row.available_foremen_hours,
            journeymen_hours=row.available_journeymen_hours,
            apprentice_hours=row.available_apprentice_hours,
            employee_count=row.employee_count,
            available_employees=row.available_employees,
        ),
        deficit=LaborDeficit(
            total_deficit=row.deficit,
            foremen_deficit=row.foremen_deficit,
            journeymen_deficit=row.journeymen_deficit,
            apprentice_deficit=row.apprentice_deficit,
            is_deficit=row.deficit > 0,
            severity=Severity(row.severity),
        ),
        recommendations=tuple(row.recommendations),
        confidence=row.confidence,
        meets_min_confidence=row.confidence >= row.min_confidence,
    )
