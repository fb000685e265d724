"""Forecast orchestration across a rolling horizon.

Runs demand, supply, deficit and confidence for each week of the horizon,
applies the safety buffer, rolls the series up into aggregates and
recommendations, and persists one snapshot row per week. Also answers the
cross-division shortage and hiring-plan queries.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import replace
from datetime import UTC, date, datetime, timedelta
from typing import Any

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from labor_forecast.core.config import Settings, get_settings
from labor_forecast.core.models import Division
from labor_forecast.forecast.confidence import calculate_confidence
from labor_forecast.forecast.deficit import analyze_deficit
from labor_forecast.forecast.demand import DemandCalculator
from labor_forecast.forecast.errors import ForecastConfigError, ForecastTimeoutError, SnapshotPersistenceError
from labor_forecast.forecast.policy import ForecastPolicy
from labor_forecast.forecast.ports import (
    AssignmentRepository,
    EmployeeRepository,
    PhaseRepository,
    SnapshotRecord,
    SnapshotStore,
)
from labor_forecast.forecast.recommendations import (
    analyze_persistent_deficit,
    calculate_hiring_needs,
    estimate_hiring_cost,
    hiring_justification,
    hiring_timeline,
    series_recommendations,
    weekly_recommendations,
)
from labor_forecast.forecast.repositories import (
    SqlAssignmentRepository,
    SqlEmployeeRepository,
    SqlPhaseRepository,
    SqlSnapshotStore,
)
from labor_forecast.forecast.snapshots import forecast_from_snapshot, run_matches, snapshots_from_forecasts
from labor_forecast.forecast.supply import SupplyCalculator
from labor_forecast.forecast.types import (
    CriticalShortage,
    ForecastAggregates,
    ForecastConfig,
    ForecastPeriod,
    ForecastSummary,
    HiringPlan,
    LaborDeficit,
    LaborDemand,
    Severity,
    WeeklyForecast,
)
from labor_forecast.forecast.weeks import add_weeks, iter_weeks, week_start

logger = logging.getLogger(__name__)

_IMPACT_BY_SEVERITY = {
    Severity.CRITICAL: "Projects at risk of delay, overtime costs will exceed budget",
    Severity.HIGH: "Capacity constraints will require overtime or rescheduling",
    Severity.MEDIUM: "Limited flexibility for new projects or changes",
    Severity.LOW: "Minor capacity constraints, manageable with current resources",
}


def apply_buffer(demand: LaborDemand, buffer_percentage: float) -> LaborDemand:
    """Scale every demand-hour field by ``1 + buffer_percentage / 100``.

    Counts are left untouched.
    """
    multiplier = 1 + buffer_percentage / 100
    return replace(
        demand,
        total_hours=demand.total_hours * multiplier,
        foremen_hours=demand.foremen_hours * multiplier,
        journeymen_hours=demand.journeymen_hours * multiplier,
        apprentice_hours=demand.apprentice_hours * multiplier,
    )


def calculate_aggregates(forecasts: Sequence[WeeklyForecast]) -> ForecastAggregates:
    """Roll a weekly series up into horizon totals."""
    if not forecasts:
        return ForecastAggregates()
    return ForecastAggregates(
        total_demand=sum(f.demand.total_hours for f in forecasts),
        total_supply=sum(f.supply.total_hours for f in forecasts),
        total_deficit=sum(f.deficit.total_deficit for f in forecasts),
        deficit_weeks=sum(1 for f in forecasts if f.deficit.is_deficit),
        critical_weeks=sum(1 for f in forecasts if f.deficit.severity.is_critical_or_high),
        average_confidence=sum(f.confidence for f in forecasts) / len(forecasts),
        low_confidence_weeks=sum(1 for f in forecasts if not f.meets_min_confidence),
    )


def deficit_impact(deficit: LaborDeficit) -> str:
    """One-line business impact of a deficit's severity."""
    return _IMPACT_BY_SEVERITY[deficit.severity]


def validate_division(division: str) -> str:
    """Return ``division`` if it names a known division.

    Raises:
        ForecastConfigError: If it does not.
    """
    try:
        return Division(division).value
    except ValueError as exc:
        known = ", ".join(d.value for d in Division)
        raise ForecastConfigError(f"Unknown division {division!r}; expected one of {known}") from exc


def _utcnow() -> datetime:
    return datetime.now(UTC)


class LaborForecastService:
    """Composes the forecast pipeline over explicit repository ports.

    The service holds no per-run state, so one instance can serve
    concurrent requests for different divisions.
    """

    def __init__(
        self,
        phases: PhaseRepository,
        employees: EmployeeRepository,
        assignments: AssignmentRepository,
        snapshots: SnapshotStore,
        *,
        settings: Settings | None = None,
        policy: ForecastPolicy | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        settings = settings or get_settings()
        self._settings = settings
        self._policy = policy or ForecastPolicy.from_settings(settings)
        self._demand = DemandCalculator(phases, self._policy)
        self._supply = SupplyCalculator(employees, assignments, self._policy)
        self._snapshots = snapshots
        self._clock = clock
        self._cache_window = timedelta(hours=settings.forecast_cache_hours)
        self._timeout = settings.forecast_timeout_seconds
        self._max_concurrency = settings.forecast_max_concurrency
        self._default_config = self._build_config(
            {
                "forecast_weeks": settings.forecast_default_weeks,
                "min_confidence": settings.forecast_min_confidence,
                "include_quoted_projects": settings.forecast_include_quoted_projects,
                "buffer_percentage": settings.forecast_buffer_percentage,
            }
        )

    @classmethod
    def from_session_factory(
        cls,
        session_factory: async_sessionmaker[AsyncSession],
        **kwargs: Any,
    ) -> LaborForecastService:
        """Build a service backed by the SQLAlchemy repositories."""
        return cls(
            SqlPhaseRepository(session_factory),
            SqlEmployeeRepository(session_factory),
            SqlAssignmentRepository(session_factory),
            SqlSnapshotStore(session_factory),
            **kwargs,
        )

    @property
    def default_config(self) -> ForecastConfig:
        return self._default_config

    @staticmethod
    def _build_config(values: Mapping[str, Any]) -> ForecastConfig:
        try:
            return ForecastConfig.model_validate(dict(values))
        except ValidationError as exc:
            raise ForecastConfigError(f"Invalid forecast configuration: {exc}") from exc

    def resolve_config(self, config: ForecastConfig | Mapping[str, Any] | None = None) -> ForecastConfig:
        """Merge caller overrides onto the defaults and validate the result.

        Raises:
            ForecastConfigError: If the merged configuration is invalid.
        """
        if config is None:
            return self._default_config
        if isinstance(config, ForecastConfig):
            return config
        return self._build_config({**self._default_config.model_dump(), **config})

    # ── Forecast generation ──────────────────────────────────────

    async def generate_forecast(
        self,
        division: str,
        start_date: date | datetime | None = None,
        config: ForecastConfig | Mapping[str, Any] | None = None,
    ) -> ForecastSummary:
        """Generate, persist and return a forecast for ``division``.

        The timeout bounds the weekly computation. A snapshot write that
        fails or outlives the timeout is reported on ``snapshot_error``.

        Args:
            division: Division to forecast.
            start_date: Any day in the first forecast week; defaults to now.
            config: A ``ForecastConfig`` or a mapping of overrides.

        Raises:
            ForecastConfigError: If the division or configuration is invalid.
            ForecastTimeoutError: If the computation exceeds the configured timeout.
        """
        division = validate_division(division)
        cfg = self.resolve_config(config)
        now = self._clock()
        start = week_start(start_date or now)
        try:
            forecasts = await asyncio.wait_for(
                self._compute(division, start, cfg, now.date()),
                timeout=self._timeout,
            )
        except TimeoutError as exc:
            raise ForecastTimeoutError(
                f"Forecast for {division} exceeded {self._timeout:.0f}s"
            ) from exc

        snapshot_error = await self._save_snapshots(division, forecasts, now, cfg)
        summary = self._summarize(division, now, start, forecasts, snapshot_error)
        logger.info(
            "Forecast %s from %s (%d weeks): %d deficit weeks, %d critical/high, avg confidence %.0f",
            division,
            start,
            cfg.forecast_weeks,
            summary.aggregates.deficit_weeks,
            summary.aggregates.critical_weeks,
            summary.aggregates.average_confidence,
        )
        return summary

    async def _compute(
        self,
        division: str,
        start: date,
        cfg: ForecastConfig,
        today: date,
    ) -> list[WeeklyForecast]:
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def _bounded(week: date) -> WeeklyForecast:
            async with semaphore:
                return await self._weekly_forecast(division, week, cfg, today)

        return list(await asyncio.gather(*(_bounded(w) for w in iter_weeks(start, cfg.forecast_weeks))))

    async def _weekly_forecast(
        self,
        division: str,
        week_starting: date,
        cfg: ForecastConfig,
        today: date,
    ) -> WeeklyForecast:
        demand, supply = await asyncio.gather(
            self._demand.calculate_weekly_demand(division, week_starting, cfg.include_quoted_projects),
            self._supply.calculate_weekly_supply(division, week_starting),
        )
        buffered = apply_buffer(demand, cfg.buffer_percentage)
        deficit = analyze_deficit(buffered, supply)
        confidence = calculate_confidence(
            demand,
            supply,
            week_starting,
            today=today,
            historical_accuracy=self._policy.historical_accuracy,
        )
        return WeeklyForecast(
            week_starting=week_starting,
            division=division,
            demand=buffered,
            supply=supply,
            deficit=deficit,
            recommendations=tuple(weekly_recommendations(deficit)),
            confidence=confidence,
            meets_min_confidence=confidence >= cfg.min_confidence,
        )

    def _summarize(
        self,
        division: str,
        forecast_date: datetime,
        start: date,
        forecasts: Sequence[WeeklyForecast],
        snapshot_error: str | None = None,
    ) -> ForecastSummary:
        return ForecastSummary(
            division=division,
            forecast_date=forecast_date,
            period=ForecastPeriod(start=start, end=add_weeks(start, len(forecasts)), weeks=len(forecasts)),
            weekly_forecasts=tuple(forecasts),
            aggregates=calculate_aggregates(forecasts),
            recommendations=series_recommendations(
                forecasts, division, self._policy.standard_weekly_hours
            ),
            snapshot_error=snapshot_error,
        )

    async def _save_snapshots(
        self,
        division: str,
        forecasts: Sequence[WeeklyForecast],
        forecast_date: datetime,
        cfg: ForecastConfig,
    ) -> str | None:
        rows = snapshots_from_forecasts(forecasts, forecast_date, cfg, self._policy.standard_weekly_hours)
        try:
            await asyncio.wait_for(self._snapshots.upsert_snapshots(rows), timeout=self._timeout)
        except SnapshotPersistenceError as exc:
            logger.exception("Could not persist forecast snapshots for %s", division)
            return str(exc)
        except TimeoutError:
            logger.error("Persisting forecast snapshots for %s exceeded %gs", division, self._timeout)
            return f"Snapshot write exceeded {self._timeout:g}s"
        return None

    # ── Read paths ───────────────────────────────────────────────

    async def get_forecast(self, division: str, force_regenerate: bool = False) -> ForecastSummary:
        """Return the default forecast from the current week.

        A stored run is reused when it is inside the freshness window and
        was made with the default configuration from the current week.
        """
        division = validate_division(division)
        if not force_regenerate:
            cached = await self._recent_forecast(division)
            if cached is not None:
                logger.debug("Reusing forecast for %s from %s", division, cached.forecast_date)
                return cached
        return await self.generate_forecast(division)

    async def _recent_forecast(self, division: str) -> ForecastSummary | None:
        now = self._clock()
        try:
            rows: list[SnapshotRecord] = await self._snapshots.latest_snapshots(division, now - self._cache_window)
        except SnapshotPersistenceError:
            logger.warning("Snapshot lookup failed for %s; regenerating", division, exc_info=True)
            return None
        if not rows:
            return None

        rows = sorted(rows, key=lambda r: r.week_starting)
        current_week = week_start(now)
        if not run_matches(rows, self._default_config, current_week):
            logger.debug(
                "Latest run for %s (%s, %d weeks) does not match the defaults from %s; regenerating",
                division,
                rows[0].horizon_start,
                rows[0].horizon_weeks,
                current_week,
            )
            return None
        forecasts = [forecast_from_snapshot(r) for r in rows]
        return self._summarize(division, rows[0].forecast_date, current_week, forecasts)

    async def get_deficits(self, division: str, threshold_hours: float = 0.0) -> list[WeeklyForecast]:
        """Weeks whose deficit exceeds ``threshold_hours``."""
        forecast = await self.get_forecast(division)
        return [
            wf
            for wf in forecast.weekly_forecasts
            if wf.deficit.is_deficit and wf.deficit.total_deficit > threshold_hours
        ]

    async def get_critical_shortages(
        self,
        divisions: Sequence[str] | None = None,
    ) -> list[CriticalShortage]:
        """HIGH and CRITICAL weeks across divisions, by week then severity."""
        targets = (
            [validate_division(d) for d in divisions] if divisions is not None else [d.value for d in Division]
        )
        summaries = await asyncio.gather(*(self.get_forecast(d) for d in targets))

        shortages = [
            CriticalShortage(
                division=summary.division,
                week=wf.week_starting,
                deficit=wf.deficit,
                impact=deficit_impact(wf.deficit),
            )
            for summary in summaries
            for wf in summary.weekly_forecasts
            if wf.deficit.severity.is_critical_or_high
        ]
        shortages.sort(key=lambda s: (s.week, -s.deficit.severity.rank))
        return shortages

    async def generate_hiring_plan(self, division: str, horizon_weeks: int | None = None) -> HiringPlan:
        """Hiring recommendation from a fresh forecast over ``horizon_weeks``."""
        division = validate_division(division)
        horizon = self._settings.hiring_plan_weeks if horizon_weeks is None else horizon_weeks
        forecast = await self.generate_forecast(division, config={"forecast_weeks": horizon})

        hours_per_head = self._policy.standard_weekly_hours
        persistent = analyze_persistent_deficit(forecast.weekly_forecasts)
        needs = calculate_hiring_needs(persistent, hours_per_head)
        return HiringPlan(
            division=division,
            foremen=needs.foremen,
            journeymen=needs.journeymen,
            apprentices=needs.apprentices,
            contractors=needs.contractors,
            timeline=hiring_timeline(persistent),
            estimated_cost=estimate_hiring_cost(needs, self._policy),
            justification=tuple(hiring_justification(forecast.aggregates, persistent, needs)),
        )
