"""Tests for converting weekly forecasts to and from snapshot rows."""

from __future__ import annotations

from datetime import UTC, date, datetime

import pytest

from labor_forecast.forecast.snapshots import (
    forecast_from_snapshot,
    run_matches,
    snapshot_from_forecast,
    snapshots_from_forecasts,
)
from labor_forecast.forecast.types import (
    ForecastConfig,
    LaborDeficit,
    LaborDemand,
    LaborSupply,
    Severity,
    WeeklyForecast,
)

RUN = datetime(2026, 3, 4, 12, 0, tzinfo=UTC)
DEFAULTS = ForecastConfig(min_confidence=60.0)


@pytest.fixture
def weekly() -> WeeklyForecast:
    return WeeklyForecast(
        week_starting=date(2026, 3, 2),
        division="HVAC_MULTIFAMILY",
        demand=LaborDemand(
            total_hours=220.0,
            foremen_hours=44.0,
            journeymen_hours=110.0,
            apprentice_hours=66.0,
            project_count=2,
            phase_count=3,
        ),
        supply=LaborSupply(
            total_hours=80.0,
            journeymen_hours=80.0,
            employee_count=2,
            available_employees=2,
        ),
        deficit=LaborDeficit(
            total_deficit=140.0,
            foremen_deficit=44.0,
            journeymen_deficit=30.0,
            apprentice_deficit=66.0,
            is_deficit=True,
            severity=Severity.CRITICAL,
        ),
        recommendations=("Hire 1-2 contractors for the week",),
        confidence=79,
        meets_min_confidence=True,
    )


class TestSnapshotFromForecast:
    def test_copies_figures_and_run_identity(self, weekly: WeeklyForecast) -> None:
        row = snapshot_from_forecast(weekly, RUN, DEFAULTS)

        assert row.key == ("HVAC_MULTIFAMILY", date(2026, 3, 2), RUN)
        assert row.required_hours == 220.0
        assert row.available_hours == 80.0
        assert row.deficit == 140.0
        assert row.severity == "CRITICAL"
        assert row.confidence == 79
        assert row.min_confidence == 60.0
        assert row.recommendations == ("Hire 1-2 contractors for the week",)
        assert row.generated_at == RUN

    def test_role_headcounts(self, weekly: WeeklyForecast) -> None:
        row = snapshot_from_forecast(weekly, RUN, DEFAULTS)
        assert (row.required_foremen, row.required_journeymen, row.required_apprentices) == (2, 3, 2)

    def test_one_row_per_week(self, weekly: WeeklyForecast) -> None:
        assert len(snapshots_from_forecasts([weekly, weekly], RUN, DEFAULTS)) == 2


class TestForecastFromSnapshot:
    def test_rebuilds_weekly_forecast(self, weekly: WeeklyForecast) -> None:
        row = snapshot_from_forecast(weekly, RUN, DEFAULTS)
        assert forecast_from_snapshot(row) == weekly

    def test_min_confidence_recomputed_from_row(self, weekly: WeeklyForecast) -> None:
        row = snapshot_from_forecast(weekly, RUN, ForecastConfig(min_confidence=80.0))
        assert forecast_from_snapshot(row).meets_min_confidence is False


class TestRunParameters:
    """Given rows written by a forecast run
    When they are checked against a configuration and start week
    Then only a complete run with the same parameters matches.
    """

    def test_rows_record_run_parameters(self, weekly: WeeklyForecast) -> None:
        cfg = ForecastConfig(forecast_weeks=2, buffer_percentage=0.0, include_quoted_projects=False)
        rows = snapshots_from_forecasts([weekly, weekly], RUN, cfg)

        assert {r.horizon_start for r in rows} == {date(2026, 3, 2)}
        assert {r.horizon_weeks for r in rows} == {2}
        assert {r.buffer_percentage for r in rows} == {0.0}
        assert {r.include_quoted_projects for r in rows} == {False}

    def test_matching_run(self, weekly: WeeklyForecast) -> None:
        cfg = ForecastConfig(forecast_weeks=1)
        rows = snapshots_from_forecasts([weekly], RUN, cfg)
        assert run_matches(rows, cfg, date(2026, 3, 2)) is True

    @pytest.mark.parametrize(
        "other",
        [
            ForecastConfig(forecast_weeks=2),
            ForecastConfig(forecast_weeks=1, buffer_percentage=0.0),
            ForecastConfig(forecast_weeks=1, include_quoted_projects=False),
            ForecastConfig(forecast_weeks=1, min_confidence=80.0),
        ],
    )
    def test_parameter_mismatch(self, weekly: WeeklyForecast, other: ForecastConfig) -> None:
        rows = snapshots_from_forecasts([weekly], RUN, ForecastConfig(forecast_weeks=1))
        assert run_matches(rows, other, date(2026, 3, 2)) is False

    def test_start_week_mismatch(self, weekly: WeeklyForecast) -> None:
        cfg = ForecastConfig(forecast_weeks=1)
        rows = snapshots_from_forecasts([weekly], RUN, cfg)
        assert run_matches(rows, cfg, date(2026, 3, 9)) is False

    def test_no_rows(self) -> None:
        assert run_matches([], ForecastConfig(), date(2026, 3, 2)) is False
