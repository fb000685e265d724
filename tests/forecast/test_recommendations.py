"""BDD tests for staffing recommendations and hiring-plan helpers."""

from __future__ import annotations

from datetime import date

import pytest

from labor_forecast.forecast.policy import ForecastPolicy
from labor_forecast.forecast.recommendations import (
    analyze_persistent_deficit,
    calculate_hiring_needs,
    estimate_hiring_cost,
    headcount,
    hiring_justification,
    hiring_timeline,
    persistent_hiring_headcount,
    series_recommendations,
    weekly_recommendations,
)
from labor_forecast.forecast.types import (
    ForecastAggregates,
    HiringNeeds,
    LaborDeficit,
    LaborDemand,
    LaborSupply,
    PersistentDeficit,
    Severity,
    WeeklyForecast,
)
from labor_forecast.forecast.weeks import add_weeks

FIRST_WEEK = date(2026, 3, 2)


def _deficit(
    total: float = 0.0,
    severity: Severity = Severity.LOW,
    foremen: float = 0.0,
    journeymen: float = 0.0,
    apprentice: float = 0.0,
) -> LaborDeficit:
    return LaborDeficit(
        total_deficit=total,
        foremen_deficit=foremen,
        journeymen_deficit=journeymen,
        apprentice_deficit=apprentice,
        is_deficit=total > 0,
        severity=severity,
    )


def _week(index: int, deficit: LaborDeficit | None = None, start: date = FIRST_WEEK) -> WeeklyForecast:
    return WeeklyForecast(
        week_starting=add_weeks(start, index),
        division="HVAC_COMMERCIAL",
        demand=LaborDemand(),
        supply=LaborSupply(),
        deficit=deficit or _deficit(),
    )


def _series(*deficits: LaborDeficit, start: date = FIRST_WEEK) -> list[WeeklyForecast]:
    return [_week(i, d, start) for i, d in enumerate(deficits)]


class TestHeadcount:
    @pytest.mark.parametrize(
        ("hours", "expected"),
        [(0.0, 0), (-5.0, 0), (1.0, 1), (40.0, 1), (41.0, 2), (80.0, 2), (30.000000000000014, 1)],
    )
    def test_ceiling_of_full_time_heads(self, hours: float, expected: int) -> None:
        assert headcount(hours, 40.0) == expected


class TestWeeklyRecommendations:
    """Given a single week's deficit
    When weekly guidance is produced
    Then the advice scales with the size of the shortfall.
    """

    def test_no_deficit_no_advice(self) -> None:
        assert weekly_recommendations(_deficit()) == []

    def test_small_deficit_overtime(self) -> None:
        assert weekly_recommendations(_deficit(30.0)) == ["Approve overtime for existing crew"]

    def test_forty_hours_still_overtime(self) -> None:
        assert weekly_recommendations(_deficit(40.0)) == ["Approve overtime for existing crew"]

    def test_medium_deficit_contractors(self) -> None:
        assert weekly_recommendations(_deficit(60.0)) == ["Hire 1-2 contractors for the week"]

    def test_large_deficit_reschedule(self) -> None:
        assert weekly_recommendations(_deficit(120.0)) == [
            "Significant deficit (120h) - reschedule non-critical work or hire multiple contractors"
        ]

    def test_role_specific_notes(self) -> None:
        recs = weekly_recommendations(_deficit(30.0, foremen=8.0, apprentice=25.0))
        assert recs == [
            "Approve overtime for existing crew",
            "Foreman shortage - promote an experienced journeyman to lead",
            "Contact trade school for apprentice placement",
        ]

    def test_small_apprentice_gap_no_outreach(self) -> None:
        assert "Contact trade school for apprentice placement" not in weekly_recommendations(
            _deficit(30.0, apprentice=20.0)
        )


class TestSeriesRecommendations:
    """Given a forecast series
    When series guidance is produced
    Then advice is bucketed into immediate, short-term and long-term.
    """

    def test_immediate_covers_first_two_weeks_only(self) -> None:
        series = _series(
            _deficit(100.0, Severity.CRITICAL, foremen=10.0),
            _deficit(20.0, Severity.MEDIUM),
            _deficit(100.0, Severity.CRITICAL, foremen=10.0),
        )
        recs = series_recommendations(series, "PLUMBING_CUSTOM")
        assert recs.immediate == (
            "Critical capacity shortage week of Mar 2 - approve overtime or hire contractors immediately",
            "Foreman shortage week of Mar 2 - assign lead journeyman or reschedule phases",
        )

    def test_short_term_average_deficit(self) -> None:
        series = _series(_deficit(), _deficit(), *[_deficit(100.0, Severity.MEDIUM)] * 4)
        recs = series_recommendations(series, "PLUMBING_CUSTOM")
        assert "Average deficit of 100 hours/week over next month - initiate hiring process" in recs.short_term

    def test_short_term_average_at_threshold_is_quiet(self) -> None:
        series = _series(_deficit(), _deficit(), *[_deficit(80.0, Severity.MEDIUM)] * 4)
        recs = series_recommendations(series, "PLUMBING_CUSTOM")
        assert recs.short_term == ()

    def test_many_critical_weeks_suggest_contractor_agreements(self) -> None:
        series = _series(*[_deficit(30.0, Severity.HIGH)] * 3)
        recs = series_recommendations(series, "PLUMBING_CUSTOM")
        assert "3 weeks with critical/high deficits - consider contractor agreements" in recs.short_term

    def test_two_critical_weeks_not_enough(self) -> None:
        series = _series(*[_deficit(30.0, Severity.HIGH)] * 2)
        recs = series_recommendations(series, "PLUMBING_CUSTOM")
        assert recs.short_term == ()

    def test_hvac_summer_peak(self) -> None:
        series = _series(_deficit(), start=date(2026, 6, 1))
        assert series_recommendations(series, "HVAC_COMMERCIAL").short_term == (
            "Summer peak season approaching - secure additional HVAC technicians",
        )

    def test_summer_note_is_hvac_only(self) -> None:
        series = _series(_deficit(), start=date(2026, 6, 1))
        assert series_recommendations(series, "PLUMBING_COMMERCIAL").short_term == ()

    def test_no_summer_note_in_spring(self) -> None:
        assert series_recommendations(_series(_deficit()), "HVAC_COMMERCIAL").short_term == ()

    def test_persistent_deficit_long_term_hiring(self) -> None:
        weekly = _deficit(90.0, Severity.MEDIUM, foremen=10.0, journeymen=50.0, apprentice=30.0)
        recs = series_recommendations(_series(*[weekly] * 4), "PLUMBING_CUSTOM")
        assert recs.long_term == (
            "Persistent capacity deficit detected - recommend hiring 1 foremen, 2 journeymen, 1 apprentices",
        )

    def test_half_the_weeks_is_persistent(self) -> None:
        weekly = _deficit(90.0, Severity.MEDIUM, journeymen=50.0)
        recs = series_recommendations(_series(weekly, _deficit(), weekly, _deficit()), "PLUMBING_CUSTOM")
        assert len(recs.long_term) == 1

    def test_occasional_deficit_no_long_term_hiring(self) -> None:
        weekly = _deficit(90.0, Severity.MEDIUM, journeymen=50.0)
        recs = series_recommendations(_series(weekly, _deficit(), _deficit(), _deficit()), "PLUMBING_CUSTOM")
        assert recs.long_term == ()
        assert persistent_hiring_headcount(_series(weekly, _deficit(), _deficit(), _deficit())) is None

    def test_empty_series(self) -> None:
        recs = series_recommendations([], "HVAC_CUSTOM")
        assert (recs.immediate, recs.short_term, recs.long_term) == ((), (), ())


class TestPersistentDeficit:
    def test_averages_over_deficit_weeks_only(self) -> None:
        series = _series(
            _deficit(30.0, foremen=10.0, journeymen=20.0),
            _deficit(),
            _deficit(80.0, foremen=30.0, journeymen=40.0, apprentice=10.0),
            _deficit(),
        )
        persistent = analyze_persistent_deficit(series)

        assert persistent is not None
        assert persistent.weeks_with_deficit == 2
        assert persistent.total_weeks == 4
        assert persistent.deficit_percentage == 50.0
        assert persistent.avg_foremen_deficit == pytest.approx(20.0)
        assert persistent.avg_journeymen_deficit == pytest.approx(30.0)
        assert persistent.avg_apprentice_deficit == pytest.approx(5.0)

    def test_no_deficit_weeks(self) -> None:
        assert analyze_persistent_deficit(_series(_deficit(), _deficit())) is None


def _persistent(
    pct: float,
    foremen: float = 10.0,
    journeymen: float = 50.0,
    apprentice: float = 30.0,
) -> PersistentDeficit:
    return PersistentDeficit(
        weeks_with_deficit=1,
        total_weeks=1,
        deficit_percentage=pct,
        avg_foremen_deficit=foremen,
        avg_journeymen_deficit=journeymen,
        avg_apprentice_deficit=apprentice,
    )


class TestHiringNeeds:
    """Given persistent deficit statistics
    When hiring needs are calculated
    Then frequent deficits become permanent hires and occasional ones contractors.
    """

    def test_nothing_to_hire(self) -> None:
        assert calculate_hiring_needs(None) == HiringNeeds()

    def test_frequent_deficit_permanent_hires(self) -> None:
        assert calculate_hiring_needs(_persistent(100.0)) == HiringNeeds(foremen=1, journeymen=2, apprentices=1)

    def test_half_the_weeks_still_permanent(self) -> None:
        assert calculate_hiring_needs(_persistent(50.0)).contractors == 0

    def test_occasional_deficit_contractors(self) -> None:
        needs = calculate_hiring_needs(_persistent(25.0))
        assert needs == HiringNeeds(apprentices=1, contractors=2)


class TestHiringCost:
    def test_permanent_hires(self) -> None:
        assert estimate_hiring_cost(HiringNeeds(foremen=1, journeymen=2, apprentices=1), ForecastPolicy()) == 295_000.0

    def test_contractors(self) -> None:
        assert estimate_hiring_cost(HiringNeeds(apprentices=1, contractors=2), ForecastPolicy()) == 285_000.0

    def test_empty(self) -> None:
        assert estimate_hiring_cost(HiringNeeds(), ForecastPolicy()) == 0.0


class TestHiringTimeline:
    @pytest.mark.parametrize(
        ("pct", "expected"),
        [
            (100.0, "Immediate - within 2 weeks"),
            (80.0, "Immediate - within 2 weeks"),
            (75.0, "Short-term - within 1 month"),
            (60.0, "Short-term - within 1 month"),
            (50.0, "Medium-term - within 3 months"),
            (10.0, "Medium-term - within 3 months"),
        ],
    )
    def test_urgency_by_deficit_share(self, pct: float, expected: str) -> None:
        assert hiring_timeline(_persistent(pct)) == expected

    def test_no_deficit(self) -> None:
        assert hiring_timeline(None) == "No immediate hiring needed"


class TestHiringJustification:
    def test_full_justification(self) -> None:
        aggregates = ForecastAggregates(total_demand=1200.0, total_supply=1000.0, critical_weeks=2)
        reasons = hiring_justification(aggregates, _persistent(100.0), HiringNeeds(foremen=1))
        assert reasons == [
            "Critical: 100% of weeks show labor deficit",
            "2 weeks with critical/high severity deficits",
            "Need 1 additional foremen to meet project leadership requirements",
            "Division operating at 120% utilization - unsustainable",
        ]

    def test_contractor_reason(self) -> None:
        reasons = hiring_justification(ForecastAggregates(), _persistent(25.0), HiringNeeds(contractors=3))
        assert reasons == ["Recommend 3 contractors for flexible capacity"]

    def test_zero_supply_with_demand(self) -> None:
        reasons = hiring_justification(ForecastAggregates(total_demand=50.0), None, HiringNeeds())
        assert reasons == ["No available labor supply against scheduled demand"]

    def test_healthy_division(self) -> None:
        aggregates = ForecastAggregates(total_demand=500.0, total_supply=1000.0)
        assert hiring_justification(aggregates, None, HiringNeeds()) == []
