"""Staffing guidance derived from deficits.

Two levels of advice: per-week notes sized to that week's shortfall, and
series-level guidance bucketed into immediate, short-term and long-term
actions. The hiring-plan helpers turn persistent deficits into headcount,
cost and timeline.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from datetime import date

from labor_forecast.forecast.policy import ForecastPolicy
from labor_forecast.forecast.types import (
    ForecastAggregates,
    HiringNeeds,
    LaborDeficit,
    PersistentDeficit,
    Role,
    SeriesRecommendations,
    Severity,
    WeeklyForecast,
)

OVERTIME_LIMIT_HOURS = 40.0
SHORT_CONTRACT_LIMIT_HOURS = 80.0
APPRENTICE_OUTREACH_HOURS = 20.0

IMMEDIATE_WEEKS = 2
SHORT_TERM_END_WEEK = 6
SHORT_TERM_AVG_DEFICIT_HOURS = 80.0
SHORT_TERM_CRITICAL_WEEKS = 2

PERSISTENT_DEFICIT_SHARE = 0.5
URGENT_DEFICIT_PCT = 75.0
CONTRACTOR_CUTOFF_PCT = 50.0

SUMMER_PEAK_MONTHS = range(6, 10)  # June through September


def _short_date(d: date) -> str:
    return f"{d:%b} {d.day}"


def headcount(hours: float, hours_per_head: float) -> int:
    """Full-time heads needed to cover ``hours`` per week."""
    if hours <= 0:
        return 0
    # round off float noise before taking the ceiling
    return math.ceil(round(hours / hours_per_head, 6))


# ---------------------------------------------------------------------------
# Per-week
# ---------------------------------------------------------------------------


def weekly_recommendations(deficit: LaborDeficit) -> list[str]:
    """Plain-language guidance for a single week's deficit."""
    if not deficit.is_deficit:
        return []

    recs: list[str] = []
    total = deficit.total_deficit
    if total <= OVERTIME_LIMIT_HOURS:
        recs.append("Approve overtime for existing crew")
    elif total <= SHORT_CONTRACT_LIMIT_HOURS:
        recs.append("Hire 1-2 contractors for the week")
    else:
        recs.append(
            f"Significant deficit ({total:.0f}h) - reschedule non-critical work or hire multiple contractors"
        )

    if deficit.foremen_deficit > 0:
        recs.append("Foreman shortage - promote an experienced journeyman to lead")
    if deficit.apprentice_deficit > APPRENTICE_OUTREACH_HOURS:
        recs.append("Contact trade school for apprentice placement")
    return recs


# ---------------------------------------------------------------------------
# Series-level
# ---------------------------------------------------------------------------


def average_deficit(forecasts: Sequence[WeeklyForecast]) -> float:
    if not forecasts:
        return 0.0
    return sum(f.deficit.total_deficit for f in forecasts) / len(forecasts)


def analyze_persistent_deficit(forecasts: Sequence[WeeklyForecast]) -> PersistentDeficit | None:
    """Average role deficits over the weeks that show a deficit.

    Returns None when no week in the series has a deficit.
    """
    deficit_weeks = [f for f in forecasts if f.deficit.is_deficit]
    if not deficit_weeks:
        return None

    n = len(deficit_weeks)
    return PersistentDeficit(
        weeks_with_deficit=n,
        total_weeks=len(forecasts),
        deficit_percentage=n / len(forecasts) * 100,
        avg_foremen_deficit=sum(f.deficit.foremen_deficit for f in deficit_weeks) / n,
        avg_journeymen_deficit=sum(f.deficit.journeymen_deficit for f in deficit_weeks) / n,
        avg_apprentice_deficit=sum(f.deficit.apprentice_deficit for f in deficit_weeks) / n,
    )


def persistent_hiring_headcount(
    forecasts: Sequence[WeeklyForecast],
    hours_per_head: float = 40.0,
) -> HiringNeeds | None:
    """Permanent headcount implied by a persistent deficit.

    A deficit is persistent when at least half of the weeks show one;
    otherwise None is returned and no hiring is suggested.
    """
    persistent = analyze_persistent_deficit(forecasts)
    if persistent is None:
        return None
    if persistent.weeks_with_deficit < persistent.total_weeks * PERSISTENT_DEFICIT_SHARE:
        return None
    return HiringNeeds(
        foremen=headcount(persistent.avg_foremen_deficit, hours_per_head),
        journeymen=headcount(persistent.avg_journeymen_deficit, hours_per_head),
        apprentices=headcount(persistent.avg_apprentice_deficit, hours_per_head),
    )


def is_summer_peak(forecasts: Sequence[WeeklyForecast]) -> bool:
    return any(f.week_starting.month in SUMMER_PEAK_MONTHS for f in forecasts)


def series_recommendations(
    forecasts: Sequence[WeeklyForecast],
    division: str,
    hours_per_head: float = 40.0,
) -> SeriesRecommendations:
    """Bucket guidance for a whole forecast horizon."""
    immediate: list[str] = []
    short_term: list[str] = []
    long_term: list[str] = []

    for f in forecasts[:IMMEDIATE_WEEKS]:
        week = _short_date(f.week_starting)
        if f.deficit.severity is Severity.CRITICAL:
            immediate.append(
                f"Critical capacity shortage week of {week} - approve overtime or hire contractors immediately"
            )
        if f.deficit.foremen_deficit > 0:
            immediate.append(f"Foreman shortage week of {week} - assign lead journeyman or reschedule phases")

    avg_short = average_deficit(forecasts[IMMEDIATE_WEEKS:SHORT_TERM_END_WEEK])
    if avg_short > SHORT_TERM_AVG_DEFICIT_HOURS:
        short_term.append(
            f"Average deficit of {avg_short:.0f} hours/week over next month - initiate hiring process"
        )

    critical_weeks = sum(1 for f in forecasts if f.deficit.severity.is_critical_or_high)
    if critical_weeks > SHORT_TERM_CRITICAL_WEEKS:
        short_term.append(f"{critical_weeks} weeks with critical/high deficits - consider contractor agreements")

    if "HVAC" in division.upper() and is_summer_peak(forecasts):
        short_term.append("Summer peak season approaching - secure additional HVAC technicians")

    needs = persistent_hiring_headcount(forecasts, hours_per_head)
    if needs is not None and (needs.foremen or needs.journeymen or needs.apprentices):
        long_term.append(
            f"Persistent capacity deficit detected - recommend hiring {needs.foremen} foremen, "
            f"{needs.journeymen} journeymen, {needs.apprentices} apprentices"
        )

    return SeriesRecommendations(
        immediate=tuple(immediate),
        short_term=tuple(short_term),
        long_term=tuple(long_term),
    )


# ---------------------------------------------------------------------------
# Hiring plan
# ---------------------------------------------------------------------------


def calculate_hiring_needs(
    persistent: PersistentDeficit | None,
    hours_per_head: float = 40.0,
) -> HiringNeeds:
    """Split persistent deficits between permanent hires and contractors.

    When fewer than half of the weeks show a deficit, foreman and journeyman
    gaps are covered by contractors instead of permanent hires. Apprentice
    gaps are always filled by permanent hires.
    """
    if persistent is None:
        return HiringNeeds()

    apprentices = headcount(persistent.avg_apprentice_deficit, hours_per_head)
    if persistent.deficit_percentage < CONTRACTOR_CUTOFF_PCT:
        contractors = headcount(
            persistent.avg_foremen_deficit + persistent.avg_journeymen_deficit,
            hours_per_head,
        )
        return HiringNeeds(apprentices=apprentices, contractors=contractors)

    return HiringNeeds(
        foremen=headcount(persistent.avg_foremen_deficit, hours_per_head),
        journeymen=headcount(persistent.avg_journeymen_deficit, hours_per_head),
        apprentices=apprentices,
    )


def estimate_hiring_cost(needs: HiringNeeds, policy: ForecastPolicy) -> float:
    """Annualized cost of a hiring plan."""
    return (
        needs.foremen * policy.annual_cost_for(Role.FOREMAN)
        + needs.journeymen * policy.annual_cost_for(Role.JOURNEYMAN)
        + needs.apprentices * policy.annual_cost_for(Role.APPRENTICE)
        + needs.contractors * policy.contractor_annual_cost
    )


def hiring_timeline(persistent: PersistentDeficit | None) -> str:
    if persistent is None:
        return "No immediate hiring needed"
    if persistent.deficit_percentage > URGENT_DEFICIT_PCT:
        return "Immediate - within 2 weeks"
    if persistent.deficit_percentage > CONTRACTOR_CUTOFF_PCT:
        return "Short-term - within 1 month"
    return "Medium-term - within 3 months"


def hiring_justification(
    aggregates: ForecastAggregates,
    persistent: PersistentDeficit | None,
    needs: HiringNeeds,
) -> list[str]:
    """Reasons supporting a hiring plan, most urgent first."""
    reasons: list[str] = []

    if persistent is not None and persistent.deficit_percentage > URGENT_DEFICIT_PCT:
        reasons.append(f"Critical: {persistent.deficit_percentage:.0f}% of weeks show labor deficit")

    if aggregates.critical_weeks > 0:
        reasons.append(f"{aggregates.critical_weeks} weeks with critical/high severity deficits")

    if needs.foremen > 0:
        reasons.append(f"Need {needs.foremen} additional foremen to meet project leadership requirements")

    if needs.contractors > 0:
        reasons.append(f"Recommend {needs.contractors} contractors for flexible capacity")

    if aggregates.total_supply > 0:
        utilization = aggregates.total_demand / aggregates.total_supply * 100
        if utilization > 100:
            reasons.append(f"Division operating at {utilization:.0f}% utilization - unsustainable")
    elif aggregates.total_demand > 0:
        reasons.append("No available labor supply against scheduled demand")

    return reasons
