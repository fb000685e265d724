"""Forecast reliability score.

Five weighted factors, each scored 0-100, combine into a single 0-100
confidence value. The weights sum to 1.0.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from labor_forecast.forecast.types import LaborDemand, LaborSupply
from labor_forecast.forecast.weeks import weeks_between

TIME_WEIGHT = 0.3
PROJECT_WEIGHT = 0.2
SUPPLY_WEIGHT = 0.2
HISTORICAL_WEIGHT = 0.2
COMPLETENESS_WEIGHT = 0.1

DECAY_PER_WEEK = 5.0
POINTS_PER_PROJECT = 20.0
DEFAULT_HISTORICAL_ACCURACY = 75.0


@dataclass(frozen=True)
class ConfidenceLevel:
    level: str
    description: str


def time_distance_score(week_starting: date, today: date) -> float:
    """100 for the current week, minus 5 per week out, floored at 0."""
    weeks_out = max(0, weeks_between(today, week_starting))
    return max(0.0, 100.0 - weeks_out * DECAY_PER_WEEK)


def project_stability_score(demand: LaborDemand) -> float:
    return min(100.0, demand.project_count * POINTS_PER_PROJECT)


def supply_stability_score(supply: LaborSupply) -> float:
    if supply.employee_count <= 0:
        return 0.0
    return min(100.0, supply.available_employees / supply.employee_count * 100)


def data_completeness_score(demand: LaborDemand, supply: LaborSupply) -> float:
    """Start at 100 and deduct for each missing input."""
    score = 100.0
    if demand.phase_count == 0:
        score -= 20
    if supply.employee_count == 0:
        score -= 20
    if demand.total_hours == 0:
        score -= 10
    if supply.total_hours == 0:
        score -= 10
    return max(0.0, score)


def calculate_confidence(
    demand: LaborDemand,
    supply: LaborSupply,
    week_starting: date,
    *,
    today: date,
    historical_accuracy: float = DEFAULT_HISTORICAL_ACCURACY,
) -> int:
    """Weighted 0-100 confidence for one week's forecast."""
    weighted = (
        TIME_WEIGHT * time_distance_score(week_starting, today)
        + PROJECT_WEIGHT * project_stability_score(demand)
        + SUPPLY_WEIGHT * supply_stability_score(supply)
        + HISTORICAL_WEIGHT * min(100.0, max(0.0, historical_accuracy))
        + COMPLETENESS_WEIGHT * data_completeness_score(demand, supply)
    )
    return round(min(100.0, max(0.0, weighted)))


def confidence_level(confidence: float) -> ConfidenceLevel:
    if confidence >= 80:
        return ConfidenceLevel("HIGH", "High confidence forecast")
    if confidence >= 60:
        return ConfidenceLevel("MEDIUM", "Moderate confidence forecast")
    return ConfidenceLevel("LOW", "Low confidence forecast - interpret with caution")
