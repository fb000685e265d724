"""Forecast pipeline: demand, supply, deficit, confidence and recommendations.

``LaborForecastService`` composes the calculators over the repository ports
in ``ports``; the pure functions are exported for callers that already hold
the inputs.
"""

from __future__ import annotations

from labor_forecast.forecast.confidence import calculate_confidence, confidence_level
from labor_forecast.forecast.deficit import analyze_deficit, classify_severity, cumulative_deficit, identify_critical_periods
from labor_forecast.forecast.demand import DemandCalculator
from labor_forecast.forecast.errors import (
    ForecastConfigError,
    ForecastError,
    ForecastTimeoutError,
    SnapshotPersistenceError,
)
from labor_forecast.forecast.policy import ForecastPolicy
from labor_forecast.forecast.service import LaborForecastService
from labor_forecast.forecast.supply import SupplyCalculator
from labor_forecast.forecast.types import (
    CriticalShortage,
    ForecastConfig,
    ForecastSummary,
    HiringPlan,
    LaborDeficit,
    LaborDemand,
    LaborSupply,
    PlannedHire,
    PlannedTermination,
    Role,
    Severity,
    WeeklyForecast,
)

__all__ = [
    "CriticalShortage",
    "DemandCalculator",
    "ForecastConfig",
    "ForecastConfigError",
    "ForecastError",
    "ForecastPolicy",
    "ForecastSummary",
    "ForecastTimeoutError",
    "HiringPlan",
    "LaborDeficit",
    "LaborDemand",
    "LaborForecastService",
    "LaborSupply",
    "PlannedHire",
    "PlannedTermination",
    "Role",
    "Severity",
    "SnapshotPersistenceError",
    "SupplyCalculator",
    "WeeklyForecast",
    "analyze_deficit",
    "calculate_confidence",
    "classify_severity",
    "confidence_level",
    "cumulative_deficit",
    "identify_critical_periods",
]
