"""Value types flowing through the forecast pipeline.

Calculation results are frozen dataclasses; the caller-supplied
``ForecastConfig`` is a pydantic model so it is validated once at the
orchestration boundary.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class Role(enum.StrEnum):
    """Closed set of field roles shared by demand, supply and deficit."""

    FOREMAN = "FOREMAN"
    JOURNEYMAN = "JOURNEYMAN"
    APPRENTICE = "APPRENTICE"


class Severity(enum.StrEnum):
    """Deficit severity tier, ordered by ``rank``."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    @property
    def is_critical_or_high(self) -> bool:
        return self in (Severity.HIGH, Severity.CRITICAL)


_SEVERITY_RANK = {
    Severity.LOW: 1,
    Severity.MEDIUM: 2,
    Severity.HIGH: 3,
    Severity.CRITICAL: 4,
}

ROLE_HOUR_FIELDS: dict[Role, str] = {
    Role.FOREMAN: "foremen_hours",
    Role.JOURNEYMAN: "journeymen_hours",
    Role.APPRENTICE: "apprentice_hours",
}

ROLE_DEFICIT_FIELDS: dict[Role, str] = {
    Role.FOREMAN: "foremen_deficit",
    Role.JOURNEYMAN: "journeymen_deficit",
    Role.APPRENTICE: "apprentice_deficit",
}


@dataclass(frozen=True)
class LaborDemand:
    """Hours required by scheduled or quoted work in one week.

    ``total_hours`` is advisory: role hours come from a heuristic split and
    need not sum to it.
    """

    total_hours: float = 0.0
    foremen_hours: float = 0.0
    journeymen_hours: float = 0.0
    apprentice_hours: float = 0.0
    project_count: int = 0
    phase_count: int = 0

    def hours_for(self, role: Role) -> float:
        return float(getattr(self, ROLE_HOUR_FIELDS[role]))


@dataclass(frozen=True)
class LaborSupply:
    """Hours available from the workforce in one week, net of bookings."""

    total_hours: float = 0.0
    foremen_hours: float = 0.0
    journeymen_hours: float = 0.0
    apprentice_hours: float = 0.0
    employee_count: int = 0
    available_employees: int = 0

    def hours_for(self, role: Role) -> float:
        return float(getattr(self, ROLE_HOUR_FIELDS[role]))


@dataclass(frozen=True)
class LaborDeficit:
    """Shortfall of supply against demand, per role and overall."""

    total_deficit: float = 0.0
    foremen_deficit: float = 0.0
    journeymen_deficit: float = 0.0
    apprentice_deficit: float = 0.0
    is_deficit: bool = False
    severity: Severity = Severity.LOW

    def deficit_for(self, role: Role) -> float:
        return float(getattr(self, ROLE_DEFICIT_FIELDS[role]))


@dataclass(frozen=True)
class WeeklyForecast:
    """Forecast for one division and one ISO week."""

    week_starting: date
    division: str
    demand: LaborDemand
    supply: LaborSupply
    deficit: LaborDeficit
    recommendations: tuple[str, ...] = ()
    confidence: int = 0
    meets_min_confidence: bool = True


@dataclass(frozen=True)
class ForecastPeriod:
    start: date
    end: date
    weeks: int


@dataclass(frozen=True)
class ForecastAggregates:
    total_demand: float = 0.0
    total_supply: float = 0.0
    total_deficit: float = 0.0
    deficit_weeks: int = 0
    critical_weeks: int = 0
    average_confidence: float = 0.0
    low_confidence_weeks: int = 0


@dataclass(frozen=True)
class SeriesRecommendations:
    immediate: tuple[str, ...] = ()
    short_term: tuple[str, ...] = ()
    long_term: tuple[str, ...] = ()


@dataclass(frozen=True)
class ForecastSummary:
    """Top-level result of one forecast run for a division.

    ``snapshot_error`` carries the message of a failed snapshot write; the
    computed figures are still valid when it is set.
    """

    division: str
    forecast_date: datetime
    period: ForecastPeriod
    weekly_forecasts: tuple[WeeklyForecast, ...]
    aggregates: ForecastAggregates
    recommendations: SeriesRecommendations
    snapshot_error: str | None = None


@dataclass(frozen=True)
class CriticalShortage:
    division: str
    week: date
    deficit: LaborDeficit
    impact: str


@dataclass(frozen=True)
class PersistentDeficit:
    """Deficit statistics over the weeks of a horizon that show a deficit."""

    weeks_with_deficit: int
    total_weeks: int
    deficit_percentage: float
    avg_foremen_deficit: float
    avg_journeymen_deficit: float
    avg_apprentice_deficit: float


@dataclass(frozen=True)
class HiringNeeds:
    foremen: int = 0
    journeymen: int = 0
    apprentices: int = 0
    contractors: int = 0


@dataclass(frozen=True)
class HiringPlan:
    division: str
    foremen: int
    journeymen: int
    apprentices: int
    contractors: int
    timeline: str
    estimated_cost: float
    justification: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class PlannedHire:
    """Hypothetical hires of one role starting on ``start_date``."""

    role: Role
    count: int
    start_date: date


@dataclass(frozen=True)
class PlannedTermination:
    employee_id: str
    effective_date: date


class ForecastConfig(BaseModel):
    """Caller-supplied forecast parameters."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    forecast_weeks: int = Field(default=13, ge=1, le=52)
    min_confidence: float = Field(default=60.0, ge=0, le=100)
    include_quoted_projects: bool = True
    buffer_percentage: float = Field(default=10.0, ge=0, le=100)
