"""Business policy values used by the forecast pipeline.

These are tuning knobs, not structural constraints. Defaults mirror the
values the business has run with; ``ForecastPolicy.from_settings`` lets an
operator override any of them through environment configuration.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from labor_forecast.core.config import Settings
from labor_forecast.forecast.types import Role


def _default_allocation() -> dict[Role, float]:
    return {Role.FOREMAN: 0.20, Role.JOURNEYMAN: 0.50, Role.APPRENTICE: 0.30}


def _default_annual_costs() -> dict[Role, float]:
    return {Role.FOREMAN: 100_000.0, Role.JOURNEYMAN: 75_000.0, Role.APPRENTICE: 45_000.0}


@dataclass(frozen=True)
class ForecastPolicy:
    """Policy constants for demand allocation, staffing and cost.

    Attributes:
        role_allocation: Share of a phase's weekly hours attributed to each
            role. The foreman share only applies to phases that require one.
        quoted_probability: Weight applied to phases of quoted projects.
        standard_weekly_hours: Hours one full-time head covers per week.
        historical_accuracy: Placeholder score for the historical-accuracy
            confidence factor until backtesting data exists.
        annual_costs: Annual cost per permanent head by role.
        contractor_annual_cost: Annualized cost of one contractor.
    """

    role_allocation: dict[Role, float] = field(default_factory=_default_allocation)
    quoted_probability: float = 0.5
    standard_weekly_hours: float = 40.0
    historical_accuracy: float = 75.0
    annual_costs: dict[Role, float] = field(default_factory=_default_annual_costs)
    contractor_annual_cost: float = 120_000.0

    def allocation_for(self, role: Role) -> float:
        return self.role_allocation.get(role, 0.0)

    def annual_cost_for(self, role: Role) -> float:
        return self.annual_costs.get(role, 0.0)

    @classmethod
    def from_settings(cls, settings: Settings) -> ForecastPolicy:
        return cls(
            role_allocation={
                Role.FOREMAN: settings.foreman_allocation,
                Role.JOURNEYMAN: settings.journeyman_allocation,
                Role.APPRENTICE: settings.apprentice_allocation,
            },
            quoted_probability=settings.quoted_probability,
            standard_weekly_hours=settings.standard_weekly_hours,
            historical_accuracy=settings.historical_accuracy_score,
            annual_costs={
                Role.FOREMAN: settings.foreman_annual_cost,
                Role.JOURNEYMAN: settings.journeyman_annual_cost,
                Role.APPRENTICE: settings.apprentice_annual_cost,
            },
            contractor_annual_cost=settings.contractor_annual_cost,
        )
