"""Gap between demand and supply, and its severity tier."""

from __future__ import annotations

from collections.abc import Sequence

from labor_forecast.forecast.types import (
    ROLE_DEFICIT_FIELDS,
    LaborDeficit,
    LaborDemand,
    LaborSupply,
    Role,
    Severity,
)

# Lower bounds (deficit as % of supply) of each tier above LOW
MEDIUM_THRESHOLD_PCT = 10.0
HIGH_THRESHOLD_PCT = 25.0
CRITICAL_THRESHOLD_PCT = 50.0


def classify_severity(deficit: float, supply: float) -> Severity:
    """Bucket a deficit by its share of supply.

    The ratio is taken against supply rather than demand; any deficit
    against zero supply is CRITICAL.
    """
    if deficit <= 0:
        return Severity.LOW
    if supply <= 0:
        return Severity.CRITICAL

    pct = deficit / supply * 100
    if pct >= CRITICAL_THRESHOLD_PCT:
        return Severity.CRITICAL
    if pct >= HIGH_THRESHOLD_PCT:
        return Severity.HIGH
    if pct >= MEDIUM_THRESHOLD_PCT:
        return Severity.MEDIUM
    return Severity.LOW


def analyze_deficit(demand: LaborDemand, supply: LaborSupply) -> LaborDeficit:
    """Per-role and total shortfall of ``supply`` against ``demand``."""
    total = max(0.0, demand.total_hours - supply.total_hours)
    by_role = {
        ROLE_DEFICIT_FIELDS[role]: max(0.0, demand.hours_for(role) - supply.hours_for(role))
        for role in Role
    }
    return LaborDeficit(
        total_deficit=total,
        is_deficit=total > 0,
        severity=classify_severity(total, supply.total_hours),
        **by_role,
    )


def identify_critical_periods(deficits: Sequence[LaborDeficit]) -> list[int]:
    """Indexes of the HIGH or CRITICAL entries of a deficit series."""
    return [i for i, d in enumerate(deficits) if d.severity.is_critical_or_high]


def cumulative_deficit(deficits: Sequence[LaborDeficit]) -> list[float]:
    """Running total of the deficit hours across a series."""
    running = 0.0
    out: list[float] = []
    for d in deficits:
        running += d.total_deficit
        out.append(running)
    return out
