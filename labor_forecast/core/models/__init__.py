"""SQLAlchemy models for the labor forecast engine.

This package re-exports all models and enums from domain-specific modules
so that code can use ``from labor_forecast.core.models import X``.
"""

from labor_forecast.core.models.forecast import LaborForecastSnapshot
from labor_forecast.core.models.project import (
    Division,
    PhaseStatus,
    Project,
    ProjectPhase,
    ProjectStatus,
)
from labor_forecast.core.models.workforce import CrewAssignment, Employee, EmployeeType

__all__ = [
    "CrewAssignment",
    "Division",
    "Employee",
    "EmployeeType",
    "LaborForecastSnapshot",
    "PhaseStatus",
    "Project",
    "ProjectPhase",
    "ProjectStatus",
]
