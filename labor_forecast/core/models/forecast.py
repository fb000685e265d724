"""Labor forecast snapshot model.

One row per (division, week_starting, forecast_date). Rows are written once
per forecast run and never mutated by later runs; a new run gets a new
forecast_date.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, Enum, Float, Index, Integer, String, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import JSON, UUID
from sqlalchemy.orm import Mapped, mapped_column

from labor_forecast.core.database import Base
from labor_forecast.core.models.project import Division


class LaborForecastSnapshot(Base):
    """Persisted figures for one division/week of one forecast run."""

    __tablename__ = "labor_forecast_snapshots"
    __table_args__ = (
        UniqueConstraint(
            "division", "week_starting", "forecast_date",
            name="uq_labor_forecast_snapshots_division_week_run",
        ),
        Index("ix_labor_forecast_snapshots_division_generated", "division", "generated_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    division: Mapped[Division] = mapped_column(
        Enum(Division, values_callable=lambda e: [x.value for x in e]), nullable=False
    )
    week_starting: Mapped[date] = mapped_column(Date, nullable=False)
    forecast_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # Demand (buffered)
    required_hours: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    required_foremen_hours: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    required_journeymen_hours: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    required_apprentice_hours: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    required_foremen: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    required_journeymen: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    required_apprentices: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    project_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    phase_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Supply
    available_hours: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    available_foremen_hours: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    available_journeymen_hours: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    available_apprentice_hours: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    employee_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    available_employees: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Deficit
    deficit: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    foremen_deficit: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    journeymen_deficit: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    apprentice_deficit: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    severity: Mapped[str] = mapped_column(String(16), nullable=False, default="LOW")

    recommendations: Mapped[list | None] = mapped_column(JSON, nullable=True)
    confidence: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    min_confidence: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    # Run parameters
    horizon_start: Mapped[date | None] = mapped_column(Date, nullable=True)
    horizon_weeks: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    buffer_percentage: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    include_quoted_projects: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    generated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        return (
            f"<LaborForecastSnapshot(division='{self.division}', week={self.week_starting}, "
            f"run={self.forecast_date}, deficit={self.deficit})>"
        )
