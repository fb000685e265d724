"""Workforce models: EmployeeType enum, Employee, CrewAssignment."""

from __future__ import annotations

import enum
import uuid
from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, Enum, Float, ForeignKey, Index, String, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from labor_forecast.core.database import Base
from labor_forecast.core.models.project import Division


class EmployeeType(enum.StrEnum):
    """Trade classification of a field employee."""

    FOREMAN = "FOREMAN"
    JOURNEYMAN = "JOURNEYMAN"
    APPRENTICE = "APPRENTICE"


class Employee(Base):
    """A field employee with a weekly hour cap and an availability window."""

    __tablename__ = "employees"
    __table_args__ = (Index("ix_employees_division_active", "division", "is_active"),)

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    division: Mapped[Division] = mapped_column(
        Enum(Division, values_callable=lambda e: [x.value for x in e]), nullable=False
    )
    employee_type: Mapped[EmployeeType] = mapped_column(
        Enum(EmployeeType, values_callable=lambda e: [x.value for x in e]), nullable=False
    )
    max_hours_per_week: Mapped[float | None] = mapped_column(Float, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    availability_start: Mapped[date] = mapped_column(Date, nullable=False)
    availability_end: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    assignments: Mapped[list[CrewAssignment]] = relationship("CrewAssignment", back_populates="employee")

    def __repr__(self) -> str:
        return f"<Employee(id={self.id}, name='{self.name}', type='{self.employee_type}')>"


class CrewAssignment(Base):
    """Hours an employee is booked against a phase on a given day."""

    __tablename__ = "crew_assignments"
    __table_args__ = (
        Index("ix_crew_assignments_employee_date", "employee_id", "assignment_date"),
        Index("ix_crew_assignments_phase_id", "phase_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    employee_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("employees.id", ondelete="CASCADE"), nullable=False
    )
    phase_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("project_phases.id", ondelete="CASCADE"), nullable=False
    )
    assignment_date: Mapped[date] = mapped_column(Date, nullable=False)
    hours_allocated: Mapped[float] = mapped_column(Float, nullable=False, default=8.0)

    employee: Mapped[Employee] = relationship("Employee", back_populates="assignments")

    def __repr__(self) -> str:
        return f"<CrewAssignment(employee={self.employee_id}, date={self.assignment_date}, hours={self.hours_allocated})>"
