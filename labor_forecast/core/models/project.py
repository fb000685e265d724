"""Project models: division/status enums, Project, ProjectPhase."""

from __future__ import annotations

import enum
import uuid
from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, Enum, Float, ForeignKey, Index, Integer, String, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from labor_forecast.core.database import Base


class Division(enum.StrEnum):
    """Trade and market segment a project or employee belongs to."""

    PLUMBING_MULTIFAMILY = "PLUMBING_MULTIFAMILY"
    PLUMBING_COMMERCIAL = "PLUMBING_COMMERCIAL"
    PLUMBING_CUSTOM = "PLUMBING_CUSTOM"
    HVAC_MULTIFAMILY = "HVAC_MULTIFAMILY"
    HVAC_COMMERCIAL = "HVAC_COMMERCIAL"
    HVAC_CUSTOM = "HVAC_CUSTOM"


class ProjectStatus(enum.StrEnum):
    """Commercial lifecycle of a project."""

    QUOTED = "QUOTED"
    AWARDED = "AWARDED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CLOSED = "CLOSED"


class PhaseStatus(enum.StrEnum):
    """Execution status of a project phase."""

    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    DELAYED = "DELAYED"
    COMPLETED = "COMPLETED"


class Project(Base):
    """A contracted or quoted job."""

    __tablename__ = "projects"
    __table_args__ = (Index("ix_projects_division_status", "division", "status"),)

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    division: Mapped[Division] = mapped_column(
        Enum(Division, values_callable=lambda e: [x.value for x in e]), nullable=False
    )
    status: Mapped[ProjectStatus] = mapped_column(
        Enum(ProjectStatus, values_callable=lambda e: [x.value for x in e]),
        nullable=False,
        default=ProjectStatus.QUOTED,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    phases: Mapped[list[ProjectPhase]] = relationship("ProjectPhase", back_populates="project")

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, name='{self.name}', status='{self.status}')>"


class ProjectPhase(Base):
    """A scheduled segment of project work with its own labor-hour budget."""

    __tablename__ = "project_phases"
    __table_args__ = (
        Index("ix_project_phases_project_id", "project_id"),
        Index("ix_project_phases_division_dates", "division", "start_date", "end_date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    project_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    division: Mapped[Division] = mapped_column(
        Enum(Division, values_callable=lambda e: [x.value for x in e]), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    labor_hours: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    required_foreman: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    status: Mapped[PhaseStatus] = mapped_column(
        Enum(PhaseStatus, values_callable=lambda e: [x.value for x in e]),
        nullable=False,
        default=PhaseStatus.NOT_STARTED,
    )

    project: Mapped[Project] = relationship("Project", back_populates="phases")

    def __repr__(self) -> str:
        return f"<ProjectPhase(id={self.id}, name='{self.name}', {self.start_date}..{self.end_date})>"
