"""Create project, workforce and forecast snapshot tables.

Tables: projects, project_phases, employees, crew_assignments,
        labor_forecast_snapshots.

Revision ID: 001
Revises:
Create Date: 2026-10-12
"""

from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_DIVISIONS = (
    "PLUMBING_MULTIFAMILY",
    "PLUMBING_COMMERCIAL",
    "PLUMBING_CUSTOM",
    "HVAC_MULTIFAMILY",
    "HVAC_COMMERCIAL",
    "HVAC_CUSTOM",
)


def upgrade() -> None:
    postgresql.ENUM(*_DIVISIONS, name="division").create(op.get_bind(), checkfirst=True)
    # shared by four tables
    division_col = postgresql.ENUM(*_DIVISIONS, name="division", create_type=False)

    # -- projects --
    op.create_table(
        "projects",
        sa.Column("id", sa.UUID(), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("division", division_col, nullable=False),
        sa.Column("status", sa.Enum("QUOTED", "AWARDED", "IN_PROGRESS", "COMPLETED", "CLOSED", name="projectstatus", create_type=True), nullable=False, server_default="QUOTED"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_projects_division_status", "projects", ["division", "status"])

    # -- project_phases --
    op.create_table(
        "project_phases",
        sa.Column("id", sa.UUID(), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("project_id", sa.UUID(), sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False),
        sa.Column("division", division_col, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("labor_hours", sa.Float(), nullable=False, server_default="0.0"),
        sa.Column("required_foreman", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("status", sa.Enum("NOT_STARTED", "IN_PROGRESS", "DELAYED", "COMPLETED", name="phasestatus", create_type=True), nullable=False, server_default="NOT_STARTED"),
    )
    op.create_index("ix_project_phases_project_id", "project_phases", ["project_id"])
    op.create_index("ix_project_phases_division_dates", "project_phases", ["division", "start_date", "end_date"])

    # -- employees --
    op.create_table(
        "employees",
        sa.Column("id", sa.UUID(), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("division", division_col, nullable=False),
        sa.Column("employee_type", sa.Enum("FOREMAN", "JOURNEYMAN", "APPRENTICE", name="employeetype", create_type=True), nullable=False),
        sa.Column("max_hours_per_week", sa.Float(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("availability_start", sa.Date(), nullable=False),
        sa.Column("availability_end", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_employees_division_active", "employees", ["division", "is_active"])

    # -- crew_assignments --
    op.create_table(
        "crew_assignments",
        sa.Column("id", sa.UUID(), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("employee_id", sa.UUID(), sa.ForeignKey("employees.id", ondelete="CASCADE"), nullable=False),
        sa.Column("phase_id", sa.UUID(), sa.ForeignKey("project_phases.id", ondelete="CASCADE"), nullable=False),
        sa.Column("assignment_date", sa.Date(), nullable=False),
        sa.Column("hours_allocated", sa.Float(), nullable=False, server_default="8.0"),
    )
    op.create_index("ix_crew_assignments_employee_date", "crew_assignments", ["employee_id", "assignment_date"])
    op.create_index("ix_crew_assignments_phase_id", "crew_assignments", ["phase_id"])

    # -- labor_forecast_snapshots --
    op.create_table(
        "labor_forecast_snapshots",
        sa.Column("id", sa.UUID(), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("division", division_col, nullable=False),
        sa.Column("week_starting", sa.Date(), nullable=False),
        sa.Column("forecast_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("required_hours", sa.Float(), nullable=False, server_default="0.0"),
        sa.Column("required_foremen_hours", sa.Float(), nullable=False, server_default="0.0"),
        sa.Column("required_journeymen_hours", sa.Float(), nullable=False, server_default="0.0"),
        sa.Column("required_apprentice_hours", sa.Float(), nullable=False, server_default="0.0"),
        sa.Column("required_foremen", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("required_journeymen", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("required_apprentices", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("project_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("phase_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("available_hours", sa.Float(), nullable=False, server_default="0.0"),
        sa.Column("available_foremen_hours", sa.Float(), nullable=False, server_default="0.0"),
        sa.Column("available_journeymen_hours", sa.Float(), nullable=False, server_default="0.0"),
        sa.Column("available_apprentice_hours", sa.Float(), nullable=False, server_default="0.0"),
        sa.Column("employee_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("available_employees", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("deficit", sa.Float(), nullable=False, server_default="0.0"),
        sa.Column("foremen_deficit", sa.Float(), nullable=False, server_default="0.0"),
        sa.Column("journeymen_deficit", sa.Float(), nullable=False, server_default="0.0"),
        sa.Column("apprentice_deficit", sa.Float(), nullable=False, server_default="0.0"),
        sa.Column("severity", sa.String(16), nullable=False, server_default="LOW"),
        sa.Column("recommendations", sa.JSON(), nullable=True),
        sa.Column("confidence", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("min_confidence", sa.Float(), nullable=False, server_default="0.0"),
        sa.Column("generated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("division", "week_starting", "forecast_date", name="uq_labor_forecast_snapshots_division_week_run"),
    )
    op.create_index("ix_labor_forecast_snapshots_division_generated", "labor_forecast_snapshots", ["division", "generated_at"])


def downgrade() -> None:
    op.drop_table("labor_forecast_snapshots")
    op.drop_table("crew_assignments")
    op.drop_table("employees")
    op.drop_table("project_phases")
    op.drop_table("projects")

    op.execute("DROP TYPE IF EXISTS employeetype")
    op.execute("DROP TYPE IF EXISTS phasestatus")
    op.execute("DROP TYPE IF EXISTS projectstatus")
    op.execute("DROP TYPE IF EXISTS division")
