"""Add run parameter columns to labor_forecast_snapshots.

Revision ID: 002
Revises: 001
Create Date: 2026-10-18
"""

from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column("labor_forecast_snapshots", sa.Column("horizon_start", sa.Date(), nullable=True))
    op.add_column(
        "labor_forecast_snapshots",
        sa.Column("horizon_weeks", sa.Integer(), nullable=False, server_default="0"),
    )
    op.add_column(
        "labor_forecast_snapshots",
        sa.Column("buffer_percentage", sa.Float(), nullable=False, server_default="0.0"),
    )
    op.add_column(
        "labor_forecast_snapshots",
        sa.Column("include_quoted_projects", sa.Boolean(), nullable=False, server_default=sa.true()),
    )


def downgrade() -> None:
    op.drop_column("labor_forecast_snapshots", "include_quoted_projects")
    op.drop_column("labor_forecast_snapshots", "buffer_percentage")
    op.drop_column("labor_forecast_snapshots", "horizon_weeks")
    op.drop_column("labor_forecast_snapshots", "horizon_start")
