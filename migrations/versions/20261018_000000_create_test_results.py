"""Create test_results table.

Revision ID: 001
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "test_results",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("component", sa.String(length=255), nullable=False),
        sa.Column("version", sa.String(length=100), nullable=False),
        sa.Column("build_number", sa.Integer(), nullable=False),
        sa.Column("platform", sa.String(length=100), nullable=False),
        sa.Column("test_key", sa.String(length=1000), nullable=False),
        sa.Column("duration_millis", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_test_results_component_version_build",
        "test_results",
        ["component", "version", "build_number"],
    )


def downgrade() -> None:
    op.drop_index("ix_test_results_component_version_build", table_name="test_results")
    op.drop_table("test_results")
