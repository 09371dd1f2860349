# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Initial billing schema: students, teachers, fees and salaries.

Revision ID: 001_initial_billing_schema
Revises:
Create Date: 2025-10-01
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001_initial_billing_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id_column() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=False),
        server_default=sa.text("gen_random_uuid()"),
        nullable=False,
    )


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def _create_period_table(table: str, subject_column: str, subject_table: str) -> None:
    op.create_table(
        table,
        _id_column(),
        sa.Column(subject_column, postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("school_id", postgresql.UUID(as_uuid=False), nullable=True),
        sa.Column("month", sa.Integer, nullable=False),
        sa.Column("year", sa.Integer, nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("status", sa.String(10), nullable=False, server_default="unpaid"),
        sa.Column("paid_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reset_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint([subject_column], [f"{subject_table}.id"], ondelete="CASCADE"),
        sa.UniqueConstraint(subject_column, "month", "year", name=f"uq_{table}__period"),
        sa.CheckConstraint("month BETWEEN 1 AND 12", name=f"ck_{table}__month"),
        sa.CheckConstraint("year BETWEEN 2000 AND 2100", name=f"ck_{table}__year"),
        sa.CheckConstraint("amount >= 0", name=f"ck_{table}__amount"),
        sa.CheckConstraint("status IN ('paid', 'unpaid')", name=f"ck_{table}__status"),
    )
    op.create_index(f"ix_{table}_{subject_column}", table, [subject_column])
    op.create_index(f"ix_{table}__status_paid_date", table, ["status", "paid_date"])


def upgrade() -> None:
    """Create subject and period tables."""
    op.execute('CREATE EXTENSION IF NOT EXISTS "pgcrypto"')

    op.create_table(
        "students",
        _id_column(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("school_id", postgresql.UUID(as_uuid=False), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "teachers",
        _id_column(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("school_id", postgresql.UUID(as_uuid=False), nullable=True),
        sa.Column("push_token", sa.String(512), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    _create_period_table("student_fees", "student_id", "students")
    _create_period_table("teacher_salary", "teacher_id", "teachers")


def downgrade() -> None:
    """Drop billing tables."""
    op.drop_table("teacher_salary")
    op.drop_table("student_fees")
    op.drop_table("teachers")
    op.drop_table("students")
