# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Fee and salary period records.

A period record belongs to one subject (student or teacher) and one
(month, year). The pair is unique per subject, so at most one fee and one
salary row exists for a given month.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class PeriodStatus(str, Enum):
    """Payment status of a period record."""

    PAID = "paid"
    UNPAID = "unpaid"


class PeriodRecordMixin(UUIDPrimaryKeyMixin, TimestampMixin):
    """Columns shared by student fees and teacher salaries.

    Subclasses set ``subject_column`` to the name of their subject FK column.
    """

    school_id: Mapped[str | None] = mapped_column(UUID(as_uuid=False), nullable=True)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    status: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        default=PeriodStatus.UNPAID.value,
        server_default=PeriodStatus.UNPAID.value,
    )
    paid_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    reset_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    @property
    def subject_id(self) -> str:
        """ID of the student or teacher this record bills."""
        return getattr(self, self.subject_column)

    @property
    def is_paid(self) -> bool:
        """Check whether the record is currently marked paid."""
        return self.status == PeriodStatus.PAID.value


def _period_constraints(table: str, subject_column: str) -> tuple:
    return (
        UniqueConstraint(subject_column, "month", "year", name=f"uq_{table}__period"),
        CheckConstraint("month BETWEEN 1 AND 12", name=f"ck_{table}__month"),
        CheckConstraint("year BETWEEN 2000 AND 2100", name=f"ck_{table}__year"),
        CheckConstraint("amount >= 0", name=f"ck_{table}__amount"),
        CheckConstraint("status IN ('paid', 'unpaid')", name=f"ck_{table}__status"),
        Index(f"ix_{table}__status_paid_date", "status", "paid_date"),
    )


class StudentFee(PeriodRecordMixin, Base):
    """Monthly fee owed by a student."""

    __tablename__ = "student_fees"
    __table_args__ = _period_constraints("student_fees", "student_id")

    subject_column = "student_id"

    student_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


class TeacherSalary(PeriodRecordMixin, Base):
    """Monthly salary owed to a teacher."""

    __tablename__ = "teacher_salary"
    __table_args__ = _period_constraints("teacher_salary", "teacher_id")

    subject_column = "teacher_id"

    teacher_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("teachers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
