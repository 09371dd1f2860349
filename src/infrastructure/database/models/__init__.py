# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy models for the school database."""

from src.infrastructure.database.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from src.infrastructure.database.models.billing import (
    PeriodRecordMixin,
    PeriodStatus,
    StudentFee,
    TeacherSalary,
)
from src.infrastructure.database.models.school import Student, Teacher

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "PeriodRecordMixin",
    "PeriodStatus",
    "StudentFee",
    "TeacherSalary",
    "Student",
    "Teacher",
]
