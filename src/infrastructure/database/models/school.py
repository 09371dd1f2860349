# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student and teacher models.

Both tables are owned by the school's CRUD screens. The billing code only
reads them to create monthly records and to address notifications.
"""

from sqlalchemy import String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Student(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A student who is billed a monthly fee."""

    __tablename__ = "students"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    school_id: Mapped[str | None] = mapped_column(UUID(as_uuid=False), nullable=True)


class Teacher(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A teacher who receives a monthly salary.

    Attributes:
        push_token: FCM registration token of the teacher's device, if any.
    """

    __tablename__ = "teachers"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    school_id: Mapped[str | None] = mapped_column(UUID(as_uuid=False), nullable=True)
    push_token: Mapped[str | None] = mapped_column(String(512), nullable=True)
