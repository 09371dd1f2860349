# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests
- Integration tests
"""

from collections.abc import Generator
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.core.config import clear_settings_cache
from src.infrastructure.database.models import StudentFee, TeacherSalary


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def fresh_settings() -> Generator[None, None, None]:
    """Reload settings around every test so env patches take effect."""
    clear_settings_cache()
    yield
    clear_settings_cache()


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )


# =============================================================================
# Helper Fixtures
# =============================================================================


@pytest.fixture
def fixed_now() -> datetime:
    """Provide a fixed current time."""
    return datetime(2025, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(fixed_now):
    """Provide a clock returning the fixed current time."""
    return lambda: fixed_now


@pytest.fixture
def mock_db():
    """Create mock database session."""
    db = AsyncMock()
    db.add = MagicMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock()
    db.execute = AsyncMock()
    db.get = AsyncMock()
    return db


@pytest.fixture
def sample_student_id() -> str:
    """Provide a sample student ID for testing."""
    return "550e8400-e29b-41d4-a716-446655440001"


@pytest.fixture
def sample_teacher_id() -> str:
    """Provide a sample teacher ID for testing."""
    return "550e8400-e29b-41d4-a716-446655440002"


@pytest.fixture
def sample_school_id() -> str:
    """Provide a sample school ID for testing."""
    return "550e8400-e29b-41d4-a716-446655440000"


@pytest.fixture
def make_fee(sample_student_id):
    """Provide a factory for transient StudentFee rows."""

    def _make(
        status: str = "unpaid",
        paid_date: datetime | None = None,
        month: int = 3,
        year: int = 2025,
        amount: str = "150.00",
    ) -> StudentFee:
        return StudentFee(
            id=str(uuid4()),
            student_id=sample_student_id,
            school_id=None,
            month=month,
            year=year,
            amount=Decimal(amount),
            status=status,
            paid_date=paid_date,
            reset_at=None,
            created_at=datetime(2025, 3, 1, tzinfo=timezone.utc),
            updated_at=datetime(2025, 3, 1, tzinfo=timezone.utc),
        )

    return _make


@pytest.fixture
def make_salary(sample_teacher_id):
    """Provide a factory for transient TeacherSalary rows."""

    def _make(
        status: str = "unpaid",
        paid_date: datetime | None = None,
        month: int = 3,
        year: int = 2025,
        amount: str = "2000.00",
    ) -> TeacherSalary:
        return TeacherSalary(
            id=str(uuid4()),
            teacher_id=sample_teacher_id,
            school_id=None,
            month=month,
            year=year,
            amount=Decimal(amount),
            status=status,
            paid_date=paid_date,
            reset_at=None,
            created_at=datetime(2025, 3, 1, tzinfo=timezone.utc),
            updated_at=datetime(2025, 3, 1, tzinfo=timezone.utc),
        )

    return _make
