# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the scheduled billing jobs."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from src.domains.billing.errors import InvalidPeriodError
from src.domains.billing.sweep import BillingSweepService


@pytest.fixture
def notifier():
    """Create a mock billing notifier."""
    notifier = MagicMock()
    notifier.notify_records_reverted = AsyncMock()
    notifier.notify_salary_paid = AsyncMock()
    return notifier


@pytest.fixture
def sweep_service(mock_db, clock, notifier):
    """Create sweep service with mock database and notifier."""
    return BillingSweepService(db=mock_db, threshold_days=30, clock=clock, notifier=notifier)


def sweep_results(ids: list[str], rowcount: int) -> list[MagicMock]:
    """Build execute() results for a select-then-update sweep."""
    select_result = MagicMock()
    select_result.scalars.return_value.all.return_value = ids
    update_result = MagicMock()
    update_result.rowcount = rowcount
    return [select_result, update_result]


def subjects_result(rows: list[tuple[str, str | None]]) -> MagicMock:
    """Build an execute() result listing subject (id, school_id) rows."""
    result = MagicMock()
    result.all.return_value = rows
    return result


class TestResetJobs:
    """Tests for the expiration sweeps."""

    @pytest.mark.asyncio
    async def test_reset_student_fees(self, sweep_service, mock_db, notifier):
        """Test the fee sweep reports and announces reverted fees."""
        mock_db.execute.side_effect = sweep_results(["a", "b"], 2)

        count = await sweep_service.reset_student_fees()

        assert count == 2
        notifier.notify_records_reverted.assert_awaited_once_with("student_fees", 2)
        update_statement = mock_db.execute.call_args_list[1][0][0]
        assert str(update_statement).startswith("UPDATE student_fees")

    @pytest.mark.asyncio
    async def test_reset_teacher_salaries(self, sweep_service, mock_db, notifier):
        """Test the salary sweep targets the salary table."""
        mock_db.execute.side_effect = sweep_results(["a"], 1)

        count = await sweep_service.reset_teacher_salaries()

        assert count == 1
        notifier.notify_records_reverted.assert_awaited_once_with("teacher_salary", 1)
        update_statement = mock_db.execute.call_args_list[1][0][0]
        assert str(update_statement).startswith("UPDATE teacher_salary")

    @pytest.mark.asyncio
    async def test_nothing_reverted_is_silent(self, sweep_service, mock_db, notifier):
        """Test no notification when nothing expired."""
        mock_db.execute.side_effect = sweep_results([], 0)[:1]

        assert await sweep_service.reset_student_fees() == 0
        notifier.notify_records_reverted.assert_not_called()

    @pytest.mark.asyncio
    async def test_notification_failure_keeps_count(self, sweep_service, mock_db, notifier):
        """Test a failing announcement does not fail the sweep."""
        mock_db.execute.side_effect = sweep_results(["a"], 1)
        notifier.notify_records_reverted.side_effect = RuntimeError("fcm down")

        assert await sweep_service.reset_student_fees() == 1

    @pytest.mark.asyncio
    async def test_store_error_propagates(self, sweep_service, mock_db, notifier):
        """Test store errors reach the caller."""
        mock_db.execute.side_effect = RuntimeError("connection lost")

        with pytest.raises(RuntimeError):
            await sweep_service.reset_teacher_salaries()

        notifier.notify_records_reverted.assert_not_called()


class TestMonthlyBilling:
    """Tests for monthly record creation."""

    @pytest.mark.asyncio
    async def test_creates_records_for_current_month(self, sweep_service, mock_db):
        """Test every student and teacher gets a record for the month."""
        mock_db.execute.side_effect = [
            subjects_result([("s1", "school"), ("s2", "school")]),
            MagicMock(),
            subjects_result([("t1", "school")]),
            MagicMock(),
        ]

        result = await sweep_service.create_monthly_records()

        assert result.students_processed == 2
        assert result.teachers_processed == 1
        assert (result.month, result.year) == (3, 2025)
        mock_db.commit.assert_called_once()

        fee_insert = str(mock_db.execute.call_args_list[1][0][0].compile(
            dialect=postgresql.dialect()
        ))
        assert fee_insert.startswith("INSERT INTO student_fees")
        assert "ON CONFLICT ON CONSTRAINT uq_student_fees__period DO NOTHING" in fee_insert

    @pytest.mark.asyncio
    async def test_no_subjects(self, sweep_service, mock_db):
        """Test empty tables insert nothing."""
        mock_db.execute.side_effect = [subjects_result([]), subjects_result([])]

        result = await sweep_service.create_monthly_records(month="2025-06")

        assert result.students_processed == 0
        assert result.teachers_processed == 0
        assert (result.month, result.year) == (6, 2025)
        assert mock_db.execute.call_count == 2

    @pytest.mark.asyncio
    async def test_invalid_month(self, sweep_service, mock_db):
        """Test an invalid period is rejected."""
        with pytest.raises(InvalidPeriodError):
            await sweep_service.create_monthly_records(month=0)

        mock_db.execute.assert_not_called()
