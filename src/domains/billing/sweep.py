# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Scheduled billing jobs.

These jobs are run by an external scheduler through the cron endpoints:
- reset_student_fees / reset_teacher_salaries revert expired payments
- create_monthly_records opens an unpaid record for every subject

Each run reports what it did; errors propagate to the caller and are
not retried here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Callable

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.billing.periods import resolve_period
from src.domains.billing.service import PeriodRecordService
from src.domains.fees.service import StudentFeeService
from src.domains.salaries.service import TeacherSalaryService
from src.infrastructure.database.models import PeriodStatus
from src.infrastructure.notifications import BillingNotifier, get_billing_notifier
from src.utils.datetime import utc_now
from src.utils.logging import get_logger

logger = logging.getLogger(__name__)
job_logger = get_logger("schooldesk.jobs")


@dataclass(frozen=True)
class MonthlyBillingResult:
    """Outcome of the monthly billing job.

    Attributes:
        students_processed: Students considered for a fee record.
        teachers_processed: Teachers considered for a salary record.
        month: Billed month.
        year: Billed year.
    """

    students_processed: int
    teachers_processed: int
    month: int
    year: int


class BillingSweepService:
    """Service running the scheduled billing jobs.

    Attributes:
        db: Async database session.
    """

    def __init__(
        self,
        db: AsyncSession,
        threshold_days: int | None = None,
        clock: Callable[[], datetime] = utc_now,
        notifier: BillingNotifier | None = None,
    ) -> None:
        """Initialize the sweep service.

        Args:
            db: Async database session.
            threshold_days: Expiration window. Defaults to BILLING_EXPIRATION_DAYS.
            clock: Source of the current time.
            notifier: Notifier for sweep results. Defaults to the shared one.
        """
        self.db = db
        self._clock = clock
        self._notifier = notifier
        self.fees = StudentFeeService(db, threshold_days=threshold_days, clock=clock)
        self.salaries = TeacherSalaryService(
            db, threshold_days=threshold_days, clock=clock, notifier=notifier
        )

    @property
    def notifier(self) -> BillingNotifier:
        if self._notifier is None:
            self._notifier = get_billing_notifier()
        return self._notifier

    async def reset_student_fees(self) -> int:
        """Revert expired student fees to unpaid.

        Returns:
            Number of fees reverted.
        """
        return await self._sweep(self.fees)

    async def reset_teacher_salaries(self) -> int:
        """Revert expired teacher salaries to unpaid.

        Returns:
            Number of salaries reverted.
        """
        return await self._sweep(self.salaries)

    async def _sweep(self, service: PeriodRecordService) -> int:
        job_logger.info("sweep_started", table=service.table_name)
        reverted = await service.sweep_expired()
        job_logger.info("sweep_finished", table=service.table_name, reverted=reverted)

        if reverted:
            try:
                await self.notifier.notify_records_reverted(service.table_name, reverted)
            except Exception:
                logger.exception(
                    "Failed to announce %d reverted %s records",
                    reverted,
                    service.table_name,
                )
        return reverted

    async def create_monthly_records(
        self,
        month: int | str | None = None,
        year: int | str | None = None,
    ) -> MonthlyBillingResult:
        """Create unpaid fee and salary records for a period.

        Existing records of the period are left untouched.

        Args:
            month: Month to bill. Defaults to the current month.
            year: Year to bill. Defaults to the current year.

        Returns:
            MonthlyBillingResult with the number of subjects processed.
        """
        month, year = resolve_period(month, year, self._clock().date())
        job_logger.info("monthly_billing_started", month=month, year=year)

        students_processed = await self._insert_period(self.fees, month, year)
        teachers_processed = await self._insert_period(self.salaries, month, year)
        await self.db.commit()

        job_logger.info(
            "monthly_billing_finished",
            month=month,
            year=year,
            students=students_processed,
            teachers=teachers_processed,
        )
        return MonthlyBillingResult(
            students_processed=students_processed,
            teachers_processed=teachers_processed,
            month=month,
            year=year,
        )

    async def _insert_period(
        self,
        service: PeriodRecordService,
        month: int,
        year: int,
    ) -> int:
        subject_model = service.subject_model
        result = await self.db.execute(
            select(subject_model.id, subject_model.school_id).order_by(subject_model.id)
        )
        subjects = result.all()
        if not subjects:
            logger.info("No subjects for %s %s/%s", service.table_name, month, year)
            return 0

        rows = [
            {
                service.model.subject_column: subject_id,
                "school_id": school_id,
                "month": month,
                "year": year,
                "amount": Decimal("0"),
                "status": PeriodStatus.UNPAID.value,
                "paid_date": None,
            }
            for subject_id, school_id in subjects
        ]
        await self.db.execute(
            insert(service.model)
            .values(rows)
            .on_conflict_do_nothing(constraint=f"uq_{service.table_name}__period")
        )
        return len(subjects)
