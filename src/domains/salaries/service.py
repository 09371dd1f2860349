# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Teacher salary service.

Teacher salaries use the shared period record rules. When a salary turns
paid the teacher receives a push notification.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.billing.service import PeriodRecordService
from src.infrastructure.database.models import PeriodStatus, Teacher, TeacherSalary
from src.infrastructure.notifications import BillingNotifier, get_billing_notifier
from src.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class TeacherSalaryService(PeriodRecordService):
    """Service for managing teacher salaries."""

    model = TeacherSalary
    subject_model = Teacher

    def __init__(
        self,
        db: AsyncSession,
        threshold_days: int | None = None,
        clock: Callable[[], datetime] = utc_now,
        notifier: BillingNotifier | None = None,
    ) -> None:
        """Initialize teacher salary service.

        Args:
            db: Async database session.
            threshold_days: Expiration window. Defaults to BILLING_EXPIRATION_DAYS.
            clock: Source of the current time.
            notifier: Notifier for salary events. Defaults to the shared one.
        """
        super().__init__(db, threshold_days=threshold_days, clock=clock)
        self._notifier = notifier

    @property
    def notifier(self) -> BillingNotifier:
        if self._notifier is None:
            self._notifier = get_billing_notifier()
        return self._notifier

    async def _on_status_changed(
        self,
        record: TeacherSalary,
        previous: str | None,
    ) -> None:
        if record.status != PeriodStatus.PAID.value:
            return

        try:
            teacher = await self.db.get(Teacher, record.teacher_id)
            await self.notifier.notify_salary_paid(
                push_token=teacher.push_token if teacher else None,
                month=record.month,
                year=record.year,
                amount=record.amount,
            )
        except Exception:
            logger.exception(
                "Failed to send salary notification for teacher %s",
                record.teacher_id,
            )
