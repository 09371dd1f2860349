# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student fee service.

Student fees use the shared period record rules; this module adds the
fee summary shown on the admin dashboard.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import func, select

from src.domains.billing.service import PeriodRecordService
from src.infrastructure.database.models import PeriodStatus, Student, StudentFee

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeeSummary:
    """Fee totals across all records.

    Attributes:
        total_fees: Sum of all fee amounts.
        paid_fees: Sum of paid fee amounts.
        unpaid_fees: Sum of unpaid fee amounts.
    """

    total_fees: Decimal
    paid_fees: Decimal
    unpaid_fees: Decimal


class StudentFeeService(PeriodRecordService):
    """Service for managing student fees."""

    model = StudentFee
    subject_model = Student

    async def get_summary(self) -> FeeSummary:
        """Sum fee amounts by status.

        Returns:
            FeeSummary with total, paid and unpaid amounts.
        """
        query = select(
            StudentFee.status,
            func.coalesce(func.sum(StudentFee.amount), 0),
        ).group_by(StudentFee.status)

        result = await self.db.execute(query)
        totals = {status: Decimal(amount) for status, amount in result.all()}

        paid = totals.get(PeriodStatus.PAID.value, Decimal("0"))
        unpaid = totals.get(PeriodStatus.UNPAID.value, Decimal("0"))

        return FeeSummary(
            total_fees=paid + unpaid,
            paid_fees=paid,
            unpaid_fees=unpaid,
        )
