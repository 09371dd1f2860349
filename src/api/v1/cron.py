# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Scheduled job endpoints.

These endpoints are called by an external scheduler:
- POST /reset-student-fees - Revert expired student fees to unpaid
- POST /reset-teacher-salary - Revert expired teacher salaries to unpaid
- POST /monthly-billing - Open unpaid records for the current month

Every call must carry ``Authorization: Bearer <BILLING_CRON_SECRET>``.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db, require_cron_secret
from src.domains.billing.periods import format_period
from src.domains.billing.sweep import BillingSweepService
from src.models.billing import MonthlyBillingResponse, SweepResponse

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_cron_secret)])


def _get_service(db: AsyncSession) -> BillingSweepService:
    """Get billing sweep service instance.

    Args:
        db: Database session.

    Returns:
        Configured BillingSweepService instance.
    """
    return BillingSweepService(db=db)


@router.post(
    "/reset-student-fees",
    response_model=SweepResponse,
    summary="Reset expired student fees",
    description="Revert student fees paid 30 or more days ago to unpaid.",
)
async def reset_student_fees(
    db: AsyncSession = Depends(get_db),
) -> SweepResponse:
    """Revert expired student fees."""
    count = await _get_service(db).reset_student_fees()
    return SweepResponse(count=count)


@router.post(
    "/reset-teacher-salary",
    response_model=SweepResponse,
    summary="Reset expired teacher salaries",
    description="Revert teacher salaries paid 30 or more days ago to unpaid.",
)
async def reset_teacher_salary(
    db: AsyncSession = Depends(get_db),
) -> SweepResponse:
    """Revert expired teacher salaries."""
    count = await _get_service(db).reset_teacher_salaries()
    return SweepResponse(count=count)


@router.post(
    "/monthly-billing",
    response_model=MonthlyBillingResponse,
    summary="Create monthly records",
    description="Create unpaid fees and salaries for the current month.",
)
async def monthly_billing(
    db: AsyncSession = Depends(get_db),
) -> MonthlyBillingResponse:
    """Open the current month for every student and teacher."""
    result = await _get_service(db).create_monthly_records()

    logger.info(
        "Monthly billing for %s: %d students, %d teachers",
        format_period(result.month, result.year),
        result.students_processed,
        result.teachers_processed,
    )

    return MonthlyBillingResponse(
        students_processed=result.students_processed,
        teachers_processed=result.teachers_processed,
        month=result.month,
        year=result.year,
    )
