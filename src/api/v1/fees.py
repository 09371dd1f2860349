# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student fee API endpoints.

The shared period record routes (list, create, update, monthly, toggle
and status) plus:
- GET /summary - Total, paid and unpaid amounts
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db
from src.api.v1.period_records import create_period_router
from src.domains.fees import StudentFeeService
from src.models.billing import FeeSummaryResponse


def _get_service(db: AsyncSession) -> StudentFeeService:
    """Get student fee service instance.

    Args:
        db: Database session.

    Returns:
        Configured StudentFeeService instance.
    """
    return StudentFeeService(db=db)


router = create_period_router(
    lambda db: _get_service(db),
    noun="fee",
    plural="fees",
    subject="student",
)


@router.get(
    "/summary",
    response_model=FeeSummaryResponse,
    summary="Fee summary",
    description="Total, paid and unpaid fee amounts.",
)
async def get_fee_summary(
    db: AsyncSession = Depends(get_db),
) -> FeeSummaryResponse:
    """Get fee totals."""
    summary = await _get_service(db).get_summary()

    return FeeSummaryResponse(
        total_fees=float(summary.total_fees),
        paid_fees=float(summary.paid_fees),
        unpaid_fees=float(summary.unpaid_fees),
    )
