# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Teacher salary API endpoints.

Salaries use the shared period record routes. Marking a salary paid
notifies the teacher's device.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.api.v1.period_records import create_period_router
from src.domains.salaries import TeacherSalaryService


def _get_service(db: AsyncSession) -> TeacherSalaryService:
    """Get teacher salary service instance.

    Args:
        db: Database session.

    Returns:
        Configured TeacherSalaryService instance.
    """
    return TeacherSalaryService(db=db)


router = create_period_router(
    lambda db: _get_service(db),
    noun="salary",
    plural="salaries",
    subject="teacher",
)
