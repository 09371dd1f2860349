# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student fee domain.

Example:
    from src.domains.fees import StudentFeeService

    service = StudentFeeService(db)
    status = await service.upsert_and_toggle(student_id, amount=150, month="2025-03")
"""

from src.domains.fees.service import FeeSummary, StudentFeeService

__all__ = [
    "FeeSummary",
    "StudentFeeService",
]
