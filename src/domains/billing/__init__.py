# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Billing domain shared by student fees and teacher salaries.

This package provides:
- Period parsing ("YYYY-MM" and numeric months)
- The paid status reconciler
- PeriodRecordService, the base of the fee and salary services
- BillingSweepService for the scheduled jobs

Example:
    from src.domains.billing.sweep import BillingSweepService

    sweep = BillingSweepService(db)
    reverted = await sweep.reset_student_fees()
"""

from src.domains.billing.errors import (
    BillingServiceError,
    InvalidPeriodError,
    NothingToUpdateError,
    RecordNotFoundError,
    SubjectNotFoundError,
)
from src.domains.billing.periods import format_period, parse_period, resolve_period
from src.domains.billing.reconciler import (
    DEFAULT_EXPIRATION_DAYS,
    ReconcileOutcome,
    is_expired,
    reconcile,
    should_revert,
)
from src.domains.billing.service import PeriodRecordService

__all__ = [
    # Errors
    "BillingServiceError",
    "InvalidPeriodError",
    "NothingToUpdateError",
    "RecordNotFoundError",
    "SubjectNotFoundError",
    # Periods
    "format_period",
    "parse_period",
    "resolve_period",
    # Reconciler
    "DEFAULT_EXPIRATION_DAYS",
    "ReconcileOutcome",
    "is_expired",
    "reconcile",
    "should_revert",
    # Services
    "PeriodRecordService",
]
