# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Paid status expiration.

A "paid" fee or salary stays paid for a fixed number of days after its
paid date. Once that window has passed the record reverts to "unpaid",
its paid date is cleared and ``reset_at`` records when that happened.

The functions here work on any object exposing ``status``, ``paid_date``
and ``reset_at`` and never touch the database; persisting the outcome is
the caller's job.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable

from src.infrastructure.database.models import PeriodStatus
from src.utils.datetime import ensure_utc

DEFAULT_EXPIRATION_DAYS = 30


@dataclass(frozen=True)
class ReconcileOutcome:
    """Result of reconciling one record.

    Attributes:
        record: The record, already updated when it expired.
        expired: True if this call reverted the record to unpaid.
    """

    record: Any
    expired: bool


def is_expired(
    paid_date: datetime | None,
    now: datetime,
    threshold_days: int = DEFAULT_EXPIRATION_DAYS,
) -> bool:
    """Check whether a paid date is old enough to revert.

    Args:
        paid_date: When the record was marked paid.
        now: Current time.
        threshold_days: Days a payment stays valid.

    Returns:
        True if ``now - paid_date`` is at least ``threshold_days``.
    """
    if paid_date is None:
        return False
    return ensure_utc(now) - ensure_utc(paid_date) >= timedelta(days=threshold_days)


def reverted_values(now: datetime) -> dict[str, Any]:
    """Column values written when a record reverts to unpaid."""
    return {
        "status": PeriodStatus.UNPAID.value,
        "paid_date": None,
        "reset_at": now,
    }


def should_revert(
    record: Any,
    now: datetime,
    threshold_days: int = DEFAULT_EXPIRATION_DAYS,
) -> bool:
    """Check whether a record is paid and its payment has expired."""
    return record.status == PeriodStatus.PAID.value and is_expired(
        record.paid_date, now, threshold_days
    )


def reconcile(
    record: Any,
    now: datetime,
    threshold_days: int = DEFAULT_EXPIRATION_DAYS,
    setter: Callable[[Any, str, Any], None] = setattr,
) -> ReconcileOutcome:
    """Revert an expired paid record to unpaid in place.

    Unpaid records and records without a paid date are returned
    unchanged, so applying this twice is the same as applying it once.

    Args:
        record: Fee or salary record.
        now: Current time.
        threshold_days: Days a payment stays valid.
        setter: Writes one attribute. Persisted ORM rows pass
            ``set_committed_value`` so the change is not flushed again.

    Returns:
        ReconcileOutcome with the (possibly updated) record.
    """
    if not should_revert(record, now, threshold_days):
        return ReconcileOutcome(record=record, expired=False)

    for key, value in reverted_values(now).items():
        setter(record, key, value)
    return ReconcileOutcome(record=record, expired=True)
