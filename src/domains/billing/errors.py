# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Billing domain exceptions."""


class BillingServiceError(Exception):
    """Base exception for billing service errors."""

    pass


class InvalidPeriodError(BillingServiceError):
    """Raised when a month or year cannot be parsed or is out of range."""

    pass


class RecordNotFoundError(BillingServiceError):
    """Raised when a fee or salary record is not found."""

    pass


class SubjectNotFoundError(RecordNotFoundError):
    """Raised when the student or teacher of a record does not exist."""

    pass


class NothingToUpdateError(BillingServiceError):
    """Raised when an update request carries no changes."""

    pass
