# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pydantic models for the HTTP API."""

from src.models.billing import (
    CreateRecordRequest,
    CreateRecordResponse,
    ErrorResponse,
    FeeSummaryResponse,
    MonthlyBillingResponse,
    MonthlyRecordResponse,
    PeriodRecordResponse,
    RecordListResponse,
    RecordResponse,
    RecordStatusResponse,
    SweepResponse,
    ToggleRequest,
    ToggleResponse,
    UpdateRecordRequest,
)

__all__ = [
    "CreateRecordRequest",
    "CreateRecordResponse",
    "ErrorResponse",
    "FeeSummaryResponse",
    "MonthlyBillingResponse",
    "MonthlyRecordResponse",
    "PeriodRecordResponse",
    "RecordListResponse",
    "RecordResponse",
    "RecordStatusResponse",
    "SweepResponse",
    "ToggleRequest",
    "ToggleResponse",
    "UpdateRecordRequest",
]
