# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Request and response models for fee and salary endpoints.

JSON field names are camelCase (``subjectId``, ``paidDate``); Python
attributes stay snake_case.
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model using camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


StatusValue = Literal["paid", "unpaid"]


# =============================================================================
# Requests
# =============================================================================


class ToggleRequest(CamelModel):
    """Request to toggle the paid status of a monthly record."""

    subject_id: UUID = Field(..., description="Student or teacher ID")
    amount: float = Field(default=0, ge=0, description="Amount owed")
    month: int | str | None = Field(
        default=None,
        description='Month as 1-12, "3" or "2025-03"; defaults to the current month',
    )
    year: int | None = Field(default=None, description="Year; defaults to the current year")
    status: StatusValue | None = Field(
        default=None,
        description="Explicit status; when set the record is not flipped",
    )


class CreateRecordRequest(CamelModel):
    """Request to create a monthly record."""

    subject_id: UUID = Field(..., description="Student or teacher ID")
    month: int | str = Field(..., description='Month as 1-12, "3" or "2025-03"')
    year: int | None = Field(default=None, description="Year; defaults to the current year")
    amount: float = Field(default=0, ge=0, description="Amount owed")
    school_id: UUID | None = Field(
        default=None,
        description="School ID; defaults to the subject's school",
    )


class UpdateRecordRequest(CamelModel):
    """Request to update a record's status or amount."""

    id: UUID = Field(..., description="Record ID")
    status: StatusValue | None = None
    paid_date: datetime | None = Field(
        default=None,
        description="Payment time used when status is paid; defaults to now",
    )
    amount: float | None = Field(default=None, ge=0)


# =============================================================================
# Responses
# =============================================================================


class PeriodRecordResponse(CamelModel):
    """A fee or salary record."""

    id: str
    subject_id: str
    school_id: str | None = None
    month: int
    year: int
    amount: float
    status: StatusValue
    paid_date: datetime | None = None
    reset_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RecordListResponse(CamelModel):
    """List of records."""

    success: bool = True
    records: list[PeriodRecordResponse]


class RecordResponse(CamelModel):
    """A single record."""

    success: bool = True
    record: PeriodRecordResponse


class CreateRecordResponse(CamelModel):
    """Result of a create request."""

    success: bool = True
    record: PeriodRecordResponse
    created: bool


class MonthlyRecordResponse(CamelModel):
    """Monthly lookup; ``exists`` is false when the period has no record."""

    success: bool = True
    record: PeriodRecordResponse | None = None
    exists: bool


class RecordStatusResponse(CamelModel):
    """A record together with whether this read expired it."""

    success: bool = True
    record: PeriodRecordResponse
    expired: bool


class ToggleResponse(CamelModel):
    """Status after a toggle."""

    success: bool = True
    status: StatusValue


class FeeSummaryResponse(CamelModel):
    """Fee totals."""

    success: bool = True
    total_fees: float
    paid_fees: float
    unpaid_fees: float


class SweepResponse(CamelModel):
    """Result of a reset job."""

    success: bool = True
    count: int


class MonthlyBillingResponse(CamelModel):
    """Result of the monthly billing job."""

    success: bool = True
    students_processed: int
    teachers_processed: int
    month: int
    year: int


class ErrorResponse(BaseModel):
    """Error body returned by every failing endpoint."""

    success: bool = False
    error: str
