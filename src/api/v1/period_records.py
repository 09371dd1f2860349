# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared endpoints for period records.

Student fees and teacher salaries expose the same operations:
- GET / - List records (current month by default)
- POST / - Create the record of a month unless it exists
- PUT / - Update a record's status or amount
- GET /monthly - Get a subject's record for one month
- POST /toggle - Flip a subject's paid status for a month
- GET /{record_id}/status - Get a record with its expiration flag

Paid records older than the expiration window are reverted to unpaid
whenever they are read, listed or toggled.
"""

from typing import Annotated, Callable
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db
from src.api.errors import to_http_exception
from src.domains.billing import BillingServiceError, PeriodRecordService
from src.models.billing import (
    CreateRecordRequest,
    CreateRecordResponse,
    MonthlyRecordResponse,
    PeriodRecordResponse,
    RecordListResponse,
    RecordResponse,
    RecordStatusResponse,
    ToggleRequest,
    ToggleResponse,
    UpdateRecordRequest,
)

MonthQuery = Annotated[str | None, Query(description='Month as 1-12 or "YYYY-MM"')]
YearQuery = Annotated[str | None, Query()]


def create_period_router(
    get_service: Callable[[AsyncSession], PeriodRecordService],
    noun: str,
    plural: str,
    subject: str,
) -> APIRouter:
    """Build the router for one kind of period record.

    Args:
        get_service: Returns the record service for a session.
        noun: Record name used in summaries, e.g. "fee".
        plural: Plural record name used in route names, e.g. "fees".
        subject: Subject name used in summaries, e.g. "student".

    Returns:
        APIRouter with the list, create, update, monthly, toggle and
        status routes.
    """
    router = APIRouter()

    @router.get(
        "",
        response_model=RecordListResponse,
        name=f"list_{plural}",
        summary=f"List {plural}",
        description=f"List {subject} {plural}. Without filters only the current month is returned.",
    )
    async def list_records(
        subject_id: Annotated[UUID | None, Query(alias="subjectId")] = None,
        month: MonthQuery = None,
        year: YearQuery = None,
        all_months: Annotated[bool, Query(alias="allMonths")] = False,
        db: AsyncSession = Depends(get_db),
    ) -> RecordListResponse:
        service = get_service(db)

        try:
            records = await service.list_records(
                subject_id=str(subject_id) if subject_id else None,
                month=month,
                year=year,
                all_months=all_months,
            )
        except BillingServiceError as e:
            raise to_http_exception(e)

        return RecordListResponse(
            records=[PeriodRecordResponse.model_validate(r) for r in records],
        )

    @router.post(
        "",
        response_model=CreateRecordResponse,
        name=f"create_{noun}",
        summary=f"Create {noun}",
        description=f"Create an unpaid {noun} for a month. Returns the existing {noun} if present.",
    )
    async def create_record(
        data: CreateRecordRequest,
        db: AsyncSession = Depends(get_db),
    ) -> CreateRecordResponse:
        """Create the record of a subject for a month.

        Raises:
            HTTPException: If the period is invalid or the subject is unknown.
        """
        service = get_service(db)

        try:
            record, created = await service.create_record(
                subject_id=str(data.subject_id),
                month=data.month,
                year=data.year,
                amount=data.amount,
                school_id=str(data.school_id) if data.school_id else None,
            )
        except BillingServiceError as e:
            raise to_http_exception(e)

        return CreateRecordResponse(
            record=PeriodRecordResponse.model_validate(record),
            created=created,
        )

    @router.put(
        "",
        response_model=RecordResponse,
        name=f"update_{noun}",
        summary=f"Update {noun}",
        description=f"Update a {noun}'s status, payment date or amount.",
    )
    async def update_record(
        data: UpdateRecordRequest,
        db: AsyncSession = Depends(get_db),
    ) -> RecordResponse:
        """Update a record.

        Raises:
            HTTPException: If nothing is to be updated or the record is not found.
        """
        service = get_service(db)

        try:
            record = await service.update_record(
                record_id=str(data.id),
                status=data.status,
                paid_date=data.paid_date,
                amount=data.amount,
            )
        except BillingServiceError as e:
            raise to_http_exception(e)

        return RecordResponse(record=PeriodRecordResponse.model_validate(record))

    @router.get(
        "/monthly",
        response_model=MonthlyRecordResponse,
        name=f"get_monthly_{noun}",
        summary=f"Get monthly {noun}",
        description=f"Get a {subject}'s {noun} for one month. Missing {plural} are not an error.",
    )
    async def get_monthly_record(
        subject_id: Annotated[UUID, Query(alias="subjectId")],
        month: MonthQuery = None,
        year: YearQuery = None,
        db: AsyncSession = Depends(get_db),
    ) -> MonthlyRecordResponse:
        service = get_service(db)

        try:
            record = await service.get_period_record(str(subject_id), month=month, year=year)
        except BillingServiceError as e:
            raise to_http_exception(e)

        if record is None:
            return MonthlyRecordResponse(record=None, exists=False)
        return MonthlyRecordResponse(
            record=PeriodRecordResponse.model_validate(record),
            exists=True,
        )

    @router.post(
        "/toggle",
        response_model=ToggleResponse,
        name=f"toggle_{noun}",
        summary=f"Toggle {noun}",
        description=f"Flip a {subject}'s paid status for a month, creating the {noun} if needed.",
    )
    async def toggle_record(
        data: ToggleRequest,
        db: AsyncSession = Depends(get_db),
    ) -> ToggleResponse:
        """Toggle the paid status of a monthly record.

        Raises:
            HTTPException: If the period is invalid or the subject is unknown.
        """
        service = get_service(db)

        try:
            new_status = await service.upsert_and_toggle(
                subject_id=str(data.subject_id),
                amount=data.amount,
                month=data.month,
                year=data.year,
                toggle=data.status is None,
                status=data.status,
            )
        except BillingServiceError as e:
            raise to_http_exception(e)

        return ToggleResponse(status=new_status.value)

    @router.get(
        "/{record_id}/status",
        response_model=RecordStatusResponse,
        name=f"get_{noun}_status",
        summary=f"Get {noun} status",
        description=f"Get a {noun} and whether reading it expired the payment.",
    )
    async def get_record_status(
        record_id: UUID,
        db: AsyncSession = Depends(get_db),
    ) -> RecordStatusResponse:
        service = get_service(db)

        try:
            outcome = await service.get_record_status(str(record_id))
        except BillingServiceError as e:
            raise to_http_exception(e)

        return RecordStatusResponse(
            record=PeriodRecordResponse.model_validate(outcome.record),
            expired=outcome.expired,
        )

    return router
