# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Period record service shared by student fees and teacher salaries.

This module provides the PeriodRecordService base class for:
- Reconciling expired paid records (on read and in bulk sweeps)
- Upserting a monthly record and toggling its paid status
- Listing, creating and updating records

Subclasses bind the service to a record model (StudentFee or
TeacherSalary) and the model of its subject (Student or Teacher).
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from src.core.config import get_settings
from src.domains.billing.errors import (
    NothingToUpdateError,
    RecordNotFoundError,
    SubjectNotFoundError,
)
from src.domains.billing.periods import current_period, parse_period, resolve_period
from src.domains.billing.reconciler import (
    ReconcileOutcome,
    reconcile,
    reverted_values,
    should_revert,
)
from src.infrastructure.database.models import PeriodRecordMixin, PeriodStatus
from src.utils.datetime import days_ago, ensure_utc, utc_now

logger = logging.getLogger(__name__)


class PeriodRecordService:
    """Service for one kind of period record.

    Attributes:
        db: Async database session.
        threshold_days: Days a payment stays valid before it expires.
        model: Record model, set by subclasses.
        subject_model: Subject model, set by subclasses.
    """

    model: type[PeriodRecordMixin]
    subject_model: type[Any]

    def __init__(
        self,
        db: AsyncSession,
        threshold_days: int | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the period record service.

        Args:
            db: Async database session.
            threshold_days: Expiration window. Defaults to BILLING_EXPIRATION_DAYS.
            clock: Source of the current time.
        """
        self.db = db
        self.threshold_days = threshold_days or get_settings().billing.expiration_days
        self._clock = clock

    @property
    def table_name(self) -> str:
        return self.model.__tablename__

    @property
    def _subject_column(self):
        return getattr(self.model, self.model.subject_column)

    # =========================================================================
    # Reconciler
    # =========================================================================

    async def reconcile_record(self, record: PeriodRecordMixin) -> ReconcileOutcome:
        """Revert a record to unpaid if its payment has expired.

        The revert is one conditional update on the primary key that only
        matches while the row is still paid. If another writer reverted the
        row first, the record is refreshed and ``expired`` is False.

        Args:
            record: Loaded fee or salary record.

        Returns:
            ReconcileOutcome with the updated record.
        """
        reverted = await self._revert_expired([record])
        return ReconcileOutcome(record=record, expired=bool(reverted))

    async def _revert_expired(
        self,
        records: list[PeriodRecordMixin],
    ) -> list[PeriodRecordMixin]:
        """Persist the revert of every expired record in ``records``.

        Returns:
            The records this call reverted.
        """
        now = self._clock()
        due = [r for r in records if should_revert(r, now, self.threshold_days)]
        if not due:
            return []

        ids = [r.id for r in due]
        id_clause = self.model.id == ids[0] if len(ids) == 1 else self.model.id.in_(ids)
        result = await self.db.execute(
            update(self.model)
            .where(id_clause, self.model.status == PeriodStatus.PAID.value)
            .values(**reverted_values(now))
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()

        if result.rowcount == len(due):
            # Committed values, so the session has nothing left to flush
            for record in due:
                reconcile(record, now, self.threshold_days, setter=set_committed_value)
            reverted = due
        else:
            for record in due:
                await self.db.refresh(record)
            reverted = [r for r in due if ensure_utc(r.reset_at) == now]

        for record in reverted:
            logger.info(
                "Reverted expired %s record %s to unpaid",
                self.table_name,
                record.id,
            )
        return reverted

    async def sweep_expired(self) -> int:
        """Revert every expired paid record to unpaid.

        Returns:
            Number of records reverted.
        """
        now = self._clock()
        cutoff = days_ago(self.threshold_days, now)

        result = await self.db.execute(
            select(self.model.id).where(
                self.model.status == PeriodStatus.PAID.value,
                self.model.paid_date <= cutoff,
            )
        )
        expired_ids = list(result.scalars().all())

        if not expired_ids:
            logger.info("No expired %s records", self.table_name)
            return 0

        result = await self.db.execute(
            update(self.model)
            .where(
                self.model.id.in_(expired_ids),
                self.model.status == PeriodStatus.PAID.value,
            )
            .values(**reverted_values(now))
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()

        reverted = result.rowcount or 0
        logger.info(
            "Reverted %d of %d expired %s records",
            reverted,
            len(expired_ids),
            self.table_name,
        )
        return reverted

    # =========================================================================
    # Upsert and toggle
    # =========================================================================

    async def upsert_and_toggle(
        self,
        subject_id: str,
        amount: Decimal | float | None = None,
        month: int | str | None = None,
        year: int | str | None = None,
        toggle: bool = True,
        status: PeriodStatus | str | None = None,
    ) -> PeriodStatus:
        """Find or create the record for a period and set its paid status.

        An expired payment is reverted before toggling, so the toggle marks
        the record paid again.

        Args:
            subject_id: Student or teacher ID.
            amount: Amount to store. Left unchanged when None.
            month: Month number, numeric string or "YYYY-MM".
            year: Year; defaults to the current year.
            toggle: Flip the current status.
            status: Explicit status, used when not toggling.

        Returns:
            The resulting status of the record.

        Raises:
            InvalidPeriodError: If the period is invalid.
            SubjectNotFoundError: If the subject does not exist.
        """
        month, year = resolve_period(month, year, self._clock().date())
        explicit = PeriodStatus(status) if status is not None else None

        record = await self._find(subject_id, month, year)
        if record is None:
            return await self._insert_for_toggle(
                subject_id, month, year, amount, toggle, explicit
            )

        # An expired payment counts as unpaid, so a toggle records a new payment
        await self._revert_expired([record])

        previous = record.status
        if toggle:
            new_status = PeriodStatus.UNPAID if record.is_paid else PeriodStatus.PAID
        elif explicit is not None:
            new_status = explicit
        else:
            new_status = PeriodStatus(previous)

        self._apply_status(record, new_status)
        if amount is not None:
            record.amount = Decimal(str(amount))
        await self.db.commit()

        logger.info(
            "Set %s %s/%s for %s: %s -> %s",
            self.table_name,
            month,
            year,
            subject_id,
            previous,
            new_status.value,
        )

        if previous != new_status.value:
            await self._on_status_changed(record, previous)
        return new_status

    async def _insert_for_toggle(
        self,
        subject_id: str,
        month: int,
        year: int,
        amount: Decimal | float | None,
        toggle: bool,
        explicit: PeriodStatus | None,
    ) -> PeriodStatus:
        if explicit is not None:
            new_status = explicit
        else:
            new_status = PeriodStatus.PAID if toggle else PeriodStatus.UNPAID

        subject = await self._get_subject(subject_id)
        record = self._new_record(subject, month, year, amount)
        self._apply_status(record, new_status)
        self.db.add(record)

        try:
            await self.db.commit()
        except IntegrityError:
            # Another request created the period first; report what it stored
            await self.db.rollback()
            existing = await self._find(subject_id, month, year)
            if existing is None:
                raise
            logger.info(
                "Concurrent insert for %s %s/%s of %s, keeping stored status %s",
                self.table_name,
                month,
                year,
                subject_id,
                existing.status,
            )
            return PeriodStatus(existing.status)

        logger.info(
            "Created %s %s/%s for %s as %s",
            self.table_name,
            month,
            year,
            subject_id,
            new_status.value,
        )

        if new_status == PeriodStatus.PAID:
            await self._on_status_changed(record, None)
        return new_status

    async def _on_status_changed(
        self,
        record: PeriodRecordMixin,
        previous: str | None,
    ) -> None:
        """Hook called after a record's status changed and was committed."""
        return None

    # =========================================================================
    # CRUD
    # =========================================================================

    async def list_records(
        self,
        subject_id: str | None = None,
        month: int | str | None = None,
        year: int | str | None = None,
        all_months: bool = False,
    ) -> list[PeriodRecordMixin]:
        """List records, by default those of the current month.

        Expired payments among the listed records are reverted first.

        Args:
            subject_id: Only records of this subject.
            month: Only records of this month.
            year: Only records of this year.
            all_months: Skip the current-month default.

        Returns:
            Records ordered by year and month.
        """
        month, year = parse_period(month, year)
        if month is None and year is None and not all_months:
            month, year = current_period(self._clock().date())

        query = select(self.model)
        if subject_id:
            query = query.where(self._subject_column == subject_id)
        if month is not None:
            query = query.where(self.model.month == month)
        if year is not None:
            query = query.where(self.model.year == year)
        query = query.order_by(self.model.year.asc(), self.model.month.asc())

        result = await self.db.execute(query)
        records = list(result.scalars().all())
        await self._revert_expired(records)
        return records

    async def create_record(
        self,
        subject_id: str,
        month: int | str,
        year: int | str | None = None,
        amount: Decimal | float | None = None,
        school_id: str | None = None,
    ) -> tuple[PeriodRecordMixin, bool]:
        """Create an unpaid record for a period unless one exists.

        Args:
            subject_id: Student or teacher ID.
            month: Month number, numeric string or "YYYY-MM".
            year: Year; defaults to the current year.
            amount: Amount owed. Defaults to 0.
            school_id: School ID. Defaults to the subject's school.

        Returns:
            Tuple of (record, created).

        Raises:
            InvalidPeriodError: If the period is invalid.
            SubjectNotFoundError: If the subject does not exist.
        """
        month, year = resolve_period(month, year, self._clock().date())

        existing = await self._find(subject_id, month, year)
        if existing is not None:
            return existing, False

        subject = await self._get_subject(subject_id)
        record = self._new_record(subject, month, year, amount, school_id)
        self.db.add(record)

        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            existing = await self._find(subject_id, month, year)
            if existing is None:
                raise
            return existing, False

        await self.db.refresh(record)
        logger.info(
            "Created %s record %s for %s (%s/%s)",
            self.table_name,
            record.id,
            subject_id,
            month,
            year,
        )
        return record, True

    async def update_record(
        self,
        record_id: str,
        status: PeriodStatus | str | None = None,
        paid_date: datetime | None = None,
        amount: Decimal | float | None = None,
    ) -> PeriodRecordMixin:
        """Update the status or amount of a record.

        Marking a record paid stores ``paid_date`` (or now); marking it
        unpaid clears the paid date.

        Args:
            record_id: Record identifier.
            status: New status.
            paid_date: Payment time used when status is paid.
            amount: New amount.

        Returns:
            The updated record.

        Raises:
            NothingToUpdateError: If neither status nor amount is given.
            RecordNotFoundError: If the record does not exist.
        """
        if status is None and amount is None:
            raise NothingToUpdateError("Nothing to update")

        record = await self._get_by_id(record_id)
        previous = record.status

        if status is not None:
            self._apply_status(record, PeriodStatus(status), paid_date)
        if amount is not None:
            record.amount = Decimal(str(amount))

        await self.db.commit()
        await self.db.refresh(record)

        logger.info("Updated %s record %s", self.table_name, record_id)

        if previous != record.status:
            await self._on_status_changed(record, previous)
        return record

    async def get_period_record(
        self,
        subject_id: str,
        month: int | str | None = None,
        year: int | str | None = None,
    ) -> PeriodRecordMixin | None:
        """Get the record of a subject for one period.

        Expired payments are reverted before the record is returned.

        Args:
            subject_id: Student or teacher ID.
            month: Month number, numeric string or "YYYY-MM".
            year: Year; defaults to the current year.

        Returns:
            The record, or None if the period has none.
        """
        month, year = resolve_period(month, year, self._clock().date())
        record = await self._find(subject_id, month, year)
        if record is None:
            return None

        outcome = await self.reconcile_record(record)
        return outcome.record

    async def get_record_status(self, record_id: str) -> ReconcileOutcome:
        """Get a record together with its expiration flag.

        Args:
            record_id: Record identifier.

        Returns:
            ReconcileOutcome; ``expired`` is True when this read reverted it.

        Raises:
            RecordNotFoundError: If the record does not exist.
        """
        record = await self._get_by_id(record_id)
        return await self.reconcile_record(record)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _apply_status(
        self,
        record: PeriodRecordMixin,
        status: PeriodStatus,
        paid_date: datetime | None = None,
    ) -> None:
        if status == PeriodStatus.PAID:
            if not record.is_paid or paid_date is not None:
                record.paid_date = ensure_utc(paid_date) or self._clock()
        else:
            record.paid_date = None
        record.status = status.value

    def _new_record(
        self,
        subject: Any,
        month: int,
        year: int,
        amount: Decimal | float | None,
        school_id: str | None = None,
    ) -> PeriodRecordMixin:
        return self.model(
            **{self.model.subject_column: subject.id},
            school_id=school_id or subject.school_id,
            month=month,
            year=year,
            amount=Decimal(str(amount)) if amount is not None else Decimal("0"),
            status=PeriodStatus.UNPAID.value,
        )

    async def _find(
        self,
        subject_id: str,
        month: int,
        year: int,
    ) -> PeriodRecordMixin | None:
        result = await self.db.execute(
            select(self.model).where(
                self._subject_column == subject_id,
                self.model.month == month,
                self.model.year == year,
            )
        )
        return result.scalar_one_or_none()

    async def _get_by_id(self, record_id: str) -> PeriodRecordMixin:
        result = await self.db.execute(
            select(self.model).where(self.model.id == record_id)
        )
        record = result.scalar_one_or_none()
        if not record:
            raise RecordNotFoundError(f"Record {record_id} not found")
        return record

    async def _get_subject(self, subject_id: str) -> Any:
        subject = await self.db.get(self.subject_model, subject_id)
        if subject is None:
            raise SubjectNotFoundError(
                f"{self.subject_model.__name__} {subject_id} not found"
            )
        return subject
