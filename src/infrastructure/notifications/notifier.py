# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Billing notifications.

BillingNotifier turns billing events into push payloads:
- Records reverted by a sweep are announced on the admin topic.
- A teacher is told when their salary for a month is marked paid.

Delivery problems are logged and reported through ChannelResult; nothing
here raises into the billing request that triggered the notification.
"""

import logging

from src.core.config import get_settings
from src.infrastructure.notifications.channels import (
    BaseChannel,
    ChannelResult,
    ChannelType,
    DeliveryStatus,
    NotificationPayload,
    PushChannel,
)

logger = logging.getLogger(__name__)

SWEEP_LABELS = {
    "student_fees": "student fees",
    "teacher_salary": "teacher salaries",
}


class BillingNotifier:
    """Sends billing notifications through the push channel.

    Attributes:
        admin_topic: FCM topic school administrators subscribe to.
    """

    def __init__(
        self,
        channel: BaseChannel | None = None,
        admin_topic: str | None = None,
    ) -> None:
        """Initialize the notifier.

        Args:
            channel: Channel used for delivery. Defaults to PushChannel.
            admin_topic: Admin topic. Defaults to BILLING_ADMIN_TOPIC.
        """
        self._channel = channel or PushChannel()
        self.admin_topic = admin_topic or get_settings().billing.admin_topic

    async def notify_records_reverted(self, table: str, count: int) -> ChannelResult:
        """Announce that a sweep reverted paid records to unpaid.

        Args:
            table: Table the sweep ran on (student_fees or teacher_salary).
            count: Number of reverted records.

        Returns:
            ChannelResult, skipped when nothing was reverted.
        """
        if count <= 0:
            return ChannelResult(
                channel=ChannelType.PUSH,
                status=DeliveryStatus.SKIPPED,
                error_message="No records reverted",
            )

        label = SWEEP_LABELS.get(table, table)
        payload = NotificationPayload(
            notification_type="records_reverted",
            title="Payments expired",
            message=f"{count} {label} were reset to unpaid.",
            topic=self.admin_topic,
            data={"table": table, "count": str(count)},
        )
        return await self._deliver(payload)

    async def notify_salary_paid(
        self,
        push_token: str | None,
        month: int,
        year: int,
        amount: object,
    ) -> ChannelResult:
        """Tell a teacher their salary was paid.

        Args:
            push_token: Teacher's device token, if registered.
            month: Salary month.
            year: Salary year.
            amount: Paid amount.

        Returns:
            ChannelResult, skipped when the teacher has no token.
        """
        if not push_token:
            return ChannelResult(
                channel=ChannelType.PUSH,
                status=DeliveryStatus.SKIPPED,
                error_message="Teacher has no push token",
            )

        period = f"{year:04d}-{month:02d}"
        payload = NotificationPayload(
            notification_type="salary_paid",
            title="Salary paid",
            message=f"Your salary for {period} has been paid.",
            push_tokens=[{"token": push_token}],
            data={"period": period, "amount": str(amount)},
            priority="high",
        )
        return await self._deliver(payload)

    async def _deliver(self, payload: NotificationPayload) -> ChannelResult:
        result = await self._channel.send(payload)
        if result.status == DeliveryStatus.FAILED:
            logger.warning(
                "Notification %s failed: %s",
                payload.notification_type,
                result.error_message,
            )
        else:
            logger.debug(
                "Notification %s %s",
                payload.notification_type,
                result.status.value,
            )
        return result


# Singleton instance management
_notifier_instance: BillingNotifier | None = None


def get_billing_notifier() -> BillingNotifier:
    """Get or create the billing notifier singleton.

    Returns:
        BillingNotifier instance.
    """
    global _notifier_instance
    if _notifier_instance is None:
        _notifier_instance = BillingNotifier()
    return _notifier_instance
