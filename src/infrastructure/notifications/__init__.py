# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Notification system for SchoolDesk.

Billing events are delivered as push notifications through Firebase
Cloud Messaging.

Key Components:
- BillingNotifier: Builds payloads for billing events
- PushChannel: FCM HTTP v1 delivery
- NotificationPayload: Data structure for notification content

Usage:
    from src.infrastructure.notifications import get_billing_notifier

    notifier = get_billing_notifier()
    await notifier.notify_records_reverted("student_fees", 12)

Configuration (environment variables):
- FIREBASE_CREDENTIALS_PATH: Path to Firebase service account JSON
- FIREBASE_PROJECT_ID: Firebase project ID
- BILLING_ADMIN_TOPIC: Topic for administrator broadcasts
"""

from src.infrastructure.notifications.channels import (
    BaseChannel,
    ChannelResult,
    ChannelType,
    DeliveryStatus,
    NotificationPayload,
    PushChannel,
)
from src.infrastructure.notifications.notifier import (
    BillingNotifier,
    get_billing_notifier,
)

__all__ = [
    # Notifier
    "BillingNotifier",
    "get_billing_notifier",
    # Channel types
    "BaseChannel",
    "ChannelResult",
    "ChannelType",
    "DeliveryStatus",
    "NotificationPayload",
    # Channels
    "PushChannel",
]
