# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Notification channels for delivering notifications.

- PushChannel: Sends push notifications via Firebase Cloud Messaging

Usage:
    from src.infrastructure.notifications.channels import (
        PushChannel,
        NotificationPayload,
    )

    push = PushChannel()
    payload = NotificationPayload(
        notification_type="salary_paid",
        title="Salary paid",
        message="Your salary for 2024-03 has been paid.",
        push_tokens=[{"platform": "android", "token": token}],
    )
    result = await push.send(payload)
"""

from src.infrastructure.notifications.channels.base import (
    BaseChannel,
    ChannelResult,
    ChannelType,
    DeliveryStatus,
    NotificationPayload,
)
from src.infrastructure.notifications.channels.push import PushChannel

__all__ = [
    # Base types
    "BaseChannel",
    "ChannelResult",
    "ChannelType",
    "DeliveryStatus",
    "NotificationPayload",
    # Channels
    "PushChannel",
]
