# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the FCM push channel."""

import json
from unittest.mock import AsyncMock

import httpx
import pytest

from src.core.config import FirebaseSettings
from src.infrastructure.notifications.channels import (
    DeliveryStatus,
    NotificationPayload,
    PushChannel,
)


def make_channel(handler, **kwargs) -> PushChannel:
    """Create an initialized channel that talks to a mock transport."""
    channel = PushChannel(
        settings=FirebaseSettings(credentials_path="/secrets/fcm.json", project_id="demo-school"),
        transport=httpx.MockTransport(handler),
        **kwargs,
    )
    channel._initialized = True
    channel._project_id = "demo-school"
    channel._get_access_token = AsyncMock(return_value="access-token")
    return channel


@pytest.fixture
def topic_payload() -> NotificationPayload:
    """Payload addressed to the admin topic."""
    return NotificationPayload(
        notification_type="records_reverted",
        title="Payments expired",
        message="3 student fees were reset to unpaid.",
        topic="school-admins",
        data={"count": "3"},
    )


class TestPushChannelConfiguration:
    """Tests for channel initialization."""

    @pytest.mark.asyncio
    async def test_not_configured_is_skipped(self, topic_payload):
        """Test sends are skipped without Firebase settings."""
        channel = PushChannel(settings=FirebaseSettings(credentials_path=None, project_id=None))

        result = await channel.send(topic_payload)

        assert result.status == DeliveryStatus.SKIPPED
        assert "not configured" in result.error_message

    @pytest.mark.asyncio
    async def test_missing_credentials_file(self, topic_payload, tmp_path):
        """Test a missing credentials file disables the channel."""
        channel = PushChannel(
            settings=FirebaseSettings(
                credentials_path=str(tmp_path / "missing.json"),
                project_id="demo-school",
            )
        )

        result = await channel.send(topic_payload)

        assert result.status == DeliveryStatus.SKIPPED
        assert "not found" in result.error_message

    @pytest.mark.asyncio
    async def test_invalid_credentials_file(self, topic_payload, tmp_path):
        """Test an unreadable service account file disables the channel."""
        credentials = tmp_path / "fcm.json"
        credentials.write_text("{}")
        channel = PushChannel(
            settings=FirebaseSettings(credentials_path=str(credentials), project_id="demo-school")
        )

        result = await channel.send(topic_payload)

        assert result.status == DeliveryStatus.SKIPPED
        assert result.error_message.startswith("Failed to initialize")


class TestPushChannelSend:
    """Tests for FCM delivery."""

    @pytest.mark.asyncio
    async def test_topic_message(self, topic_payload):
        """Test a topic payload is posted to the FCM v1 endpoint."""
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(
                200, json={"name": "projects/demo-school/messages/msg-1"}
            )

        result = await make_channel(handler).send(topic_payload)

        assert result.status == DeliveryStatus.SENT
        assert result.message_id == "msg-1"
        assert len(requests) == 1
        request = requests[0]
        assert str(request.url) == (
            "https://fcm.googleapis.com/v1/projects/demo-school/messages:send"
        )
        assert request.headers["Authorization"] == "Bearer access-token"
        message = json.loads(request.content)["message"]
        assert message["topic"] == "school-admins"
        assert message["notification"]["title"] == "Payments expired"
        assert message["data"] == {"notification_type": "records_reverted", "count": "3"}

    @pytest.mark.asyncio
    async def test_token_messages(self):
        """Test each device token gets its own message."""
        sent: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            sent.append(json.loads(request.content)["message"])
            return httpx.Response(200, json={"name": f"projects/p/messages/{len(sent)}"})

        payload = NotificationPayload(
            notification_type="salary_paid",
            title="Salary paid",
            message="Your salary for 2025-03 has been paid.",
            push_tokens=[
                {"platform": "android", "token": "android-token"},
                {"platform": "ios", "token": "ios-token"},
                {"platform": "web", "token": ""},
            ],
            priority="high",
        )

        result = await make_channel(handler).send(payload)

        assert result.status == DeliveryStatus.SENT
        assert result.metadata["success_count"] == 2
        assert [m["token"] for m in sent] == ["android-token", "ios-token"]
        assert sent[0]["android"]["priority"] == "high"
        assert sent[1]["apns"]["headers"]["apns-priority"] == "10"

    @pytest.mark.asyncio
    async def test_all_failed(self, topic_payload):
        """Test FCM errors produce a failed result."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403, text="permission denied")

        result = await make_channel(handler).send(topic_payload)

        assert result.status == DeliveryStatus.FAILED
        assert result.metadata["results"][0]["status_code"] == 403

    @pytest.mark.asyncio
    async def test_transport_error(self, topic_payload):
        """Test network errors produce a failed result."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        result = await make_channel(handler).send(topic_payload)

        assert result.status == DeliveryStatus.FAILED

    @pytest.mark.asyncio
    async def test_no_target_skipped(self):
        """Test payloads with neither topic nor tokens are skipped."""
        channel = make_channel(lambda request: httpx.Response(200, json={}))
        payload = NotificationPayload(notification_type="x", title="t", message="m")

        result = await channel.send(payload)

        assert result.status == DeliveryStatus.SKIPPED

    @pytest.mark.asyncio
    async def test_missing_access_token(self, topic_payload):
        """Test a failed token refresh fails the send."""
        channel = make_channel(lambda request: httpx.Response(200, json={}))
        channel._get_access_token = AsyncMock(return_value=None)

        result = await channel.send(topic_payload)

        assert result.status == DeliveryStatus.FAILED
