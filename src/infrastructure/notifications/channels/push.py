# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Push notification channel using Firebase Cloud Messaging.

This channel sends push notifications to devices and topics using the
FCM HTTP v1 API. It requires valid Firebase service account credentials
to be configured.

Configuration (via environment variables):
- FIREBASE_CREDENTIALS_PATH: Path to service account JSON file
- FIREBASE_PROJECT_ID: Firebase project ID
"""

import asyncio
import os
from typing import Any

import httpx
from google.auth.transport.requests import Request
from google.oauth2 import service_account

from src.core.config import FirebaseSettings, get_settings
from src.infrastructure.notifications.channels.base import (
    BaseChannel,
    ChannelResult,
    ChannelType,
    NotificationPayload,
)

# FCM HTTP v1 API endpoint template
FCM_API_URL = "https://fcm.googleapis.com/v1/projects/{project_id}/messages:send"
FCM_SCOPE = "https://www.googleapis.com/auth/firebase.messaging"


class PushChannel(BaseChannel):
    """Push notification channel using Firebase Cloud Messaging.

    Targets are taken from the payload: ``topic`` for broadcasts and
    ``push_tokens`` for individual devices, given as
    ``[{"platform": "android|ios|web", "token": "device_token"}]``.
    """

    # FCM priority mapping
    PRIORITY_MAP = {
        "low": "normal",
        "normal": "high",
        "high": "high",
    }

    def __init__(
        self,
        settings: FirebaseSettings | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the push channel.

        Args:
            settings: Firebase settings. Defaults to application settings.
            timeout: HTTP timeout in seconds for FCM requests.
            transport: Optional httpx transport for the FCM client.
        """
        super().__init__()
        self._settings = settings or get_settings().firebase
        self._timeout = timeout
        self._transport = transport
        self._credentials: service_account.Credentials | None = None
        self._project_id: str | None = None
        self._initialized = False
        self._init_error: str | None = None

    @property
    def channel_type(self) -> ChannelType:
        """Return the channel type."""
        return ChannelType.PUSH

    async def _ensure_initialized(self) -> bool:
        """Ensure Firebase credentials are loaded.

        Returns:
            True if initialization succeeded.
        """
        if self._initialized:
            return True

        if self._init_error:
            return False

        if not self._settings.is_configured:
            self._init_error = "Firebase credentials not configured"
            self.logger.warning(
                "Push notifications disabled: FIREBASE_CREDENTIALS_PATH or "
                "FIREBASE_PROJECT_ID not set"
            )
            return False

        credentials_path = self._settings.credentials_path
        if not os.path.exists(credentials_path):
            self._init_error = f"Credentials file not found: {credentials_path}"
            self.logger.error(self._init_error)
            return False

        try:
            self._credentials = service_account.Credentials.from_service_account_file(
                credentials_path,
                scopes=[FCM_SCOPE],
            )
        except (ValueError, OSError) as e:
            self._init_error = f"Failed to initialize: {e}"
            self.logger.error(self._init_error, exc_info=True)
            return False

        self._project_id = self._settings.project_id
        self._initialized = True
        self.logger.info("FCM push channel initialized for project %s", self._project_id)
        return True

    async def _get_access_token(self) -> str | None:
        """Get OAuth2 access token for FCM API.

        Returns:
            Access token string or None if failed.
        """
        if not self._credentials:
            return None

        try:
            # Token refresh is blocking, run it in the default executor
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, self._credentials.refresh, Request())
            return self._credentials.token
        except Exception as e:
            self.logger.error("Failed to get FCM access token: %s", str(e))
            return None

    async def send(self, payload: NotificationPayload) -> ChannelResult:
        """Send push notification via FCM.

        Args:
            payload: The notification payload.

        Returns:
            ChannelResult with delivery status.
        """
        if not await self._ensure_initialized():
            return self.create_skipped_result(
                self._init_error or "Push channel not configured"
            )

        targets: list[dict[str, str]] = []
        if payload.topic:
            targets.append({"topic": payload.topic})
        targets.extend(
            {"token": info["token"], "platform": info.get("platform", "android")}
            for info in payload.push_tokens
            if info.get("token")
        )
        if not targets:
            return self.create_skipped_result("No push target available")

        access_token = await self._get_access_token()
        if not access_token:
            return self.create_failure_result("Failed to obtain access token")

        results: list[dict[str, Any]] = []
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            for target in targets:
                results.append(
                    await self._send_message(client, target, payload, access_token)
                )

        success_count = sum(1 for r in results if r["success"])
        failure_count = len(results) - success_count

        if success_count == 0:
            return self.create_failure_result(
                f"All {failure_count} push notifications failed",
                metadata={"results": results},
            )

        return self.create_success_result(
            message_id=next(r["message_id"] for r in results if r["success"]),
            metadata={
                "success_count": success_count,
                "failure_count": failure_count,
                "results": results,
            },
        )

    async def _send_message(
        self,
        client: httpx.AsyncClient,
        target: dict[str, str],
        payload: NotificationPayload,
        access_token: str,
    ) -> dict[str, Any]:
        """Send one FCM message to a topic or device token.

        Args:
            client: Shared HTTP client.
            target: Either ``{"topic": ...}`` or ``{"token": ..., "platform": ...}``.
            payload: Notification payload.
            access_token: OAuth2 access token.

        Returns:
            Result dictionary with success status.
        """
        label = target.get("topic") or target["token"][:20] + "..."
        url = FCM_API_URL.format(project_id=self._project_id)
        headers = {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
        }

        try:
            response = await client.post(
                url,
                headers=headers,
                json={"message": self._build_fcm_message(target, payload)},
            )
        except httpx.HTTPError as e:
            self.logger.error("Failed to send push to %s: %s", label, str(e))
            return {"success": False, "target": label, "error": str(e)}

        if response.status_code == 200:
            message_id = response.json().get("name", "").split("/")[-1]
            self.logger.debug("Push sent successfully to %s: %s", label, message_id)
            return {"success": True, "target": label, "message_id": message_id}

        self.logger.warning(
            "FCM request failed (%d): %s",
            response.status_code,
            response.text,
        )
        return {
            "success": False,
            "target": label,
            "error": response.text,
            "status_code": response.status_code,
        }

    def _build_fcm_message(
        self,
        target: dict[str, str],
        payload: NotificationPayload,
    ) -> dict[str, Any]:
        """Build FCM message structure.

        Args:
            target: Topic or token target.
            payload: Notification payload.

        Returns:
            FCM message dictionary.
        """
        message: dict[str, Any] = {
            "notification": {
                "title": payload.title,
                "body": payload.message,
            },
            # FCM data values must be strings
            "data": {
                "notification_type": payload.notification_type,
                **{key: str(value) for key, value in payload.data.items()},
            },
        }

        priority = self.PRIORITY_MAP.get(payload.priority, "high")

        if "topic" in target:
            message["topic"] = target["topic"]
            message["android"] = {"priority": priority}
            return message

        message["token"] = target["token"]
        platform = target.get("platform", "android")

        if platform == "android":
            message["android"] = {
                "priority": priority,
                "notification": {"channel_id": "schooldesk_billing"},
            }
        elif platform == "ios":
            message["apns"] = {
                "headers": {
                    "apns-priority": "10" if priority == "high" else "5",
                },
                "payload": {
                    "aps": {
                        "sound": "default",
                    },
                },
            }
        elif platform == "web":
            message["webpush"] = {
                "headers": {
                    "Urgency": priority,
                },
            }

        return message
