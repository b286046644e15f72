"""
Best-effort delivery of Expo push notifications.

Messages are POSTed to the configured push gateway with ``requests``.
Delivery never fails the calling operation: transport errors are logged and
reported in the returned ``DispatchResult``. Tokens the gateway reports as
``DeviceNotRegistered`` are deleted when a token repository is available.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import requests

from ..exceptions import NotificationException
from ..models import Message, Reminder
from ..repositories.push_tokens import PushTokenRepository
from ..utils.config import NotificationConfig

logger = logging.getLogger(__name__)

DEVICE_NOT_REGISTERED = "DeviceNotRegistered"
MESSAGE_PREVIEW_LENGTH = 100


@dataclass
class PushMessage:
    """Content of one notification, sent identically to every device."""

    title: str
    body: str
    data: Dict[str, str] = field(default_factory=dict)


@dataclass
class DispatchResult:
    sent: int = 0
    failed: int = 0
    skipped: int = 0
    invalid_tokens: List[str] = field(default_factory=list)


def new_message_notification(sender_name: str, message: Message) -> PushMessage:
    body = message.content
    if len(body) > MESSAGE_PREVIEW_LENGTH:
        body = body[: MESSAGE_PREVIEW_LENGTH - 3] + "..."
    return PushMessage(
        title=f"New message from {sender_name}",
        body=body,
        data={"type": "new_message", "messageId": str(message.id)},
    )


def medication_reminder_notification(reminder: Reminder) -> PushMessage:
    return PushMessage(
        title="Medication Reminder",
        body=reminder.message,
        data={
            "type": "medication_reminder",
            "scheduleId": str(reminder.schedule_id),
            "reminderId": str(reminder.id),
        },
    )


class PushNotificationDispatcher:
    """Sends push notifications through an Expo-compatible gateway."""

    def __init__(
        self,
        config: NotificationConfig,
        token_repository: Optional[PushTokenRepository] = None,
    ) -> None:
        self.config = config
        self.token_repository = token_repository
        self._warned_unconfigured = False

    def _build_messages(
        self, tokens: Sequence[str], message: PushMessage
    ) -> List[Dict[str, Any]]:
        messages = []
        for token in tokens:
            entry: Dict[str, Any] = {
                "to": token,
                "title": message.title,
                "body": message.body,
                "data": message.data,
            }
            if self.config.default_sound:
                entry["sound"] = self.config.default_sound
            messages.append(entry)
        return messages

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if self.config.access_token:
            headers["Authorization"] = f"Bearer {self.config.access_token}"
        return headers

    def _post(self, messages: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        POST messages to the gateway and return one ticket per message.

        Raises:
            NotificationException: On transport errors, non-2xx responses or
                an unreadable response body
        """
        try:
            response = requests.post(
                self.config.gateway_url,
                json=messages,
                headers=self._headers(),
                timeout=self.config.timeout_seconds,
            )
            response.raise_for_status()
            tickets = response.json().get("data", [])
        except requests.HTTPError as e:
            raise NotificationException(
                "Push gateway rejected the request",
                status_code=e.response.status_code if e.response is not None else None,
                original_error=e,
            )
        except (requests.RequestException, ValueError, AttributeError) as e:
            raise NotificationException(
                "Push gateway request failed", original_error=e
            )

        if isinstance(tickets, dict):
            tickets = [tickets]
        return tickets

    async def dispatch(self, tokens: Sequence[str], message: PushMessage) -> DispatchResult:
        """
        Send ``message`` to every token.

        Returns:
            Counts of accepted, failed and skipped deliveries
        """
        if not tokens:
            return DispatchResult()

        if not self.config.is_configured:
            if not self._warned_unconfigured:
                logger.warning(
                    "Push gateway not configured. Push notifications will be disabled."
                )
                self._warned_unconfigured = True
            return DispatchResult(skipped=len(tokens))

        try:
            tickets = await asyncio.to_thread(
                self._post, self._build_messages(tokens, message)
            )
        except NotificationException as e:
            e.log_error(logger)
            return DispatchResult(failed=len(tokens))

        result = DispatchResult()
        for index, token in enumerate(tokens):
            ticket = tickets[index] if index < len(tickets) else {}
            if ticket.get("status") == "ok":
                result.sent += 1
                continue

            result.failed += 1
            details = ticket.get("details") or {}
            if details.get("error") == DEVICE_NOT_REGISTERED:
                result.invalid_tokens.append(token)

        logger.info(f"Sent {result.sent} push notification(s), {result.failed} failed")

        if result.invalid_tokens and self.token_repository is not None:
            await self.token_repository.delete_tokens(result.invalid_tokens)

        return result

    async def notify_user(self, user_id: uuid.UUID, message: PushMessage) -> DispatchResult:
        """Send ``message`` to every device registered by a user."""
        if self.token_repository is None:
            logger.warning("No push token repository available, skipping notification")
            return DispatchResult(skipped=1)

        push_tokens = await self.token_repository.list_for_user(user_id)
        if not push_tokens:
            logger.info(f"No push tokens found for user {user_id}")
            return DispatchResult()

        return await self.dispatch([t.token for t in push_tokens], message)
