"""Push notification delivery."""

from .push import (
    DEVICE_NOT_REGISTERED,
    DispatchResult,
    PushMessage,
    PushNotificationDispatcher,
    medication_reminder_notification,
    new_message_notification,
)

__all__ = [
    "DEVICE_NOT_REGISTERED",
    "DispatchResult",
    "PushMessage",
    "PushNotificationDispatcher",
    "medication_reminder_notification",
    "new_message_notification",
]
