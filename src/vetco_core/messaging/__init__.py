"""
Messaging domain logic.

Pure functions that turn the viewer's messages into conversations; all
I/O lives in ``vetco_core.repositories`` and ``vetco_core.services``.
"""

from .conversations import (
    Conversation,
    counterparty_of,
    derive_conversations,
    messages_to_mark_read,
    start_conversation,
)

__all__ = [
    "Conversation",
    "counterparty_of",
    "derive_conversations",
    "messages_to_mark_read",
    "start_conversation",
]
