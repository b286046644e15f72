"""
Conversation derivation over a flat message table.

Conversations are not persisted. They are recomputed on every request by
grouping the viewer's messages by counterparty, where the counterparty is
whichever participant of a message is not the viewer. Because senders and
recipients are typed ``Participant`` values, the four user/veterinarian
sender-recipient combinations are handled by the same code path.

Example:
    >>> viewer = Participant.user(owner_id)
    >>> messages = await repo.list_for_participant(viewer)   # newest first
    >>> for conversation in derive_conversations(owner_id, "user", messages):
    ...     print(conversation.counterparty, conversation.unread_count)
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from ..models.message import Message, Participant, ParticipantKind

logger = logging.getLogger(__name__)


@dataclass
class Conversation:
    """
    Messages between the viewer and one counterparty, summarised.

    Attributes:
        viewer: The participant the conversation is computed for
        counterparty: The other participant
        last_message: Most recent message, None for a freshly started thread
        unread_count: Messages addressed to the viewer not yet read
    """

    viewer: Participant
    counterparty: Participant
    last_message: Optional[Message] = None
    unread_count: int = 0

    @property
    def counterparty_id(self) -> uuid.UUID:
        return self.counterparty.id

    @property
    def counterparty_kind(self) -> ParticipantKind:
        return self.counterparty.kind

    @property
    def is_empty(self) -> bool:
        """True when no message has been exchanged yet."""
        return self.last_message is None


def counterparty_of(message: Message, viewer: Participant) -> Optional[Participant]:
    """
    Return the participant of ``message`` that is not ``viewer``.

    A message the viewer sent to themself yields the viewer. Messages the
    viewer is not part of yield None.
    """
    if message.sender == viewer:
        return message.recipient
    if message.recipient == viewer:
        return message.sender
    return None


def derive_conversations(
    viewer_id: uuid.UUID,
    viewer_kind: Any,
    messages: Sequence[Message],
    count_unread: bool = True,
) -> List[Conversation]:
    """
    Group a viewer's messages into one conversation per counterparty.

    Args:
        viewer_id: Id of the viewing user or veterinarian
        viewer_kind: ``ParticipantKind`` or its value ("user"/"veterinarian")
        messages: Every message the viewer sent or received, newest first
        count_unread: Count unread messages addressed to the viewer. When
            False every conversation reports 0, matching the legacy API.

    Returns:
        Conversations ordered by their most recent message, newest first.
        Each ``last_message`` is the first message seen for that counterparty.
    """
    viewer = Participant.of(viewer_kind, viewer_id)
    conversations: Dict[Participant, Conversation] = {}
    skipped = 0

    for message in messages:
        counterparty = counterparty_of(message, viewer)
        if counterparty is None:
            skipped += 1
            continue

        conversation = conversations.get(counterparty)
        if conversation is None:
            conversation = Conversation(
                viewer=viewer, counterparty=counterparty, last_message=message
            )
            conversations[counterparty] = conversation

        if count_unread and not message.is_read and message.is_addressed_to(viewer):
            conversation.unread_count += 1

    if skipped:
        logger.warning(
            f"Skipped {skipped} message(s) not involving {viewer} while deriving conversations"
        )

    return list(conversations.values())


def start_conversation(viewer: Participant, counterparty: Participant) -> Conversation:
    """
    Build the placeholder shown when a thread is opened before any message.

    Nothing is persisted; the conversation exists only once a message is sent.
    """
    return Conversation(viewer=viewer, counterparty=counterparty)


def messages_to_mark_read(
    viewer: Participant, messages: Sequence[Message]
) -> List[uuid.UUID]:
    """Ids of messages in ``messages`` addressed to ``viewer`` and still unread."""
    return [
        message.id
        for message in messages
        if not message.is_read and message.is_addressed_to(viewer)
    ]
