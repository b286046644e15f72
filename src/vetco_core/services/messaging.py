"""
Messaging workflows: conversation list, conversation page, send.

The service owns one request's session; committing is left to the caller
(typically ``SessionManager.get_transaction``).
"""

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import NotFoundException, ValidationException
from ..messaging import (
    Conversation,
    derive_conversations,
    messages_to_mark_read,
    start_conversation,
)
from ..models import Message, Participant
from ..notifications import PushNotificationDispatcher, new_message_notification
from ..repositories import MessageRepository, ParticipantRepository
from ..schemas.message import ConversationResponse

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


class MessagingService:
    """Conversations and messages between users and veterinarians."""

    def __init__(
        self,
        session: AsyncSession,
        dispatcher: Optional[PushNotificationDispatcher] = None,
        count_unread: bool = True,
    ):
        """
        Args:
            session: Session of the current request
            dispatcher: Push dispatcher for new-message notifications; None
                disables them
            count_unread: Report real unread counts (False reports 0)
        """
        self.session = session
        self.messages = MessageRepository(session)
        self.participants = ParticipantRepository(session)
        self.dispatcher = dispatcher
        self.count_unread = count_unread

    async def list_conversations(self, viewer: Participant) -> List[Conversation]:
        """The viewer's conversations, most recently active first."""
        messages = await self.messages.list_for_participant(viewer)
        return derive_conversations(
            viewer.id, viewer.kind, messages, count_unread=self.count_unread
        )

    async def list_conversation_summaries(
        self, viewer: Participant
    ) -> List[ConversationResponse]:
        """Conversations with the partner's display details attached."""
        summaries = []
        for conversation in await self.list_conversations(viewer):
            partner = await self.participants.get_profile(conversation.counterparty)
            summaries.append(ConversationResponse.from_conversation(conversation, partner))
        return summaries

    async def get_conversation(
        self,
        viewer: Participant,
        counterparty: Participant,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Message]:
        """
        Return one page of a conversation, oldest first.

        Messages on the page that are addressed to the viewer are marked read.

        Raises:
            ValidationException: If ``limit`` or ``offset`` is out of range
        """
        if not 1 <= limit <= MAX_PAGE_SIZE:
            raise ValidationException(
                f"limit must be between 1 and {MAX_PAGE_SIZE}", field="limit", value=limit
            )
        if offset < 0:
            raise ValidationException("offset must not be negative", field="offset", value=offset)

        page = await self.messages.list_between(viewer, counterparty, limit, offset)

        unread_ids = messages_to_mark_read(viewer, page)
        if unread_ids:
            await self.messages.mark_read(unread_ids)

        page.reverse()
        return page

    async def send_message(
        self, sender: Participant, recipient: Participant, content: str
    ) -> Message:
        """
        Persist a message and notify a user recipient.

        Raises:
            ValidationException: If ``content`` is blank
            NotFoundException: If the recipient does not exist
        """
        if not content or not content.strip():
            raise ValidationException("Message content is required", field="content")

        if not await self.messages.participant_exists(recipient):
            raise NotFoundException("Recipient", recipient.id, message="Recipient not found")

        message = await self.messages.create(sender, recipient, content)
        logger.info(f"Message {message.id} sent from {sender} to {recipient}")

        if self.dispatcher is not None and not recipient.is_veterinarian:
            await self._notify_recipient(sender, recipient, message)

        return message

    async def _notify_recipient(
        self, sender: Participant, recipient: Participant, message: Message
    ) -> None:
        account = await self.participants.get(sender)
        sender_name = account.display_name if account is not None else "VetCo"
        await self.dispatcher.notify_user(
            recipient.id, new_message_notification(sender_name, message)
        )

    async def start_conversation(
        self, viewer: Participant, counterparty: Participant
    ) -> Conversation:
        """
        Open a thread with a participant before any message is sent.

        Raises:
            NotFoundException: If the counterparty does not exist
        """
        if not await self.participants.exists(counterparty):
            raise NotFoundException(
                counterparty.kind.value.capitalize(),
                counterparty.id,
            )
        return start_conversation(viewer, counterparty)
