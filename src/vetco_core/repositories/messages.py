"""Message queries."""

import logging
import uuid
from typing import Iterable, List

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Message, Participant
from .participants import ParticipantRepository

logger = logging.getLogger(__name__)


class MessageRepository:
    """Reads and writes messages within one request's session."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.participants = ParticipantRepository(session)

    async def list_for_participant(self, participant: Participant) -> List[Message]:
        """Every message the participant sent or received, newest first."""
        query = (
            select(Message)
            .where(or_(Message.sent_by(participant), Message.received_by(participant)))
            .order_by(Message.timestamp.desc(), Message.created_at.desc())
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_between(
        self,
        viewer: Participant,
        counterparty: Participant,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Message]:
        """
        One page of the conversation between two participants, newest first.

        Args:
            viewer: Participant reading the conversation
            counterparty: The other side of the conversation
            limit: Page size
            offset: Number of newer messages to skip
        """
        query = (
            select(Message)
            .where(
                or_(
                    Message.exchanged(viewer, counterparty),
                    Message.exchanged(counterparty, viewer),
                )
            )
            .order_by(Message.timestamp.desc(), Message.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def mark_read(self, message_ids: Iterable[uuid.UUID]) -> int:
        """Set ``is_read`` on the given messages; returns how many changed."""
        ids = list(message_ids)
        if not ids:
            return 0

        result = await self.session.execute(
            select(Message).where(Message.id.in_(ids), Message.is_read.is_(False))
        )
        unread = result.scalars().all()
        for message in unread:
            message.mark_read()

        await self.session.flush()
        logger.debug(f"Marked {len(unread)} message(s) as read")
        return len(unread)

    async def create(
        self, sender: Participant, recipient: Participant, content: str
    ) -> Message:
        message = Message(sender=sender, recipient=recipient, content=content)
        self.session.add(message)
        await self.session.flush()
        await self.session.refresh(message)
        return message

    async def participant_exists(self, participant: Participant) -> bool:
        return await self.participants.exists(participant)
