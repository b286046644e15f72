"""
Message and conversation Pydantic schemas.

Request schemas validate what clients send; response schemas serialize
ORM messages and derived conversations.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models.message import Participant, ParticipantKind


class ParticipantRef(BaseModel):
    """A participant identity as sent over the wire."""

    model_config = ConfigDict(from_attributes=True)

    kind: ParticipantKind
    id: UUID

    @classmethod
    def from_participant(cls, participant: Optional[Participant]) -> Optional["ParticipantRef"]:
        if participant is None:
            return None
        return cls(kind=participant.kind, id=participant.id)

    def to_participant(self) -> Participant:
        return Participant(self.kind, self.id)


class ParticipantProfile(BaseModel):
    """Display information for a conversation partner."""

    id: UUID
    type: ParticipantKind
    first_name: str
    last_name: str
    email: Optional[str] = None
    clinic: Optional[str] = Field(None, description="Only set for veterinarians")


class MessageCreate(BaseModel):
    """Schema for sending a message."""

    model_config = ConfigDict(str_strip_whitespace=True)

    recipient_id: UUID
    recipient_type: ParticipantKind
    content: str = Field(..., min_length=1, description="Message text")

    @property
    def recipient(self) -> Participant:
        return Participant(self.recipient_type, self.recipient_id)


class ConversationQuery(BaseModel):
    """Schema for fetching one conversation page."""

    conversation_with: UUID
    conversation_type: ParticipantKind
    limit: int = Field(50, gt=0, le=100)
    offset: int = Field(0, ge=0)

    @property
    def counterparty(self) -> Participant:
        return Participant(self.conversation_type, self.conversation_with)


class MessageResponse(BaseModel):
    """A message as returned to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    content: str
    timestamp: datetime
    is_read: bool
    sender_id: Optional[UUID] = None
    vet_sender_id: Optional[UUID] = None
    recipient_id: Optional[UUID] = None
    vet_recipient_id: Optional[UUID] = None
    sender: Optional[ParticipantRef] = None
    recipient: Optional[ParticipantRef] = None

    @field_validator("sender", "recipient", mode="before")
    @classmethod
    def validate_participant(cls, v):
        if isinstance(v, Participant):
            return ParticipantRef.from_participant(v)
        return v


class ConversationResponse(BaseModel):
    """A derived conversation with its preview message."""

    counterparty: ParticipantRef
    partner: Optional[ParticipantProfile] = None
    last_message: Optional[MessageResponse] = None
    unread_count: int = Field(0, ge=0)

    @classmethod
    def from_conversation(
        cls, conversation, partner: Optional[ParticipantProfile] = None
    ) -> "ConversationResponse":
        """Build from a ``vetco_core.messaging.Conversation``."""
        return cls(
            counterparty=ParticipantRef.from_participant(conversation.counterparty),
            partner=partner,
            last_message=(
                MessageResponse.model_validate(conversation.last_message)
                if conversation.last_message is not None
                else None
            ),
            unread_count=conversation.unread_count,
        )
