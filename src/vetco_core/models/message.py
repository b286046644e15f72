"""
Message model for the vetco-core package.

A message has exactly one sender and exactly one recipient, each of which is
either a user or a veterinarian. The table keeps one nullable foreign key
per (role, kind) pair; in Python the two ends are exposed as ``Participant``
values so callers never branch over the four columns themselves.

Example:
    >>> owner = Participant.user(owner_id)
    >>> vet = Participant.veterinarian(vet_id)
    >>> message = Message(sender=owner, recipient=vet, content="Is 32 bpm ok?")
    >>> message.vet_recipient_id == vet_id
    True
"""

import enum
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    ColumnElement,
    ForeignKey,
    Index,
    Text,
    and_,
    false,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from ..utils.datetime_utils import get_current_utc
from .base import BaseModel


class ParticipantKind(enum.Enum):
    """Kind of account taking part in a conversation."""

    USER = "user"
    VETERINARIAN = "veterinarian"


@dataclass(frozen=True)
class Participant:
    """A user or veterinarian identity; hashable so it can key conversations."""

    kind: ParticipantKind
    id: uuid.UUID

    @classmethod
    def user(cls, participant_id: uuid.UUID) -> "Participant":
        return cls(ParticipantKind.USER, participant_id)

    @classmethod
    def veterinarian(cls, participant_id: uuid.UUID) -> "Participant":
        return cls(ParticipantKind.VETERINARIAN, participant_id)

    @classmethod
    def of(cls, kind: Any, participant_id: uuid.UUID) -> "Participant":
        """Build from a kind given as enum member or its string value."""
        return cls(ParticipantKind(kind), participant_id)

    @property
    def is_veterinarian(self) -> bool:
        return self.kind is ParticipantKind.VETERINARIAN

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.id}"


class Message(BaseModel):
    """
    A single immutable message; only ``is_read`` changes after creation.

    Exactly one of ``sender_id``/``vet_sender_id`` and exactly one of
    ``recipient_id``/``vet_recipient_id`` is set.
    """

    __tablename__ = "messages"

    def __init__(
        self,
        sender: Optional[Participant] = None,
        recipient: Optional[Participant] = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize a message, optionally from sender/recipient participants.

        Args:
            sender: Sending participant, mapped onto sender_id or vet_sender_id
            recipient: Receiving participant, mapped onto recipient_id or
                vet_recipient_id
            **kwargs: Column values
        """
        if sender is not None:
            kwargs.update(self._sender_columns(sender))
        if recipient is not None:
            kwargs.update(self._recipient_columns(recipient))
        if "is_read" not in kwargs:
            kwargs["is_read"] = False
        if "timestamp" not in kwargs:
            kwargs["timestamp"] = get_current_utc()
        super().__init__(**kwargs)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    timestamp: Mapped[datetime] = mapped_column(
        nullable=False,
        default=get_current_utc,
        server_default=func.now(),
        comment="When the message was sent",
    )

    is_read: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
        comment="Set once the recipient has viewed the message",
    )

    sender_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True
    )

    vet_sender_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("veterinarians.id", ondelete="CASCADE"), nullable=True, index=True
    )

    recipient_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True
    )

    vet_recipient_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("veterinarians.id", ondelete="CASCADE"), nullable=True, index=True
    )

    __table_args__ = (
        CheckConstraint(
            "(sender_id IS NULL) <> (vet_sender_id IS NULL)",
            name="ck_messages_single_sender",
        ),
        CheckConstraint(
            "(recipient_id IS NULL) <> (vet_recipient_id IS NULL)",
            name="ck_messages_single_recipient",
        ),
        Index("ix_messages_timestamp", "timestamp"),
    )

    @staticmethod
    def _sender_columns(sender: Participant) -> Dict[str, Optional[uuid.UUID]]:
        if sender.is_veterinarian:
            return {"sender_id": None, "vet_sender_id": sender.id}
        return {"sender_id": sender.id, "vet_sender_id": None}

    @staticmethod
    def _recipient_columns(recipient: Participant) -> Dict[str, Optional[uuid.UUID]]:
        if recipient.is_veterinarian:
            return {"recipient_id": None, "vet_recipient_id": recipient.id}
        return {"recipient_id": recipient.id, "vet_recipient_id": None}

    @property
    def sender(self) -> Optional[Participant]:
        """The sending participant, or None for a row missing both sender keys."""
        if self.vet_sender_id is not None:
            return Participant.veterinarian(self.vet_sender_id)
        if self.sender_id is not None:
            return Participant.user(self.sender_id)
        return None

    @property
    def recipient(self) -> Optional[Participant]:
        """The receiving participant, or None for a row missing both recipient keys."""
        if self.vet_recipient_id is not None:
            return Participant.veterinarian(self.vet_recipient_id)
        if self.recipient_id is not None:
            return Participant.user(self.recipient_id)
        return None

    def is_addressed_to(self, participant: Participant) -> bool:
        return self.recipient == participant

    def mark_read(self) -> None:
        self.is_read = True

    @classmethod
    def sent_by(cls, participant: Participant) -> ColumnElement[bool]:
        """SQL condition matching messages sent by ``participant``."""
        if participant.is_veterinarian:
            return cls.vet_sender_id == participant.id
        return cls.sender_id == participant.id

    @classmethod
    def received_by(cls, participant: Participant) -> ColumnElement[bool]:
        """SQL condition matching messages addressed to ``participant``."""
        if participant.is_veterinarian:
            return cls.vet_recipient_id == participant.id
        return cls.recipient_id == participant.id

    @classmethod
    def exchanged(cls, sender: Participant, recipient: Participant) -> ColumnElement[bool]:
        """SQL condition matching messages sent from ``sender`` to ``recipient``."""
        return and_(cls.sent_by(sender), cls.received_by(recipient))

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        sender, recipient = self.sender, self.recipient
        data["sender_type"] = sender.kind.value if sender else None
        data["recipient_type"] = recipient.kind.value if recipient else None
        return data
