"""Device push token registered by a user's mobile app."""

import uuid

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel


class PushToken(BaseModel):
    """Expo push token for one device; a token belongs to at most one user."""

    __tablename__ = "push_tokens"

    token: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)

    platform: Mapped[str] = mapped_column(
        String(20), nullable=False, comment="'ios', 'android' or 'web'"
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
