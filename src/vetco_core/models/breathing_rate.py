"""
Breathing-rate measurement model.

Owners record resting breaths per minute for a pet; rows are never edited
or deleted by the application once written.
"""

import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from ..utils.datetime_utils import get_current_utc
from .base import BaseModel


class BreathingRate(BaseModel):
    """One breaths-per-minute measurement for a pet."""

    __tablename__ = "breathing_rates"

    def __init__(self, **kwargs: Any) -> None:
        if "timestamp" not in kwargs:
            kwargs["timestamp"] = get_current_utc()
        super().__init__(**kwargs)

    pet_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("pets.id", ondelete="CASCADE"),
        nullable=False,
        comment="Pet the measurement belongs to",
    )

    rate: Mapped[int] = mapped_column(
        Integer, nullable=False, comment="Breaths per minute"
    )

    timestamp: Mapped[datetime] = mapped_column(
        nullable=False,
        default=get_current_utc,
        server_default=func.now(),
        comment="When the measurement was taken",
    )

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("rate > 0", name="ck_breathing_rates_rate_positive"),
        Index("ix_breathing_rates_pet_timestamp", "pet_id", "timestamp"),
    )

    def __repr__(self) -> str:
        return f"<BreathingRate(pet_id={self.pet_id}, rate={self.rate})>"
