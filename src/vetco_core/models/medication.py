"""
Medication schedule models for the vetco-core package.

A veterinarian issues a MedicationSchedule for a pet; the owner imports it
by scanning the schedule's QR code, sets Reminders and records each
MedicationAdministration.
"""

import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import Boolean, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func, true

from ..utils.datetime_utils import get_current_utc
from .base import BaseModel


class MedicationSchedule(BaseModel):
    """Medication regimen issued by a veterinarian for one pet."""

    __tablename__ = "medication_schedules"

    def __init__(self, **kwargs: Any) -> None:
        if "is_active" not in kwargs:
            kwargs["is_active"] = True
        super().__init__(**kwargs)

    qr_code: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        nullable=False,
        index=True,
        comment="Lookup code embedded in the printed QR code",
    )

    medication: Mapped[str] = mapped_column(String(200), nullable=False)
    dosage: Mapped[str] = mapped_column(String(100), nullable=False)
    frequency: Mapped[str] = mapped_column(String(100), nullable=False)
    duration: Mapped[str] = mapped_column(String(100), nullable=False)
    instructions: Mapped[str] = mapped_column(Text, nullable=False)

    start_date: Mapped[datetime] = mapped_column(nullable=False)
    end_date: Mapped[Optional[datetime]] = mapped_column(nullable=True)

    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )

    pet_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("pets.id", ondelete="CASCADE"), nullable=False, index=True
    )

    veterinarian_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("veterinarians.id", ondelete="CASCADE"), nullable=False, index=True
    )

    def __repr__(self) -> str:
        return f"<MedicationSchedule(id={self.id}, medication='{self.medication}')>"


class Reminder(BaseModel):
    """A point in time at which the owner should give a dose."""

    __tablename__ = "reminders"

    def __init__(self, **kwargs: Any) -> None:
        if "is_active" not in kwargs:
            kwargs["is_active"] = True
        super().__init__(**kwargs)

    time: Mapped[datetime] = mapped_column(nullable=False)
    message: Mapped[str] = mapped_column(String(500), nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )

    schedule_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("medication_schedules.id", ondelete="CASCADE"), nullable=False
    )

    __table_args__ = (Index("ix_reminders_active_time", "is_active", "time"),)


class MedicationAdministration(BaseModel):
    """Record that a dose was (or was not) given."""

    __tablename__ = "medication_administrations"

    def __init__(self, **kwargs: Any) -> None:
        if "administered" not in kwargs:
            kwargs["administered"] = True
        if "timestamp" not in kwargs:
            kwargs["timestamp"] = get_current_utc()
        super().__init__(**kwargs)

    timestamp: Mapped[datetime] = mapped_column(
        nullable=False, default=get_current_utc, server_default=func.now()
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    administered: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    schedule_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("medication_schedules.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
