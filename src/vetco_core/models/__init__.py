"""
Database models for the vetco-core package.

This module contains SQLAlchemy models for all persisted entities of the
VetCo pet-health backend.
"""

# Base model will be imported by all other models
from .base import Base, BaseModel
from .breathing_rate import BreathingRate
from .medication import MedicationAdministration, MedicationSchedule, Reminder
from .message import Message, Participant, ParticipantKind
from .pet import Pet
from .push_token import PushToken
from .user import User
from .veterinarian import Veterinarian

__all__ = [
    "Base",
    "BaseModel",
    "User",
    "Veterinarian",
    "Pet",
    "BreathingRate",
    "Message",
    "Participant",
    "ParticipantKind",
    "MedicationSchedule",
    "Reminder",
    "MedicationAdministration",
    "PushToken",
]
