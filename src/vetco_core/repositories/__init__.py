"""
Async query helpers, one class per aggregate.

Each repository wraps the ``AsyncSession`` of a single request; none of
them commits, leaving the transaction boundary to the caller.
"""

from .breathing import BreathingRateRepository
from .medication import MedicationRepository
from .messages import MessageRepository
from .participants import ParticipantRepository
from .pets import PetRepository
from .push_tokens import PushTokenRepository
from .veterinarians import Patient, VeterinarianRepository

__all__ = [
    "BreathingRateRepository",
    "MedicationRepository",
    "MessageRepository",
    "ParticipantRepository",
    "PetRepository",
    "PushTokenRepository",
    "VeterinarianRepository",
    "Patient",
]
