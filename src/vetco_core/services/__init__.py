"""
Request-level workflows built on the repositories and domain logic.
"""

from .breathing import BreathingHistory, BreathingRecord, BreathingService
from .medication import IssuedSchedule, MedicationService
from .messaging import MessagingService
from .pets import ActiveSchedule, PetDetail, PetOverview, PetService
from .veterinarians import CreatedSchedule, VeterinarianService

__all__ = [
    "BreathingService",
    "BreathingRecord",
    "BreathingHistory",
    "MedicationService",
    "IssuedSchedule",
    "MessagingService",
    "PetService",
    "PetOverview",
    "PetDetail",
    "ActiveSchedule",
    "VeterinarianService",
    "CreatedSchedule",
]
