"""
Pydantic schemas for data validation and serialization.

This module contains Pydantic schemas for request/response validation
across the VetCo backend.
"""

from .breathing import (
    BreathingAlertResponse,
    BreathingAnalyticsResponse,
    BreathingHistoryResponse,
    BreathingRateCreate,
    BreathingRateQuery,
    BreathingRateResponse,
    BreathingRecordResponse,
    BreathingStatsResponse,
    NormalRangeResponse,
)
from .medication import (
    AdministrationCreate,
    AdministrationResponse,
    MedicationScheduleCreate,
    MedicationScheduleQR,
    MedicationScheduleResponse,
    QRScanRequest,
    ReminderCreate,
)
from .message import (
    ConversationQuery,
    ConversationResponse,
    MessageCreate,
    MessageResponse,
    ParticipantProfile,
    ParticipantRef,
)
from .pet import PetCreate, PetOverviewResponse, PetResponse, PetUpdate
from .veterinarian import (
    CreatedScheduleResponse,
    OwnerContact,
    PatientResponse,
    VeterinarianProfile,
    VeterinarianQuery,
    VeterinarianSummary,
)

__all__ = [
    # Message schemas
    "ParticipantRef",
    "ParticipantProfile",
    "MessageCreate",
    "ConversationQuery",
    "MessageResponse",
    "ConversationResponse",
    # Breathing schemas
    "BreathingRateCreate",
    "BreathingRateQuery",
    "BreathingRateResponse",
    "BreathingStatsResponse",
    "BreathingAlertResponse",
    "NormalRangeResponse",
    "BreathingAnalyticsResponse",
    "BreathingRecordResponse",
    "BreathingHistoryResponse",
    # Medication schemas
    "MedicationScheduleQR",
    "MedicationScheduleCreate",
    "MedicationScheduleResponse",
    "QRScanRequest",
    "AdministrationCreate",
    "AdministrationResponse",
    "ReminderCreate",
    # Pet schemas
    "PetCreate",
    "PetUpdate",
    "PetResponse",
    "PetOverviewResponse",
    # Veterinarian schemas
    "VeterinarianQuery",
    "VeterinarianSummary",
    "VeterinarianProfile",
    "OwnerContact",
    "PatientResponse",
    "CreatedScheduleResponse",
]
