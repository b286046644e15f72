"""
Veterinarian Pydantic schemas.

Covers the directory search owners use to find a vet to message, the vet
profile, and the patient and schedule lists a veterinarian sees.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .medication import AdministrationResponse, MedicationScheduleResponse
from .pet import PetResponse

MAX_SEARCH_LIMIT = 50
DEFAULT_SEARCH_LIMIT = 20


class VeterinarianQuery(BaseModel):
    """Filters for the veterinarian directory."""

    model_config = ConfigDict(str_strip_whitespace=True)

    query: Optional[str] = Field(
        None, description="Matches first name, last name or clinic, case-insensitive"
    )
    clinic: Optional[str] = Field(None, description="Clinic name contains this text")
    limit: int = Field(DEFAULT_SEARCH_LIMIT, gt=0, le=MAX_SEARCH_LIMIT)

    @field_validator("query", "clinic")
    @classmethod
    def validate_filters(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class VeterinarianSummary(BaseModel):
    """Directory entry for a veterinarian."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    first_name: str
    last_name: str
    clinic: str
    email: str


class VeterinarianProfile(VeterinarianSummary):
    license_number: str


class OwnerContact(BaseModel):
    """Contact details of a patient's owner."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None


class PatientResponse(BaseModel):
    """A pet the veterinarian has issued at least one schedule for."""

    pet: PetResponse
    owner: OwnerContact
    last_schedule_date: datetime


class CreatedScheduleResponse(BaseModel):
    """A schedule the veterinarian issued, with its most recent doses."""

    schedule: MedicationScheduleResponse
    pet: PetResponse
    owner: OwnerContact
    administrations: List[AdministrationResponse] = Field(default_factory=list)
