"""
Medication schedule Pydantic schemas.

Includes the payload carried inside a schedule's QR code, whose keys are
camelCase because the web and mobile clients read it directly.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class MedicationScheduleQR(BaseModel):
    """Schedule summary embedded in the QR code payload."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    schedule_id: str = Field(..., description="Schedule UUID as a string")
    medication: str
    pet_name: str
    veterinarian: str = Field(..., description="Prescribing veterinarian's name")
    clinic: str
    instructions: str
    frequency: str
    dosage: str
    start_date: str = Field(..., description="ISO-8601 start date")
    end_date: Optional[str] = Field(None, description="ISO-8601 end date")


class MedicationScheduleCreate(BaseModel):
    """Schema used by a veterinarian to issue a schedule."""

    model_config = ConfigDict(str_strip_whitespace=True)

    pet_id: UUID
    medication: str = Field(..., min_length=1, max_length=200)
    dosage: str = Field(..., min_length=1, max_length=100)
    frequency: str = Field(..., min_length=1, max_length=100)
    duration: str = Field(..., min_length=1, max_length=100)
    instructions: str = Field(..., min_length=1)
    start_date: datetime
    end_date: Optional[datetime] = None

    @model_validator(mode="after")
    def validate_dates(self) -> "MedicationScheduleCreate":
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class MedicationScheduleResponse(BaseModel):
    """Schedule as returned to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    qr_code: str
    medication: str
    dosage: str
    frequency: str
    duration: str
    instructions: str
    start_date: datetime
    end_date: Optional[datetime] = None
    is_active: bool
    pet_id: UUID
    veterinarian_id: UUID
    created_at: datetime


class QRScanRequest(BaseModel):
    """Body of a scan: the raw text decoded from the QR image."""

    qr_code: str = Field(..., min_length=1)


class AdministrationCreate(BaseModel):
    schedule_id: UUID
    notes: Optional[str] = None
    administered: bool = True


class AdministrationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    schedule_id: UUID
    timestamp: datetime
    notes: Optional[str] = None
    administered: bool


class ReminderCreate(BaseModel):
    """Times at which the owner wants dose reminders."""

    times: List[datetime] = Field(..., min_length=1)

    @field_validator("times")
    @classmethod
    def validate_times(cls, v: List[datetime]) -> List[datetime]:
        return sorted(v)
