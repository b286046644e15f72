"""
Pet Pydantic schemas for API validation and serialization.

This module contains the create, update and response schemas for pets,
including the overview returned on the owner's pet list and detail views.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from urllib.parse import urlparse
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .breathing import BreathingRateResponse
from .medication import MedicationScheduleResponse


def _validate_image_url(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    parsed = urlparse(v)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("Image URL must be an http(s) URL")
    return v


class PetCreate(BaseModel):
    """Schema for registering a new pet."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., description="Pet's name", min_length=1, max_length=100)
    species: str = Field(
        ..., description="Species as entered, e.g. 'Dog'", min_length=1, max_length=50
    )
    breed: Optional[str] = Field(None, description="Pet's breed", max_length=100)
    age: Optional[int] = Field(None, description="Age in whole years", gt=0)
    weight: Optional[Decimal] = Field(
        None, description="Weight in kilograms", gt=0, le=Decimal("9999.99")
    )
    image_url: Optional[str] = Field(
        None, description="URL of the pet's photo", max_length=500
    )

    @field_validator("breed")
    @classmethod
    def validate_breed(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    @field_validator("image_url")
    @classmethod
    def validate_image_url(cls, v: Optional[str]) -> Optional[str]:
        return _validate_image_url(v)


class PetUpdate(BaseModel):
    """
    Partial update of a pet.

    Only the fields the client sent are applied; use
    ``model_dump(exclude_unset=True)``.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(
        None, description="Pet's name", min_length=1, max_length=100
    )
    species: Optional[str] = Field(
        None, description="Species as entered", min_length=1, max_length=50
    )
    breed: Optional[str] = Field(None, description="Pet's breed", max_length=100)
    age: Optional[int] = Field(None, description="Age in whole years", gt=0)
    weight: Optional[Decimal] = Field(
        None, description="Weight in kilograms", gt=0, le=Decimal("9999.99")
    )
    image_url: Optional[str] = Field(
        None, description="URL of the pet's photo", max_length=500
    )

    @field_validator("name", "species")
    @classmethod
    def validate_required_fields(cls, v: Optional[str]) -> str:
        """Name and species may be changed but not cleared."""
        if v is None:
            raise ValueError("Field cannot be cleared")
        return v

    @field_validator("image_url")
    @classmethod
    def validate_image_url(cls, v: Optional[str]) -> Optional[str]:
        return _validate_image_url(v)


class PetResponse(BaseModel):
    """Pet as returned to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    owner_id: UUID
    name: str
    species: str
    breed: Optional[str] = None
    age: Optional[int] = None
    weight: Optional[Decimal] = None
    image_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class PetOverviewResponse(PetResponse):
    """A pet with its active schedules and most recent breathing rates."""

    medication_schedules: List[MedicationScheduleResponse] = Field(default_factory=list)
    breathing_rates: List[BreathingRateResponse] = Field(default_factory=list)
