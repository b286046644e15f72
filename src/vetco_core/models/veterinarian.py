"""
Veterinarian model for the vetco-core package.

Veterinarians are a separate account type from users: they issue
medication schedules and take part in conversations as either party.
"""

from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel


class Veterinarian(BaseModel):
    """Veterinarian account with license and clinic information."""

    __tablename__ = "veterinarians"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="Veterinarian's email address",
    )

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)

    last_name: Mapped[str] = mapped_column(String(100), nullable=False)

    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    license_number: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        nullable=False,
        comment="Professional veterinary license number",
    )

    clinic: Mapped[str] = mapped_column(
        String(200), nullable=False, comment="Name of the clinic the vet practices at"
    )

    def __repr__(self) -> str:
        return f"<Veterinarian(id={self.id}, license_number='{self.license_number}')>"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def display_name(self) -> str:
        """Name as shown on schedules and QR payloads, e.g. ``Dr. Jane Smith``."""
        return f"Dr. {self.full_name}" if self.full_name else self.email
