"""
User model for the vetco-core package.

Users are pet owners. They own pets, scan medication QR codes, record
breathing rates and message veterinarians or other users.
"""

from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel


class User(BaseModel):
    """Pet owner account."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="User's email address",
    )

    first_name: Mapped[str] = mapped_column(
        String(100), nullable=False, comment="User's first name"
    )

    last_name: Mapped[str] = mapped_column(
        String(100), nullable=False, comment="User's last name"
    )

    phone: Mapped[Optional[str]] = mapped_column(
        String(20), nullable=True, comment="User's phone number"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"

    @property
    def full_name(self) -> str:
        """Get the user's full name."""
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def display_name(self) -> str:
        """Full name, falling back to the local part of the email address."""
        return self.full_name or self.email.split("@")[0]
