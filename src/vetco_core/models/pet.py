"""
Pet model for the vetco-core package.

Species is stored as free text exactly as the owner entered it; lookups
that depend on species (normal breathing ranges) normalise it themselves.
"""

import uuid
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import CheckConstraint, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel


class Pet(BaseModel):
    """A pet registered by its owner."""

    __tablename__ = "pets"

    def __init__(self, **kwargs: Any) -> None:
        """Strip surrounding whitespace from the name and species."""
        for key in ("name", "species"):
            if isinstance(kwargs.get(key), str):
                kwargs[key] = kwargs[key].strip()
        super().__init__(**kwargs)

    owner_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="UUID of the pet's owner",
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False, comment="Pet's name")

    species: Mapped[str] = mapped_column(
        String(50), nullable=False, comment="Species as entered, e.g. 'Dog'"
    )

    breed: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    age: Mapped[Optional[int]] = mapped_column(
        nullable=True, comment="Age in whole years"
    )

    weight: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(6, 2), nullable=True, comment="Weight in kilograms"
    )

    image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    __table_args__ = (
        CheckConstraint("age IS NULL OR age > 0", name="ck_pets_age_positive"),
        CheckConstraint("weight IS NULL OR weight > 0", name="ck_pets_weight_positive"),
        Index("ix_pets_owner_created", "owner_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Pet(id={self.id}, name='{self.name}', species='{self.species}')>"

    def is_owned_by(self, user_id: uuid.UUID) -> bool:
        return self.owner_id == user_id
