"""Veterinarian directory and patient queries."""

import uuid
from datetime import datetime
from typing import List, NamedTuple, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import MedicationSchedule, Pet, User, Veterinarian


class Patient(NamedTuple):
    pet: Pet
    owner: User
    last_schedule_date: datetime


def _contains(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class VeterinarianRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, veterinarian_id: uuid.UUID) -> Optional[Veterinarian]:
        result = await self.session.execute(
            select(Veterinarian).where(Veterinarian.id == veterinarian_id)
        )
        return result.scalar_one_or_none()

    async def search(
        self,
        query: Optional[str] = None,
        clinic: Optional[str] = None,
        limit: int = 20,
    ) -> List[Veterinarian]:
        """
        Case-insensitive directory search, ordered by clinic then last name.

        ``query`` matches the first name, last name or clinic; ``clinic``
        narrows the result to clinics containing that text.
        """
        stmt = select(Veterinarian)
        if query:
            pattern = _contains(query)
            stmt = stmt.where(
                or_(
                    Veterinarian.first_name.ilike(pattern, escape="\\"),
                    Veterinarian.last_name.ilike(pattern, escape="\\"),
                    Veterinarian.clinic.ilike(pattern, escape="\\"),
                )
            )
        if clinic:
            stmt = stmt.where(Veterinarian.clinic.ilike(_contains(clinic), escape="\\"))

        stmt = stmt.order_by(Veterinarian.clinic, Veterinarian.last_name).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_patients(self, veterinarian_id: uuid.UUID) -> List[Patient]:
        """Each pet the vet has issued a schedule for, most recent schedule first."""
        latest = (
            select(
                MedicationSchedule.pet_id,
                func.max(MedicationSchedule.created_at).label("last_schedule_date"),
            )
            .where(MedicationSchedule.veterinarian_id == veterinarian_id)
            .group_by(MedicationSchedule.pet_id)
            .subquery()
        )
        stmt = (
            select(Pet, User, latest.c.last_schedule_date)
            .join(latest, latest.c.pet_id == Pet.id)
            .join(User, User.id == Pet.owner_id)
            .order_by(latest.c.last_schedule_date.desc(), Pet.id)
        )
        result = await self.session.execute(stmt)
        return [Patient(pet, owner, last) for pet, owner, last in result.all()]
