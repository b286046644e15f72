"""Medication schedule, reminder and administration queries."""

import uuid
from datetime import datetime
from typing import Any, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import MedicationAdministration, MedicationSchedule, Pet, Reminder


class MedicationRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_schedule(self, **fields: Any) -> MedicationSchedule:
        schedule = MedicationSchedule(**fields)
        self.session.add(schedule)
        await self.session.flush()
        await self.session.refresh(schedule)
        return schedule

    async def get_schedule(self, schedule_id: uuid.UUID) -> Optional[MedicationSchedule]:
        result = await self.session.execute(
            select(MedicationSchedule).where(MedicationSchedule.id == schedule_id)
        )
        return result.scalar_one_or_none()

    async def get_by_code(self, qr_code: str) -> Optional[MedicationSchedule]:
        result = await self.session.execute(
            select(MedicationSchedule).where(MedicationSchedule.qr_code == qr_code)
        )
        return result.scalar_one_or_none()

    async def list_for_owner(self, owner_id: uuid.UUID) -> List[MedicationSchedule]:
        """Schedules for every pet the owner has, newest first."""
        query = (
            select(MedicationSchedule)
            .join(Pet, Pet.id == MedicationSchedule.pet_id)
            .where(Pet.owner_id == owner_id)
            .order_by(MedicationSchedule.created_at.desc())
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_active_for_pet(self, pet_id: uuid.UUID) -> List[MedicationSchedule]:
        result = await self.session.execute(
            select(MedicationSchedule)
            .where(
                MedicationSchedule.pet_id == pet_id,
                MedicationSchedule.is_active.is_(True),
            )
            .order_by(MedicationSchedule.start_date)
        )
        return list(result.scalars().all())

    async def list_created_by(self, veterinarian_id: uuid.UUID) -> List[MedicationSchedule]:
        """Schedules the veterinarian issued, newest first."""
        result = await self.session.execute(
            select(MedicationSchedule)
            .where(MedicationSchedule.veterinarian_id == veterinarian_id)
            .order_by(MedicationSchedule.created_at.desc())
        )
        return list(result.scalars().all())

    async def create_administration(
        self,
        schedule_id: uuid.UUID,
        notes: Optional[str] = None,
        administered: bool = True,
    ) -> MedicationAdministration:
        administration = MedicationAdministration(
            schedule_id=schedule_id, notes=notes, administered=administered
        )
        self.session.add(administration)
        await self.session.flush()
        await self.session.refresh(administration)
        return administration

    async def list_administrations(
        self, schedule_id: uuid.UUID, limit: Optional[int] = None
    ) -> List[MedicationAdministration]:
        query = (
            select(MedicationAdministration)
            .where(MedicationAdministration.schedule_id == schedule_id)
            .order_by(MedicationAdministration.timestamp.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def create_reminders(
        self, schedule_id: uuid.UUID, times: Iterable[datetime], message: str
    ) -> List[Reminder]:
        reminders = [
            Reminder(schedule_id=schedule_id, time=time, message=message)
            for time in times
        ]
        self.session.add_all(reminders)
        await self.session.flush()
        return reminders

    async def list_active_reminders(self, schedule_id: uuid.UUID) -> List[Reminder]:
        result = await self.session.execute(
            select(Reminder)
            .where(Reminder.schedule_id == schedule_id, Reminder.is_active.is_(True))
            .order_by(Reminder.time)
        )
        return list(result.scalars().all())

    async def list_due_reminders(
        self, start: datetime, end: datetime
    ) -> List[Reminder]:
        """Active reminders whose time is within ``[start, end]``, earliest first."""
        result = await self.session.execute(
            select(Reminder)
            .where(
                Reminder.is_active.is_(True),
                Reminder.time >= start,
                Reminder.time <= end,
            )
            .order_by(Reminder.time)
        )
        return list(result.scalars().all())
