"""
Pet registration and the owner's pet views.

Every operation is scoped to the calling owner: a pet that belongs to
someone else is reported as not found.
"""

import logging
import uuid
from typing import List, NamedTuple, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import NotFoundException
from ..models import BreathingRate, MedicationSchedule, Participant, Pet, Reminder, Veterinarian
from ..repositories import (
    BreathingRateRepository,
    MedicationRepository,
    ParticipantRepository,
    PetRepository,
)
from ..schemas.breathing import BreathingRateResponse
from ..schemas.medication import MedicationScheduleResponse
from ..schemas.pet import PetCreate, PetOverviewResponse, PetUpdate

logger = logging.getLogger(__name__)

LIST_RECENT_RATES = 5
DETAIL_RECENT_RATES = 20


class PetOverview(NamedTuple):
    pet: Pet
    schedules: List[MedicationSchedule]
    breathing_rates: List[BreathingRate]

    def to_response(self) -> PetOverviewResponse:
        response = PetOverviewResponse.model_validate(self.pet)
        response.medication_schedules = [
            MedicationScheduleResponse.model_validate(s) for s in self.schedules
        ]
        response.breathing_rates = [
            BreathingRateResponse.model_validate(r) for r in self.breathing_rates
        ]
        return response


class ActiveSchedule(NamedTuple):
    schedule: MedicationSchedule
    veterinarian: Optional[Veterinarian]
    reminders: List[Reminder]


class PetDetail(NamedTuple):
    pet: Pet
    schedules: List[ActiveSchedule]
    breathing_rates: List[BreathingRate]


class PetService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.pets = PetRepository(session)
        self.medications = MedicationRepository(session)
        self.measurements = BreathingRateRepository(session)
        self.participants = ParticipantRepository(session)

    async def _owned_pet(self, owner_id: uuid.UUID, pet_id: uuid.UUID) -> Pet:
        pet = await self.pets.get_owned(pet_id, owner_id)
        if pet is None:
            raise NotFoundException("Pet", pet_id, message="Pet not found")
        return pet

    async def list_pets(self, owner_id: uuid.UUID) -> List[PetOverview]:
        """The owner's pets, newest first, with active schedules and the last few rates."""
        overviews = []
        for pet in await self.pets.list_for_owner(owner_id):
            schedules = await self.medications.list_active_for_pet(pet.id)
            rates = await self.measurements.list_for_pet(pet.id, limit=LIST_RECENT_RATES)
            overviews.append(PetOverview(pet, schedules, rates))
        return overviews

    async def get_pet(self, owner_id: uuid.UUID, pet_id: uuid.UUID) -> PetDetail:
        """
        One of the owner's pets with its active schedules in full.

        Each schedule carries its prescribing veterinarian and its active
        reminders, earliest first.

        Raises:
            NotFoundException: If the pet does not exist or is not the owner's
        """
        pet = await self._owned_pet(owner_id, pet_id)

        schedules = []
        for schedule in await self.medications.list_active_for_pet(pet.id):
            vet = await self.participants.get(
                Participant.veterinarian(schedule.veterinarian_id)
            )
            reminders = await self.medications.list_active_reminders(schedule.id)
            schedules.append(ActiveSchedule(schedule, vet, reminders))

        rates = await self.measurements.list_for_pet(pet.id, limit=DETAIL_RECENT_RATES)
        return PetDetail(pet, schedules, rates)

    async def create_pet(self, owner_id: uuid.UUID, data: PetCreate) -> Pet:
        """
        Register a pet for an owner.

        Raises:
            NotFoundException: If the owner does not exist
        """
        if not await self.participants.exists(Participant.user(owner_id)):
            raise NotFoundException("User", owner_id)

        pet = await self.pets.create(owner_id, **data.model_dump())
        logger.info(f"Pet {pet.id} registered for owner {owner_id}")
        return pet

    async def update_pet(
        self, owner_id: uuid.UUID, pet_id: uuid.UUID, data: PetUpdate
    ) -> Pet:
        """Apply the fields the client sent; omitted fields keep their values."""
        pet = await self._owned_pet(owner_id, pet_id)
        changes = data.model_dump(exclude_unset=True)
        if not changes:
            return pet
        return await self.pets.update(pet, **changes)

    async def delete_pet(self, owner_id: uuid.UUID, pet_id: uuid.UUID) -> None:
        pet = await self._owned_pet(owner_id, pet_id)
        await self.pets.delete(pet)
        logger.info(f"Pet {pet_id} deleted by owner {owner_id}")
