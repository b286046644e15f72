"""Veterinarian directory, profiles and the vet's own patient and schedule lists."""

import logging
import uuid
from typing import List, NamedTuple, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import NotFoundException, PermissionDeniedException, ValidationException
from ..models import MedicationAdministration, MedicationSchedule, Participant, Pet, User, Veterinarian
from ..repositories import (
    MedicationRepository,
    ParticipantRepository,
    Patient,
    PetRepository,
    VeterinarianRepository,
)
from ..schemas.medication import AdministrationResponse, MedicationScheduleResponse
from ..schemas.pet import PetResponse
from ..schemas.veterinarian import (
    DEFAULT_SEARCH_LIMIT,
    MAX_SEARCH_LIMIT,
    CreatedScheduleResponse,
    OwnerContact,
)

logger = logging.getLogger(__name__)

RECENT_ADMINISTRATIONS = 5


class CreatedSchedule(NamedTuple):
    schedule: MedicationSchedule
    pet: Pet
    owner: User
    administrations: List[MedicationAdministration]

    def to_response(self) -> CreatedScheduleResponse:
        return CreatedScheduleResponse(
            schedule=MedicationScheduleResponse.model_validate(self.schedule),
            pet=PetResponse.model_validate(self.pet),
            owner=OwnerContact.model_validate(self.owner),
            administrations=[
                AdministrationResponse.model_validate(a) for a in self.administrations
            ],
        )


class VeterinarianService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.veterinarians = VeterinarianRepository(session)
        self.medications = MedicationRepository(session)
        self.pets = PetRepository(session)
        self.participants = ParticipantRepository(session)

    @staticmethod
    def _require_veterinarian(participant: Participant, action: str) -> None:
        if not participant.is_veterinarian:
            raise PermissionDeniedException(
                "Only veterinarians can access this information", action=action
            )

    async def list_veterinarians(
        self,
        query: Optional[str] = None,
        clinic: Optional[str] = None,
        limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> List[Veterinarian]:
        """
        Search the directory owners use to find a vet to message.

        Raises:
            ValidationException: If ``limit`` is outside 1..50
        """
        if not 1 <= limit <= MAX_SEARCH_LIMIT:
            raise ValidationException(
                f"limit must be between 1 and {MAX_SEARCH_LIMIT}",
                field="limit",
                value=limit,
            )
        return await self.veterinarians.search(query or None, clinic or None, limit)

    async def get_veterinarian(self, veterinarian_id: uuid.UUID) -> Veterinarian:
        vet = await self.veterinarians.get(veterinarian_id)
        if vet is None:
            raise NotFoundException(
                "Veterinarian", veterinarian_id, message="Veterinarian not found"
            )
        return vet

    async def list_patients(self, participant: Participant) -> List[Patient]:
        """
        Pets the calling veterinarian has issued schedules for.

        Raises:
            PermissionDeniedException: If the caller is not a veterinarian
        """
        self._require_veterinarian(participant, "list_patients")
        return await self.veterinarians.list_patients(participant.id)

    async def list_created_schedules(self, participant: Participant) -> List[CreatedSchedule]:
        """
        Schedules the calling veterinarian issued, newest first.

        Each carries the pet, its owner and the most recent administrations.

        Raises:
            PermissionDeniedException: If the caller is not a veterinarian
        """
        self._require_veterinarian(participant, "list_created_schedules")

        created = []
        for schedule in await self.medications.list_created_by(participant.id):
            pet = await self.pets.get(schedule.pet_id)
            if pet is None:
                logger.warning(f"Schedule {schedule.id} refers to a missing pet")
                continue
            owner = await self.participants.get(Participant.user(pet.owner_id))
            administrations = await self.medications.list_administrations(
                schedule.id, limit=RECENT_ADMINISTRATIONS
            )
            created.append(CreatedSchedule(schedule, pet, owner, administrations))
        return created
