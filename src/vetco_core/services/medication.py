"""
Medication schedules: issuing, QR scanning, administrations and reminders.

Veterinarians issue schedules; pet owners import them by scanning the QR
code, record each dose and set reminder times.

Nothing in this package schedules reminder delivery. The host process is
expected to run a job once a minute (a cron-style scheduler or an asyncio
loop) that opens a transaction and calls ``deliver_due_reminders``; the
default one-minute window matches that cadence, and delivered reminders are
deactivated so a later run does not send them again. See
``examples/basic_usage_example.py`` for a minimal loop.
"""

import logging
import uuid
from datetime import datetime, timedelta
from typing import Iterable, List, NamedTuple, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import (
    NotFoundException,
    PermissionDeniedException,
    QRCodeException,
    ValidationException,
)
from ..medication import encode_qr_payload, generate_schedule_code, is_schedule_code, parse_qr_code
from ..models import (
    MedicationAdministration,
    MedicationSchedule,
    Participant,
    Pet,
    Reminder,
)
from ..notifications import PushNotificationDispatcher, medication_reminder_notification
from ..repositories import MedicationRepository, ParticipantRepository, PetRepository
from ..schemas.medication import MedicationScheduleCreate, MedicationScheduleQR
from ..utils.datetime_utils import get_current_utc

logger = logging.getLogger(__name__)

REMINDER_MESSAGE = "Time to give {pet} their {medication} medication"
DEFAULT_REMINDER_WINDOW = timedelta(minutes=1)


class IssuedSchedule(NamedTuple):
    schedule: MedicationSchedule
    qr_payload: str


class MedicationService:
    def __init__(
        self,
        session: AsyncSession,
        dispatcher: Optional[PushNotificationDispatcher] = None,
    ):
        self.session = session
        self.medications = MedicationRepository(session)
        self.pets = PetRepository(session)
        self.participants = ParticipantRepository(session)
        self.dispatcher = dispatcher

    async def build_qr_data(self, schedule: MedicationSchedule) -> MedicationScheduleQR:
        """Assemble the payload printed on the schedule's QR code."""
        pet = await self.pets.get(schedule.pet_id)
        vet = await self.participants.get(Participant.veterinarian(schedule.veterinarian_id))
        return MedicationScheduleQR(
            schedule_id=str(schedule.id),
            medication=schedule.medication,
            pet_name=pet.name if pet is not None else "",
            veterinarian=vet.full_name if vet is not None else "",
            clinic=vet.clinic if vet is not None else "",
            instructions=schedule.instructions,
            frequency=schedule.frequency,
            dosage=schedule.dosage,
            start_date=schedule.start_date.isoformat(),
            end_date=schedule.end_date.isoformat() if schedule.end_date else None,
        )

    async def create_schedule(
        self, veterinarian_id: uuid.UUID, data: MedicationScheduleCreate
    ) -> IssuedSchedule:
        """
        Issue a schedule for a pet.

        Returns:
            The stored schedule and the JSON text to encode in its QR image

        Raises:
            NotFoundException: If the veterinarian or the pet does not exist
        """
        if not await self.participants.exists(Participant.veterinarian(veterinarian_id)):
            raise NotFoundException("Veterinarian", veterinarian_id)
        if await self.pets.get(data.pet_id) is None:
            raise NotFoundException("Pet", data.pet_id, message="Pet not found")

        schedule = await self.medications.create_schedule(
            qr_code=generate_schedule_code(),
            veterinarian_id=veterinarian_id,
            **data.model_dump(),
        )
        logger.info(f"Medication schedule {schedule.id} issued for pet {data.pet_id}")

        qr_data = await self.build_qr_data(schedule)
        return IssuedSchedule(schedule, encode_qr_payload(qr_data))

    async def list_for_owner(self, owner_id: uuid.UUID) -> List[MedicationSchedule]:
        return await self.medications.list_for_owner(owner_id)

    async def scan(self, owner_id: uuid.UUID, raw: str) -> MedicationSchedule:
        """
        Resolve scanned QR text to one of the owner's schedules.

        ``raw`` may be the bare schedule code or the JSON payload.

        Raises:
            QRCodeException: If the payload is malformed or of another type
            NotFoundException: If no schedule matches
            PermissionDeniedException: If the schedule is for another owner's pet
        """
        raw = (raw or "").strip()
        if not raw:
            raise QRCodeException("QR code is empty")

        if is_schedule_code(raw):
            schedule = await self.medications.get_by_code(raw)
        else:
            data = parse_qr_code(raw)
            try:
                schedule_id = uuid.UUID(data.schedule_id)
            except ValueError as e:
                raise QRCodeException(
                    "QR code schedule id is not valid", original_error=e
                )
            schedule = await self.medications.get_schedule(schedule_id)

        if schedule is None:
            raise NotFoundException("MedicationSchedule", message="Invalid QR code")

        pet = await self.pets.get(schedule.pet_id)
        if pet is None or not pet.is_owned_by(owner_id):
            raise PermissionDeniedException(
                "You can only access schedules for your own pets", action="scan"
            )
        return schedule

    async def _owned_schedule(
        self, owner_id: uuid.UUID, schedule_id: uuid.UUID
    ) -> tuple[MedicationSchedule, Pet]:
        schedule = await self.medications.get_schedule(schedule_id)
        if schedule is not None:
            pet = await self.pets.get_owned(schedule.pet_id, owner_id)
            if pet is not None:
                return schedule, pet
        raise NotFoundException(
            "MedicationSchedule", schedule_id, message="Medication schedule not found"
        )

    async def record_administration(
        self,
        owner_id: uuid.UUID,
        schedule_id: uuid.UUID,
        notes: Optional[str] = None,
        administered: bool = True,
    ) -> MedicationAdministration:
        schedule, _ = await self._owned_schedule(owner_id, schedule_id)
        return await self.medications.create_administration(
            schedule.id, notes=notes, administered=administered
        )

    async def list_administrations(
        self, participant: Participant, schedule_id: uuid.UUID
    ) -> List[MedicationAdministration]:
        """
        Administration history, newest first.

        Visible to the owner of the pet and to the issuing veterinarian.
        """
        schedule = await self.medications.get_schedule(schedule_id)
        if schedule is not None:
            if participant.is_veterinarian:
                allowed = schedule.veterinarian_id == participant.id
            else:
                allowed = await self.pets.get_owned(schedule.pet_id, participant.id) is not None
            if allowed:
                return await self.medications.list_administrations(schedule.id)

        raise NotFoundException(
            "MedicationSchedule", schedule_id, message="Medication schedule not found"
        )

    async def set_reminders(
        self,
        owner_id: uuid.UUID,
        schedule_id: uuid.UUID,
        times: Iterable[datetime],
    ) -> List[Reminder]:
        """
        Create one active reminder per time.

        Raises:
            ValidationException: If no times are given
            NotFoundException: If the schedule is not for one of the owner's pets
        """
        times = sorted(times)
        if not times:
            raise ValidationException("At least one reminder time is required", field="times")

        schedule, pet = await self._owned_schedule(owner_id, schedule_id)
        message = REMINDER_MESSAGE.format(pet=pet.name, medication=schedule.medication)
        reminders = await self.medications.create_reminders(schedule.id, times, message)
        logger.info(f"Set {len(reminders)} reminder(s) for schedule {schedule.id}")
        return reminders

    async def due_reminders(
        self,
        now: Optional[datetime] = None,
        window: timedelta = DEFAULT_REMINDER_WINDOW,
    ) -> List[Reminder]:
        """Active reminders whose time falls within ``[now - window, now]``."""
        now = now or get_current_utc()
        return await self.medications.list_due_reminders(now - window, now)

    async def deliver_due_reminders(
        self,
        now: Optional[datetime] = None,
        window: timedelta = DEFAULT_REMINDER_WINDOW,
    ) -> int:
        """
        Push each due reminder to the pet owner and deactivate it.

        Reminders are deactivated even when no dispatcher is configured, so
        each one is handled at most once.

        Returns:
            Number of reminders handled
        """
        reminders = await self.due_reminders(now, window)
        if reminders and self.dispatcher is None:
            logger.warning("Push dispatcher not configured, reminders will not be sent")

        for reminder in reminders:
            if self.dispatcher is not None:
                schedule = await self.medications.get_schedule(reminder.schedule_id)
                pet = await self.pets.get(schedule.pet_id) if schedule else None
                if pet is not None:
                    await self.dispatcher.notify_user(
                        pet.owner_id, medication_reminder_notification(reminder)
                    )
            reminder.is_active = False

        await self.session.flush()
        return len(reminders)
