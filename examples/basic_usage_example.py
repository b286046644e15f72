#!/usr/bin/env python3
"""
Basic usage examples for the vetco-core package.

Walks through the everyday flows against a local SQLite database: a pet
owner registering a pet, finding and messaging a veterinarian, logging
breathing rates and importing a medication schedule by scanning its QR
code. The last example shows the once-a-minute job that delivers due
medication reminders.

Set DATABASE_URL to run against PostgreSQL instead.
"""

import asyncio
import os
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from vetco_core import (
    Participant,
    User,
    ValidationException,
    Veterinarian,
    get_transaction,
)
from vetco_core.database import create_engine_from_config, initialize_session_manager
from vetco_core.exceptions import NotFoundException
from vetco_core.models import Base, Pet
from vetco_core.notifications import PushNotificationDispatcher
from vetco_core.repositories import PushTokenRepository
from vetco_core.schemas import (
    ConversationResponse,
    MedicationScheduleCreate,
    PetCreate,
    PetUpdate,
)
from vetco_core.services import (
    BreathingService,
    MedicationService,
    MessagingService,
    PetService,
    VeterinarianService,
)
from vetco_core.utils import (
    LoggingConfigurator,
    NotificationConfig,
    VetcoSettings,
    get_current_utc,
)

REMINDER_INTERVAL_SECONDS = 60


async def setup_database(settings: VetcoSettings):
    """Set up the engine, the session manager and the tables."""
    engine = create_engine_from_config(settings.database)
    manager = initialize_session_manager(engine)
    await manager.initialize_database(Base.metadata)
    return manager


async def create_accounts_example():
    """Example: an owner registering their dog, and a veterinarian."""
    print("\n=== Creating Accounts Example ===")

    async with get_transaction() as session:
        owner = User(email="alice@example.com", first_name="Alice", last_name="Owner")
        vet = Veterinarian(
            email="jane.smith@happypaws.example",
            first_name="Jane",
            last_name="Smith",
            license_number="VET-10001",
            clinic="Happy Paws Clinic",
        )
        session.add_all([owner, vet])
        await session.flush()

        pets = PetService(session)
        pet = await pets.create_pet(
            owner.id,
            PetCreate(name="Buddy", species="Dog", breed="Golden Retriever", age=4),
        )
        pet = await pets.update_pet(owner.id, pet.id, PetUpdate(weight=Decimal("31.5")))

    print(f"✓ Owner {owner.display_name}, vet {vet.display_name}, pet {pet.name}")
    return owner, vet, pet


async def find_veterinarian_example():
    """Example: searching the veterinarian directory."""
    print("\n=== Veterinarian Directory Example ===")

    async with get_transaction() as session:
        for vet in await VeterinarianService(session).list_veterinarians(query="happy paws"):
            print(f"✓ {vet.display_name} at {vet.clinic}")


async def messaging_example(owner: User, vet: Veterinarian):
    """Example: sending messages and listing conversations."""
    print("\n=== Messaging Example ===")

    alice = Participant.user(owner.id)
    jane = Participant.veterinarian(vet.id)

    async with get_transaction() as session:
        service = MessagingService(session)
        await service.send_message(alice, jane, "Buddy is breathing fast after walks.")
        await service.send_message(jane, alice, "Please log his resting rate for a few days.")

        for summary in await service.list_conversation_summaries(alice):
            assert isinstance(summary, ConversationResponse)
            print(
                f"✓ Conversation with {summary.partner.first_name}: "
                f"{summary.last_message.content!r} ({summary.unread_count} unread)"
            )

        thread = await service.get_conversation(alice, jane)
        print(f"✓ Thread has {len(thread)} messages, oldest first")

    try:
        async with get_transaction() as session:
            await MessagingService(session).send_message(alice, jane, "   ")
    except ValidationException as e:
        print(f"✓ Blank message rejected: {e.message}")


async def breathing_example(owner: User, pet: Pet):
    """Example: recording breathing rates and reading analytics."""
    print("\n=== Breathing Rate Example ===")

    async with get_transaction() as session:
        service = BreathingService(session)
        for rate in (22, 24, 21, 35):
            record = await service.record(owner.id, pet.id, rate)
            if record.alert is not None:
                print(f"! {rate} bpm: {record.alert.message}")

        history = await service.history(owner.id, pet.id, limit=10)
        print(
            f"✓ {history.stats.count} measurements, average {history.stats.average} bpm"
        )

        analytics = await service.analytics(owner.id, pet.id)
        print(
            f"✓ Trend {analytics.trend.value}, normal range "
            f"{analytics.normal_range.min}-{analytics.normal_range.max} bpm"
        )


async def medication_example(owner: User, vet: Veterinarian, pet: Pet):
    """Example: issuing a schedule, scanning it and setting reminders."""
    print("\n=== Medication Schedule Example ===")

    now = get_current_utc()

    async with get_transaction() as session:
        service = MedicationService(session)
        issued = await service.create_schedule(
            vet.id,
            MedicationScheduleCreate(
                pet_id=pet.id,
                medication="Carprofen",
                dosage="25mg",
                frequency="Twice daily",
                duration="14 days",
                instructions="Give with food",
                start_date=now,
                end_date=now + timedelta(days=14),
            ),
        )
        print(f"✓ Schedule {issued.schedule.qr_code} issued")

        schedule = await service.scan(owner.id, issued.qr_payload)
        await service.record_administration(owner.id, schedule.id, notes="With breakfast")
        reminders = await service.set_reminders(
            owner.id, schedule.id, [now + timedelta(hours=12)]
        )
        print(f"✓ Reminder set: {reminders[0].message}")
        reminder_time = reminders[0].time

        try:
            await service.scan(owner.id, "VETCO_0_unknown00")
        except NotFoundException as e:
            print(f"✓ Unknown code rejected: {e.message}")

    return reminder_time


async def deliver_reminders_periodically(
    config: NotificationConfig,
    runs: Optional[int] = None,
    now: Optional[datetime] = None,
):
    """
    Deliver due reminders once a minute, each run in its own transaction.

    A deployment runs this forever (``runs=None``) next to the API process,
    or calls ``deliver_due_reminders`` from a cron-style scheduler instead.
    """
    completed = 0
    while runs is None or completed < runs:
        async with get_transaction() as session:
            dispatcher = PushNotificationDispatcher(config, PushTokenRepository(session))
            handled = await MedicationService(session, dispatcher).deliver_due_reminders(now)
        print(f"✓ Reminder run handled {handled} reminder(s)")

        completed += 1
        if runs is None or completed < runs:
            await asyncio.sleep(REMINDER_INTERVAL_SECONDS)


async def main():
    """Run all examples."""
    LoggingConfigurator.configure_basic_logging("WARNING")
    os.environ.setdefault("DATABASE_URL", "sqlite:///./vetco_example.db")
    settings = VetcoSettings.from_environment()

    manager = await setup_database(settings)
    try:
        owner, vet, pet = await create_accounts_example()
        await find_veterinarian_example()
        await messaging_example(owner, vet)
        await breathing_example(owner, pet)
        reminder_time = await medication_example(owner, vet, pet)

        # Pretend the clock has reached the reminder so one run delivers it.
        await deliver_reminders_periodically(settings.notifications, runs=1, now=reminder_time)
    finally:
        await manager.close_all_sessions()


if __name__ == "__main__":
    asyncio.run(main())
