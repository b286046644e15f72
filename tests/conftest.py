"""
Pytest configuration and fixtures for vetco-core tests.

Each test gets its own SQLite database file (through aiosqlite) with the
full schema created, plus factory classes for the core entities.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from vetco_core.database.connection import create_engine
from vetco_core.database.session import SessionManager
from vetco_core.models import (
    Base,
    BreathingRate,
    MedicationSchedule,
    Message,
    Participant,
    Pet,
    User,
    Veterinarian,
)
from vetco_core.medication import generate_schedule_code

# Fixed reference time so ordering assertions do not depend on the clock.
BASE_TIME = datetime(2024, 3, 1, 8, 0, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def test_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Async engine on a fresh SQLite file with all tables created."""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'vetco_test.db'}")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def test_session_manager(test_engine: AsyncEngine) -> SessionManager:
    return SessionManager(test_engine)


@pytest_asyncio.fixture
async def async_session(
    test_session_manager: SessionManager,
) -> AsyncGenerator[AsyncSession, None]:
    """
    Session whose work is rolled back after the test.

    Repositories only flush, so everything a test writes stays visible to
    the same session until the rollback.
    """
    async with test_session_manager.get_session() as session:
        try:
            yield session
        finally:
            await session.rollback()


# Factory classes for creating test entities
class UserFactory:
    """Factory for creating test User instances."""

    @staticmethod
    def build(**kwargs) -> User:
        defaults = {
            "email": f"owner_{uuid.uuid4().hex[:8]}@example.com",
            "first_name": "Test",
            "last_name": "Owner",
        }
        defaults.update(kwargs)
        return User(**defaults)

    @staticmethod
    async def create(session: AsyncSession, **kwargs) -> User:
        user = UserFactory.build(**kwargs)
        session.add(user)
        await session.flush()
        await session.refresh(user)
        return user


class VeterinarianFactory:
    """Factory for creating test Veterinarian instances."""

    @staticmethod
    def build(**kwargs) -> Veterinarian:
        defaults = {
            "email": f"vet_{uuid.uuid4().hex[:8]}@example.com",
            "first_name": "Jane",
            "last_name": "Smith",
            "license_number": f"VET{uuid.uuid4().hex[:8].upper()}",
            "clinic": "Happy Paws Clinic",
        }
        defaults.update(kwargs)
        return Veterinarian(**defaults)

    @staticmethod
    async def create(session: AsyncSession, **kwargs) -> Veterinarian:
        vet = VeterinarianFactory.build(**kwargs)
        session.add(vet)
        await session.flush()
        await session.refresh(vet)
        return vet


class PetFactory:
    """Factory for creating test Pet instances."""

    @staticmethod
    def build(owner_id: Optional[uuid.UUID] = None, **kwargs) -> Pet:
        defaults = {
            "owner_id": owner_id or uuid.uuid4(),
            "name": "Buddy",
            "species": "Dog",
            "breed": "Golden Retriever",
        }
        defaults.update(kwargs)
        return Pet(**defaults)

    @staticmethod
    async def create(
        session: AsyncSession, owner: Optional[User] = None, **kwargs
    ) -> Pet:
        if owner is None:
            owner = await UserFactory.create(session)

        pet = PetFactory.build(owner_id=owner.id, **kwargs)
        session.add(pet)
        await session.flush()
        await session.refresh(pet)
        return pet


class MessageFactory:
    """Factory for creating test Message instances."""

    @staticmethod
    def build(
        sender: Participant,
        recipient: Participant,
        minutes: int = 0,
        **kwargs,
    ) -> Message:
        """Build a message sent ``minutes`` after ``BASE_TIME``."""
        defaults = {
            "content": f"Message at +{minutes}m",
            "timestamp": BASE_TIME + timedelta(minutes=minutes),
        }
        defaults.update(kwargs)
        return Message(sender=sender, recipient=recipient, **defaults)

    @staticmethod
    async def create(
        session: AsyncSession,
        sender: Participant,
        recipient: Participant,
        minutes: int = 0,
        **kwargs,
    ) -> Message:
        message = MessageFactory.build(sender, recipient, minutes, **kwargs)
        session.add(message)
        await session.flush()
        return message


class BreathingRateFactory:
    """Factory for creating test BreathingRate instances."""

    @staticmethod
    def build(pet_id: Optional[uuid.UUID] = None, rate: int = 20, minutes: int = 0, **kwargs) -> BreathingRate:
        defaults = {
            "pet_id": pet_id or uuid.uuid4(),
            "rate": rate,
            "timestamp": BASE_TIME + timedelta(minutes=minutes),
        }
        defaults.update(kwargs)
        return BreathingRate(**defaults)

    @staticmethod
    def newest_first(rates, pet_id: Optional[uuid.UUID] = None) -> list:
        """Unsaved measurements whose first element is the most recent."""
        count = len(rates)
        return [
            BreathingRateFactory.build(pet_id=pet_id, rate=rate, minutes=count - index)
            for index, rate in enumerate(rates)
        ]

    @staticmethod
    async def create(session: AsyncSession, pet: Pet, rate: int = 20, minutes: int = 0, **kwargs) -> BreathingRate:
        measurement = BreathingRateFactory.build(pet_id=pet.id, rate=rate, minutes=minutes, **kwargs)
        session.add(measurement)
        await session.flush()
        return measurement


class MedicationScheduleFactory:
    """Factory for creating test MedicationSchedule instances."""

    @staticmethod
    async def create(
        session: AsyncSession, pet: Pet, veterinarian: Veterinarian, **kwargs
    ) -> MedicationSchedule:
        defaults = {
            "qr_code": generate_schedule_code(),
            "medication": "Carprofen",
            "dosage": "25mg",
            "frequency": "Twice daily",
            "duration": "14 days",
            "instructions": "Give with food",
            "start_date": BASE_TIME,
            "pet_id": pet.id,
            "veterinarian_id": veterinarian.id,
        }
        defaults.update(kwargs)
        schedule = MedicationSchedule(**defaults)
        session.add(schedule)
        await session.flush()
        await session.refresh(schedule)
        return schedule


@pytest.fixture
def user_factory() -> UserFactory:
    """Factory for creating test users."""
    return UserFactory


@pytest.fixture
def veterinarian_factory() -> VeterinarianFactory:
    return VeterinarianFactory


@pytest.fixture
def pet_factory() -> PetFactory:
    return PetFactory


@pytest.fixture
def message_factory() -> MessageFactory:
    return MessageFactory


@pytest.fixture
def breathing_rate_factory() -> BreathingRateFactory:
    return BreathingRateFactory


@pytest.fixture
def schedule_factory() -> MedicationScheduleFactory:
    return MedicationScheduleFactory


@pytest_asyncio.fixture
async def test_user(async_session: AsyncSession) -> User:
    """A pet owner."""
    return await UserFactory.create(async_session, first_name="Alice", last_name="Owner")


@pytest_asyncio.fixture
async def test_veterinarian(async_session: AsyncSession) -> Veterinarian:
    return await VeterinarianFactory.create(async_session)


@pytest_asyncio.fixture
async def test_pet(async_session: AsyncSession, test_user: User) -> Pet:
    """A dog owned by ``test_user``."""
    return await PetFactory.create(async_session, owner=test_user)
