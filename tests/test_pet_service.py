"""
Tests for PetService and the pet schemas.
"""

import uuid
from datetime import timedelta
from decimal import Decimal

import pytest
from pydantic import ValidationError

from vetco_core.exceptions import NotFoundException
from vetco_core.repositories import MedicationRepository, PetRepository
from vetco_core.schemas import PetCreate, PetUpdate
from vetco_core.services import PetService

from .conftest import BASE_TIME


class TestPetSchemas:
    def test_create_strips_and_accepts_optional_fields(self):
        data = PetCreate(
            name=" Buddy ",
            species="Dog",
            age=4,
            weight=Decimal("12.5"),
            image_url="https://img.example.com/buddy.jpg",
        )

        assert data.name == "Buddy"
        assert data.breed is None

    @pytest.mark.parametrize(
        "fields",
        [
            {"name": "", "species": "Dog"},
            {"name": "Buddy", "species": "  "},
            {"name": "Buddy", "species": "Dog", "age": 0},
            {"name": "Buddy", "species": "Dog", "weight": -1},
            {"name": "Buddy", "species": "Dog", "image_url": "not a url"},
            {"name": "Buddy", "species": "Dog", "image_url": "ftp://img.example.com/a.jpg"},
        ],
    )
    def test_create_rejects_invalid_fields(self, fields):
        with pytest.raises(ValidationError):
            PetCreate(**fields)

    def test_update_only_dumps_sent_fields(self):
        assert PetUpdate(age=5).model_dump(exclude_unset=True) == {"age": 5}

    def test_update_cannot_clear_name(self):
        with pytest.raises(ValidationError):
            PetUpdate(name=None)


@pytest.mark.asyncio
class TestListAndGet:
    async def test_list_newest_first_with_recent_rates(
        self, async_session, test_user, pet_factory, breathing_rate_factory
    ):
        older = await pet_factory.create(async_session, owner=test_user, name="Rex", created_at=BASE_TIME)
        newer = await pet_factory.create(
            async_session, owner=test_user, name="Mia", species="Cat", created_at=BASE_TIME + timedelta(days=1)
        )
        await pet_factory.create(async_session, name="Stranger's pet")
        for minutes in range(7):
            await breathing_rate_factory.create(async_session, older, rate=20 + minutes, minutes=minutes)

        overviews = await PetService(async_session).list_pets(test_user.id)

        assert [o.pet.id for o in overviews] == [newer.id, older.id]
        assert [r.rate for r in overviews[1].breathing_rates] == [26, 25, 24, 23, 22]
        assert overviews[0].breathing_rates == []

    async def test_list_includes_only_active_schedules(
        self, async_session, test_user, test_pet, test_veterinarian, schedule_factory
    ):
        active = await schedule_factory.create(async_session, test_pet, test_veterinarian)
        await schedule_factory.create(async_session, test_pet, test_veterinarian, is_active=False)

        [overview] = await PetService(async_session).list_pets(test_user.id)

        assert [s.id for s in overview.schedules] == [active.id]
        response = overview.to_response()
        assert response.name == "Buddy"
        assert [s.id for s in response.medication_schedules] == [active.id]

    async def test_get_pet_with_schedule_details(
        self, async_session, test_user, test_pet, test_veterinarian, schedule_factory, breathing_rate_factory
    ):
        schedule = await schedule_factory.create(async_session, test_pet, test_veterinarian)
        repo = MedicationRepository(async_session)
        late, early = BASE_TIME + timedelta(hours=12), BASE_TIME + timedelta(hours=1)
        await repo.create_reminders(schedule.id, [late, early], "Give Carprofen")
        for minutes in range(25):
            await breathing_rate_factory.create(async_session, test_pet, minutes=minutes)

        detail = await PetService(async_session).get_pet(test_user.id, test_pet.id)

        [active] = detail.schedules
        assert active.schedule.id == schedule.id
        assert active.veterinarian.id == test_veterinarian.id
        assert [r.message for r in active.reminders] == ["Give Carprofen"] * 2
        assert active.reminders[0].time < active.reminders[1].time
        assert len(detail.breathing_rates) == 20

    async def test_get_other_owners_pet(self, async_session, test_pet, user_factory):
        stranger = await user_factory.create(async_session)

        with pytest.raises(NotFoundException) as exc_info:
            await PetService(async_session).get_pet(stranger.id, test_pet.id)

        assert exc_info.value.message == "Pet not found"


@pytest.mark.asyncio
class TestCreateUpdateDelete:
    async def test_create_pet(self, async_session, test_user):
        pet = await PetService(async_session).create_pet(
            test_user.id,
            PetCreate(name="Mia", species="Cat", age=2, weight=Decimal("4.2")),
        )

        assert pet.owner_id == test_user.id
        assert pet.species == "Cat"
        assert pet.weight == Decimal("4.2")

    async def test_create_for_unknown_owner(self, async_session):
        with pytest.raises(NotFoundException):
            await PetService(async_session).create_pet(
                uuid.uuid4(), PetCreate(name="Mia", species="Cat")
            )

    async def test_partial_update(self, async_session, test_user, test_pet):
        pet = await PetService(async_session).update_pet(
            test_user.id, test_pet.id, PetUpdate(age=5, image_url="https://img.example.com/b.jpg")
        )

        assert pet.age == 5
        assert pet.image_url == "https://img.example.com/b.jpg"
        assert pet.name == "Buddy"
        assert pet.breed == "Golden Retriever"

    async def test_empty_update_is_a_no_op(self, async_session, test_user, test_pet):
        pet = await PetService(async_session).update_pet(test_user.id, test_pet.id, PetUpdate())

        assert pet.id == test_pet.id
        assert pet.name == "Buddy"

    async def test_update_other_owners_pet(self, async_session, test_pet, user_factory):
        stranger = await user_factory.create(async_session)

        with pytest.raises(NotFoundException):
            await PetService(async_session).update_pet(stranger.id, test_pet.id, PetUpdate(age=9))

        assert test_pet.age != 9

    async def test_delete_pet(self, async_session, test_user, test_pet):
        pet_id = test_pet.id

        await PetService(async_session).delete_pet(test_user.id, pet_id)

        assert await PetRepository(async_session).get(pet_id) is None

    async def test_delete_other_owners_pet(self, async_session, test_pet, user_factory):
        stranger = await user_factory.create(async_session)

        with pytest.raises(NotFoundException):
            await PetService(async_session).delete_pet(stranger.id, test_pet.id)

        assert await PetRepository(async_session).get(test_pet.id) is not None
