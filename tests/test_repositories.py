"""
Tests for the async repositories against a SQLite database.
"""

import uuid
from datetime import timedelta

import pytest

from vetco_core.models import Participant
from vetco_core.repositories import (
    BreathingRateRepository,
    MessageRepository,
    ParticipantRepository,
    PetRepository,
    PushTokenRepository,
)

from .conftest import BASE_TIME, MessageFactory

pytestmark = pytest.mark.asyncio


@pytest.fixture
def owner(test_user):
    return Participant.user(test_user.id)


@pytest.fixture
def vet(test_veterinarian):
    return Participant.veterinarian(test_veterinarian.id)


class TestMessageRepository:
    async def test_list_for_participant_newest_first(self, async_session, owner, vet):
        other = Participant.user(uuid.uuid4())
        first = await MessageFactory.create(async_session, owner, vet, minutes=1)
        second = await MessageFactory.create(async_session, vet, owner, minutes=2)
        await MessageFactory.create(async_session, vet, other, minutes=3)

        messages = await MessageRepository(async_session).list_for_participant(owner)

        assert [m.id for m in messages] == [second.id, first.id]

    async def test_list_between_pages(self, async_session, owner, vet):
        created = [
            await MessageFactory.create(async_session, owner, vet, minutes=i)
            for i in range(5)
        ]
        repo = MessageRepository(async_session)

        page = await repo.list_between(owner, vet, limit=2, offset=1)

        assert [m.id for m in page] == [created[3].id, created[2].id]

    async def test_list_between_excludes_other_threads(self, async_session, owner, vet, veterinarian_factory):
        colleague = await veterinarian_factory.create(async_session)
        await MessageFactory.create(
            async_session, owner, Participant.veterinarian(colleague.id)
        )
        mine = await MessageFactory.create(async_session, vet, owner, minutes=1)

        page = await MessageRepository(async_session).list_between(owner, vet)

        assert [m.id for m in page] == [mine.id]

    async def test_mark_read(self, async_session, owner, vet):
        unread = await MessageFactory.create(async_session, vet, owner)
        already = await MessageFactory.create(async_session, vet, owner, minutes=1, is_read=True)

        changed = await MessageRepository(async_session).mark_read([unread.id, already.id])

        assert changed == 1
        assert unread.is_read

    async def test_mark_read_with_no_ids(self, async_session):
        assert await MessageRepository(async_session).mark_read([]) == 0

    async def test_create(self, async_session, owner, vet):
        message = await MessageRepository(async_session).create(owner, vet, "Hello")

        assert message.sender == owner
        assert message.recipient == vet
        assert message.is_read is False

    async def test_participant_exists(self, async_session, owner, vet):
        repo = MessageRepository(async_session)

        assert await repo.participant_exists(owner)
        assert await repo.participant_exists(vet)
        assert not await repo.participant_exists(Participant.veterinarian(owner.id))


class TestParticipantRepository:
    async def test_get_profile(self, async_session, vet, test_veterinarian):
        profile = await ParticipantRepository(async_session).get_profile(vet)

        assert profile.id == test_veterinarian.id
        assert profile.first_name == "Jane"
        assert profile.clinic == "Happy Paws Clinic"

    async def test_user_profile_has_no_clinic(self, async_session, owner):
        profile = await ParticipantRepository(async_session).get_profile(owner)

        assert profile.first_name == "Alice"
        assert profile.clinic is None

    async def test_unknown_participant(self, async_session):
        repo = ParticipantRepository(async_session)

        assert await repo.get_profile(Participant.user(uuid.uuid4())) is None


class TestBreathingRateRepository:
    async def test_list_for_pet_filters_and_orders(self, async_session, test_pet, breathing_rate_factory):
        for minutes, rate in enumerate([18, 20, 22, 24]):
            await breathing_rate_factory.create(async_session, test_pet, rate=rate, minutes=minutes)
        repo = BreathingRateRepository(async_session)

        rows = await repo.list_for_pet(
            test_pet.id,
            start_date=BASE_TIME + timedelta(minutes=1),
            end_date=BASE_TIME + timedelta(minutes=3),
            limit=2,
        )

        assert [r.rate for r in rows] == [24, 22]

    async def test_list_for_other_pet_is_empty(self, async_session, test_pet, breathing_rate_factory):
        await breathing_rate_factory.create(async_session, test_pet)

        assert await BreathingRateRepository(async_session).list_for_pet(uuid.uuid4()) == []

    async def test_create(self, async_session, test_pet):
        measurement = await BreathingRateRepository(async_session).create(
            test_pet.id, 26, notes="After a walk"
        )

        assert measurement.rate == 26
        assert measurement.notes == "After a walk"

    async def test_stats_for_pet_aggregates_in_sql(self, async_session, test_pet, breathing_rate_factory):
        for minutes, rate in enumerate([18, 20, 21, 40]):
            await breathing_rate_factory.create(async_session, test_pet, rate=rate, minutes=minutes)
        repo = BreathingRateRepository(async_session)

        stats = await repo.stats_for_pet(
            test_pet.id,
            start_date=BASE_TIME + timedelta(minutes=1),
            end_date=BASE_TIME + timedelta(minutes=2),
        )

        assert (stats.count, stats.average, stats.min, stats.max) == (2, 21, 20, 21)

    async def test_stats_for_pet_without_measurements(self, async_session, test_pet):
        stats = await BreathingRateRepository(async_session).stats_for_pet(test_pet.id)

        assert (stats.count, stats.average, stats.min, stats.max) == (0, 0, 0, 0)


class TestPetRepository:
    async def test_get_owned(self, async_session, test_pet, test_user, user_factory):
        stranger = await user_factory.create(async_session)
        repo = PetRepository(async_session)

        assert (await repo.get_owned(test_pet.id, test_user.id)).id == test_pet.id
        assert await repo.get_owned(test_pet.id, stranger.id) is None


class TestPushTokenRepository:
    async def test_register_and_list(self, async_session, test_user):
        repo = PushTokenRepository(async_session)

        await repo.register(test_user.id, "ExponentPushToken[a]", "ios")
        tokens = await repo.list_for_user(test_user.id)

        assert [t.token for t in tokens] == ["ExponentPushToken[a]"]

    async def test_register_moves_existing_token(self, async_session, test_user, user_factory):
        other = await user_factory.create(async_session)
        repo = PushTokenRepository(async_session)
        await repo.register(test_user.id, "ExponentPushToken[a]", "ios")

        await repo.register(other.id, "ExponentPushToken[a]", "android")

        assert await repo.list_for_user(test_user.id) == []
        moved = await repo.list_for_user(other.id)
        assert len(moved) == 1
        assert moved[0].platform == "android"

    async def test_delete_tokens(self, async_session, test_user):
        repo = PushTokenRepository(async_session)
        await repo.register(test_user.id, "ExponentPushToken[a]", "ios")
        await repo.register(test_user.id, "ExponentPushToken[b]", "ios")

        removed = await repo.delete_tokens(["ExponentPushToken[a]", "unknown"])

        assert removed == 1
        assert [t.token for t in await repo.list_for_user(test_user.id)] == [
            "ExponentPushToken[b]"
        ]
