"""
Tests for BreathingService.
"""

import uuid
from datetime import timedelta

import pytest

from vetco_core.breathing import ABNORMAL_RATE_MESSAGE, Trend
from vetco_core.exceptions import NotFoundException, ValidationException
from vetco_core.services import BreathingService

from .conftest import BASE_TIME

pytestmark = pytest.mark.asyncio


class TestRecord:
    async def test_normal_rate_has_no_alert(self, async_session, test_user, test_pet):
        record = await BreathingService(async_session).record(
            test_user.id, test_pet.id, 20, notes="Resting"
        )

        assert record.measurement.rate == 20
        assert record.measurement.pet_id == test_pet.id
        assert record.alert is None

    async def test_abnormal_rate_is_stored_with_alert(self, async_session, test_user, test_pet):
        service = BreathingService(async_session)

        record = await service.record(test_user.id, test_pet.id, 45)

        assert record.alert.type == "warning"
        assert record.alert.message == ABNORMAL_RATE_MESSAGE
        history = await service.history(test_user.id, test_pet.id)
        assert [m.rate for m in history.measurements] == [45]

    async def test_response_shape(self, async_session, test_user, test_pet):
        record = await BreathingService(async_session).record(test_user.id, test_pet.id, 45)

        response = record.to_response()

        assert response.message == "Breathing rate recorded successfully"
        assert response.breathing_rate.rate == 45
        assert response.alert.type == "warning"

    async def test_other_owners_pet_is_not_found(self, async_session, test_pet, user_factory):
        stranger = await user_factory.create(async_session)

        with pytest.raises(NotFoundException) as exc_info:
            await BreathingService(async_session).record(stranger.id, test_pet.id, 20)

        assert exc_info.value.message == "Pet not found"

    @pytest.mark.parametrize("rate", [0, -5, True])
    async def test_rate_must_be_positive_integer(self, async_session, test_user, test_pet, rate):
        with pytest.raises(ValidationException):
            await BreathingService(async_session).record(test_user.id, test_pet.id, rate)


class TestHistory:
    async def test_limit_bounds_rows_but_not_stats(self, async_session, test_user, test_pet, breathing_rate_factory):
        for minutes, rate in enumerate([10, 20, 30, 40]):
            await breathing_rate_factory.create(async_session, test_pet, rate=rate, minutes=minutes)

        history = await BreathingService(async_session).history(
            test_user.id, test_pet.id, limit=2
        )

        assert [m.rate for m in history.measurements] == [40, 30]
        assert history.stats.count == 4
        assert history.stats.average == 25
        assert (history.stats.min, history.stats.max) == (10, 40)

    async def test_date_range(self, async_session, test_user, test_pet, breathing_rate_factory):
        for minutes, rate in enumerate([10, 20, 30]):
            await breathing_rate_factory.create(async_session, test_pet, rate=rate, minutes=minutes)

        history = await BreathingService(async_session).history(
            test_user.id,
            test_pet.id,
            start_date=BASE_TIME + timedelta(minutes=1),
        )

        assert [m.rate for m in history.measurements] == [30, 20]
        assert history.stats.count == 2

    async def test_empty_history(self, async_session, test_user, test_pet):
        history = await BreathingService(async_session).history(test_user.id, test_pet.id)

        response = history.to_response()

        assert response.breathing_rates == []
        assert response.stats.model_dump() == {"count": 0, "average": 0, "min": 0, "max": 0}

    @pytest.mark.parametrize("limit", [0, 101])
    async def test_limit_bounds(self, async_session, test_user, test_pet, limit):
        with pytest.raises(ValidationException):
            await BreathingService(async_session).history(test_user.id, test_pet.id, limit=limit)

    async def test_inverted_range(self, async_session, test_user, test_pet):
        with pytest.raises(ValidationException):
            await BreathingService(async_session).history(
                test_user.id,
                test_pet.id,
                start_date=BASE_TIME + timedelta(days=1),
                end_date=BASE_TIME,
            )


class TestAnalytics:
    async def test_uses_most_recent_window(self, async_session, test_user, test_pet, breathing_rate_factory):
        # Oldest to newest: three at 30 then three at 20.
        for minutes, rate in enumerate([99, 30, 30, 30, 20, 20, 20]):
            await breathing_rate_factory.create(async_session, test_pet, rate=rate, minutes=minutes)

        analytics = await BreathingService(async_session, analytics_window=6).analytics(
            test_user.id, test_pet.id
        )

        assert analytics.total_measurements == 6
        assert analytics.max_rate == 30
        assert analytics.trend is Trend.DECREASING
        assert analytics.normal_range == (10, 30)
        assert analytics.last_measurement.rate == 20

    async def test_species_range_from_pet(self, async_session, test_user, pet_factory):
        cat = await pet_factory.create(async_session, owner=test_user, name="Tom", species="CAT")

        analytics = await BreathingService(async_session).analytics(test_user.id, cat.id)

        assert analytics.total_measurements == 0
        assert analytics.trend is Trend.STABLE
        assert analytics.normal_range == (20, 30)

    async def test_unknown_pet(self, async_session, test_user):
        with pytest.raises(NotFoundException):
            await BreathingService(async_session).analytics(test_user.id, uuid.uuid4())
