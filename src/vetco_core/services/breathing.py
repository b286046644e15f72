"""Breathing-rate recording, history and analytics for pet owners."""

import logging
import uuid
from datetime import datetime
from typing import List, NamedTuple, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..breathing import (
    ANALYTICS_WINDOW,
    DEFAULT_HISTORY_LIMIT,
    MAX_HISTORY_LIMIT,
    BreathingAlert,
    BreathingAnalytics,
    BreathingStats,
    abnormality_alert,
    compute_analytics,
)
from ..exceptions import NotFoundException, ValidationException
from ..models import BreathingRate, Pet
from ..repositories import BreathingRateRepository, PetRepository
from ..schemas.breathing import (
    BreathingAlertResponse,
    BreathingHistoryResponse,
    BreathingRateResponse,
    BreathingRecordResponse,
    BreathingStatsResponse,
)
from ..utils.datetime_utils import validate_date_range

logger = logging.getLogger(__name__)


class BreathingRecord(NamedTuple):
    measurement: BreathingRate
    alert: Optional[BreathingAlert]

    def to_response(self) -> BreathingRecordResponse:
        return BreathingRecordResponse(
            breathing_rate=BreathingRateResponse.model_validate(self.measurement),
            alert=BreathingAlertResponse.from_alert(self.alert),
        )


class BreathingHistory(NamedTuple):
    measurements: List[BreathingRate]
    stats: BreathingStats

    def to_response(self) -> BreathingHistoryResponse:
        return BreathingHistoryResponse(
            breathing_rates=[
                BreathingRateResponse.model_validate(m) for m in self.measurements
            ],
            stats=BreathingStatsResponse.from_stats(self.stats),
        )


class BreathingService:
    def __init__(self, session: AsyncSession, analytics_window: int = ANALYTICS_WINDOW):
        self.session = session
        self.measurements = BreathingRateRepository(session)
        self.pets = PetRepository(session)
        self.analytics_window = analytics_window

    async def _owned_pet(self, owner_id: uuid.UUID, pet_id: uuid.UUID) -> Pet:
        pet = await self.pets.get_owned(pet_id, owner_id)
        if pet is None:
            raise NotFoundException("Pet", pet_id, message="Pet not found")
        return pet

    async def record(
        self,
        owner_id: uuid.UUID,
        pet_id: uuid.UUID,
        rate: int,
        notes: Optional[str] = None,
    ) -> BreathingRecord:
        """
        Store a measurement for one of the owner's pets.

        The alert is advisory: an abnormal rate is stored like any other.

        Raises:
            ValidationException: If ``rate`` is not a positive integer
            NotFoundException: If the pet does not exist or is not the owner's
        """
        if isinstance(rate, bool) or not isinstance(rate, int) or rate <= 0:
            raise ValidationException(
                "Breathing rate must be a positive integer", field="rate", value=rate
            )

        pet = await self._owned_pet(owner_id, pet_id)
        measurement = await self.measurements.create(pet.id, rate, notes)

        alert = abnormality_alert(rate, pet.species)
        if alert is not None:
            logger.info(f"Abnormal breathing rate {rate} recorded for pet {pet.id}")

        return BreathingRecord(measurement, alert)

    async def history(
        self,
        owner_id: uuid.UUID,
        pet_id: uuid.UUID,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> BreathingHistory:
        """
        Most recent measurements in a date range plus statistics.

        ``limit`` bounds the returned rows only; the statistics cover every
        measurement in the range.

        Raises:
            ValidationException: If ``limit`` or the date range is invalid
            NotFoundException: If the pet does not exist or is not the owner's
        """
        if not 1 <= limit <= MAX_HISTORY_LIMIT:
            raise ValidationException(
                f"limit must be between 1 and {MAX_HISTORY_LIMIT}",
                field="limit",
                value=limit,
            )
        try:
            validate_date_range(start_date, end_date)
        except ValueError as e:
            raise ValidationException(str(e), field="start_date")

        pet = await self._owned_pet(owner_id, pet_id)
        rows = await self.measurements.list_for_pet(pet.id, start_date, end_date, limit)
        stats = await self.measurements.stats_for_pet(pet.id, start_date, end_date)

        return BreathingHistory(rows, stats)

    async def analytics(self, owner_id: uuid.UUID, pet_id: uuid.UUID) -> BreathingAnalytics:
        """Analytics over the pet's most recent measurements."""
        pet = await self._owned_pet(owner_id, pet_id)
        recent = await self.measurements.list_for_pet(pet.id, limit=self.analytics_window)
        return compute_analytics(recent, pet.species)
