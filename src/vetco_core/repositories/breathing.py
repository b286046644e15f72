"""Breathing-rate measurement queries."""

import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..breathing.analytics import BreathingStats, stats_from_totals
from ..models import BreathingRate


class BreathingRateRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    @staticmethod
    def _in_range(query, pet_id, start_date, end_date):
        query = query.where(BreathingRate.pet_id == pet_id)
        if start_date is not None:
            query = query.where(BreathingRate.timestamp >= start_date)
        if end_date is not None:
            query = query.where(BreathingRate.timestamp <= end_date)
        return query

    async def list_for_pet(
        self,
        pet_id: uuid.UUID,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[BreathingRate]:
        """
        Measurements for one pet, newest first.

        Args:
            pet_id: Pet whose measurements to load
            start_date: Inclusive lower bound on ``timestamp``
            end_date: Inclusive upper bound on ``timestamp``
            limit: Maximum number of rows, or None for all
        """
        query = self._in_range(select(BreathingRate), pet_id, start_date, end_date)
        query = query.order_by(BreathingRate.timestamp.desc())
        if limit is not None:
            query = query.limit(limit)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def stats_for_pet(
        self,
        pet_id: uuid.UUID,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> BreathingStats:
        """Count, rounded average, min and max over the same range, in one query."""
        query = self._in_range(
            select(
                func.count(BreathingRate.id),
                func.sum(BreathingRate.rate),
                func.min(BreathingRate.rate),
                func.max(BreathingRate.rate),
            ),
            pet_id,
            start_date,
            end_date,
        )
        count, total, min_rate, max_rate = (await self.session.execute(query)).one()
        return stats_from_totals(count, total, min_rate, max_rate)

    async def create(
        self, pet_id: uuid.UUID, rate: int, notes: Optional[str] = None
    ) -> BreathingRate:
        measurement = BreathingRate(pet_id=pet_id, rate=rate, notes=notes)
        self.session.add(measurement)
        await self.session.flush()
        await self.session.refresh(measurement)
        return measurement
