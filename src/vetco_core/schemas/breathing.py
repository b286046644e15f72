"""
Breathing-rate Pydantic schemas.

This module contains the request schemas for recording and querying
measurements and the response schemas for history, statistics and analytics.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..breathing.analytics import (
    DEFAULT_HISTORY_LIMIT,
    MAX_HISTORY_LIMIT,
    BreathingAlert,
    BreathingAnalytics,
    BreathingStats,
    Trend,
)


class BreathingRateCreate(BaseModel):
    """Schema for recording a measurement."""

    pet_id: UUID
    rate: int = Field(..., gt=0, description="Breaths per minute")
    notes: Optional[str] = Field(None, description="Free-text observation")


class BreathingRateQuery(BaseModel):
    """Schema for fetching measurement history."""

    pet_id: UUID
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    limit: int = Field(DEFAULT_HISTORY_LIMIT, gt=0, le=MAX_HISTORY_LIMIT)

    @model_validator(mode="after")
    def validate_range(self) -> "BreathingRateQuery":
        if (
            self.start_date is not None
            and self.end_date is not None
            and self.start_date > self.end_date
        ):
            raise ValueError("start_date must not be after end_date")
        return self


class BreathingRateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    pet_id: UUID
    rate: int
    timestamp: datetime
    notes: Optional[str] = None


class NormalRangeResponse(BaseModel):
    min: int
    max: int


class BreathingStatsResponse(BaseModel):
    count: int
    average: int
    min: int
    max: int

    @classmethod
    def from_stats(cls, stats: BreathingStats) -> "BreathingStatsResponse":
        return cls(count=stats.count, average=stats.average, min=stats.min, max=stats.max)


class BreathingAlertResponse(BaseModel):
    type: str
    message: str

    @classmethod
    def from_alert(cls, alert: Optional[BreathingAlert]) -> Optional["BreathingAlertResponse"]:
        if alert is None:
            return None
        return cls(type=alert.type, message=alert.message)


class BreathingAnalyticsResponse(BaseModel):
    """Analytics over a pet's most recent measurements."""

    total_measurements: int
    average_rate: int
    min_rate: int
    max_rate: int
    trend: Trend
    normal_range: NormalRangeResponse
    last_measurement: Optional[BreathingRateResponse] = None

    @classmethod
    def from_analytics(cls, analytics: BreathingAnalytics) -> "BreathingAnalyticsResponse":
        return cls(
            total_measurements=analytics.total_measurements,
            average_rate=analytics.average_rate,
            min_rate=analytics.min_rate,
            max_rate=analytics.max_rate,
            trend=analytics.trend,
            normal_range=NormalRangeResponse(
                min=analytics.normal_range.min, max=analytics.normal_range.max
            ),
            last_measurement=(
                BreathingRateResponse.model_validate(analytics.last_measurement)
                if analytics.last_measurement is not None
                else None
            ),
        )


class BreathingRecordResponse(BaseModel):
    """Response to an ingest; ``alert`` is advisory only."""

    message: str = "Breathing rate recorded successfully"
    breathing_rate: BreathingRateResponse
    alert: Optional[BreathingAlertResponse] = None


class BreathingHistoryResponse(BaseModel):
    breathing_rates: List[BreathingRateResponse]
    stats: BreathingStatsResponse
