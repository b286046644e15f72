"""
Breathing-rate analytics.

Summary statistics, a coarse trend label and species normal ranges computed
over measurements that the caller has already loaded (newest first). The
functions here perform no I/O and never raise for empty input.
"""

import enum
from dataclasses import dataclass
from typing import Any, NamedTuple, Optional, Sequence

from ..models.breathing_rate import BreathingRate

ANALYTICS_WINDOW = 30
DEFAULT_HISTORY_LIMIT = 50
MAX_HISTORY_LIMIT = 100

TREND_GROUP_SIZE = 3
TREND_STABLE_THRESHOLD = 2

ABNORMAL_RATE_MESSAGE = (
    "This breathing rate may be outside normal range. "
    "Consider consulting your veterinarian."
)


class NormalRange(NamedTuple):
    """Inclusive breaths-per-minute interval considered normal at rest."""

    min: int
    max: int

    def contains(self, rate: int) -> bool:
        return self.min <= rate <= self.max


# Keys are lower-case species names.
NORMAL_RANGES = {
    "dog": NormalRange(10, 30),
    "cat": NormalRange(20, 30),
    "rabbit": NormalRange(30, 60),
    "bird": NormalRange(15, 45),
}
DEFAULT_NORMAL_RANGE = NormalRange(15, 40)


class Trend(enum.Enum):
    """Direction of recent measurements relative to the ones before them."""

    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


@dataclass(frozen=True)
class BreathingStats:
    """Count, rounded mean and extrema of a set of measurements."""

    count: int = 0
    average: int = 0
    min: int = 0
    max: int = 0


@dataclass(frozen=True)
class BreathingAnalytics:
    """Analytics over a pet's most recent measurements."""

    total_measurements: int
    average_rate: int
    min_rate: int
    max_rate: int
    trend: Trend
    normal_range: NormalRange
    last_measurement: Optional[BreathingRate] = None


@dataclass(frozen=True)
class BreathingAlert:
    """Advisory attached to an ingest response; it never blocks the write."""

    type: str
    message: str


def normal_range_for(species: Any) -> NormalRange:
    """
    Look up the normal resting range for a species.

    Args:
        species: Species name in any case, or an enum whose value is the name

    Returns:
        The species range, or 15-40 for species without a specific range
    """
    if isinstance(species, enum.Enum):
        species = species.value
    key = str(species or "").strip().lower()
    return NORMAL_RANGES.get(key, DEFAULT_NORMAL_RANGE)


def is_abnormal(rate: int, species: Any) -> bool:
    """True when ``rate`` is strictly below or above the species range."""
    return not normal_range_for(species).contains(rate)


def abnormality_alert(rate: int, species: Any) -> Optional[BreathingAlert]:
    """Return a warning for an abnormal rate, None otherwise."""
    if is_abnormal(rate, species):
        return BreathingAlert(type="warning", message=ABNORMAL_RATE_MESSAGE)
    return None


def _rounded_mean(total: int, count: int) -> int:
    # Halves round up, so a mean of 20.5 reports 21.
    return (2 * total + count) // (2 * count)


def stats_from_totals(
    count: int, total: Optional[int], min_rate: Optional[int], max_rate: Optional[int]
) -> BreathingStats:
    """
    Build stats from SQL aggregates (``count``, ``sum``, ``min``, ``max``).

    Aggregates over no rows come back as NULL; those give all zeros.
    """
    if not count:
        return BreathingStats()

    return BreathingStats(
        count=count,
        average=_rounded_mean(int(total), count),
        min=int(min_rate),
        max=int(max_rate),
    )


def compute_stats(measurements: Sequence[BreathingRate]) -> BreathingStats:
    """
    Count, average (rounded to nearest integer), min and max.

    Returns all zeros when ``measurements`` is empty.
    """
    rates = [m.rate for m in measurements]
    if not rates:
        return BreathingStats()
    return stats_from_totals(len(rates), sum(rates), min(rates), max(rates))


def calculate_trend(measurements: Sequence[BreathingRate]) -> Trend:
    """
    Compare the three newest measurements with the three before them.

    Positions 0-2 form the recent group and 3-5 the older group. Fewer than
    three in either group is STABLE, as is a difference of means under 2.
    Otherwise the recent mean being higher is INCREASING, lower DECREASING.
    """
    recent = measurements[:TREND_GROUP_SIZE]
    older = measurements[TREND_GROUP_SIZE : 2 * TREND_GROUP_SIZE]
    if len(recent) < TREND_GROUP_SIZE or len(older) < TREND_GROUP_SIZE:
        return Trend.STABLE

    recent_mean = sum(m.rate for m in recent) / len(recent)
    older_mean = sum(m.rate for m in older) / len(older)
    difference = recent_mean - older_mean

    if abs(difference) < TREND_STABLE_THRESHOLD:
        return Trend.STABLE
    return Trend.INCREASING if difference > 0 else Trend.DECREASING


def compute_analytics(
    measurements: Sequence[BreathingRate], species: Any
) -> BreathingAnalytics:
    """
    Analytics for one pet's measurements, ordered newest first.

    The caller bounds the window (``ANALYTICS_WINDOW`` by default); every
    measurement passed in is considered.
    """
    stats = compute_stats(measurements)
    return BreathingAnalytics(
        total_measurements=stats.count,
        average_rate=stats.average,
        min_rate=stats.min,
        max_rate=stats.max,
        trend=calculate_trend(measurements),
        normal_range=normal_range_for(species),
        last_measurement=measurements[0] if measurements else None,
    )
