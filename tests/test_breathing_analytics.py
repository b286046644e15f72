"""
Tests for breathing-rate analytics.
"""

import enum

import pytest

from vetco_core.breathing import (
    ABNORMAL_RATE_MESSAGE,
    DEFAULT_NORMAL_RANGE,
    NormalRange,
    Trend,
    abnormality_alert,
    calculate_trend,
    compute_analytics,
    compute_stats,
    is_abnormal,
    normal_range_for,
)

from .conftest import BreathingRateFactory

series = BreathingRateFactory.newest_first


class TestNormalRange:
    @pytest.mark.parametrize(
        "species, expected",
        [
            ("dog", (10, 30)),
            ("cat", (20, 30)),
            ("rabbit", (30, 60)),
            ("bird", (15, 45)),
        ],
    )
    def test_known_species(self, species, expected):
        assert normal_range_for(species) == expected

    @pytest.mark.parametrize("species", ["DOG", "dog", "Dog", "  dog "])
    def test_lookup_is_case_insensitive(self, species):
        assert normal_range_for(species) == NormalRange(10, 30)

    @pytest.mark.parametrize("species", ["iguana", "", None])
    def test_unknown_species_uses_default(self, species):
        assert normal_range_for(species) == DEFAULT_NORMAL_RANGE == (15, 40)

    def test_accepts_enum_members(self):
        class Species(enum.Enum):
            CAT = "cat"

        assert normal_range_for(Species.CAT) == (20, 30)


class TestAbnormality:
    def test_outside_range_is_abnormal(self):
        assert is_abnormal(35, "dog")
        assert is_abnormal(9, "dog")

    def test_inside_range_is_normal(self):
        assert not is_abnormal(15, "dog")

    def test_bounds_are_inclusive(self):
        assert not is_abnormal(10, "dog")
        assert not is_abnormal(30, "dog")

    def test_alert_for_abnormal_rate(self):
        alert = abnormality_alert(50, "cat")

        assert alert.type == "warning"
        assert alert.message == ABNORMAL_RATE_MESSAGE

    def test_no_alert_for_normal_rate(self):
        assert abnormality_alert(25, "cat") is None


class TestStats:
    def test_empty_input_is_all_zero(self):
        stats = compute_stats([])

        assert (stats.count, stats.average, stats.min, stats.max) == (0, 0, 0, 0)

    def test_average_rounds_half_up(self):
        stats = compute_stats(series([20, 21]))

        assert stats.average == 21

    def test_average_rounds_to_nearest(self):
        assert compute_stats(series([20, 20, 21])).average == 20
        assert compute_stats(series([20, 21, 21])).average == 21

    def test_min_max_and_count(self):
        stats = compute_stats(series([18, 25, 12, 30]))

        assert stats.count == 4
        assert stats.min == 12
        assert stats.max == 30
        assert stats.min <= stats.average <= stats.max


class TestTrend:
    def test_fewer_than_six_is_stable(self):
        assert calculate_trend(series([40, 40, 40, 10, 10])) is Trend.STABLE

    def test_recent_lower_is_decreasing(self):
        assert calculate_trend(series([20, 20, 20, 30, 30, 30])) is Trend.DECREASING

    def test_recent_higher_is_increasing(self):
        assert calculate_trend(series([30, 30, 30, 20, 20, 20])) is Trend.INCREASING

    def test_small_difference_is_stable(self):
        assert calculate_trend(series([21, 21, 21, 20, 20, 20])) is Trend.STABLE

    def test_difference_of_two_is_not_stable(self):
        assert calculate_trend(series([22, 22, 22, 20, 20, 20])) is Trend.INCREASING

    def test_only_first_six_considered(self):
        rates = [20, 20, 20, 20, 20, 20, 90, 90, 90]

        assert calculate_trend(series(rates)) is Trend.STABLE


class TestComputeAnalytics:
    def test_empty_input(self):
        analytics = compute_analytics([], "dog")

        assert analytics.total_measurements == 0
        assert analytics.average_rate == 0
        assert analytics.min_rate == 0
        assert analytics.max_rate == 0
        assert analytics.trend is Trend.STABLE
        assert analytics.normal_range == (10, 30)
        assert analytics.last_measurement is None

    def test_populated_input(self):
        measurements = series([24, 22, 20, 18, 16, 14])

        analytics = compute_analytics(measurements, "Cat")

        assert analytics.total_measurements == 6
        assert analytics.average_rate == 19
        assert analytics.min_rate == 14
        assert analytics.max_rate == 24
        assert analytics.trend is Trend.INCREASING
        assert analytics.normal_range == NormalRange(20, 30)
        assert analytics.last_measurement is measurements[0]
        assert analytics.min_rate <= analytics.average_rate <= analytics.max_rate
