"""
Breathing-rate domain logic: statistics, trend and species normal ranges.
"""

from .analytics import (
    ABNORMAL_RATE_MESSAGE,
    ANALYTICS_WINDOW,
    DEFAULT_HISTORY_LIMIT,
    DEFAULT_NORMAL_RANGE,
    MAX_HISTORY_LIMIT,
    NORMAL_RANGES,
    BreathingAlert,
    BreathingAnalytics,
    BreathingStats,
    NormalRange,
    Trend,
    abnormality_alert,
    calculate_trend,
    compute_analytics,
    compute_stats,
    is_abnormal,
    normal_range_for,
    stats_from_totals,
)

__all__ = [
    "ABNORMAL_RATE_MESSAGE",
    "ANALYTICS_WINDOW",
    "DEFAULT_HISTORY_LIMIT",
    "MAX_HISTORY_LIMIT",
    "NORMAL_RANGES",
    "DEFAULT_NORMAL_RANGE",
    "NormalRange",
    "Trend",
    "BreathingStats",
    "BreathingAnalytics",
    "BreathingAlert",
    "normal_range_for",
    "is_abnormal",
    "abnormality_alert",
    "compute_stats",
    "stats_from_totals",
    "calculate_trend",
    "compute_analytics",
]
