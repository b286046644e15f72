"""
Utility functions and helper modules.

This module provides datetime handling and configuration management
shared by the VetCo backend layers.
"""

from .config import (
    EnvironmentConfig,
    LoggingConfigurator,
    LogLevel,
    NotificationConfig,
    VetcoSettings,
)
from .datetime_utils import (
    get_current_utc,
    parse_iso_datetime,
    to_epoch_millis,
    to_utc,
    validate_date_range,
)

__all__ = [
    # DateTime utilities
    "get_current_utc",
    "to_utc",
    "parse_iso_datetime",
    "to_epoch_millis",
    "validate_date_range",
    # Configuration utilities
    "LogLevel",
    "NotificationConfig",
    "VetcoSettings",
    "EnvironmentConfig",
    "LoggingConfigurator",
]
