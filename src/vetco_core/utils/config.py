"""
Configuration management utilities.

This module provides environment variable handling with type conversion,
database settings, push gateway settings and logging configuration for
the VetCo backend.
"""

import logging
import logging.config
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..database.connection import DatabaseConfig
from ..exceptions import ConfigurationException


class LogLevel(Enum):
    """Enumeration for log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class EnvironmentConfig:
    """Utility class for handling environment variables with type conversion."""

    @staticmethod
    def get_str(
        key: str, default: Optional[str] = None, required: bool = False
    ) -> Optional[str]:
        """
        Get a string environment variable.

        Args:
            key: Environment variable key
            default: Default value if not found
            required: Whether the variable is required

        Returns:
            String value or default

        Raises:
            ConfigurationException: If required variable is missing
        """
        value = os.getenv(key, default)

        if required and value is None:
            raise ConfigurationException(
                f"Required environment variable '{key}' is not set", config_key=key
            )

        return value

    @staticmethod
    def get_int(
        key: str, default: Optional[int] = None, required: bool = False
    ) -> Optional[int]:
        """
        Get an integer environment variable.

        Raises:
            ConfigurationException: If required variable is missing or invalid
        """
        value = os.getenv(key)

        if value is None:
            if required:
                raise ConfigurationException(
                    f"Required environment variable '{key}' is not set", config_key=key
                )
            return default

        try:
            return int(value)
        except ValueError:
            raise ConfigurationException(
                f"Environment variable '{key}' must be an integer, got: {value}",
                config_key=key,
                config_value=value,
            )

    @staticmethod
    def get_float(
        key: str, default: Optional[float] = None, required: bool = False
    ) -> Optional[float]:
        """
        Get a float environment variable.

        Raises:
            ConfigurationException: If required variable is missing or invalid
        """
        value = os.getenv(key)

        if value is None:
            if required:
                raise ConfigurationException(
                    f"Required environment variable '{key}' is not set", config_key=key
                )
            return default

        try:
            return float(value)
        except ValueError:
            raise ConfigurationException(
                f"Environment variable '{key}' must be a float, got: {value}",
                config_key=key,
                config_value=value,
            )

    @staticmethod
    def get_bool(
        key: str, default: Optional[bool] = None, required: bool = False
    ) -> Optional[bool]:
        """Get a boolean environment variable ("true", "1", "yes", "on")."""
        value = os.getenv(key)

        if value is None:
            if required:
                raise ConfigurationException(
                    f"Required environment variable '{key}' is not set", config_key=key
                )
            return default

        return value.lower() in ("true", "1", "yes", "on", "enabled")

    @staticmethod
    def get_list(
        key: str,
        separator: str = ",",
        default: Optional[List[str]] = None,
        required: bool = False,
    ) -> Optional[List[str]]:
        """Get a separator-delimited list environment variable."""
        value = os.getenv(key)

        if value is None:
            if required:
                raise ConfigurationException(
                    f"Required environment variable '{key}' is not set", config_key=key
                )
            return default or []

        return [item.strip() for item in value.split(separator) if item.strip()]


@dataclass
class NotificationConfig:
    """Settings for the push notification gateway."""

    gateway_url: Optional[str] = None
    access_token: Optional[str] = None
    timeout_seconds: float = 10.0
    default_sound: Optional[str] = "default"

    @property
    def is_configured(self) -> bool:
        """Push delivery is disabled unless a gateway URL is set."""
        return bool(self.gateway_url)

    @classmethod
    def from_environment(cls) -> "NotificationConfig":
        """Build from PUSH_GATEWAY_URL, PUSH_ACCESS_TOKEN and PUSH_TIMEOUT_SECONDS."""
        return cls(
            gateway_url=EnvironmentConfig.get_str("PUSH_GATEWAY_URL"),
            access_token=EnvironmentConfig.get_str("PUSH_ACCESS_TOKEN"),
            timeout_seconds=EnvironmentConfig.get_float("PUSH_TIMEOUT_SECONDS", 10.0),
        )


@dataclass
class VetcoSettings:
    """Process-wide settings, loaded once at start-up."""

    database: Optional[DatabaseConfig] = None
    log_level: LogLevel = LogLevel.INFO
    breathing_analytics_window: int = 30
    notifications: Optional[NotificationConfig] = None

    @property
    def database_url(self) -> Optional[str]:
        return self.database.database_url if self.database else None

    @classmethod
    def from_environment(cls) -> "VetcoSettings":
        """
        Load settings from the environment.

        Reads DATABASE_URL (with DATABASE_POOL_SIZE, DATABASE_MAX_OVERFLOW and
        DATABASE_ECHO), LOG_LEVEL and BREATHING_ANALYTICS_WINDOW plus the push
        gateway variables read by NotificationConfig.

        Raises:
            ConfigurationException: If a variable holds an invalid value
        """
        level_name = (EnvironmentConfig.get_str("LOG_LEVEL", "INFO") or "INFO").upper()
        try:
            log_level = LogLevel(level_name)
        except ValueError:
            raise ConfigurationException(
                f"Unknown log level: {level_name}",
                config_key="LOG_LEVEL",
                config_value=level_name,
            )

        window = EnvironmentConfig.get_int("BREATHING_ANALYTICS_WINDOW", 30)
        if window is None or window <= 0:
            raise ConfigurationException(
                "BREATHING_ANALYTICS_WINDOW must be a positive integer",
                config_key="BREATHING_ANALYTICS_WINDOW",
                config_value=str(window),
            )

        return cls(
            database=cls._database_from_environment(),
            log_level=log_level,
            breathing_analytics_window=window,
            notifications=NotificationConfig.from_environment(),
        )

    @staticmethod
    def _database_from_environment() -> Optional[DatabaseConfig]:
        url = EnvironmentConfig.get_str("DATABASE_URL")
        if not url:
            return None
        try:
            return DatabaseConfig(
                url,
                pool_size=EnvironmentConfig.get_int("DATABASE_POOL_SIZE", 10),
                max_overflow=EnvironmentConfig.get_int("DATABASE_MAX_OVERFLOW", 20),
                echo=EnvironmentConfig.get_bool("DATABASE_ECHO", False),
            )
        except ValueError as e:
            raise ConfigurationException(str(e), config_key="DATABASE_URL")


class LoggingConfigurator:
    """Utility class for configuring logging."""

    DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @staticmethod
    def configure_basic_logging(
        level: Union[str, LogLevel] = LogLevel.INFO,
        format_string: Optional[str] = None,
        log_file: Optional[str] = None,
    ) -> None:
        """
        Configure basic logging for the application.

        Args:
            level: Logging level
            format_string: Custom format string
            log_file: Optional log file path
        """
        if isinstance(level, LogLevel):
            level = level.value

        basic_config_args: Dict[str, Any] = {
            "level": level,
            "format": format_string or LoggingConfigurator.DEFAULT_FORMAT,
            "datefmt": "%Y-%m-%d %H:%M:%S",
        }
        if log_file:
            basic_config_args["filename"] = log_file
            basic_config_args["filemode"] = "a"

        logging.basicConfig(**basic_config_args)

    @staticmethod
    def build_default_config(level: Union[str, LogLevel] = LogLevel.INFO) -> Dict[str, Any]:
        """Return the dictConfig used when no explicit configuration is supplied."""
        if isinstance(level, LogLevel):
            level = level.value

        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {"format": LoggingConfigurator.DEFAULT_FORMAT},
                "detailed": {
                    "format": "%(asctime)s - %(name)s - %(levelname)s - %(module)s - %(funcName)s - %(message)s"
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": level,
                    "formatter": "standard",
                    "stream": "ext://sys.stdout",
                }
            },
            "loggers": {
                "vetco_core": {
                    "level": level,
                    "handlers": ["console"],
                    "propagate": False,
                }
            },
            "root": {"level": "WARNING", "handlers": ["console"]},
        }

    @staticmethod
    def configure_structured_logging(
        config_dict: Optional[Dict[str, Any]] = None,
        config_file: Optional[str] = None,
        level: Union[str, LogLevel] = LogLevel.INFO,
    ) -> None:
        """
        Configure logging from a dictionary, a file, or the package default.

        Args:
            config_dict: Logging configuration dictionary
            config_file: Path to logging configuration file
            level: Level for the default configuration
        """
        if config_file and Path(config_file).exists():
            logging.config.fileConfig(config_file)
        elif config_dict:
            logging.config.dictConfig(config_dict)
        else:
            logging.config.dictConfig(LoggingConfigurator.build_default_config(level))
