"""
Core exceptions for the vetco-core package.

This module defines the exception hierarchy used by the repositories,
services and notification layer of the VetCo pet-health backend. The pure
domain functions (conversation derivation, breathing analytics) never raise
these; they are total over well-formed input.
"""

import logging
import time
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse, urlunparse


class VetcoException(Exception):
    """
    Base exception class for all vetco-core exceptions.

    Carries a human-readable message, a machine-readable error code and a
    details dictionary that request handlers can serialize directly.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary format.

        Returns:
            Dictionary representation of the exception
        """
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "timestamp": time.time(),
        }

    def log_error(
        self, logger: Optional[logging.Logger] = None, level: int = logging.ERROR
    ) -> None:
        """
        Log the exception with its structured payload attached.

        Args:
            logger: Logger instance to use (module logger if None)
            level: Logging level to use
        """
        if logger is None:
            logger = logging.getLogger(__name__)

        logger.log(
            level,
            f"Exception occurred: {self.message}",
            extra={
                "exception_data": {
                    "error_type": self.__class__.__name__,
                    "error_code": self.error_code,
                    "message": self.message,
                    "details": self.details,
                }
            },
        )

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class DatabaseException(VetcoException):
    """Base exception for persistence errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None,
        retry_count: int = 0,
        max_retries: int = 3,
    ):
        """
        Initialize database exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            details: Additional error details
            original_error: Original exception that caused this error
            retry_count: Current retry attempt count
            max_retries: Maximum number of retry attempts
        """
        super().__init__(message, error_code, details)
        self.original_error = original_error
        self.retry_count = retry_count
        self.max_retries = max_retries

        if original_error and "original_error" not in self.details:
            self.details["original_error"] = str(original_error)

        self.details.update(
            {
                "retry_count": retry_count,
                "max_retries": max_retries,
                "retryable": self.is_retryable(),
            }
        )

    def is_retryable(self) -> bool:
        """Return True while retry attempts remain."""
        return self.retry_count < self.max_retries


class ConnectionException(DatabaseException):
    """Exception raised when the database cannot be reached."""

    NON_RETRYABLE_PATTERNS = (
        "authentication failed",
        "invalid credentials",
        "access denied",
        "permission denied",
        "database does not exist",
        "role does not exist",
    )

    def __init__(
        self,
        message: str = "Database connection failed",
        database_url: Optional[str] = None,
        original_error: Optional[Exception] = None,
        retry_count: int = 0,
        max_retries: int = 3,
    ):
        """
        Initialize connection exception.

        Args:
            message: Error message
            database_url: Database URL (credentials are stripped)
            original_error: Original exception
            retry_count: Current retry attempt count
            max_retries: Maximum number of retry attempts
        """
        details = {}
        if database_url:
            details["database_url"] = self._sanitize_url(database_url)

        super().__init__(
            message=message,
            error_code="DATABASE_CONNECTION_ERROR",
            details=details,
            original_error=original_error,
            retry_count=retry_count,
            max_retries=max_retries,
        )

    @staticmethod
    def _sanitize_url(url: str) -> str:
        """Remove credentials from a database URL for logging."""
        try:
            parsed = urlparse(url)
            netloc = parsed.hostname or ""
            if parsed.port:
                netloc = f"{netloc}:{parsed.port}"
            return urlunparse(parsed._replace(netloc=netloc))
        except (ValueError, AttributeError) as e:
            return f"[URL_PARSE_ERROR: {e}]"

    def is_retryable(self) -> bool:
        """
        Connection errors are retryable unless they point at credentials
        or a missing database.
        """
        if not super().is_retryable():
            return False

        if self.original_error:
            error_str = str(self.original_error).lower()
            if any(pattern in error_str for pattern in self.NON_RETRYABLE_PATTERNS):
                return False

        return True


class TransactionException(DatabaseException):
    """Exception raised when a unit of work fails to commit."""

    def __init__(
        self,
        message: str = "Database transaction failed",
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        details = {}
        if operation:
            details["operation"] = operation

        super().__init__(
            message=message,
            error_code="DATABASE_TRANSACTION_ERROR",
            details=details,
            original_error=original_error,
        )


class ValidationException(VetcoException):
    """Base exception for invalid input data."""

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        value: Optional[Any] = None,
        validation_errors: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize validation exception.

        Args:
            message: Error message
            field: Field that failed validation
            value: Value that failed validation
            validation_errors: Detailed validation errors
        """
        details: Dict[str, Any] = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        if validation_errors:
            details["validation_errors"] = validation_errors

        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details=details,
        )


class NotFoundException(VetcoException):
    """Exception raised when a requested record does not exist or is not visible."""

    def __init__(
        self,
        resource: str,
        resource_id: Optional[Any] = None,
        message: Optional[str] = None,
    ):
        details: Dict[str, Any] = {"resource": resource}
        if resource_id is not None:
            details["resource_id"] = str(resource_id)

        super().__init__(
            message=message or f"{resource} not found",
            error_code="NOT_FOUND",
            details=details,
        )


class PermissionDeniedException(VetcoException):
    """Exception raised when a participant kind may not perform an action."""

    def __init__(
        self,
        message: str = "Permission denied",
        action: Optional[str] = None,
    ):
        details = {}
        if action:
            details["action"] = action

        super().__init__(
            message=message,
            error_code="PERMISSION_DENIED",
            details=details,
        )


class QRCodeException(VetcoException):
    """Exception raised when a scanned QR payload cannot be decoded."""

    def __init__(
        self,
        message: str = "Invalid QR code",
        payload_type: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        details = {}
        if payload_type is not None:
            details["payload_type"] = payload_type
        if original_error is not None:
            details["original_error"] = str(original_error)

        super().__init__(
            message=message,
            error_code="QR_CODE_ERROR",
            details=details,
        )
        self.original_error = original_error


class NotificationException(VetcoException):
    """Exception raised by the push gateway client. Never escapes a dispatch."""

    def __init__(
        self,
        message: str = "Push notification dispatch failed",
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ):
        details: Dict[str, Any] = {}
        if status_code is not None:
            details["status_code"] = status_code
        if original_error is not None:
            details["original_error"] = str(original_error)

        super().__init__(
            message=message,
            error_code="NOTIFICATION_ERROR",
            details=details,
        )


class ConfigurationException(VetcoException):
    """Exception raised for invalid or missing configuration."""

    SENSITIVE_KEYS = ("password", "secret", "key", "token", "credential")

    def __init__(
        self,
        message: str = "Configuration error",
        config_key: Optional[str] = None,
        config_value: Optional[str] = None,
    ):
        details = {}
        if config_key:
            details["config_key"] = config_key
        if config_value:
            details["config_value"] = self._sanitize_config_value(
                config_key, config_value
            )

        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            details=details,
        )

    @classmethod
    def _sanitize_config_value(cls, key: Optional[str], value: str) -> str:
        """Redact values whose key looks like a secret."""
        if not key:
            return "[REDACTED]"
        if any(sensitive in key.lower() for sensitive in cls.SENSITIVE_KEYS):
            return "[REDACTED]"
        return value


# Utility functions for exception handling and error formatting


def format_validation_errors(errors: List[Dict[str, Any]]) -> Dict[str, List[str]]:
    """
    Format Pydantic validation errors into a field -> messages mapping.

    Args:
        errors: List of errors as returned by ``ValidationError.errors()``

    Returns:
        Dictionary mapping dotted field paths to lists of error messages
    """
    formatted_errors: Dict[str, List[str]] = {}

    for error in errors:
        field_path = ".".join(str(loc) for loc in error.get("loc", [])) or "root"
        message = error.get("msg", "Validation error")
        error_type = error.get("type", "unknown")

        if error_type == "value_error":
            formatted_message = message
        elif error_type == "missing":
            formatted_message = "This field is required"
        else:
            formatted_message = f"{message} (type: {error_type})"

        formatted_errors.setdefault(field_path, []).append(formatted_message)

    return formatted_errors


def create_error_response(
    exception: VetcoException, include_debug: bool = False
) -> Dict[str, Any]:
    """
    Create a standardized error response body from an exception.

    Args:
        exception: The exception to format
        include_debug: Whether to include the raising module and class

    Returns:
        ``{"success": False, "error": {...}}`` response dictionary
    """
    response: Dict[str, Any] = {
        "success": False,
        "error": {
            "type": exception.__class__.__name__,
            "code": exception.error_code,
            "message": exception.message,
        },
    }

    if exception.details:
        response["error"]["details"] = exception.details

    if include_debug:
        response["debug"] = {
            "timestamp": time.time(),
            "module": exception.__class__.__module__,
            "class_name": exception.__class__.__name__,
        }

    return response
