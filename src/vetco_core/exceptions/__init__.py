"""
Custom exceptions for the vetco-core package.

This module defines the exception hierarchy raised by the persistence,
service and notification layers of the VetCo backend.
"""

from .core_exceptions import (
    ConfigurationException,
    ConnectionException,
    DatabaseException,
    NotFoundException,
    NotificationException,
    PermissionDeniedException,
    QRCodeException,
    TransactionException,
    ValidationException,
    VetcoException,
    create_error_response,
    format_validation_errors,
)

__all__ = [
    # Exception classes
    "VetcoException",
    "DatabaseException",
    "ConnectionException",
    "TransactionException",
    "ValidationException",
    "NotFoundException",
    "PermissionDeniedException",
    "QRCodeException",
    "NotificationException",
    "ConfigurationException",
    # Utility functions
    "format_validation_errors",
    "create_error_response",
]
