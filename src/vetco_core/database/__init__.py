"""
Database connection and session management.

This module provides async SQLAlchemy engine configuration and session
management for the VetCo backend.
"""

from .connection import (
    DatabaseConfig,
    check_connection,
    close_engine,
    create_engine,
    create_engine_from_config,
    get_database_url,
    wait_for_database,
)
from .session import (
    SessionManager,
    execute_with_retry,
    get_session,
    get_session_manager,
    get_transaction,
    health_check,
    initialize_session_manager,
)

__all__ = [
    # Connection utilities
    "DatabaseConfig",
    "create_engine",
    "create_engine_from_config",
    "get_database_url",
    "check_connection",
    "close_engine",
    "wait_for_database",
    # Session management
    "SessionManager",
    "initialize_session_manager",
    "get_session_manager",
    "get_session",
    "get_transaction",
    "execute_with_retry",
    "health_check",
]
