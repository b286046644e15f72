"""
Database session management utilities for the vetco-core package.

This module provides the async session factory, per-request session and
transaction context managers, and retry helpers for transient failures.
"""

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Awaitable, Callable, Dict, Optional

from sqlalchemy import MetaData, text
from sqlalchemy.exc import DisconnectionError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from ..exceptions import DatabaseException, TransactionException

logger = logging.getLogger(__name__)


def _operation_name(operation: Any) -> str:
    return getattr(operation, "__name__", str(operation))


class SessionManager:
    """Manages database sessions and provides transaction utilities."""

    def __init__(
        self, engine: AsyncEngine, session_config: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize session manager with database engine.

        Args:
            engine: SQLAlchemy async engine
            session_config: Optional overrides for ``autoflush`` and
                ``expire_on_commit``
        """
        self.engine = engine
        self._is_initialized = False

        config = {"expire_on_commit": False, "autoflush": True}
        if session_config:
            config.update(session_config)

        self.session_factory = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            autoflush=config["autoflush"],
            expire_on_commit=config["expire_on_commit"],
        )

    @property
    def is_initialized(self) -> bool:
        return self._is_initialized

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Context manager for database sessions with automatic cleanup.

        Example:
            async with session_manager.get_session() as session:
                result = await session.execute(select(Message))
        """
        session = self.session_factory()
        try:
            yield session
        except Exception as e:
            await session.rollback()
            logger.error(f"Session error, rolling back: {e}")
            raise
        finally:
            await session.close()

    @asynccontextmanager
    async def get_transaction(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Context manager for a session inside one transaction.

        The transaction commits when the block exits normally and rolls back
        if it raises.
        """
        async with self.get_session() as session:
            async with session.begin():
                yield session

    async def execute_in_transaction(
        self, operation: Callable[..., Awaitable[Any]], *args: Any, **kwargs: Any
    ) -> Any:
        """
        Run ``operation(session, *args, **kwargs)`` inside a transaction.

        Raises:
            TransactionException: If the database rejects the operation
        """
        try:
            async with self.get_transaction() as session:
                return await operation(session, *args, **kwargs)
        except SQLAlchemyError as e:
            logger.error(f"Database operation failed: {e}")
            raise TransactionException(
                "Database transaction failed",
                operation=_operation_name(operation),
                original_error=e,
            )

    async def execute_with_retry(
        self,
        operation: Callable[[AsyncSession], Awaitable[Any]],
        max_retries: int = 3,
        retry_delay: float = 1.0,
        exponential_backoff: bool = True,
    ) -> Any:
        """
        Execute a database operation, retrying transient connection failures.

        Args:
            operation: Async function that takes a session and returns a result
            max_retries: Maximum number of retry attempts
            retry_delay: Initial delay between retries in seconds
            exponential_backoff: Whether to use exponential backoff

        Returns:
            Result of the operation

        Raises:
            DatabaseException: If the operation fails after all retries or
                fails with a non-transient database error
        """
        last_exception: Optional[Exception] = None

        for attempt in range(max_retries + 1):
            try:
                async with self.get_transaction() as session:
                    return await operation(session)

            except (DisconnectionError, OperationalError) as e:
                last_exception = e
                if attempt < max_retries:
                    delay = retry_delay * (2**attempt if exponential_backoff else 1)
                    logger.warning(
                        f"Database operation failed (attempt {attempt + 1}/{max_retries + 1}), "
                        f"retrying in {delay}s: {e}"
                    )
                    await asyncio.sleep(delay)
                else:
                    logger.error(
                        f"Database operation failed after {max_retries + 1} attempts: {e}"
                    )

            except SQLAlchemyError as e:
                logger.error(f"Non-retryable database operation error: {e}")
                raise DatabaseException(
                    "Database operation failed",
                    details={"operation": _operation_name(operation)},
                    original_error=e,
                )

        raise DatabaseException(
            f"Database operation failed after {max_retries + 1} attempts",
            details={"operation": _operation_name(operation)},
            original_error=last_exception,
            retry_count=max_retries,
            max_retries=max_retries,
        )

    async def health_check(self) -> Dict[str, Any]:
        """
        Check that a session can run a query.

        Returns:
            Dictionary with ``status`` ("healthy" or "unhealthy") and
            ``response_time`` in milliseconds
        """
        start_time = time.monotonic()
        try:
            async with self.get_session() as session:
                await session.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error(f"Database error during health check: {e}")
            return {"status": "unhealthy", "error": str(e)}

        return {
            "status": "healthy",
            "response_time": round((time.monotonic() - start_time) * 1000, 2),
        }

    async def initialize_database(self, metadata: Optional[MetaData] = None) -> bool:
        """
        Create any missing tables described by ``metadata``.

        Returns:
            True if initialization succeeded, False otherwise
        """
        health = await self.health_check()
        if health["status"] != "healthy":
            logger.error("Database health check failed during initialization")
            return False

        if metadata is not None:
            try:
                async with self.engine.begin() as conn:
                    await conn.run_sync(metadata.create_all)
            except SQLAlchemyError as e:
                logger.error(f"Database initialization failed: {e}")
                return False
            logger.info("Database tables created successfully")

        self._is_initialized = True
        return True

    async def close_all_sessions(self) -> None:
        """Dispose of the engine, closing every pooled connection."""
        await self.engine.dispose()
        logger.info("All database sessions and connections closed")


# Process-wide session manager, set once at startup.
_session_manager: Optional[SessionManager] = None


def initialize_session_manager(
    engine: AsyncEngine, session_config: Optional[Dict[str, Any]] = None
) -> SessionManager:
    """Create the process-wide session manager."""
    global _session_manager
    _session_manager = SessionManager(engine, session_config)
    logger.info("Session manager initialized")
    return _session_manager


def get_session_manager() -> SessionManager:
    """
    Return the process-wide session manager.

    Raises:
        RuntimeError: If ``initialize_session_manager`` has not been called
    """
    if _session_manager is None:
        raise RuntimeError(
            "Session manager not initialized. Call initialize_session_manager() first."
        )
    return _session_manager


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Session from the process-wide manager."""
    async with get_session_manager().get_session() as session:
        yield session


@asynccontextmanager
async def get_transaction() -> AsyncGenerator[AsyncSession, None]:
    """Transaction from the process-wide manager."""
    async with get_session_manager().get_transaction() as session:
        yield session


async def execute_with_retry(
    operation: Callable[[AsyncSession], Awaitable[Any]], **kwargs: Any
) -> Any:
    return await get_session_manager().execute_with_retry(operation, **kwargs)


async def health_check() -> Dict[str, Any]:
    return await get_session_manager().health_check()
