"""
Database connection utilities for the vetco-core package.

This module builds the async SQLAlchemy engine that is created once at
process start and shared by every request handler. PostgreSQL (asyncpg) is
the production backend; SQLite (aiosqlite) is accepted for local runs and
the test suite.
"""

import asyncio
import logging
import time
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import AsyncAdaptedQueuePool, NullPool

from ..exceptions import ConnectionException

logger = logging.getLogger(__name__)

SUPPORTED_SCHEMES = ("postgresql", "sqlite")


class DatabaseConfig:
    """Validated connection settings for ``create_engine``."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 10,
        max_overflow: int = 20,
        pool_timeout: int = 30,
        pool_recycle: int = 3600,
        echo: bool = False,
    ):
        """
        Initialize database configuration.

        Args:
            database_url: PostgreSQL or SQLite connection URL
            pool_size: Number of connections to maintain in the pool
            max_overflow: Maximum number of connections that can overflow the pool
            pool_timeout: Timeout for getting connection from pool
            pool_recycle: Time in seconds to recycle connections
            echo: Whether to echo SQL statements

        Raises:
            ValueError: If the URL is not a supported database URL
        """
        self.database_url = database_url
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.pool_timeout = pool_timeout
        self.pool_recycle = pool_recycle
        self.echo = echo

        self._validate_database_url()

    @property
    def is_sqlite(self) -> bool:
        return urlparse(self.database_url).scheme.startswith("sqlite")

    def _validate_database_url(self) -> None:
        parsed = urlparse(self.database_url)
        if not parsed.scheme.startswith(SUPPORTED_SCHEMES):
            raise ValueError(
                "Invalid database URL: must use postgresql:// or sqlite:// "
                "(optionally with +asyncpg / +aiosqlite)"
            )
        if self.is_sqlite:
            return
        if not parsed.hostname:
            raise ValueError("Invalid database URL: must include hostname")
        if not parsed.path or parsed.path == "/":
            raise ValueError("Invalid database URL: must include database name")

    def get_async_url(self) -> str:
        """Convert the URL to its async driver form if needed."""
        if self.database_url.startswith("postgresql://"):
            return self.database_url.replace(
                "postgresql://", "postgresql+asyncpg://", 1
            )
        if self.database_url.startswith("sqlite://"):
            return self.database_url.replace("sqlite://", "sqlite+aiosqlite://", 1)
        return self.database_url


def create_engine(
    database_url: str,
    pool_size: int = 10,
    max_overflow: int = 20,
    pool_timeout: int = 30,
    pool_recycle: int = 3600,
    pool_pre_ping: bool = True,
    echo: bool = False,
    use_null_pool: bool = False,
    connect_args: Optional[dict] = None,
) -> AsyncEngine:
    """
    Create an async SQLAlchemy engine.

    SQLite URLs always get a NullPool; PostgreSQL URLs get a queue pool
    unless ``use_null_pool`` is set.

    Returns:
        Configured async SQLAlchemy engine

    Raises:
        ValueError: If database URL is invalid
    """
    config = DatabaseConfig(
        database_url=database_url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_timeout=pool_timeout,
        pool_recycle=pool_recycle,
        echo=echo,
    )
    return create_engine_from_config(
        config,
        pool_pre_ping=pool_pre_ping,
        use_null_pool=use_null_pool,
        connect_args=connect_args,
    )


def create_engine_from_config(
    config: DatabaseConfig,
    pool_pre_ping: bool = True,
    use_null_pool: bool = False,
    connect_args: Optional[dict] = None,
) -> AsyncEngine:
    """Create an async engine from an already validated ``DatabaseConfig``."""
    async_url = config.get_async_url()
    engine_kwargs: Dict[str, Any] = {"echo": config.echo}

    if connect_args:
        engine_kwargs["connect_args"] = connect_args

    if use_null_pool or config.is_sqlite:
        engine_kwargs["poolclass"] = NullPool
    else:
        engine_kwargs.update(
            {
                "poolclass": AsyncAdaptedQueuePool,
                "pool_size": config.pool_size,
                "max_overflow": config.max_overflow,
                "pool_timeout": config.pool_timeout,
                "pool_recycle": config.pool_recycle,
                "pool_pre_ping": pool_pre_ping,
            }
        )

    try:
        engine = create_async_engine(async_url, **engine_kwargs)
    except Exception as e:
        logger.error(f"Failed to create database engine: {e}")
        raise ConnectionException(
            "Failed to create database engine",
            database_url=config.database_url,
            original_error=e,
        )

    logger.info(f"Created async database engine ({urlparse(async_url).scheme})")
    return engine


async def check_connection(
    engine: AsyncEngine, max_retries: int = 3, retry_delay: float = 1.0
) -> bool:
    """
    Run ``SELECT 1`` with exponential backoff between attempts.

    Returns:
        True if the database answered, False after the last failed attempt
    """
    for attempt in range(max_retries + 1):
        try:
            async with engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            if attempt < max_retries:
                logger.warning(
                    f"Database connection check failed (attempt {attempt + 1}/{max_retries + 1}): {e}"
                )
                await asyncio.sleep(retry_delay * (2**attempt))
            else:
                logger.error(
                    f"Database connection check failed after {max_retries + 1} attempts: {e}"
                )
    return False


async def wait_for_database(
    engine: AsyncEngine, timeout: float = 30.0, check_interval: float = 1.0
) -> bool:
    """
    Block until the database answers or ``timeout`` elapses.

    Raises:
        ConnectionException: If the database is not reachable in time
    """
    start_time = time.monotonic()

    while time.monotonic() - start_time < timeout:
        if await check_connection(engine, max_retries=0):
            return True
        await asyncio.sleep(check_interval)

    raise ConnectionException(
        f"Database did not become available within {timeout} seconds"
    )


async def close_engine(engine: AsyncEngine) -> None:
    """Dispose of the engine and all pooled connections."""
    try:
        await engine.dispose()
        logger.info("Database engine closed successfully")
    except Exception as e:
        logger.error(f"Error closing database engine: {e}")


def get_database_url(
    host: str,
    port: int = 5432,
    database: str = "vetco",
    username: str = "postgres",
    password: str = "",  # nosec B107
    driver: str = "asyncpg",
) -> str:
    """Construct a PostgreSQL database URL."""
    auth = f"{username}:{password}" if password else username
    return f"postgresql+{driver}://{auth}@{host}:{port}/{database}"
