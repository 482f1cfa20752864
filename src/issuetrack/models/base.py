"""
Base models and database handle for issuetrack.

This module provides the foundational components for the database layer:
- SQLAlchemy declarative base
- Common mixins (UUID primary key, timestamps)
- Database configuration
- The ``Database`` store handle that owns the engine and connection pool
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import TYPE_CHECKING, AsyncGenerator, Optional
from uuid import UUID, uuid4

from sqlalchemy import DateTime, Uuid, event, text
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

if TYPE_CHECKING:
    from issuetrack.config import Settings

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    """Naive UTC timestamp, the format every timestamp column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


class TimestampMixin:
    """Mixin to add created_at and updated_at timestamps to models."""

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )


class UUIDMixin:
    """Mixin to add UUID primary key to models."""

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)


class DatabaseConfig:
    """Database configuration and connection options."""

    def __init__(
        self,
        url: str,
        pool_size: int = 5,
        max_overflow: int = 10,
        echo: bool = False,
        busy_timeout: float = 30.0,
    ):
        """
        Initialize database configuration.

        Args:
            url: SQLAlchemy async database URL
            pool_size: Connection pool size
            max_overflow: Maximum overflow connections
            echo: Whether to echo SQL statements (for debugging)
            busy_timeout: Seconds a SQLite connection waits for the write lock
        """
        self.url = url
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.echo = echo
        self.busy_timeout = busy_timeout

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @classmethod
    def from_settings(cls, settings: "Settings") -> "DatabaseConfig":
        """Create database configuration from application settings."""
        return cls(
            url=settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            echo=settings.database_echo,
            busy_timeout=settings.database_busy_timeout,
        )


def _enable_sqlite_pragmas(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


class Database:
    """
    Store handle: owns the engine, the connection pool and the session factory.

    One instance is constructed at process start and handed to every service
    that touches the database; ``close()`` disposes the pool on shutdown.
    """

    def __init__(self, config: DatabaseConfig):
        """
        Initialize the store handle.

        Args:
            config: Database configuration
        """
        self.config = config

        engine_kwargs: dict = {"echo": config.echo, "pool_pre_ping": True}
        if config.is_sqlite:
            engine_kwargs["connect_args"] = {"timeout": config.busy_timeout}
        else:
            engine_kwargs["pool_size"] = config.pool_size
            engine_kwargs["max_overflow"] = config.max_overflow

        self.engine = create_async_engine(config.url, **engine_kwargs)
        if config.is_sqlite:
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_pragmas)

        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Open a unit of work.

        The session commits when the block exits normally and rolls back when
        it raises, so every block is one database transaction.

        Usage:
            async with db.session() as session:
                result = await session.execute(query)

        Yields:
            AsyncSession instance
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def create_all(self) -> None:
        """Create every table known to the declarative base."""
        # Register all mappers before touching metadata.
        import issuetrack.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema created")

    async def drop_all(self) -> None:
        """Drop every table known to the declarative base."""
        import issuetrack.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def ping(self) -> None:
        """Run a trivial query, raising if the database is unreachable."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def close(self) -> None:
        """Close the database engine and all connections."""
        await self.engine.dispose()


def open_database(config: Optional[DatabaseConfig] = None) -> Database:
    """
    Construct a store handle.

    Args:
        config: Database configuration. If None, loads from settings.

    Returns:
        Database instance
    """
    if config is None:
        from issuetrack.config import get_settings

        config = DatabaseConfig.from_settings(get_settings())
    return Database(config)
