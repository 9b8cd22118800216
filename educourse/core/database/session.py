"""Async SQLAlchemy database connection.

Provides:
- Engine and connection pool management
- ``async_sessionmaker`` handed to the services (one session per call)
- Table creation and optional sample catalog seeding at startup
"""

from typing import Any

import structlog
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from educourse.config.settings import Settings, get_settings


logger = structlog.get_logger(__name__)


def _is_memory_sqlite(url: str) -> bool:
    return url.startswith("sqlite") and (":memory:" in url or url.endswith("://"))


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for the configured database URL.

    In-memory SQLite shares a single connection so every session sees the
    same database.
    """
    url = settings.database_url
    options: dict[str, Any] = {"echo": settings.database_echo}

    if _is_memory_sqlite(url):
        options["poolclass"] = StaticPool
        options["connect_args"] = {"check_same_thread": False}
    elif settings.is_sqlite:
        options["connect_args"] = {"check_same_thread": False}
    else:
        options["pool_size"] = settings.database_pool_size
        options["max_overflow"] = settings.database_max_overflow
        options["pool_pre_ping"] = True

    return create_async_engine(url, **options)


class AsyncDatabase:
    """Async database connection manager.

    Holds the process-wide engine (connection pool) and session factory.
    """

    _engine: AsyncEngine | None = None
    _session_factory: async_sessionmaker[AsyncSession] | None = None

    @classmethod
    def connect(cls, settings: Settings | None = None) -> async_sessionmaker[AsyncSession]:
        """Create the engine and session factory if not done yet.

        Returns:
            Session factory bound to the engine
        """
        if cls._session_factory is not None:
            return cls._session_factory

        settings = settings or get_settings()
        cls._engine = build_engine(settings)
        cls._session_factory = async_sessionmaker(
            cls._engine,
            expire_on_commit=False,
        )
        logger.info(
            "database_engine_created",
            dialect=cls._engine.dialect.name,
            url=cls._engine.url.render_as_string(hide_password=True),
        )
        return cls._session_factory

    @classmethod
    def get_engine(cls) -> AsyncEngine:
        """Get the active engine."""
        if cls._engine is None:
            msg = "Database not initialized"
            raise RuntimeError(msg)
        return cls._engine

    @classmethod
    def get_session_factory(cls) -> async_sessionmaker[AsyncSession]:
        """Get the active session factory, connecting if necessary."""
        if cls._session_factory is None:
            return cls.connect()
        return cls._session_factory

    @classmethod
    async def disconnect(cls) -> None:
        """Dispose the engine and its pooled connections."""
        if cls._engine is not None:
            await cls._engine.dispose()
            logger.info("database_engine_disposed")
        cls._engine = None
        cls._session_factory = None

    @classmethod
    def is_connected(cls) -> bool:
        """Check if an engine is active."""
        return cls._engine is not None


async def create_tables(engine: AsyncEngine) -> None:
    """Create every table registered on the declarative base."""
    # Registers the models on Base.metadata
    from educourse.courses import models as _courses_models  # noqa: F401
    from educourse.progress import models as _progress_models  # noqa: F401

    from educourse.core.database.base import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("database_tables_ready", tables=sorted(Base.metadata.tables))


async def ping_database(engine: AsyncEngine) -> bool:
    """Run ``SELECT 1`` against the database."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning("database_ping_failed", error=str(e))
        return False
    return True


async def init_database(
    settings: Settings | None = None,
) -> async_sessionmaker[AsyncSession]:
    """Connect, create tables and optionally seed the sample catalog."""
    settings = settings or get_settings()
    session_factory = AsyncDatabase.connect(settings)
    engine = AsyncDatabase.get_engine()

    if settings.database_create_tables:
        await create_tables(engine)

    if settings.database_seed_sample_data:
        from educourse.courses.seed import seed_sample_catalog

        async with session_factory() as session:
            await seed_sample_catalog(session)

    return session_factory


async def shutdown_database() -> None:
    """Close the database connection pool."""
    await AsyncDatabase.disconnect()
