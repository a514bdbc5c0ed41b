"""
RailLovable Database Configuration

SQLAlchemy async engine with SQLite (aiosqlite) by default.
Any async SQLAlchemy URL works for the project store.
"""
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy import event
from .config import settings


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


def create_engine_for(url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine, applying SQLite tuning for sqlite URLs."""
    is_sqlite = url.startswith("sqlite")
    engine = create_async_engine(
        url,
        echo=echo,
        connect_args={
            "timeout": 30,  # Wait up to 30 seconds for locks
            "check_same_thread": False,
        } if is_sqlite else {},
    )

    if is_sqlite:
        @event.listens_for(engine.sync_engine, "connect")
        def configure_sqlite(dbapi_connection, connection_record):
            """Configure SQLite for concurrent readers during a write."""
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA busy_timeout=30000")
            cursor.close()

    return engine


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


engine = create_engine_for(settings.database_url, echo=settings.debug)

# Session factory
async_session = create_session_factory(engine)


async def init_db(bind: AsyncEngine = engine) -> None:
    """Initialize database tables."""
    # Register models on Base.metadata
    from . import models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db(bind: AsyncEngine = engine) -> None:
    """Close database connections."""
    await bind.dispose()
