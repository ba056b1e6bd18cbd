from typing import Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.config import Settings, settings as default_settings
from app.db.base import Base


def create_engine(database_url: Optional[str] = None, *, echo: Optional[bool] = None) -> AsyncEngine:
    """Create an async engine for the given URL (defaults to the configured database).

    In-memory SQLite databases share one connection so every session sees the
    same tables.
    """
    url = database_url or str(default_settings.SQLALCHEMY_DATABASE_URI)
    kwargs = {}
    if url.startswith("sqlite") and ":memory:" in url:
        kwargs["poolclass"] = StaticPool
    engine = create_async_engine(
        url,
        echo=default_settings.DATABASE_ECHO if echo is None else echo,
        future=True,
        **kwargs,
    )
    if url.startswith("sqlite"):
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite leaves foreign key enforcement off per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory bound to the engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


def engine_from_settings(config: Optional[Settings] = None) -> AsyncEngine:
    config = config or default_settings
    return create_engine(str(config.SQLALCHEMY_DATABASE_URI), echo=config.DATABASE_ECHO)


async def create_tables(engine: AsyncEngine) -> None:
    """Create all tables known to the model metadata."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_tables(engine: AsyncEngine) -> None:
    """Drop all tables known to the model metadata."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
