"""
Async SQLAlchemy engine, session factory, and base model for the key-value table.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from config import settings


class Base(DeclarativeBase):
    pass


def make_engine(database_url: str = None) -> AsyncEngine:
    database_url = database_url or settings.DATABASE_URL
    engine_kwargs = {"echo": settings.DEBUG}

    # SQLite doesn't support pool_size/max_overflow
    if "sqlite" not in database_url:
        engine_kwargs.update({"pool_size": 5, "max_overflow": 5, "pool_pre_ping": True})

    return create_async_engine(database_url, **engine_kwargs)


def make_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db(engine: AsyncEngine):
    """Create the key-value table if it does not exist yet."""
    async with engine.begin() as conn:
        from models.entities import KeyValueEntry  # noqa
        await conn.run_sync(Base.metadata.create_all)
