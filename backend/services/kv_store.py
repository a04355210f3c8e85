"""
Key-value persistence adapters.

The conversation store only ever sees ``get`` / ``set`` / ``remove`` over
named text blobs. Backend failures are logged and swallowed; callers treat a
missing value as "use the default".
"""

from typing import Dict, Optional, Protocol, runtime_checkable

from loguru import logger
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from models.entities import KeyValueEntry


@runtime_checkable
class KeyValueStore(Protocol):
    """Protocol for key-value persistence."""

    async def get(self, key: str) -> Optional[str]:
        ...

    async def set(self, key: str, value: str) -> None:
        ...

    async def remove(self, key: str) -> None:
        ...


class InMemoryKeyValueStore:
    """Process-local store; used for tests and throwaway runs."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def snapshot(self) -> Dict[str, str]:
        return dict(self._data)


class SQLKeyValueStore:
    """Durable store keeping one row per key in the ``kv_store`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get(self, key: str) -> Optional[str]:
        try:
            async with self._session_factory() as db:
                entry = await db.get(KeyValueEntry, key)
                return entry.value if entry is not None else None
        except SQLAlchemyError as e:
            logger.warning(f"Storage read failed for '{key}': {e}")
            return None

    async def set(self, key: str, value: str) -> None:
        try:
            async with self._session_factory() as db:
                entry = await db.get(KeyValueEntry, key)
                if entry is None:
                    db.add(KeyValueEntry(key=key, value=value))
                else:
                    entry.value = value
                await db.commit()
        except SQLAlchemyError as e:
            logger.warning(f"Storage write failed for '{key}': {e}")

    async def remove(self, key: str) -> None:
        try:
            async with self._session_factory() as db:
                await db.execute(delete(KeyValueEntry).where(KeyValueEntry.key == key))
                await db.commit()
        except SQLAlchemyError as e:
            logger.warning(f"Storage delete failed for '{key}': {e}")
