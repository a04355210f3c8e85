import pytest

from models.database import init_db, make_engine, make_sessionmaker
from services.kv_store import InMemoryKeyValueStore, KeyValueStore, SQLKeyValueStore


@pytest.mark.asyncio
async def test_in_memory_get_set_remove():
    kv = InMemoryKeyValueStore()

    assert await kv.get("missing") is None

    await kv.set("gra_language", "twi")
    assert await kv.get("gra_language") == "twi"

    await kv.remove("gra_language")
    await kv.remove("gra_language")
    assert await kv.get("gra_language") is None


def test_adapters_satisfy_protocol():
    assert isinstance(InMemoryKeyValueStore(), KeyValueStore)


@pytest.mark.asyncio
async def test_sql_store_persists_across_instances(tmp_path):
    engine = make_engine(f"sqlite+aiosqlite:///{tmp_path / 'kv.db'}")
    try:
        await init_db(engine)
        sessions = make_sessionmaker(engine)

        first = SQLKeyValueStore(sessions)
        await first.set("gra_user_id", "user_1")
        await first.set("gra_user_id", "user_2")

        second = SQLKeyValueStore(sessions)
        assert await second.get("gra_user_id") == "user_2"

        await second.remove("gra_user_id")
        assert await first.get("gra_user_id") is None
    finally:
        await engine.dispose()


@pytest.mark.asyncio
async def test_sql_store_swallows_backend_errors(tmp_path):
    # No init_db: the table does not exist, so every statement fails.
    engine = make_engine(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
    try:
        kv = SQLKeyValueStore(make_sessionmaker(engine))

        assert await kv.get("gra_conversations") is None
        await kv.set("gra_conversations", "[]")
        await kv.remove("gra_conversations")
    finally:
        await engine.dispose()
