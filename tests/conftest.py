import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

BASE_DIR = Path(__file__).resolve().parents[1] / "backend"
sys.path.insert(0, str(BASE_DIR))

os.environ["STORAGE_BACKEND"] = "memory"
os.environ["WEBHOOK_URL"] = ""
os.environ["RATE_LIMIT_PER_MINUTE"] = "10000"

from fastapi.testclient import TestClient

from services.kv_store import InMemoryKeyValueStore
from services.storage_service import ConversationStore


class FixedClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock():
    return FixedClock(datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc))


class FullKeyValueStore(InMemoryKeyValueStore):
    """Storage that silently drops every write, like a full browser quota."""

    async def set(self, key: str, value: str) -> None:
        return None


@pytest.fixture
def backend():
    return InMemoryKeyValueStore()


@pytest.fixture
def full_store(clock):
    return ConversationStore(FullKeyValueStore(), clock=clock)


@pytest.fixture
def store(backend, clock):
    return ConversationStore(backend, clock=clock)


@pytest.fixture(scope="function")
def client():
    from main import app

    with TestClient(app) as test_client:
        yield test_client
