"""Unit tests for bearer token stores and the sweep worker."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from travel_api.core.tokens import DatabaseTokenStore, InMemoryTokenStore
from travel_api.workers.token_sweep_worker import TokenSweepWorker


class FrozenClock:
    def __init__(self):
        self.now = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def memory_store(clock):
    return InMemoryTokenStore(ttl=timedelta(hours=1), clock=clock)


@pytest.mark.asyncio
async def test_issue_and_validate(memory_store):
    token = await memory_store.issue("user-1")

    assert await memory_store.validate(token) == "user-1"
    assert await memory_store.validate("unknown-token") is None


@pytest.mark.asyncio
async def test_expired_token_is_rejected(memory_store, clock):
    token = await memory_store.issue("user-1")

    clock.advance(hours=1)

    assert await memory_store.validate(token) is None
    assert await memory_store.count() == 0


@pytest.mark.asyncio
async def test_revoke(memory_store):
    token = await memory_store.issue("user-1")

    assert await memory_store.revoke(token) == "user-1"
    assert await memory_store.validate(token) is None
    assert await memory_store.revoke(token) is None


@pytest.mark.asyncio
async def test_revoke_user_drops_every_token(memory_store):
    first = await memory_store.issue("user-1")
    second = await memory_store.issue("user-1")
    other = await memory_store.issue("user-2")

    assert await memory_store.revoke_user("user-1") == 2
    assert await memory_store.validate(first) is None
    assert await memory_store.validate(second) is None
    assert await memory_store.validate(other) == "user-2"


@pytest.mark.asyncio
async def test_sweep_removes_only_expired(memory_store, clock):
    await memory_store.issue("user-1")
    clock.advance(minutes=30)
    fresh = await memory_store.issue("user-2")
    clock.advance(minutes=31)

    assert await memory_store.sweep() == 1
    assert await memory_store.count() == 1
    assert await memory_store.validate(fresh) == "user-2"


@pytest.mark.asyncio
async def test_database_store(session_factory, user, clock):
    store = DatabaseTokenStore(session_factory, ttl=timedelta(hours=1), clock=clock)

    token = await store.issue(user.id)
    other = await store.issue(user.id)
    assert await store.validate(token) == user.id
    assert await store.count() == 2

    assert await store.revoke(token) == user.id
    assert await store.validate(token) is None

    clock.advance(hours=2)
    assert await store.validate(other) is None
    assert await store.sweep() == 1
    assert await store.count() == 0


@pytest.mark.asyncio
async def test_sweep_worker_process(memory_store, clock):
    await memory_store.issue("user-1")
    live = await memory_store.issue("user-2")
    memory_store._tokens[live].expires_at = clock() + timedelta(days=1)
    clock.advance(hours=2)

    worker = TokenSweepWorker(memory_store, interval_seconds=60)
    await worker.process()

    assert await memory_store.count() == 1
    assert await memory_store.validate(live) == "user-2"


@pytest.mark.asyncio
async def test_sweep_worker_start_stop(memory_store, clock):
    await memory_store.issue("user-1")
    clock.advance(hours=2)

    worker = TokenSweepWorker(memory_store, interval_seconds=3600)
    await worker.start()
    assert worker.running

    # First iteration runs immediately
    for _ in range(10):
        if await memory_store.count() == 0:
            break
        await asyncio.sleep(0.01)

    await worker.stop()

    assert not worker.running
    assert await memory_store.count() == 0


@pytest.mark.asyncio
async def test_worker_manager_lifecycle(memory_store):
    from travel_api.workers.manager import WorkerManager

    manager = WorkerManager(store=memory_store)
    assert manager.get_worker_status() == {"token_sweep": False}

    await manager.start_all()
    assert manager.get_worker_status() == {"token_sweep": True}

    await manager.stop_all()
    assert manager.get_worker("token_sweep").running is False


class BrokenStore:
    async def sweep(self):
        raise ConnectionError("token table unavailable")

    async def count(self):
        return 0


@pytest.mark.asyncio
async def test_failed_iteration_is_recorded():
    worker = TokenSweepWorker(BrokenStore(), interval_seconds=60)

    assert await worker.run_once() is False

    state = worker.describe()
    assert state["iterations"] == 1
    assert state["failures"] == 1
    assert state["last_error"] == "token table unavailable"
    assert state["running"] is False
