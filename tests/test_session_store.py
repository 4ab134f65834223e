from __future__ import annotations

import asyncio
import threading
from datetime import timedelta

import pytest

from excel_analyst.errors import NotFoundError
from excel_analyst.orchestrator.session_store import SessionStore, generate_session_id


def test_session_expires_in_two_days(store: SessionStore, clock, sales: list) -> None:
    session = store.create(sales, ["region", "ventas"])

    assert session.created_at == clock.now
    assert session.expires_at - session.created_at == timedelta(days=2)
    assert len(session.conversation) == 0
    assert session.columns == ["region", "ventas"]


def test_get_returns_live_session(store: SessionStore, sales: list) -> None:
    session = store.create(sales, ["region", "ventas"])

    found = store.get(session.id)
    found.conversation.append("question", "hola")

    assert found is session
    assert len(store.get(session.id).conversation) == 1


def test_get_unknown_or_empty_id(store: SessionStore) -> None:
    assert store.get("") is None
    assert store.get(None) is None
    assert store.get("missing") is None


def test_lazy_eviction_after_expiry(store: SessionStore, clock, sales: list) -> None:
    session = store.create(sales, ["region", "ventas"])

    clock.now = session.expires_at
    assert store.get(session.id) is session

    clock.advance(milliseconds=1)
    assert store.get(session.id) is None
    assert session.id not in store
    assert store.get(session.id) is None


def test_most_recent_active(store: SessionStore, clock, sales: list) -> None:
    assert store.most_recent_active() is None

    first = store.create(sales, [])
    clock.advance(minutes=5)
    second = store.create(sales, [])

    assert store.most_recent_active() is second

    clock.now = second.expires_at + timedelta(milliseconds=1)
    assert store.most_recent_active() is None
    assert first.id in store


def test_most_recent_active_skips_expired(store: SessionStore, clock, sales: list) -> None:
    old = store.create(sales, [])
    clock.advance(days=1)
    newer = store.create(sales, [])
    clock.advance(days=1, seconds=1)

    assert old.is_expired(clock.now)
    assert store.most_recent_active() is newer


def test_most_recent_active_tie_goes_to_last_inserted(store: SessionStore, sales: list) -> None:
    store.create(sales, [])
    last = store.create(sales, [])

    assert store.most_recent_active() is last


def test_sweep_removes_only_expired(store: SessionStore, clock, sales: list) -> None:
    old = store.create(sales, [])
    clock.advance(days=1)
    fresh = store.create(sales, [])
    clock.advance(days=1, milliseconds=1)

    assert store.sweep() == 1
    assert old.id not in store
    assert fresh.id in store
    assert store.sweep() == 0


def test_create_retries_on_id_collision(clock, sales: list) -> None:
    ids = iter(["dup", "dup", "other"])
    store = SessionStore(clock=clock, id_factory=lambda: next(ids))

    first = store.create(sales, [])
    second = store.create(sales, [])

    assert first.id == "dup"
    assert second.id == "other"


def test_generated_ids_are_unique_and_long() -> None:
    ids = {generate_session_id() for _ in range(1000)}

    assert len(ids) == 1000
    assert all(len(session_id) >= 22 for session_id in ids)


def test_concurrent_creates_produce_distinct_sessions(store: SessionStore, sales: list) -> None:
    created = []

    def worker() -> None:
        for _ in range(50):
            created.append(store.create(sales, []).id)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(set(created)) == 400
    assert len(store) == 400


def test_run_sweeper_sweeps_periodically(store: SessionStore, clock, sales: list) -> None:
    session = store.create(sales, [])
    clock.advance(days=3)

    async def run() -> None:
        task = asyncio.create_task(store.run_sweeper(0.01))
        await asyncio.sleep(0.05)
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    asyncio.run(run())

    assert session.id not in store


def test_delete(store: SessionStore, sales: list) -> None:
    session = store.create(sales, [])

    assert store.delete(session.id) is True
    assert store.delete(session.id) is False
    assert store.get(session.id) is None


def test_append_to_live_session(store: SessionStore, clock, sales: list) -> None:
    session = store.create(sales, [])

    entry = store.append(session, "question", "hola")

    assert entry.timestamp == clock.now.isoformat()
    assert len(session.conversation) == 1


def test_append_after_sweep_is_rejected(store: SessionStore, clock, sales: list) -> None:
    session = store.create(sales, [])
    store.append(session, "question", "hola")
    clock.advance(days=2, seconds=1)
    store.sweep()

    with pytest.raises(NotFoundError):
        store.append(session, "response", "tarde")

    assert len(session.conversation) == 1


def test_append_to_expired_session_is_rejected(store: SessionStore, clock, sales: list) -> None:
    session = store.create(sales, [])
    clock.advance(days=3)

    with pytest.raises(NotFoundError):
        store.append(session, "question", "hola")
