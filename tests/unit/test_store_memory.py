"""Unit tests for kvsession.store.memory.InMemorySessionStore.

Exercises the store contract shared with the Redis backend: create-only
save, update-only update, idempotent destroy, and expiry, using the
``FakeClock`` from conftest so no test sleeps.
"""
from __future__ import annotations

import asyncio
from datetime import timedelta

import pytest

from kvsession.session.key import SessionKey
from kvsession.session.session import Session
from kvsession.store.base import (
    SessionAbsentError,
    SessionExistsError,
    SessionNotFoundError,
    StoreSerializationError,
)
from kvsession.store.configuration import StoreConfiguration
from kvsession.store.memory import InMemorySessionStore, _Record


def _session(**fields: object) -> Session:
    session = Session()
    for name, value in fields.items():
        session.insert(name, value)
    return session


# ---------------------------------------------------------------------------
# save / load
# ---------------------------------------------------------------------------


class TestInMemoryStoreSaveLoad:
    @pytest.mark.asyncio
    async def test_create_then_load(self, store: InMemorySessionStore) -> None:
        session = _session(user_id="abc-123")
        await store.save(session, timedelta(seconds=1))
        loaded = await store.load(session.id)
        assert loaded is not None
        assert loaded.get("user_id", str) == "abc-123"

    @pytest.mark.asyncio
    async def test_load_absent_returns_none(self, store: InMemorySessionStore) -> None:
        assert await store.load(SessionKey.generate()) is None

    @pytest.mark.asyncio
    async def test_loaded_session_is_independent_copy(
        self, store: InMemorySessionStore
    ) -> None:
        session = _session(n=1)
        await store.save(session, 60)
        session.insert("n", 2)
        loaded = await store.load(session.id)
        assert loaded is not None
        assert loaded.get("n", int) == 1

    @pytest.mark.asyncio
    async def test_double_create_fails(self, store: InMemorySessionStore) -> None:
        session = _session()
        await store.save(session, 60)
        with pytest.raises(SessionExistsError):
            await store.save(session, 60)

    @pytest.mark.asyncio
    async def test_concurrent_creates_have_one_winner(
        self, store: InMemorySessionStore
    ) -> None:
        key = SessionKey.generate()
        first = Session(key)
        first.insert("owner", "first")
        second = Session(key)
        second.insert("owner", "second")
        results = await asyncio.gather(
            store.save(first, 60), store.save(second, 60), return_exceptions=True
        )
        errors = [r for r in results if isinstance(r, Exception)]
        assert len(errors) == 1
        assert isinstance(errors[0], SessionExistsError)

    @pytest.mark.asyncio
    async def test_malformed_record_raises(self, store: InMemorySessionStore) -> None:
        key = SessionKey.generate()
        store._records[key.value] = _Record("[]", None)
        with pytest.raises(StoreSerializationError):
            await store.load(key)


# ---------------------------------------------------------------------------
# update
# ---------------------------------------------------------------------------


class TestInMemoryStoreUpdate:
    @pytest.mark.asyncio
    async def test_update_overwrites(self, store: InMemorySessionStore) -> None:
        session = _session(user_id="beavis")
        await store.save(session, 60)
        session.insert("user_id", "butt-head")
        await store.update(session, 60)
        loaded = await store.load(session.id)
        assert loaded is not None
        assert loaded.get("user_id", str) == "butt-head"

    @pytest.mark.asyncio
    async def test_update_without_create_fails(self, store: InMemorySessionStore) -> None:
        with pytest.raises(SessionAbsentError):
            await store.update(_session(), 60)
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_update_refreshes_ttl(self, store: InMemorySessionStore, clock) -> None:
        session = _session()
        await store.save(session, 10)
        clock.advance(8)
        await store.update(session, 10)
        clock.advance(8)
        assert await store.exists(session.id)
        assert await store.ttl(session.id) == timedelta(seconds=2)


# ---------------------------------------------------------------------------
# destroy / exists
# ---------------------------------------------------------------------------


class TestInMemoryStoreDestroyExists:
    @pytest.mark.asyncio
    async def test_exists_reflects_lifecycle(self, store: InMemorySessionStore) -> None:
        session = _session()
        assert await store.exists(session.id) is False
        await store.save(session, 60)
        assert await store.exists(session.id) is True
        await store.destroy(session.id)
        assert await store.exists(session.id) is False

    @pytest.mark.asyncio
    async def test_destroy_absent_is_not_an_error(self, store: InMemorySessionStore) -> None:
        await store.destroy(SessionKey.generate())

    @pytest.mark.asyncio
    async def test_save_after_destroy_creates_again(
        self, store: InMemorySessionStore
    ) -> None:
        session = _session()
        await store.save(session, 60)
        await store.destroy(session.id)
        await store.save(session, 60)
        assert await store.exists(session.id)


# ---------------------------------------------------------------------------
# ttl / expiry
# ---------------------------------------------------------------------------


class TestInMemoryStoreTtl:
    @pytest.mark.asyncio
    async def test_ttl_counts_down(self, store: InMemorySessionStore, clock) -> None:
        session = _session()
        await store.save(session, timedelta(minutes=1))
        clock.advance(15.5)
        assert await store.ttl(session.id) == timedelta(seconds=45)

    @pytest.mark.asyncio
    async def test_ttl_rounds_to_nearest_second(
        self, store: InMemorySessionStore, clock
    ) -> None:
        session = _session()
        await store.save(session, timedelta(seconds=10))
        clock.advance(0.2)
        assert await store.ttl(session.id) == timedelta(seconds=10)
        clock.advance(0.4)
        assert await store.ttl(session.id) == timedelta(seconds=9)

    @pytest.mark.asyncio
    async def test_fresh_one_second_record_reports_one(
        self, store: InMemorySessionStore
    ) -> None:
        session = _session()
        await store.save(session, 1)
        assert await store.ttl(session.id) == timedelta(seconds=1)

    @pytest.mark.asyncio
    async def test_nearly_expired_record_reports_zero(
        self, store: InMemorySessionStore, clock
    ) -> None:
        session = _session()
        await store.save(session, 1)
        clock.advance(0.7)
        assert await store.ttl(session.id) == timedelta(0)
        assert await store.exists(session.id)

    @pytest.mark.asyncio
    async def test_record_without_expiry(self, store: InMemorySessionStore, clock) -> None:
        session = _session()
        await store.save(session, None)
        clock.advance(10_000)
        assert await store.ttl(session.id) is None
        assert await store.exists(session.id)

    @pytest.mark.asyncio
    async def test_ttl_of_absent_raises(self, store: InMemorySessionStore) -> None:
        with pytest.raises(SessionNotFoundError):
            await store.ttl(SessionKey.generate())

    @pytest.mark.asyncio
    async def test_expired_record_is_gone(self, store: InMemorySessionStore, clock) -> None:
        session = _session(user_id="abc-123")
        await store.save(session, timedelta(seconds=1))
        clock.advance(1.5)
        assert await store.load(session.id) is None
        assert await store.exists(session.id) is False

    @pytest.mark.asyncio
    async def test_expired_record_can_be_created_again(
        self, store: InMemorySessionStore, clock
    ) -> None:
        session = _session()
        await store.save(session, 1)
        clock.advance(2)
        await store.save(session, 1)

    @pytest.mark.asyncio
    async def test_update_of_expired_record_fails(
        self, store: InMemorySessionStore, clock
    ) -> None:
        session = _session()
        await store.save(session, 1)
        clock.advance(2)
        with pytest.raises(SessionAbsentError):
            await store.update(session, 1)


# ---------------------------------------------------------------------------
# Configuration and extras
# ---------------------------------------------------------------------------


class TestInMemoryStoreExtras:
    @pytest.mark.asyncio
    async def test_records_use_configured_key(self, clock) -> None:
        store = InMemorySessionStore(StoreConfiguration.with_prefix("ns:"), clock=clock)
        session = _session()
        await store.save(session, 60)
        assert list(store._records) == [f"ns:{session.id.value}"]

    @pytest.mark.asyncio
    async def test_clear(self, store: InMemorySessionStore) -> None:
        await store.save(_session(), 60)
        store.clear()
        assert len(store) == 0

    def test_repr(self, store: InMemorySessionStore) -> None:
        assert "records=0" in repr(store)

    @pytest.mark.asyncio
    async def test_len_excludes_expired_records(
        self, store: InMemorySessionStore, clock
    ) -> None:
        await store.save(_session(), 1)
        await store.save(_session(), 60)
        assert len(store) == 2
        clock.advance(2)
        assert len(store) == 1
        assert "records=1" in repr(store)

    @pytest.mark.asyncio
    async def test_purge_expired_returns_count(
        self, store: InMemorySessionStore, clock
    ) -> None:
        await store.save(_session(), 1)
        await store.save(_session(), None)
        clock.advance(5)
        assert store.purge_expired() == 1
        assert len(store._records) == 1
