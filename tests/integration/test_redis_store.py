"""Integration tests for RedisSessionStore against a live server.

Skipped unless ``KVSESSION_TEST_REDIS_URL`` points at a Redis instance,
e.g. ``redis://localhost:6379/15``.  Every test namespaces its records
under a unique prefix and removes them afterwards.
"""
from __future__ import annotations

import asyncio
import os
import uuid
from collections.abc import AsyncIterator
from datetime import timedelta

import pytest
import pytest_asyncio

from kvsession.model import SessionModel
from kvsession.session.key import SessionKey
from kvsession.session.session import Session
from kvsession.store.base import SessionAbsentError, SessionExistsError
from kvsession.store.configuration import StoreConfiguration
from kvsession.store.redis import RedisSessionStore

_REDIS_URL = os.environ.get("KVSESSION_TEST_REDIS_URL")

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(not _REDIS_URL, reason="KVSESSION_TEST_REDIS_URL not set"),
]


@pytest_asyncio.fixture()
async def store() -> AsyncIterator[RedisSessionStore]:
    prefix = f"kvsession-test:{uuid.uuid4().hex}:"
    redis_store = await RedisSessionStore.connect(
        _REDIS_URL or "", StoreConfiguration.with_prefix(prefix)
    )
    created: list[SessionKey] = []
    redis_store.created = created  # type: ignore[attr-defined]
    try:
        yield redis_store
    finally:
        for key in created:
            await redis_store.destroy(key)
        await redis_store.aclose()


def _session(store: RedisSessionStore, **fields: object) -> Session:
    session = Session()
    for name, value in fields.items():
        session.insert(name, value)
    store.created.append(session.id)  # type: ignore[attr-defined]
    return session


@pytest.mark.asyncio
async def test_create_then_load(store: RedisSessionStore) -> None:
    session = _session(store, user_id="abc-123")
    await store.save(session, timedelta(seconds=1))
    loaded = await store.load(session.id)
    assert loaded is not None
    assert loaded.get("user_id", str) == "abc-123"


@pytest.mark.asyncio
async def test_update_overwrites(store: RedisSessionStore) -> None:
    session = _session(store, user_id="beavis")
    await store.save(session, 10)
    session.insert("user_id", "butt-head")
    await store.update(session, 10)
    loaded = await store.load(session.id)
    assert loaded is not None
    assert loaded.get("user_id", str) == "butt-head"


@pytest.mark.asyncio
async def test_update_without_create_fails(store: RedisSessionStore) -> None:
    with pytest.raises(SessionAbsentError):
        await store.update(_session(store), 10)


@pytest.mark.asyncio
async def test_double_create_fails(store: RedisSessionStore) -> None:
    session = _session(store)
    results = await asyncio.gather(
        store.save(session, 10), store.save(session, 10), return_exceptions=True
    )
    assert sum(isinstance(r, SessionExistsError) for r in results) == 1


@pytest.mark.asyncio
async def test_exists_and_destroy(store: RedisSessionStore) -> None:
    session = _session(store)
    assert await store.exists(session.id) is False
    await store.save(session, 10)
    assert await store.exists(session.id) is True
    await store.destroy(session.id)
    assert await store.exists(session.id) is False
    await store.destroy(session.id)


@pytest.mark.asyncio
async def test_ttl_reported(store: RedisSessionStore) -> None:
    session = _session(store)
    await store.save(session, 100)
    remaining = await store.ttl(session.id)
    assert remaining is not None
    assert timedelta(seconds=95) <= remaining <= timedelta(seconds=100)


@pytest.mark.asyncio
async def test_record_expires(store: RedisSessionStore) -> None:
    session = _session(store, user_id="abc-123")
    await store.save(session, timedelta(seconds=1))
    await asyncio.sleep(2.5)
    assert await store.load(session.id) is None


@pytest.mark.asyncio
async def test_model_round_trip(store: RedisSessionStore) -> None:
    model = SessionModel(store, timedelta(seconds=10))
    store.created.append(model.id)  # type: ignore[attr-defined]
    model.insert("user_id", "beavis")
    await model.save()
    model.insert("user_id", "butt-head")
    await model.save()

    loaded = await SessionModel.load(store, model.id)
    assert loaded is not None
    assert loaded.get("user_id", str) == "butt-head"
    await loaded.destroy()
    assert not await store.exists(model.id)
