"""Session store subpackage.

All stores implement the async ``SessionStore`` ABC.

Public surface
--------------
- SessionStore          — abstract base class
- RedisSessionStore     — Redis backend over ``redis.asyncio``
- InMemorySessionStore  — in-process dict (useful for testing)
- StoreConfiguration    — record-key mapping
"""
from __future__ import annotations

from kvsession.store.base import (
    BackendError,
    QueryError,
    SessionAbsentError,
    SessionExistsError,
    SessionNotFoundError,
    SessionStore,
    StoreConnectionError,
    StoreError,
    StoreSerializationError,
    TtlLike,
)
from kvsession.store.configuration import StoreConfiguration
from kvsession.store.memory import InMemorySessionStore
from kvsession.store.redis import RedisSessionStore

__all__ = [
    "BackendError",
    "InMemorySessionStore",
    "QueryError",
    "RedisSessionStore",
    "SessionAbsentError",
    "SessionExistsError",
    "SessionNotFoundError",
    "SessionStore",
    "StoreConfiguration",
    "StoreConnectionError",
    "StoreError",
    "StoreSerializationError",
    "TtlLike",
]
