"""kvsession — Key-addressed session storage with conditional writes.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import kvsession
>>> kvsession.__version__
'0.1.0'
"""
from __future__ import annotations

# Session core
from kvsession.session.key import InvalidSessionKeyError, SessionKey
from kvsession.session.serializer import MalformedStateError, StateSerializer
from kvsession.session.session import (
    DeserializationError,
    SerializationError,
    Session,
    SessionDestroyedError,
    SessionError,
)
from kvsession.session.state import SessionState
from kvsession.session.status import SessionStatus

# Typed storage capability
from kvsession.storage.base import Storage, StorageError

# Stores
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
)
from kvsession.store.configuration import StoreConfiguration
from kvsession.store.memory import InMemorySessionStore
from kvsession.store.redis import RedisSessionStore

# Model
from kvsession.model import SessionModel

__version__: str = "0.1.0"

__all__ = [
    "__version__",
    # Session core
    "DeserializationError",
    "InvalidSessionKeyError",
    "MalformedStateError",
    "SerializationError",
    "Session",
    "SessionDestroyedError",
    "SessionError",
    "SessionKey",
    "SessionState",
    "SessionStatus",
    "StateSerializer",
    # Storage
    "Storage",
    "StorageError",
    # Stores
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
    # Model
    "SessionModel",
]
