"""In-memory session store.

Holds serialised records in a dict with the same conditional-write and
expiry semantics as the Redis store.  Data is lost when the process
exits; useful for tests and local prototyping.

Classes
-------
- InMemorySessionStore  — dict-backed ``SessionStore``
"""
from __future__ import annotations

import asyncio
import logging
import math
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable

from kvsession.session.key import SessionKey
from kvsession.session.serializer import MalformedStateError, StateSerializer
from kvsession.session.session import Session
from kvsession.store.base import (
    SessionAbsentError,
    SessionExistsError,
    SessionNotFoundError,
    SessionStore,
    StoreSerializationError,
    TtlLike,
)
from kvsession.store.commands import ttl_seconds
from kvsession.store.configuration import StoreConfiguration

logger = logging.getLogger(__name__)


@dataclass
class _Record:
    body: str
    expires_at: float | None


class InMemorySessionStore(SessionStore):
    """Ephemeral ``SessionStore`` backed by a Python dict.

    An ``asyncio.Lock`` makes each conditional write atomic with respect
    to other coroutines.  Expired records are purged lazily on access.

    Parameters
    ----------
    configuration:
        Record-key mapping.  Defaults to the session key verbatim.
    clock:
        Monotonic clock returning seconds.  Defaults to ``time.monotonic``;
        tests inject a fake clock to exercise expiry without sleeping.
    """

    def __init__(
        self,
        configuration: StoreConfiguration | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = configuration or StoreConfiguration()
        self._clock = clock
        self._records: dict[str, _Record] = {}
        self._serializer = StateSerializer()
        self._lock: asyncio.Lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _live(self, record_key: str) -> _Record | None:
        """Return the record for ``record_key`` unless it has expired."""
        record = self._records.get(record_key)
        if record is None:
            return None
        if record.expires_at is not None and record.expires_at <= self._clock():
            del self._records[record_key]
            return None
        return record

    def _new_record(self, session: Session, ttl: TtlLike) -> _Record:
        seconds = ttl_seconds(ttl)
        expires_at = None if seconds is None else self._clock() + seconds
        return _Record(self._serializer.to_json(session.state), expires_at)

    # ------------------------------------------------------------------
    # SessionStore interface
    # ------------------------------------------------------------------

    async def load(self, key: SessionKey) -> Session | None:
        record_key = self._config.record_key(key)
        async with self._lock:
            record = self._live(record_key)
        if record is None:
            return None
        try:
            state = self._serializer.from_json(record.body)
        except MalformedStateError as exc:
            raise StoreSerializationError(record_key, exc.cause) from exc
        return Session.from_state(key, state)

    async def save(self, session: Session, ttl: TtlLike) -> None:
        record_key = self._config.record_key(session.id)
        record = self._new_record(session, ttl)
        async with self._lock:
            if self._live(record_key) is not None:
                raise SessionExistsError(record_key)
            self._records[record_key] = record
        logger.debug("InMemorySessionStore: created %r", session.id)

    async def update(self, session: Session, ttl: TtlLike) -> None:
        record_key = self._config.record_key(session.id)
        record = self._new_record(session, ttl)
        async with self._lock:
            if self._live(record_key) is None:
                raise SessionAbsentError(record_key)
            self._records[record_key] = record
        logger.debug("InMemorySessionStore: updated %r", session.id)

    async def destroy(self, key: SessionKey) -> None:
        async with self._lock:
            self._records.pop(self._config.record_key(key), None)
        logger.debug("InMemorySessionStore: destroyed %r", key)

    async def exists(self, key: SessionKey) -> bool:
        async with self._lock:
            return self._live(self._config.record_key(key)) is not None

    async def ttl(self, key: SessionKey) -> timedelta | None:
        record_key = self._config.record_key(key)
        async with self._lock:
            record = self._live(record_key)
        if record is None:
            raise SessionNotFoundError(record_key)
        if record.expires_at is None:
            return None
        # Whole seconds, rounded half up, as Redis reports them.
        return timedelta(seconds=math.floor(record.expires_at - self._clock() + 0.5))

    # ------------------------------------------------------------------
    # Extras
    # ------------------------------------------------------------------

    def clear(self) -> None:
        """Remove all stored records."""
        self._records.clear()

    def purge_expired(self) -> int:
        """Drop every expired record and return how many were removed."""
        now = self._clock()
        expired = [
            record_key
            for record_key, record in self._records.items()
            if record.expires_at is not None and record.expires_at <= now
        ]
        for record_key in expired:
            del self._records[record_key]
        return len(expired)

    def __len__(self) -> int:
        """Number of live records."""
        self.purge_expired()
        return len(self._records)

    def __repr__(self) -> str:
        return f"InMemorySessionStore(records={len(self)})"


__all__ = ["InMemorySessionStore"]
