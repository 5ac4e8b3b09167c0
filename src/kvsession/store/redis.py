"""Redis session store.

Each session is stored as a Redis string holding its JSON state under
the record key produced by ``StoreConfiguration``.  Creates use
``SET ... NX`` and updates ``SET ... XX`` so that concurrent writers
are arbitrated by the server in a single round trip.

Classes
-------
- RedisSessionStore  — ``SessionStore`` over a ``redis.asyncio`` client
"""
from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any

import redis.asyncio as redis_asyncio
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError

from kvsession.session.key import SessionKey
from kvsession.session.serializer import MalformedStateError, StateSerializer
from kvsession.session.session import Session
from kvsession.store import commands
from kvsession.store.base import (
    BackendError,
    QueryError,
    SessionAbsentError,
    SessionExistsError,
    SessionNotFoundError,
    SessionStore,
    StoreConnectionError,
    StoreSerializationError,
    TtlLike,
)
from kvsession.store.configuration import StoreConfiguration

logger = logging.getLogger(__name__)

# TTL replies for keys without an expiry and for missing keys.
_TTL_NO_EXPIRY: int = -1
_TTL_NO_KEY: int = -2


def _is_ok(reply: Any) -> bool:
    return reply is True or reply in ("OK", b"OK")


class RedisSessionStore(SessionStore):
    """Persists sessions in Redis through one shared async client.

    The client is safe for concurrent use by many coroutines, so a single
    store instance can serve every request in the process.

    Parameters
    ----------
    client:
        A connected ``redis.asyncio.Redis`` client.  Use ``connect()`` to
        build one from a URL.
    configuration:
        Record-key mapping.  Defaults to the session key verbatim.
    serializer:
        State serializer.  Defaults to ``StateSerializer()``.
    """

    def __init__(
        self,
        client: redis_asyncio.Redis,
        configuration: StoreConfiguration | None = None,
        serializer: StateSerializer | None = None,
    ) -> None:
        self._client = client
        self._config = configuration or StoreConfiguration()
        self._serializer = serializer or StateSerializer()

    @classmethod
    async def connect(
        cls,
        url: str,
        configuration: StoreConfiguration | None = None,
        **client_options: Any,
    ) -> RedisSessionStore:
        """Open a client for ``url`` and verify it with ``PING``.

        Extra keyword arguments are passed to ``Redis.from_url`` (for
        example ``socket_timeout``).

        Raises
        ------
        StoreConnectionError
            If the URL is invalid or the server cannot be reached.
        """
        try:
            client = redis_asyncio.Redis.from_url(url, decode_responses=True, **client_options)
        except ValueError as exc:
            raise StoreConnectionError(f"Redis connection error: {exc}") from exc
        try:
            await client.ping()
        except RedisError as exc:
            await client.aclose()
            raise StoreConnectionError(f"Redis connection error: {exc}") from exc
        logger.debug("RedisSessionStore: connected")
        return cls(client, configuration)

    @property
    def configuration(self) -> StoreConfiguration:
        return self._config

    async def aclose(self) -> None:
        """Close the underlying client and release its connections."""
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _execute(self, command: commands.Command) -> Any:
        """Dispatch ``command`` and map client failures to store errors."""
        try:
            return await self._client.execute_command(*command.args)
        except (RedisConnectionError, RedisTimeoutError) as exc:
            raise StoreConnectionError(f"Redis connection error: {exc}") from exc
        except RedisError as exc:
            raise QueryError(f"Redis query error: {exc}") from exc

    # ------------------------------------------------------------------
    # SessionStore interface
    # ------------------------------------------------------------------

    async def load(self, key: SessionKey) -> Session | None:
        record_key = self._config.record_key(key)
        value = await self._execute(commands.Get(record_key))
        if value is None:
            logger.debug("RedisSessionStore: no record for %r", key)
            return None
        try:
            state = self._serializer.from_json(value)
        except MalformedStateError as exc:
            raise StoreSerializationError(record_key, exc.cause) from exc
        logger.debug("RedisSessionStore: loaded %r (%d fields)", key, len(state))
        return Session.from_state(key, state)

    async def save(self, session: Session, ttl: TtlLike) -> None:
        record_key = self._config.record_key(session.id)
        body = self._serializer.to_json(session.state)
        reply = await self._execute(
            commands.Set(record_key, body, commands.ttl_seconds(ttl))
        )
        if reply is None:
            raise SessionExistsError(record_key)
        if not _is_ok(reply):
            raise BackendError(f"Save returned invalid response data: {reply!r}")
        logger.debug("RedisSessionStore: created %r", session.id)

    async def update(self, session: Session, ttl: TtlLike) -> None:
        record_key = self._config.record_key(session.id)
        body = self._serializer.to_json(session.state)
        reply = await self._execute(
            commands.Update(record_key, body, commands.ttl_seconds(ttl))
        )
        if reply is None:
            raise SessionAbsentError(record_key)
        if not _is_ok(reply):
            raise BackendError(f"Update returned invalid response data: {reply!r}")
        logger.debug("RedisSessionStore: updated %r", session.id)

    async def destroy(self, key: SessionKey) -> None:
        deleted = await self._execute(commands.Delete(self._config.record_key(key)))
        logger.debug("RedisSessionStore: destroyed %r (deleted=%r)", key, deleted)

    async def exists(self, key: SessionKey) -> bool:
        count = await self._execute(commands.Exists(self._config.record_key(key)))
        return int(count) > 0

    async def ttl(self, key: SessionKey) -> timedelta | None:
        record_key = self._config.record_key(key)
        seconds = int(await self._execute(commands.Ttl(record_key)))
        if seconds == _TTL_NO_KEY:
            raise SessionNotFoundError(record_key)
        if seconds == _TTL_NO_EXPIRY:
            return None
        if seconds < 0:
            raise BackendError(f"TTL returned invalid response data: {seconds!r}")
        return timedelta(seconds=seconds)

    def __repr__(self) -> str:
        return f"RedisSessionStore(key_prefix={self._config.key_prefix!r})"


__all__ = ["RedisSessionStore"]
