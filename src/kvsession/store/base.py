"""Abstract session store and its error taxonomy.

A ``SessionStore`` persists exactly one session per call, addressed by
its ``SessionKey``.  Writes are existence-conditional: ``save`` only
creates and ``update`` only overwrites, and the backend enforces the
condition atomically rather than relying on a prior ``exists`` probe.

Classes
-------
- StoreError               — root of all backend failures
- StoreConnectionError     — the transport could not be established
- QueryError               — a dispatched command failed
- StoreSerializationError  — a stored record could not be encoded/decoded
- BackendError             — the backend returned an unexpected response
- SessionExistsError       — create rejected: the record already exists
- SessionAbsentError       — update rejected: the record does not exist
- SessionNotFoundError     — the queried record does not exist
- SessionStore             — abstract async store
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Union

from kvsession.session.key import SessionKey
from kvsession.session.session import Session

TtlLike = Union[timedelta, int, float, None]


class StoreError(Exception):
    """Base class for failures raised by ``SessionStore`` implementations."""


class StoreConnectionError(StoreError):
    """Raised when a connection to the backend cannot be established."""


class QueryError(StoreError):
    """Raised when a command fails at the transport or protocol level."""


class StoreSerializationError(StoreError):
    """Raised when a session record cannot be encoded or decoded."""

    def __init__(self, key: str, cause: str) -> None:
        self.key = key
        self.cause = cause
        super().__init__(
            f"Unable to serialize or deserialize session from session key {key!r}: {cause}"
        )


class BackendError(StoreError):
    """Raised when the backend answers with a response the contract forbids."""


class SessionExistsError(BackendError):
    """Raised when a create targets a key that already holds a record."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Session record {key!r} already exists")


class SessionAbsentError(BackendError):
    """Raised when an update targets a key that holds no record."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Update returned nil response data for {key!r}: record absent")


class SessionNotFoundError(StoreError, KeyError):
    """Raised when a query needs a record that does not exist."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Session record {key!r} not found")

    def __str__(self) -> str:
        return str(self.args[0])


class SessionStore(ABC):
    """Backend lifecycle contract for session records.

    Every method is a coroutine performing one round trip.  Failures are
    reported as ``StoreError`` subclasses and are never retried here.
    """

    async def aclose(self) -> None:
        """Release backend resources.  No-op unless overridden."""

    async def __aenter__(self) -> SessionStore:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    @abstractmethod
    async def load(self, key: SessionKey) -> Session | None:
        """Return the session stored under ``key``, or None if absent.

        Raises
        ------
        StoreSerializationError
            If the stored record is not a valid session state.
        """

    @abstractmethod
    async def save(self, session: Session, ttl: TtlLike) -> None:
        """Create the record for ``session``; never overwrites.

        Raises
        ------
        SessionExistsError
            If a record already exists for the session's key.
        """

    @abstractmethod
    async def update(self, session: Session, ttl: TtlLike) -> None:
        """Overwrite the existing record for ``session`` and refresh its TTL.

        Raises
        ------
        SessionAbsentError
            If no record exists for the session's key.
        """

    @abstractmethod
    async def destroy(self, key: SessionKey) -> None:
        """Delete the record for ``key``.  Deleting an absent key succeeds."""

    @abstractmethod
    async def exists(self, key: SessionKey) -> bool:
        """Return True if a record exists for ``key``."""

    @abstractmethod
    async def ttl(self, key: SessionKey) -> timedelta | None:
        """Return the remaining time-to-live, or None if the record never expires.

        Raises
        ------
        SessionNotFoundError
            If no record exists for ``key``.
        """


__all__ = [
    "BackendError",
    "QueryError",
    "SessionAbsentError",
    "SessionExistsError",
    "SessionNotFoundError",
    "SessionStore",
    "StoreConnectionError",
    "StoreError",
    "StoreSerializationError",
    "TtlLike",
]
