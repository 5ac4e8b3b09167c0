"""Session model: a working copy of one session bound to a store.

``SessionModel`` decides *intent* (create or update) with an ``exists``
probe, while the store's conditional write decides *outcome*.  The two
round trips in ``save`` are not a transaction: when two models race on
the same key, the loser's write is rejected by the backend and the
error reaches the caller.

Classes
-------
- SessionModel  — ``Storage[str]`` facade over a ``Session`` and a ``SessionStore``
"""
from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any

from kvsession.session.key import SessionKey
from kvsession.session.session import Session, SessionDestroyedError
from kvsession.session.status import SessionStatus
from kvsession.storage.base import Storage
from kvsession.store.base import SessionNotFoundError, SessionStore, TtlLike
from kvsession.store.commands import ttl_seconds

logger = logging.getLogger(__name__)

# Redis reports a live record with under half a second left as 0.
_MIN_LOADED_TTL = timedelta(seconds=1)


class SessionModel(Storage[str]):
    """Owns a ``Session`` and persists it through a borrowed store.

    Nothing is written until ``save`` or ``destroy`` is awaited.

    Parameters
    ----------
    store:
        The backend the session belongs to.  It is not closed by the model.
    ttl:
        Time-to-live applied on every save.  ``None`` writes records
        without expiry.  A non-positive TTL raises ``ValueError``.
    session:
        Existing session to wrap.  A fresh session when omitted.
    """

    def __init__(
        self,
        store: SessionStore,
        ttl: TtlLike,
        session: Session | None = None,
    ) -> None:
        ttl_seconds(ttl)
        self._store = store
        self._ttl = ttl
        self._session = session if session is not None else Session()
        self._status = SessionStatus.UNCHANGED
        self._bound = False

    @classmethod
    async def load(cls, store: SessionStore, key: SessionKey) -> SessionModel | None:
        """Return a model for the record stored under ``key``, or None.

        The model's TTL is the record's remaining time-to-live, raised to
        one second for a record that is about to expire so it can still be
        saved.
        """
        session = await store.load(key)
        if session is None:
            return None
        try:
            ttl = await store.ttl(key)
        except SessionNotFoundError:
            # Expired between the two round trips.
            return None
        if ttl is not None and ttl < _MIN_LOADED_TTL:
            ttl = _MIN_LOADED_TTL
        model = cls(store, ttl, session)
        model._bound = True
        logger.debug("SessionModel: loaded %r (ttl=%r)", key, ttl)
        return model

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def id(self) -> SessionKey:
        return self._session.id

    @property
    def session(self) -> Session:
        return self._session

    @property
    def ttl(self) -> TtlLike:
        return self._ttl

    @ttl.setter
    def ttl(self, value: TtlLike) -> None:
        ttl_seconds(value)
        self._ttl = value

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def is_bound(self) -> bool:
        """True once the model was loaded from, or saved to, the store."""
        return self._bound

    def into_session(self) -> Session:
        return self._session

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    async def save(self) -> None:
        """Create the record if it does not exist, otherwise update it.

        Raises
        ------
        SessionDestroyedError
            If ``destroy`` was already called on this model.
        SessionExistsError
            If another writer created the record after the probe.
        SessionAbsentError
            If the record vanished (expired or destroyed) after the probe.
        """
        if self._status is SessionStatus.DESTROYED:
            raise SessionDestroyedError(self.id)
        if await self._store.exists(self.id):
            await self._store.update(self._session, self._ttl)
            logger.debug("SessionModel: updated %r", self.id)
        else:
            await self._store.save(self._session, self._ttl)
            logger.debug("SessionModel: created %r", self.id)
        self._status = SessionStatus.UNCHANGED
        self._bound = True

    async def destroy(self) -> None:
        """Delete the backing record; the model cannot be saved afterwards."""
        await self._store.destroy(self.id)
        self._status = SessionStatus.DESTROYED
        logger.debug("SessionModel: destroyed %r", self.id)

    async def remaining_ttl(self) -> timedelta | None:
        """Query the store for the record's current time-to-live."""
        return await self._store.ttl(self.id)

    # ------------------------------------------------------------------
    # Storage interface
    # ------------------------------------------------------------------

    def _ensure_mutable(self) -> None:
        if self._status is SessionStatus.DESTROYED:
            raise SessionDestroyedError(self.id)

    def insert(self, key: str, value: Any, *, type_: Any = None) -> Any:
        self._ensure_mutable()
        previous = self._session.insert(key, value, type_=type_)
        self._status = SessionStatus.CHANGED
        return previous

    def remove(self, key: str, type_: Any = Any) -> Any:
        self._ensure_mutable()
        present = self._session.contains_key(key)
        value = self._session.remove(key, type_)
        if present:
            self._status = SessionStatus.CHANGED
        return value

    def get(self, key: str, type_: Any = Any) -> Any:
        return self._session.get(key, type_)

    def contains_key(self, key: str) -> bool:
        return self._session.contains_key(key)

    def __repr__(self) -> str:
        return (
            f"SessionModel(id={self.id!r}, status={self._status.value!r}, "
            f"ttl={self._ttl!r})"
        )


__all__ = ["SessionModel"]
