"""In-memory session: a key plus typed access to its raw field map.

Each field is serialised independently to JSON text.  Types are chosen
by the caller at the access site and validated with pydantic, so any
type pydantic understands (builtins, generics, dataclasses, models)
can be stored.

Classes
-------
- SessionError           — root of session field failures
- SerializationError     — a value could not be encoded
- DeserializationError   — a stored value did not decode as the requested type
- SessionDestroyedError  — mutation attempted on a destroyed session model
- Session                — ``Storage[str]`` over a ``SessionState``
"""
from __future__ import annotations

from typing import Any

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_json

from kvsession.session.key import SessionKey
from kvsession.session.state import SessionState
from kvsession.storage.base import Storage, StorageError


class SessionError(StorageError):
    """Base class for failures raised while accessing session fields."""


class SerializationError(SessionError):
    """Raised when a value cannot be serialised for storage under ``field``."""

    def __init__(self, field: str, cause: str) -> None:
        self.field = field
        self.cause = cause
        super().__init__(f"Unable to serialize key {field!r} value: {cause}")


class DeserializationError(SessionError):
    """Raised when the raw value under ``field`` does not decode as requested."""

    def __init__(self, field: str, cause: str) -> None:
        self.field = field
        self.cause = cause
        super().__init__(f"Unable to deserialize key {field!r} value: {cause}")


class SessionDestroyedError(SessionError):
    """Raised when a destroyed session model is mutated or saved."""

    def __init__(self, key: SessionKey) -> None:
        self.key = key
        super().__init__("Session is destroyed")


def _decode(field: str, raw: str, type_: Any) -> Any:
    try:
        return TypeAdapter(type_).validate_json(raw, strict=True)
    except ValidationError as exc:
        raise DeserializationError(field, str(exc)) from exc


class Session(Storage[str]):
    """A session key paired with its field map.

    The key is fixed at construction.  The state is only changed through
    ``insert`` and ``remove``, which serialise on the caller's behalf.

    Parameters
    ----------
    key:
        Identifier of the session.  A fresh random key when omitted.
    state:
        Previously loaded state.  An empty state when omitted.
    """

    def __init__(
        self,
        key: SessionKey | None = None,
        state: SessionState | None = None,
    ) -> None:
        self._id = key if key is not None else SessionKey.generate()
        self._state = state if state is not None else SessionState()

    @property
    def id(self) -> SessionKey:
        return self._id

    @property
    def state(self) -> SessionState:
        """The live state; mutating it bypasses typed access."""
        return self._state

    # ------------------------------------------------------------------
    # Storage interface
    # ------------------------------------------------------------------

    def insert(self, key: str, value: Any, *, type_: Any = None) -> Any:
        """Serialise ``value`` into field ``key``.

        The previous value, if any, is decoded as ``type_`` (defaults to
        ``type(value)``) and returned.  The state is left unchanged when
        either step fails.

        Raises
        ------
        SerializationError
            If ``value`` cannot be encoded as JSON.
        DeserializationError
            If the previous raw value does not decode as ``type_``.
        """
        try:
            raw = to_json(value).decode("utf-8")
        except PydanticSerializationError as exc:
            raise SerializationError(key, str(exc)) from exc

        previous_raw = self._state.get(key)
        previous = None
        if previous_raw is not None:
            previous = _decode(key, previous_raw, type_ if type_ is not None else type(value))
        self._state.insert(key, raw)
        return previous

    def remove(self, key: str, type_: Any = Any) -> Any:
        """Remove field ``key`` and return its value decoded as ``type_``.

        The field is kept when decoding fails.
        """
        raw = self._state.get(key)
        if raw is None:
            return None
        value = _decode(key, raw, type_)
        self._state.remove(key)
        return value

    def get(self, key: str, type_: Any = Any) -> Any:
        """Return field ``key`` decoded as ``type_``, or None if absent.

        Raises
        ------
        DeserializationError
            If the stored value does not decode as ``type_``.
        """
        raw = self._state.get(key)
        if raw is None:
            return None
        return _decode(key, raw, type_)

    def contains_key(self, key: str) -> bool:
        return self._state.contains_key(key)

    # ------------------------------------------------------------------
    # Conversions
    # ------------------------------------------------------------------

    @classmethod
    def from_state(cls, key: SessionKey, state: SessionState) -> Session:
        """Reconstitute a session previously loaded from a store."""
        return cls(key, state)

    def to_state(self) -> SessionState:
        """Return a detached copy of the state for handoff to storage."""
        return self._state.copy_state()

    def __repr__(self) -> str:
        return f"Session(id={self._id!r}, fields={self._state.fields()!r})"


__all__ = [
    "DeserializationError",
    "SerializationError",
    "Session",
    "SessionDestroyedError",
    "SessionError",
]
