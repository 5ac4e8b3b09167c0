"""Session data model: keys, raw state, and typed field access."""
from __future__ import annotations

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

__all__ = [
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
]
