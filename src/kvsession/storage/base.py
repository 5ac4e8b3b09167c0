"""Generic typed key-value capability.

``Storage`` describes anything that can insert, remove, and fetch typed
values by key.  ``Session`` implements it over its raw field map and
``SessionModel`` delegates to its embedded session, so callers can work
with either without knowing which one they hold.

Classes
-------
- StorageError  — root of all field-access failures
- Storage       — abstract typed key-value container
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

K = TypeVar("K")


class StorageError(Exception):
    """Base class for failures raised by ``Storage`` implementations."""


class Storage(ABC, Generic[K]):
    """Typed access to values addressed by a key of type ``K``.

    Every operation may raise a subclass of ``StorageError``.  Values are
    typed at the access site, not declared up front: ``type_`` tells the
    implementation what shape to decode a stored value into.
    """

    @abstractmethod
    def insert(self, key: K, value: Any, *, type_: Any = None) -> Any:
        """Store ``value`` under ``key``.

        Returns the previous value decoded as ``type_`` (or the type of
        ``value`` when ``type_`` is omitted), or None if there was none.
        """

    @abstractmethod
    def remove(self, key: K, type_: Any = Any) -> Any:
        """Remove ``key`` and return its value decoded as ``type_``, or None."""

    @abstractmethod
    def get(self, key: K, type_: Any = Any) -> Any:
        """Return the value under ``key`` decoded as ``type_``, or None."""

    @abstractmethod
    def contains_key(self, key: K) -> bool:
        """Return True if a value is stored under ``key``."""


__all__ = ["Storage", "StorageError"]
