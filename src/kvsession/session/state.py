"""Persisted session payload.

``SessionState`` is the wire representation of a session: a flat map of
field name to already-serialised JSON text.  It knows nothing about the
types of its values; typed access lives on ``Session``.

Classes
-------
- SessionState  — pydantic root model over ``dict[str, str]``
"""
from __future__ import annotations

from collections.abc import Iterator

from pydantic import Field, RootModel


class SessionState(RootModel[dict[str, str]]):
    """Mapping of field name to serialised field value.

    Serialises to a JSON object of strings, which is exactly the record
    format written to the backend.
    """

    root: dict[str, str] = Field(default_factory=dict)

    def insert(self, field: str, value: str) -> str | None:
        """Set ``field`` to the raw ``value`` and return the previous raw value."""
        previous = self.root.get(field)
        self.root[field] = value
        return previous

    def remove(self, field: str) -> str | None:
        """Remove ``field`` and return its raw value, or None if absent."""
        return self.root.pop(field, None)

    def get(self, field: str) -> str | None:
        return self.root.get(field)

    def contains_key(self, field: str) -> bool:
        return field in self.root

    def fields(self) -> list[str]:
        """Return the stored field names in insertion order."""
        return list(self.root)

    def copy_state(self) -> SessionState:
        """Return an independent copy whose map can be mutated separately."""
        return SessionState(dict(self.root))

    def __len__(self) -> int:
        return len(self.root)

    def __iter__(self) -> Iterator[str]:  # type: ignore[override]
        return iter(self.root)

    def __contains__(self, field: object) -> bool:
        return field in self.root


__all__ = ["SessionState"]
