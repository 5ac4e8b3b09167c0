"""Wire-level commands issued by the Redis session store.

Each store operation maps to exactly one command.  Creation and update
are both ``SET`` with a conditional flag, so the create-versus-update
decision is made atomically by the server:

========  =====================================
load      ``GET key``
save      ``SET key value NX [EX seconds]``
update    ``SET key value XX [EX seconds]``
destroy   ``DEL key``
exists    ``EXISTS key``
ttl       ``TTL key``
========  =====================================
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import timedelta
from typing import Union


def ttl_seconds(ttl: timedelta | int | float | None) -> int | None:
    """Convert ``ttl`` to whole seconds for ``EX``.

    Fractional seconds round up so that a positive TTL never becomes
    zero, which the server rejects.

    Raises
    ------
    ValueError
        If ``ttl`` is zero or negative.
    """
    if ttl is None:
        return None
    seconds = ttl.total_seconds() if isinstance(ttl, timedelta) else float(ttl)
    if seconds <= 0:
        raise ValueError(f"TTL must be positive, got {seconds!r} seconds")
    return math.ceil(seconds)


@dataclass(frozen=True)
class Get:
    key: str

    @property
    def args(self) -> tuple[str, ...]:
        return ("GET", self.key)


@dataclass(frozen=True)
class Set:
    """Create-only write: the server refuses it when ``key`` exists."""

    key: str
    value: str
    ttl: int | None

    @property
    def args(self) -> tuple[str, ...]:
        args: tuple[str, ...] = ("SET", self.key, self.value, "NX")
        if self.ttl is not None:
            args += ("EX", str(self.ttl))
        return args


@dataclass(frozen=True)
class Update:
    """Update-only write: the server refuses it when ``key`` is absent."""

    key: str
    value: str
    ttl: int | None

    @property
    def args(self) -> tuple[str, ...]:
        args: tuple[str, ...] = ("SET", self.key, self.value, "XX")
        if self.ttl is not None:
            args += ("EX", str(self.ttl))
        return args


@dataclass(frozen=True)
class Delete:
    key: str

    @property
    def args(self) -> tuple[str, ...]:
        return ("DEL", self.key)


@dataclass(frozen=True)
class Exists:
    key: str

    @property
    def args(self) -> tuple[str, ...]:
        return ("EXISTS", self.key)


@dataclass(frozen=True)
class Ttl:
    key: str

    @property
    def args(self) -> tuple[str, ...]:
        return ("TTL", self.key)


Command = Union[Get, Set, Update, Delete, Exists, Ttl]

__all__ = ["Command", "Delete", "Exists", "Get", "Set", "Ttl", "Update", "ttl_seconds"]
