"""Lifecycle status of a ``SessionModel``'s working copy."""
from __future__ import annotations

from enum import Enum


class SessionStatus(str, Enum):
    """Whether the in-process copy differs from what was last persisted."""

    CHANGED = "changed"
    UNCHANGED = "unchanged"
    DESTROYED = "destroyed"


__all__ = ["SessionStatus"]
