"""Typed key-value capability shared by sessions and session models."""
from __future__ import annotations

from kvsession.storage.base import Storage, StorageError

__all__ = ["Storage", "StorageError"]
