"""Store configuration: how logical session keys become record keys."""
from __future__ import annotations

from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict

from kvsession.session.key import SessionKey


class StoreConfiguration(BaseModel):
    """Maps a ``SessionKey`` to the physical key of its backend record.

    By default the record key is the session key verbatim.  Set
    ``key_prefix`` to namespace records, or supply ``key_gen`` for full
    control (``key_gen`` wins when both are given).

    Parameters
    ----------
    key_prefix:
        String prepended to the session key.  Defaults to ``""``.
    key_gen:
        Optional callable ``SessionKey -> str`` producing the record key.
    """

    model_config = ConfigDict(frozen=True)

    key_prefix: str = ""
    key_gen: Optional[Callable[[SessionKey], str]] = None

    @classmethod
    def with_prefix(cls, prefix: str) -> StoreConfiguration:
        return cls(key_prefix=prefix)

    def record_key(self, key: SessionKey) -> str:
        if self.key_gen is not None:
            return self.key_gen(key)
        return f"{self.key_prefix}{key.value}"


__all__ = ["StoreConfiguration"]
