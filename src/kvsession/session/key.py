"""Session identifiers.

Classes
-------
- SessionKey             — opaque 64-character alphanumeric identifier
- InvalidSessionKeyError — raised when parsing a malformed identifier
"""
from __future__ import annotations

import secrets
import string
from dataclasses import dataclass

KEY_LENGTH: int = 64
_ALPHABET: str = string.ascii_letters + string.digits


class InvalidSessionKeyError(ValueError):
    """Raised when an externally supplied session identifier is malformed."""

    def __init__(self, raw: str) -> None:
        self.raw = raw
        super().__init__(
            f"Invalid session key {raw[:16]!r}...: expected {KEY_LENGTH} "
            "alphanumeric characters."
        )


@dataclass(frozen=True)
class SessionKey:
    """Opaque random identifier for one session.

    Keys are drawn from ``secrets`` so they are safe to hand to clients
    as bearer tokens.  Uniqueness is probabilistic; no registry is
    consulted.

    Parameters
    ----------
    value:
        The raw key string.  Prefer ``generate()`` or ``parse()`` over
        constructing keys directly.
    """

    value: str

    @classmethod
    def generate(cls) -> SessionKey:
        """Return a new random key of ``KEY_LENGTH`` alphanumeric characters."""
        return cls("".join(secrets.choice(_ALPHABET) for _ in range(KEY_LENGTH)))

    @classmethod
    def parse(cls, raw: str) -> SessionKey:
        """Validate ``raw`` (e.g. a cookie value) and wrap it as a key.

        Raises
        ------
        InvalidSessionKeyError
            If ``raw`` is not exactly ``KEY_LENGTH`` ASCII alphanumerics.
        """
        if len(raw) != KEY_LENGTH or not all(ch in _ALPHABET for ch in raw):
            raise InvalidSessionKeyError(raw)
        return cls(raw)

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        # Keys are credentials; only show a prefix.
        return f"SessionKey({self.value[:8]!r}...)"


__all__ = ["KEY_LENGTH", "InvalidSessionKeyError", "SessionKey"]
