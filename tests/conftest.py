"""Shared fixtures for the kvsession test suite."""
from __future__ import annotations

import pytest

from kvsession.store.memory import InMemorySessionStore


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(clock: FakeClock) -> InMemorySessionStore:
    return InMemorySessionStore(clock=clock)
