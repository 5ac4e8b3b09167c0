#!/usr/bin/env python3
"""Example: Redis store

Shows the conditional-write contract against a live Redis server:
a second create of the same key and an update of a missing key are
both rejected by the server.

Usage:
    python examples/02_redis_store.py redis://localhost:6379/0

Requirements:
    pip install kvsession
"""
from __future__ import annotations

import asyncio
import sys

from kvsession import (
    RedisSessionStore,
    Session,
    SessionAbsentError,
    SessionExistsError,
    StoreConfiguration,
)


async def main(url: str) -> None:
    config = StoreConfiguration.with_prefix("example:session:")
    async with await RedisSessionStore.connect(url, config) as store:
        session = Session()
        session.insert("user_id", "abc-123")

        await store.save(session, 60)
        print(f"Saved; ttl={await store.ttl(session.id)}")

        try:
            await store.save(session, 60)
        except SessionExistsError as exc:
            print(f"Second create rejected: {exc}")

        await store.destroy(session.id)
        try:
            await store.update(session, 60)
        except SessionAbsentError as exc:
            print(f"Update of destroyed session rejected: {exc}")


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else "redis://localhost:6379/0"))
