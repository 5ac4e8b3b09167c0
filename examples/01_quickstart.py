#!/usr/bin/env python3
"""Example: Quickstart — kvsession

Minimal working example: create a session model, store typed fields,
save, reload, and destroy using the in-memory store.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install kvsession
"""
from __future__ import annotations

import asyncio
from datetime import timedelta

from pydantic import BaseModel

import kvsession
from kvsession import InMemorySessionStore, SessionModel


class Profile(BaseModel):
    username: str
    roles: list[str]


async def main() -> None:
    print(f"kvsession version: {kvsession.__version__}")
    store = InMemorySessionStore()

    # Step 1: a fresh model; nothing is written until save()
    model = SessionModel(store, ttl=timedelta(minutes=30))
    model.insert("user_id", "abc-123")
    model.insert("profile", Profile(username="brandon", roles=["admin"]))
    await model.save()
    print(f"Created session {model.id.value[:8]}... ({model.status.value})")

    # Step 2: reload by key and update a field
    loaded = await SessionModel.load(store, model.id)
    assert loaded is not None
    profile = loaded.get("profile", Profile)
    print(f"Loaded profile for {profile.username}; ttl={loaded.ttl}")
    loaded.insert("visits", 1)
    await loaded.save()

    # Step 3: destroy
    await loaded.destroy()
    print(f"Exists after destroy: {await store.exists(model.id)}")


if __name__ == "__main__":
    asyncio.run(main())
