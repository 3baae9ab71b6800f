#!/usr/bin/env python3
"""
Follow the live menu change stream and keep a local copy of the menu current.
Logs in, loads the full item list, then applies every INSERT/UPDATE/DELETE event.
On RESYNC (the server cut this client off) the list is reloaded and the stream reopened.
Usage: python -m scripts.watch_menu [base_url]
"""
from __future__ import annotations

import asyncio
import json
import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import httpx


async def _load_state(client: httpx.AsyncClient):
    from jelovnik.schemas.menu import MenuItemSchema
    from jelovnik.services.realtime import MenuState

    r = await client.get("/api/v1/admin/items")
    r.raise_for_status()
    return MenuState([MenuItemSchema.model_validate(row) for row in r.json()])


async def _follow(client: httpx.AsyncClient, state) -> None:
    """Apply stream events to state until the server asks for a resync."""
    from jelovnik.services.realtime import ChangeEvent

    event_name = None
    async with client.stream("GET", "/api/v1/admin/menu/changes") as stream:
        async for line in stream.aiter_lines():
            if line.startswith("event: "):
                event_name = line[len("event: "):]
                if event_name == "RESYNC":
                    return
            elif line.startswith("data: "):
                event = ChangeEvent.from_payload(json.loads(line[len("data: "):]))
                state.apply(event)
                print(f"{event.event_type.value}: {len(state.items)} items")


async def watch(base_url: str) -> None:
    email = os.environ.get("SEED_ADMIN_EMAIL", "admin@alikebaba.hr")
    password = os.environ.get("SEED_ADMIN_PASSWORD", "admin123")
    async with httpx.AsyncClient(base_url=base_url, timeout=None) as client:
        r = await client.post("/api/v1/auth/token", data={"username": email, "password": password})
        r.raise_for_status()
        client.headers["Authorization"] = f"Bearer {r.json()['access_token']}"

        while True:
            state = await _load_state(client)
            print(f"Loaded {len(state.items)} items, waiting for changes...")
            await _follow(client, state)
            print("Stream ended, reloading")


def main() -> None:
    base_url = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:8000"
    asyncio.run(watch(base_url))


if __name__ == "__main__":
    main()
