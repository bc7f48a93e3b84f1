"""Liveness predicate derived from lease existence.

A worker is alive while its lease key exists. The answer is advisory: a
crashed worker reads alive until its lease lapses, and a worker cut off from
Redis for longer than the lease window reads dead.
"""

from __future__ import annotations

from typing import Any

from shared.identity import lease_key


async def is_alive(client: Any, identity: str) -> bool:
    return bool(await client.exists(lease_key(identity)))


async def is_dead(client: Any, identity: str) -> bool:
    return not await is_alive(client, identity)


async def lease_ttl(client: Any, identity: str) -> float | None:
    """Remaining lease time in seconds, or None if there is no expiring lease."""
    remaining_ms = await client.pttl(lease_key(identity))
    # -2: key missing, -1: key has no expiry
    if remaining_ms < 0:
        return None
    return remaining_ms / 1000
