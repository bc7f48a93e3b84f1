"""Redis-backed set of known worker identities."""

from __future__ import annotations

import logging
from typing import Any

from shared.keys import WORKERS_REGISTRY_KEY, worker_key, worker_started_key

from leasebeat.connection import as_str

logger = logging.getLogger(__name__)


class WorkerRegistry:
    """Membership of the shared worker registry.

    Membership says a worker is *known*, not that it is alive. Leases are the
    liveness signal; the sweep reconciles the two.
    """

    def __init__(self, client: Any, *, key: str = WORKERS_REGISTRY_KEY) -> None:
        self._client = client
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    async def members(self) -> set[str]:
        """Snapshot of registered identities."""
        raw = await self._client.smembers(self._key)
        return {as_str(member) for member in raw}

    async def contains(self, identity: str) -> bool:
        return bool(await self._client.sismember(self._key, identity))

    async def register(self, identity: str) -> None:
        await self._client.sadd(self._key, identity)

    async def unregister(self, identity: str) -> None:
        """Forget a worker and its bookkeeping keys. Idempotent."""
        async with self._client.pipeline(transaction=False) as pipe:
            pipe.srem(self._key, identity)
            pipe.delete(worker_key(identity), worker_started_key(identity))
            await pipe.execute()
        logger.debug("Worker unregistered: %s", identity)
