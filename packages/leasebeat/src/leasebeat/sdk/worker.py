"""Worker - host-side facade tying an identity, the registry and a Heart."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from shared.identity import current_identity, hostname, pid
from shared.keys import worker_started_key

from leasebeat.config import Settings, get_settings
from leasebeat.engine.heart import Heart
from leasebeat.engine.registry import WorkerRegistry

logger = logging.getLogger(__name__)


class Worker:
    """
    A worker process as seen through the registry.

    Example:
        client = create_redis_client()
        worker = Worker(client, tags=["emails"])
        await worker.startup()
        ...
        await worker.unregister()
    """

    def __init__(
        self,
        client: Any,
        identity: str | None = None,
        *,
        tags: Iterable[str] = (),
        registry: WorkerRegistry | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._client = client
        self._id = identity or current_identity(tags)
        self._registry = registry or WorkerRegistry(
            client, key=self._settings.registry_key
        )
        self._heart: Heart | None = None

    def __repr__(self) -> str:
        return f"Worker({self._id!r})"

    @classmethod
    async def all(
        cls,
        client: Any,
        *,
        registry: WorkerRegistry | None = None,
        settings: Settings | None = None,
    ) -> list[Worker]:
        """Every registered worker, sorted by identity."""
        settings = settings or get_settings()
        registry = registry or WorkerRegistry(client, key=settings.registry_key)
        return [
            cls(client, identity, registry=registry, settings=settings)
            for identity in sorted(await registry.members())
        ]

    @property
    def id(self) -> str:
        return self._id

    @property
    def hostname(self) -> str:
        return hostname(self._id)

    @property
    def pid(self) -> str:
        return pid(self._id)

    @property
    def heart(self) -> Heart:
        if self._heart is None:
            self._heart = Heart(
                self._client,
                self._id,
                registry=self._registry,
                settings=self._settings,
            )
        return self._heart

    async def startup(self) -> None:
        """Register this worker and start beating."""
        await self._registry.register(self._id)
        await self._client.set(
            worker_started_key(self._id), datetime.now(UTC).isoformat()
        )
        await self.heart.start()
        logger.debug(f"Worker registered: {self._id}")

    async def unregister(self) -> None:
        """Stop beating, then remove this worker from the registry."""
        if self._heart is not None:
            await self._heart.stop()
        await self._registry.unregister(self._id)

    async def is_dead(self) -> bool:
        return await self.heart.is_dead()

    async def prune_if_dead(self) -> bool | None:
        """Unregister this worker if its lease is gone.

        Returns None when the worker is alive, True when it was pruned.
        """
        if not await self.is_dead():
            return None

        logger.info(f"Pruning worker '{self.hostname}' from registry")
        await self.unregister()
        return True
