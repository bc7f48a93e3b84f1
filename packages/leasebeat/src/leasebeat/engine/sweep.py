"""Registry sweep.

Reconciles the worker registry against live leases: registered workers
without a lease are unregistered, and leases that belong to no registered
worker are deleted. Every action is idempotent, so a pass racing with
renewing workers only causes inconsistencies that heal on the next beat.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from shared.identity import hostname, lease_key, pid
from shared.keys import heartbeat_pattern

from leasebeat.config import Settings, get_settings
from leasebeat.connection import as_str
from leasebeat.engine.liveness import is_dead
from leasebeat.engine.registry import WorkerRegistry

logger = logging.getLogger(__name__)


@dataclass
class SweepResult:
    """Outcome of one sweep pass."""

    checked: int = 0
    pruned: list[str] = field(default_factory=list)
    orphans_removed: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def scan_lease_keys(client: Any, *, count: int = 500) -> set[str]:
    """All lease keys currently in the store, collected with SCAN batches."""
    return {
        as_str(key)
        async for key in client.scan_iter(match=heartbeat_pattern(), count=count)
    }


async def dead_workers(
    client: Any,
    *,
    registry: WorkerRegistry | None = None,
    settings: Settings | None = None,
) -> list[str]:
    """Registered workers whose lease is gone."""
    settings = settings or get_settings()
    registry = registry or WorkerRegistry(client, key=settings.registry_key)
    return [
        identity
        for identity in sorted(await registry.members())
        if await is_dead(client, identity)
    ]


async def prune_dead_workers(
    client: Any,
    *,
    registry: WorkerRegistry | None = None,
    settings: Settings | None = None,
) -> SweepResult:
    """Run one sweep pass. Never raises; failures are reported on the result.

    Assumes every registered worker publishes heartbeats.
    """
    settings = settings or get_settings()
    registry = registry or WorkerRegistry(client, key=settings.registry_key)
    result = SweepResult()

    try:
        beats = await scan_lease_keys(client, count=settings.scan_count)

        for identity in sorted(await registry.members()):
            result.checked += 1
            if not pid(identity):
                logger.warning(
                    "Pruning registry member %r: not a worker identity", identity
                )
                await registry.unregister(identity)
                result.pruned.append(identity)
            elif await is_dead(client, identity):
                logger.info(
                    "Pruning worker '%s' (%s) from registry",
                    hostname(identity),
                    identity,
                )
                await registry.unregister(identity)
                result.pruned.append(identity)

            # Accounted for, dead or alive
            beats.discard(lease_key(identity))

        # Whatever is left belongs to workers the registry doesn't know about
        for key in sorted(beats):
            logger.info(
                "Removing %s from heartbeats because the worker isn't registered",
                key,
            )
            await client.delete(key)
            result.orphans_removed.append(key)

    except Exception as e:
        logger.exception("Sweep aborted")
        result.error = str(e) or type(e).__name__

    return result


class Sweeper:
    """Background task that runs a sweep pass on a fixed interval."""

    def __init__(
        self,
        client: Any,
        *,
        registry: WorkerRegistry | None = None,
        interval_seconds: float | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._client = client
        self._registry = registry or WorkerRegistry(
            client, key=self._settings.registry_key
        )
        self._interval_seconds = (
            interval_seconds
            if interval_seconds is not None
            else self._settings.sweep_interval_seconds
        )
        self._task: asyncio.Task[None] | None = None
        self._stop_event = asyncio.Event()
        self._sweep_count: int = 0
        self.last_result: SweepResult | None = None

    @property
    def sweep_count(self) -> int:
        return self._sweep_count

    async def start(self) -> None:
        """Start the background sweep loop."""
        if self._task is not None:
            return

        self._stop_event.clear()
        self._task = asyncio.create_task(self._sweep_loop())
        logger.debug("Sweeper started (interval=%.3fs)", self._interval_seconds)

    async def stop(self) -> None:
        """Stop the background sweep loop."""
        if self._task is None:
            return

        self._stop_event.set()
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.debug("Sweeper stopped")

    async def _sweep_loop(self) -> None:
        while not self._stop_event.is_set():
            self.last_result = await prune_dead_workers(
                self._client, registry=self._registry, settings=self._settings
            )
            self._sweep_count += 1
            await asyncio.sleep(self._interval_seconds)
