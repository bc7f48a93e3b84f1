"""Per-worker lease renewal.

A Heart keeps one worker's lease alive by renewing it on a fixed interval
from a background task. The task never exits on its own: store outages and
unexpected errors are logged and retried on the next tick, because a silent
loop is indistinguishable from a dead worker.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from redis.exceptions import RedisError
from shared.identity import hostname, lease_key
from shared.keys import lease_ttl_seconds

from leasebeat.config import Settings, get_settings
from leasebeat.engine import liveness
from leasebeat.engine.registry import WorkerRegistry

logger = logging.getLogger(__name__)

# Transport failures surface as builtin ConnectionError/TimeoutError (OSError)
STORE_ERRORS: tuple[type[Exception], ...] = (RedisError, OSError)


class Heart:
    """Background lease renewal for a single worker identity."""

    def __init__(
        self,
        client: Any,
        identity: str,
        *,
        registry: WorkerRegistry | None = None,
        interval_seconds: float | None = None,
        heartbeats_before_dead: int | None = None,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._client = client
        self._identity = identity
        self._registry = registry or WorkerRegistry(client, key=settings.registry_key)
        self._interval_seconds = (
            interval_seconds
            if interval_seconds is not None
            else settings.heartbeat_interval_seconds
        )
        self._heartbeats_before_dead = (
            heartbeats_before_dead
            if heartbeats_before_dead is not None
            else settings.heartbeats_before_dead
        )
        if self._interval_seconds <= 0:
            raise ValueError(
                f"interval_seconds must be positive, got {self._interval_seconds}"
            )
        if self._heartbeats_before_dead <= 1:
            raise ValueError(
                "heartbeats_before_dead must be at least 2 so the lease outlasts "
                f"one interval, got {self._heartbeats_before_dead}"
            )
        self._task: asyncio.Task[None] | None = None
        self._stop_event = asyncio.Event()

    @property
    def identity(self) -> str:
        return self._identity

    @property
    def key(self) -> str:
        return lease_key(self._identity)

    @property
    def interval_seconds(self) -> float:
        return self._interval_seconds

    @property
    def lease_ttl_seconds(self) -> float:
        return lease_ttl_seconds(self._interval_seconds, self._heartbeats_before_dead)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the background renewal loop. No-op if already running."""
        if self.running:
            return

        self._stop_event.clear()
        self._task = asyncio.create_task(
            self._beat_loop(), name=f"heartbeat:{self._identity}"
        )
        logger.debug(
            "Heart started for %s (interval=%.3fs, ttl=%.3fs)",
            self._identity,
            self._interval_seconds,
            self.lease_ttl_seconds,
        )

    async def stop(self) -> None:
        """Stop renewing and drop the lease. Never raises.

        Safe to call before start() or more than once. Lease deletion is
        best-effort; if it fails the lease simply expires.
        """
        task = self._task
        if task is None:
            return

        self._stop_event.set()
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.warning(f"Heartbeat task for {self._identity} ended with error: {e}")
        # Cleared after the loop exits; start() is a no-op while stopping
        if self._task is task:
            self._task = None

        try:
            await self._client.delete(self.key)
        except Exception as e:
            logger.debug(f"Failed to delete heartbeat {self.key}: {e}")

        logger.debug("Heart stopped for %s", self._identity)

    async def kill(self) -> None:
        await self.stop()

    async def renew(self) -> None:
        """Register the worker and refresh its lease. Store errors propagate."""
        await self._registry.register(self._identity)
        await self._client.set(
            self.key, "", px=max(1, int(self.lease_ttl_seconds * 1000))
        )

    async def is_alive(self) -> bool:
        return await liveness.is_alive(self._client, self._identity)

    async def is_dead(self) -> bool:
        return await liveness.is_dead(self._client, self._identity)

    async def ttl(self) -> float | None:
        """Remaining lease time in seconds, or None without a lease."""
        return await liveness.lease_ttl(self._client, self._identity)

    async def _beat(self) -> None:
        """One renewal tick. Failures are logged, never raised."""
        try:
            await self.renew()
        except STORE_ERRORS as e:
            logger.critical(
                "Unable to set the heartbeat for worker '%s': %s",
                hostname(self._identity),
                e,
            )
        except Exception:
            logger.exception("Error while doing heartbeat for %s", self._identity)

    async def _beat_loop(self) -> None:
        while not self._stop_event.is_set():
            await self._beat()
            await asyncio.sleep(self._interval_seconds)
