from __future__ import annotations

import asyncio
import logging

import pytest
import redis.asyncio as redis
from leasebeat.engine.heart import Heart
from leasebeat.engine.registry import WorkerRegistry
from leasebeat.engine.sweep import (
    Sweeper,
    dead_workers,
    prune_dead_workers,
    scan_lease_keys,
)

WORKER_A = "host-a:101:default"
WORKER_B = "host-b:202:default"
WORKER_C = "host-c:303:default"


async def _lease(client, identity: str, settings) -> None:
    await Heart(client, identity, settings=settings).renew()


@pytest.mark.asyncio
async def test_registry_membership_round_trip(fake_redis) -> None:
    registry = WorkerRegistry(fake_redis)

    await registry.register(WORKER_A)
    await registry.register(WORKER_A)
    await registry.register(WORKER_B)

    assert await registry.members() == {WORKER_A, WORKER_B}
    assert await registry.contains(WORKER_A) is True

    await registry.unregister(WORKER_A)
    await registry.unregister(WORKER_A)

    assert await registry.members() == {WORKER_B}
    assert await registry.contains(WORKER_A) is False


@pytest.mark.asyncio
async def test_unregister_drops_worker_bookkeeping_keys(fake_redis) -> None:
    registry = WorkerRegistry(fake_redis, key="pool:workers")
    await registry.register(WORKER_A)
    await fake_redis.set(f"worker:{WORKER_A}", "busy")
    await fake_redis.set(f"worker:{WORKER_A}:started", "2026-01-01T00:00:00+00:00")

    await registry.unregister(WORKER_A)

    assert await fake_redis.exists(f"worker:{WORKER_A}") == 0
    assert await fake_redis.exists(f"worker:{WORKER_A}:started") == 0
    assert await fake_redis.scard("pool:workers") == 0


@pytest.mark.asyncio
async def test_scan_collects_every_lease_across_batches(fake_redis, settings) -> None:
    for i in range(7):
        await _lease(fake_redis, f"host-{i}:{i}", settings)
    await fake_redis.set("worker:host-0:0", "not a lease")

    keys = await scan_lease_keys(fake_redis, count=2)

    assert keys == {f"worker:host-{i}:{i}:heartbeat" for i in range(7)}


@pytest.mark.asyncio
async def test_sweep_removes_only_dead_registrations(fake_redis, settings) -> None:
    registry = WorkerRegistry(fake_redis)
    await _lease(fake_redis, WORKER_A, settings)
    await registry.register(WORKER_B)
    ttl_before = await fake_redis.pttl("worker:host-a:101:heartbeat")

    result = await prune_dead_workers(fake_redis, settings=settings)

    assert result.ok is True
    assert result.checked == 2
    assert result.pruned == [WORKER_B]
    assert result.orphans_removed == []
    assert await registry.members() == {WORKER_A}
    assert await fake_redis.exists("worker:host-a:101:heartbeat") == 1
    assert 0 < await fake_redis.pttl("worker:host-a:101:heartbeat") <= ttl_before


@pytest.mark.asyncio
async def test_sweep_garbage_collects_orphan_leases(fake_redis, settings) -> None:
    registry = WorkerRegistry(fake_redis)
    await _lease(fake_redis, WORKER_A, settings)
    await _lease(fake_redis, WORKER_C, settings)
    # C's registration was lost elsewhere; its lease is still around
    await fake_redis.srem("workers", WORKER_C)

    result = await prune_dead_workers(fake_redis, settings=settings)

    assert result.ok is True
    assert result.pruned == []
    assert result.orphans_removed == ["worker:host-c:303:heartbeat"]
    assert await fake_redis.exists("worker:host-c:303:heartbeat") == 0
    assert await fake_redis.exists("worker:host-a:101:heartbeat") == 1
    assert await registry.members() == {WORKER_A}


@pytest.mark.asyncio
async def test_sweep_logs_pruned_workers_and_orphans(
    fake_redis, settings, caplog
) -> None:
    caplog.set_level(logging.INFO, logger="leasebeat")
    await WorkerRegistry(fake_redis).register(WORKER_B)
    await fake_redis.set("worker:ghost:1:heartbeat", "", ex=60)

    await prune_dead_workers(fake_redis, settings=settings)

    messages = [r.getMessage() for r in caplog.records]
    assert any("Pruning worker 'host-b'" in m for m in messages)
    assert any(
        "worker:ghost:1:heartbeat" in m and "isn't registered" in m for m in messages
    )


@pytest.mark.asyncio
async def test_sweep_is_idempotent(fake_redis, settings) -> None:
    await _lease(fake_redis, WORKER_A, settings)
    await WorkerRegistry(fake_redis).register(WORKER_B)

    first = await prune_dead_workers(fake_redis, settings=settings)
    second = await prune_dead_workers(fake_redis, settings=settings)

    assert first.pruned == [WORKER_B]
    assert second.pruned == []
    assert second.orphans_removed == []
    assert second.checked == 1


@pytest.mark.asyncio
async def test_sweep_aborts_without_raising_on_store_error(
    fake_redis, settings, monkeypatch
) -> None:
    registry = WorkerRegistry(fake_redis)
    await registry.register(WORKER_B)

    def broken_scan_iter(*args, **kwargs):  # noqa: ANN002, ANN003, ARG001
        raise redis.ConnectionError("connection reset")

    monkeypatch.setattr(fake_redis, "scan_iter", broken_scan_iter)

    result = await prune_dead_workers(fake_redis, settings=settings)

    assert result.ok is False
    assert result.error == "connection reset"
    assert result.pruned == []
    assert await registry.members() == {WORKER_B}


@pytest.mark.asyncio
async def test_alive_worker_recreates_lease_deleted_mid_sweep(
    fake_redis, settings
) -> None:
    heart = Heart(fake_redis, WORKER_A, settings=settings)
    await heart.renew()
    await fake_redis.srem("workers", WORKER_A)

    result = await prune_dead_workers(fake_redis, settings=settings)
    assert result.orphans_removed == ["worker:host-a:101:heartbeat"]
    assert await heart.is_dead() is True

    await heart.renew()

    assert await heart.is_alive() is True
    assert await WorkerRegistry(fake_redis).contains(WORKER_A)


@pytest.mark.asyncio
async def test_dead_workers_lists_registered_workers_without_lease(
    fake_redis, settings
) -> None:
    registry = WorkerRegistry(fake_redis)
    await _lease(fake_redis, WORKER_A, settings)
    await registry.register(WORKER_C)
    await registry.register(WORKER_B)

    assert await dead_workers(fake_redis, settings=settings) == [WORKER_B, WORKER_C]
    # listing never mutates
    assert await registry.members() == {WORKER_A, WORKER_B, WORKER_C}


@pytest.mark.asyncio
async def test_sweeper_runs_periodically_until_stopped(fake_redis, settings) -> None:
    registry = WorkerRegistry(fake_redis)
    await registry.register(WORKER_B)
    sweeper = Sweeper(fake_redis, settings=settings)

    await sweeper.start()
    await sweeper.start()
    try:
        for _ in range(100):
            if sweeper.sweep_count >= 2:
                break
            await asyncio.sleep(0.01)
    finally:
        await sweeper.stop()
    await sweeper.stop()

    assert sweeper.sweep_count >= 2
    assert sweeper.last_result is not None
    assert sweeper.last_result.ok is True
    assert await registry.members() == set()


@pytest.mark.asyncio
async def test_malformed_member_does_not_block_pruning(
    fake_redis, settings, caplog
) -> None:
    caplog.set_level(logging.INFO, logger="leasebeat")
    registry = WorkerRegistry(fake_redis)
    await registry.register("garbage")
    await registry.register(WORKER_B)
    await _lease(fake_redis, WORKER_A, settings)

    result = await prune_dead_workers(fake_redis, settings=settings)

    assert result.ok is True
    assert result.pruned == ["garbage", WORKER_B]
    assert await registry.members() == {WORKER_A}
    assert any(
        r.levelno == logging.WARNING and "'garbage'" in r.getMessage()
        for r in caplog.records
    )


@pytest.mark.asyncio
async def test_dead_workers_reports_malformed_member(fake_redis, settings) -> None:
    await WorkerRegistry(fake_redis).register("garbage")

    assert await dead_workers(fake_redis, settings=settings) == ["garbage"]
