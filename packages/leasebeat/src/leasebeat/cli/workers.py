"""Inspection commands: dead workers and lease status."""

import asyncio
from collections.abc import Coroutine
from typing import Any, TypeVar

import typer
from redis.exceptions import RedisError
from rich.box import ROUNDED
from rich.markup import escape
from rich.table import Table

from leasebeat.cli._console import console, dim, error, error_panel, nl
from leasebeat.cli._settings import load_settings
from leasebeat.config import Settings
from leasebeat.connection import create_redis_client
from leasebeat.engine.liveness import is_alive, lease_ttl
from leasebeat.engine.registry import WorkerRegistry
from leasebeat.engine.sweep import dead_workers

T = TypeVar("T")


async def _dead(settings: Settings) -> list[str]:
    client = create_redis_client(settings=settings)
    try:
        return await dead_workers(client, settings=settings)
    finally:
        await client.aclose()


async def _status(settings: Settings) -> list[tuple[str, bool, float | None]]:
    client = create_redis_client(settings=settings)
    try:
        registry = WorkerRegistry(client, key=settings.registry_key)
        rows: list[tuple[str, bool, float | None]] = []
        for identity in sorted(await registry.members()):
            rows.append(
                (
                    identity,
                    await is_alive(client, identity),
                    await lease_ttl(client, identity),
                )
            )
        return rows
    finally:
        await client.aclose()


def _run_or_exit(coro: Coroutine[Any, Any, T]) -> T:
    try:
        return asyncio.run(coro)
    except (RedisError, OSError) as e:
        error_panel(str(e), title="Redis unavailable")
        raise typer.Exit(1)


def dead(
    redis_url: str | None = typer.Option(
        None,
        "--redis-url",
        help="Redis URL (overrides LEASEBEAT_REDIS_URL)",
    ),
) -> None:
    """List registered workers whose lease has expired."""
    settings = load_settings(redis_url)
    identities = _run_or_exit(_dead(settings))

    nl()
    if not identities:
        dim("No dead workers")
    for identity in identities:
        error(escape(identity))
    nl()


def status(
    redis_url: str | None = typer.Option(
        None,
        "--redis-url",
        help="Redis URL (overrides LEASEBEAT_REDIS_URL)",
    ),
) -> None:
    """Show every registered worker with its liveness and remaining lease."""
    settings = load_settings(redis_url)
    rows = _run_or_exit(_status(settings))

    nl()
    if not rows:
        dim("No registered workers")
        nl()
        return

    table = Table(box=ROUNDED, border_style="dim")
    table.add_column("Worker")
    table.add_column("State")
    table.add_column("Lease TTL", justify="right")
    for identity, alive, ttl in rows:
        state = "[green]alive[/green]" if alive else "[red]dead[/red]"
        ttl_text = f"{ttl:.1f}s" if ttl is not None else "-"
        table.add_row(escape(identity), state, ttl_text)
    console.print(table)
    nl()
