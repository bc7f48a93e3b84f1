"""Sweep command: prune dead workers and orphan leases."""

import asyncio

import typer
from rich.markup import escape

from leasebeat.cli._console import dim, error_panel, info, nl, setup_logging, success
from leasebeat.cli._settings import load_settings
from leasebeat.config import Settings
from leasebeat.connection import create_redis_client
from leasebeat.engine.sweep import Sweeper, SweepResult, prune_dead_workers


async def _sweep_once(settings: Settings) -> SweepResult:
    client = create_redis_client(settings=settings)
    try:
        return await prune_dead_workers(client, settings=settings)
    finally:
        await client.aclose()


async def _sweep_forever(settings: Settings, interval: float) -> None:
    client = create_redis_client(settings=settings)
    sweeper = Sweeper(client, interval_seconds=interval, settings=settings)
    await sweeper.start()
    try:
        await asyncio.Event().wait()
    finally:
        await sweeper.stop()
        await client.aclose()


def print_result(result: SweepResult) -> None:
    nl()
    if not result.ok:
        error_panel(result.error or "unknown error", title="Sweep aborted")
        return
    success(f"Checked {result.checked} registered workers")
    for identity in result.pruned:
        info(f"pruned [bold]{escape(identity)}[/bold]")
    for key in result.orphans_removed:
        info(f"removed orphan lease [bold]{escape(key)}[/bold]")
    if not result.pruned and not result.orphans_removed:
        dim("Nothing to prune")
    nl()


def sweep(
    redis_url: str | None = typer.Option(
        None,
        "--redis-url",
        help="Redis URL (overrides LEASEBEAT_REDIS_URL)",
    ),
    interval: float | None = typer.Option(
        None,
        "--interval",
        "-i",
        min=0.1,
        help="Repeat the sweep every N seconds until interrupted",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """
    Remove dead workers from the registry and delete orphan leases.

    Examples:
        leasebeat sweep
        leasebeat sweep --redis-url redis://localhost:6379
        leasebeat sweep --interval 60            # Keep sweeping every minute
    """
    setup_logging(verbose=verbose)
    settings = load_settings(redis_url)

    if interval is None:
        result = asyncio.run(_sweep_once(settings))
        print_result(result)
        if not result.ok:
            raise typer.Exit(1)
        return

    info(f"Sweeping every {interval:g}s (Ctrl+C to stop)")
    try:
        asyncio.run(_sweep_forever(settings, interval))
    except KeyboardInterrupt:
        pass  # Clean exit on Ctrl+C
    finally:
        nl()
