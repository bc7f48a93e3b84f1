"""leasebeat engine - leases, liveness and registry reconciliation."""

from leasebeat.engine.heart import Heart
from leasebeat.engine.liveness import is_alive, is_dead, lease_ttl
from leasebeat.engine.registry import WorkerRegistry
from leasebeat.engine.sweep import (
    Sweeper,
    SweepResult,
    dead_workers,
    prune_dead_workers,
    scan_lease_keys,
)

__all__ = [
    # Heart
    "Heart",
    # Liveness
    "is_alive",
    "is_dead",
    "lease_ttl",
    # Registry
    "WorkerRegistry",
    # Sweep
    "Sweeper",
    "SweepResult",
    "dead_workers",
    "prune_dead_workers",
    "scan_lease_keys",
]
