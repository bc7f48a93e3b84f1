"""leasebeat - Lease-based liveness detection for Redis worker pools."""

from shared._version import __version__

from leasebeat.config import Settings, get_settings
from leasebeat.connection import create_redis_client
from leasebeat.engine import (
    Heart,
    Sweeper,
    SweepResult,
    WorkerRegistry,
    dead_workers,
    is_alive,
    is_dead,
    lease_ttl,
    prune_dead_workers,
)
from leasebeat.sdk import Worker

__all__ = [
    "Heart",
    "Settings",
    "Sweeper",
    "SweepResult",
    "Worker",
    "WorkerRegistry",
    "__version__",
    "create_redis_client",
    "dead_workers",
    "get_settings",
    "is_alive",
    "is_dead",
    "lease_ttl",
    "prune_dead_workers",
]
