"""Redis key helpers shared by workers and sweepers."""

from shared.keys.workers import (
    HEARTBEAT_INTERVAL_SECONDS,
    HEARTBEATS_BEFORE_DEAD,
    WORKERS_REGISTRY_KEY,
    heartbeat_key,
    heartbeat_pattern,
    lease_ttl_seconds,
    worker_key,
    worker_started_key,
)

__all__ = [
    "HEARTBEAT_INTERVAL_SECONDS",
    "HEARTBEATS_BEFORE_DEAD",
    "WORKERS_REGISTRY_KEY",
    "heartbeat_key",
    "heartbeat_pattern",
    "lease_ttl_seconds",
    "worker_key",
    "worker_started_key",
]
