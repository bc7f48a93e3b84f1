"""Shared identity and key helpers for leasebeat packages."""

from shared._version import __version__
from shared.identity import (
    build_identity,
    current_identity,
    hostname,
    lease_key,
    pid,
)
from shared.keys import (
    HEARTBEAT_INTERVAL_SECONDS,
    HEARTBEATS_BEFORE_DEAD,
    WORKERS_REGISTRY_KEY,
    heartbeat_key,
    heartbeat_pattern,
    lease_ttl_seconds,
)

__all__ = [
    "__version__",
    # Identity
    "build_identity",
    "current_identity",
    "hostname",
    "pid",
    "lease_key",
    # Keys
    "HEARTBEAT_INTERVAL_SECONDS",
    "HEARTBEATS_BEFORE_DEAD",
    "WORKERS_REGISTRY_KEY",
    "heartbeat_key",
    "heartbeat_pattern",
    "lease_ttl_seconds",
]
