"""Worker lease constants and Redis key helpers shared by workers and sweepers."""

# Default heartbeat cadence (seconds)
HEARTBEAT_INTERVAL_SECONDS = 2.0

# Missed beats tolerated before a worker is presumed dead.
# With a 2s interval this gives a 50s lease window.
HEARTBEATS_BEFORE_DEAD = 25

# Redis set holding the identities of every known worker
WORKERS_REGISTRY_KEY = "workers"

# Lease and bookkeeping key namespace
WORKER_KEY_PREFIX = "worker"
HEARTBEAT_KEY_SUFFIX = "heartbeat"
STARTED_KEY_SUFFIX = "started"


def lease_ttl_seconds(
    interval_seconds: float = HEARTBEAT_INTERVAL_SECONDS,
    heartbeats_before_dead: int = HEARTBEATS_BEFORE_DEAD,
) -> float:
    """Length of the liveness window granted by one renewal."""
    return interval_seconds * heartbeats_before_dead


def heartbeat_key(hostname: str, pid: str | int) -> str:
    """Build worker lease key.

    Redis glob wildcards are accepted for either part, so
    ``heartbeat_key("*", "*")`` is the pattern matching every lease and
    ``heartbeat_key("web-1", "*")`` filters the leases held on one host.
    """
    return f"{WORKER_KEY_PREFIX}:{hostname}:{pid}:{HEARTBEAT_KEY_SUFFIX}"


def heartbeat_pattern() -> str:
    """SCAN pattern for every worker lease key."""
    return heartbeat_key("*", "*")


def worker_key(identity: str) -> str:
    """Build per-worker bookkeeping key."""
    return f"{WORKER_KEY_PREFIX}:{identity}"


def worker_started_key(identity: str) -> str:
    """Build key holding the worker's start timestamp."""
    return f"{worker_key(identity)}:{STARTED_KEY_SUFFIX}"
