"""leasebeat SDK - user-facing worker API."""

from leasebeat.sdk.worker import Worker

__all__ = [
    "Worker",
]
