"""Redis client construction and reply decoding."""

from __future__ import annotations

import redis.asyncio as redis

from leasebeat.config import Settings, get_settings


def create_redis_client(
    redis_url: str | None = None,
    *,
    settings: Settings | None = None,
) -> redis.Redis:
    """Create an asyncio Redis client with bounded socket timeouts.

    Every store call made by hearts and sweeps inherits these timeouts, so a
    hung Redis turns into a ``TimeoutError`` instead of a stalled loop.
    """
    settings = settings or get_settings()
    return redis.from_url(
        redis_url or settings.redis_url,
        decode_responses=False,
        socket_timeout=settings.socket_timeout_seconds,
        socket_connect_timeout=settings.socket_timeout_seconds,
    )


def as_str(value: bytes | str) -> str:
    """Normalize a Redis reply item regardless of ``decode_responses``."""
    return value.decode() if isinstance(value, bytes) else str(value)
