"""leasebeat configuration with sensible defaults for development."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from shared.keys import (
    HEARTBEAT_INTERVAL_SECONDS,
    HEARTBEATS_BEFORE_DEAD,
    WORKERS_REGISTRY_KEY,
    lease_ttl_seconds,
)


class Settings(BaseSettings):
    """
    leasebeat configuration.

    All settings can be overridden via environment variables with LEASEBEAT_ prefix.
    Defaults are set for local development - no configuration needed to get started.
    """

    model_config = SettingsConfigDict(
        env_prefix="LEASEBEAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = False

    # Redis URL for leases and the worker registry
    redis_url: str = "redis://localhost:6379"
    socket_timeout_seconds: float = Field(default=5.0, gt=0)

    # Heartbeat cadence. The lease window (interval x beats) must outlast a
    # single interval, hence at least two beats.
    heartbeat_interval_seconds: float = Field(default=HEARTBEAT_INTERVAL_SECONDS, gt=0)
    heartbeats_before_dead: int = Field(default=HEARTBEATS_BEFORE_DEAD, gt=1)

    # Registry set and sweep controls
    registry_key: str = WORKERS_REGISTRY_KEY
    scan_count: int = Field(default=500, gt=0)
    sweep_interval_seconds: float = Field(default=60.0, gt=0)

    @property
    def lease_ttl_seconds(self) -> float:
        """Liveness window granted by one renewal."""
        return lease_ttl_seconds(
            self.heartbeat_interval_seconds, self.heartbeats_before_dead
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
