from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from fakeredis.aioredis import FakeRedis
from leasebeat.config import Settings


@pytest_asyncio.fixture
async def fake_redis() -> AsyncIterator[FakeRedis]:
    client = FakeRedis(decode_responses=False)
    try:
        yield client
    finally:
        await client.aclose()


@pytest.fixture
def settings() -> Settings:
    """Fast heartbeats so loops tick within test timeouts."""
    return Settings(
        _env_file=None,
        heartbeat_interval_seconds=0.01,
        heartbeats_before_dead=50,
        sweep_interval_seconds=0.01,
        scan_count=2,
    )
