"""
Example worker process publishing heartbeats.

Demonstrates:
- Registering a worker and keeping its lease alive
- Checking liveness from the same process
- Graceful shutdown dropping the lease

Run with: python examples/service.py
Then, from another shell: leasebeat status / leasebeat sweep
"""

import asyncio
import contextlib
import logging

import leasebeat

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def main() -> None:
    client = leasebeat.create_redis_client()
    worker = leasebeat.Worker(client, tags=["example"])

    await worker.startup()
    logger.info("Worker %s started (lease %s)", worker.id, worker.heart.key)
    try:
        while True:
            await asyncio.sleep(5)
            logger.info("Lease TTL: %ss", await worker.heart.ttl())
    finally:
        await worker.unregister()
        await client.aclose()


if __name__ == "__main__":
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(main())
