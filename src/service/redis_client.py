import redis.asyncio as aioredis
import os
import logging
from typing import Optional

logger = logging.getLogger('sigil.service.redis')

redis_clients: dict[str, aioredis.Redis] = {}


def get_redis_client(redis_url: Optional[str] = None) -> aioredis.Redis:
    """Return a shared client for ``redis_url`` (REDIS_URL by default), creating it on first use."""
    if not redis_url:
        redis_url = os.getenv("REDIS_URL", "redis://localhost:6379")

    if redis_url not in redis_clients:
        logger.info("Creating new Redis client for session storage")
        redis_clients[redis_url] = aioredis.from_url(redis_url, decode_responses=True)

    return redis_clients[redis_url]


async def close_redis_clients() -> None:
    for redis_url, client in list(redis_clients.items()):
        try:
            await client.aclose()
        except Exception as e:
            logger.warning(f"Error closing Redis client: {e}")
        redis_clients.pop(redis_url, None)
