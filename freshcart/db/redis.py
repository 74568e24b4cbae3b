# freshcart/db/redis.py
import logging
from typing import Optional

import redis.asyncio as redis

logger = logging.getLogger(__name__)

redis_client: redis.Redis | None = None


async def connect(url: Optional[str]) -> None:
    """
    Connect Redis when a URL is configured.
    Missing or unreachable Redis is logged, never fatal: the interaction store
    then lives in process memory.
    """
    global redis_client
    if not url:
        logger.warning("No REDIS_URL configured, skipping Redis connection")
        redis_client = None
        return

    try:
        logger.info("Connecting to Redis at %s", url)
        redis_client = redis.from_url(url, decode_responses=True)
        await redis_client.ping()
        logger.info("Redis connection successful")
    except Exception as e:
        logger.warning("Failed to connect to Redis: %s", e)
        redis_client = None


async def disconnect() -> None:
    """Close the Redis connection if one exists."""
    global redis_client
    if redis_client:
        await redis_client.aclose()
        redis_client = None
        logger.info("Redis disconnected")


def get_redis() -> redis.Redis | None:
    """Current Redis client, or None when Redis is not configured or unavailable."""
    return redis_client
