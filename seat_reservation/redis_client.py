"""Redis client for the reaper sweep lease."""

import logging

import redis.asyncio as redis

from seat_reservation.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

# Global Redis client
_redis_client: redis.Redis | None = None


async def get_redis() -> redis.Redis:
    """Get Redis client instance."""
    global _redis_client
    if _redis_client is None:
        _redis_client = redis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=True,
        )
    return _redis_client


async def redis_healthy() -> bool:
    """Ping Redis; the engine keeps working without it, only sweeps lose their lease."""
    try:
        client = await get_redis()
        return bool(await client.ping())
    except redis.RedisError as e:
        logger.warning(f"Redis ping failed: {e}")
        return False


async def close_redis() -> None:
    """Close Redis connection."""
    global _redis_client
    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None
