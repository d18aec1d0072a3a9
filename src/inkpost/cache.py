"""Redis connection used by the auth rate limiter.

Learn: Redis is optional. The lifespan tries to connect; if it can't, the
app runs without rate limiting. Callers use get_redis(), which raises
RuntimeError while no connection is open.
"""

from typing import Optional

import redis.asyncio as aioredis

from inkpost.config import settings

# Global Redis connection pool (initialized in lifespan)
_redis: Optional[aioredis.Redis] = None


async def init_redis(url: Optional[str] = None) -> aioredis.Redis:
    """Open the Redis connection pool and verify it with PING."""
    global _redis
    client = aioredis.from_url(
        url or settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
    )
    await client.ping()
    _redis = client
    return _redis


async def close_redis() -> None:
    global _redis
    if _redis:
        await _redis.aclose()
        _redis = None


def get_redis() -> aioredis.Redis:
    """Get the Redis connection (must be initialized first)."""
    if _redis is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return _redis
