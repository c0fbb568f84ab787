"""
Redis client for durable cart snapshots.

Provides a lazily created async Upstash Redis client and the key layout used
by the storefront.
"""

from typing import Optional

from upstash_redis.asyncio import Redis as AsyncRedis

from storefront.config import Settings, load_settings
from storefront.errors import ERROR_REDIS_NOT_CONFIGURED


# Singleton instance
_redis_client: Optional[AsyncRedis] = None


def get_redis(settings: Optional[Settings] = None) -> AsyncRedis:
    """
    Get async Upstash Redis client (singleton).

    Uses standard Upstash env var names:
    - UPSTASH_REDIS_REST_URL
    - UPSTASH_REDIS_REST_TOKEN
    """
    global _redis_client

    if _redis_client is None:
        settings = settings or load_settings()
        if not settings.redis_url or not settings.redis_token:
            raise ValueError(ERROR_REDIS_NOT_CONFIGURED)
        _redis_client = AsyncRedis(url=settings.redis_url, token=settings.redis_token)

    return _redis_client


class RedisKeys:
    """Redis key prefixes for storefront data."""

    # Cart snapshot: JSON list of line records, no TTL
    CART_ITEMS = "cart:items:"  # cart:items:{owner_id}

    @staticmethod
    def cart_key(owner_id: str) -> str:
        return f"{RedisKeys.CART_ITEMS}{owner_id}"
