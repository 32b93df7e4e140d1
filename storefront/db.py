"""
Storage Clients - Upstash Redis

Provides the singleton Upstash Redis client used by the Redis cart
storage backend, plus the key names shared by every backend.
"""

from typing import Optional

from upstash_redis import Redis

from storefront.config import get_settings


_redis_client: Optional[Redis] = None


def get_redis() -> Redis:
    """
    Get Upstash Redis client (singleton).

    Uses standard Upstash env var names:
    - UPSTASH_REDIS_REST_URL
    - UPSTASH_REDIS_REST_TOKEN

    Cart operations are synchronous, so the sync REST client is used.
    """
    global _redis_client

    if _redis_client is None:
        settings = get_settings()
        if not settings.upstash_redis_rest_url or not settings.upstash_redis_rest_token:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _redis_client = Redis(
            url=settings.upstash_redis_rest_url,
            token=settings.upstash_redis_rest_token,
        )

    return _redis_client


class StorageKeys:
    """Key names for persisted storefront state."""

    CART = "cart"  # default slot, overridable with CART_STORAGE_KEY
    PREFIX = "storefront:"  # namespacing inside shared Redis databases

    @staticmethod
    def redis_key(key: str) -> str:
        return f"{StorageKeys.PREFIX}{key}"
