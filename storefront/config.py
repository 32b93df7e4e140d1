"""
Storefront configuration.

Values come from environment variables; a local `.env` file is loaded
first when present.
"""

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

STORAGE_BACKENDS = ("memory", "file", "redis")


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the catalog client and cart storage."""
    catalog_api_url: str = "https://fakestoreapi.com"
    catalog_timeout_seconds: float = 10.0
    cart_storage_backend: str = "file"
    cart_storage_path: str = ".storefront/storage.json"
    cart_storage_key: str = "cart"
    cart_ttl_seconds: int = 0
    upstash_redis_rest_url: str = ""
    upstash_redis_rest_token: str = ""

    @classmethod
    def from_env(cls) -> "Settings":
        backend = os.environ.get("CART_STORAGE_BACKEND", cls.cart_storage_backend).lower()
        if backend not in STORAGE_BACKENDS:
            raise ValueError(
                f"CART_STORAGE_BACKEND must be one of {', '.join(STORAGE_BACKENDS)}, got {backend!r}"
            )
        return cls(
            catalog_api_url=os.environ.get("CATALOG_API_URL", cls.catalog_api_url).rstrip("/"),
            catalog_timeout_seconds=float(
                os.environ.get("CATALOG_TIMEOUT_SECONDS", cls.catalog_timeout_seconds)
            ),
            cart_storage_backend=backend,
            cart_storage_path=os.environ.get("CART_STORAGE_PATH", cls.cart_storage_path),
            cart_storage_key=os.environ.get("CART_STORAGE_KEY", cls.cart_storage_key),
            cart_ttl_seconds=int(os.environ.get("CART_TTL_SECONDS", cls.cart_ttl_seconds)),
            upstash_redis_rest_url=os.environ.get("UPSTASH_REDIS_REST_URL", ""),
            upstash_redis_rest_token=os.environ.get("UPSTASH_REDIS_REST_TOKEN", ""),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get settings singleton (read once from the environment)."""
    return Settings.from_env()
