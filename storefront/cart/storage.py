"""
Cart storage backends.

Each backend is a durable string-keyed slot store: the cart is written
in full as one JSON string under a single key.
"""
import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

from storefront.config import Settings
from storefront.db import StorageKeys, get_redis
from storefront.errors import StorageError
from storefront.logging import get_logger

logger = get_logger(__name__)


class CartStorage(ABC):
    """Durable string-keyed storage. Failures raise StorageError."""

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """Return the stored value or None if the key is absent."""

    @abstractmethod
    def write(self, key: str, value: str) -> None:
        """Replace the value stored under key."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key; absent keys are ignored."""


class MemoryStorage(CartStorage):
    """Process-local storage, for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def write(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStorage(CartStorage):
    """
    All keys kept in one JSON object on disk.

    Writes go to a temp file in the same directory and are moved into
    place with os.replace, so readers never see a half-written file.
    """

    def __init__(self, path: os.PathLike | str):
        self.path = Path(path)

    def _load(self) -> Dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Cannot read {self.path}: {e}") from e

        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, RecursionError) as e:
            raise StorageError(f"Corrupted storage file {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Corrupted storage file {self.path}: expected an object")
        return data

    def _dump(self, data: Dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".storage-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(data, fh)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Cannot write {self.path}: {e}") from e

    def read(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def write(self, key: str, value: str) -> None:
        try:
            data = self._load()
        except StorageError as e:
            # An unreadable file is overwritten rather than blocking every save
            logger.warning(f"Replacing unreadable storage file: {e}")
            data = {}
        data[key] = value
        self._dump(data)

    def delete(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._dump(data)


class RedisStorage(CartStorage):
    """Upstash Redis backed storage with optional expiry."""

    def __init__(self, redis=None, ttl_seconds: int = 0):
        self._redis = redis  # Lazy initialization
        self.ttl_seconds = ttl_seconds

    @property
    def redis(self):
        """Get Redis client (lazy initialization)."""
        if self._redis is None:
            try:
                self._redis = get_redis()
            except ValueError as e:
                raise StorageError(f"Redis not available: {e}") from e
        return self._redis

    def read(self, key: str) -> Optional[str]:
        try:
            value = self.redis.get(StorageKeys.redis_key(key))
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to read {key} from Redis: {e}") from e
        return value if value else None

    def write(self, key: str, value: str) -> None:
        try:
            if self.ttl_seconds > 0:
                self.redis.set(StorageKeys.redis_key(key), value, ex=self.ttl_seconds)
            else:
                self.redis.set(StorageKeys.redis_key(key), value)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to write {key} to Redis: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self.redis.delete(StorageKeys.redis_key(key))
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to delete {key} from Redis: {e}") from e


def build_storage(settings: Settings) -> CartStorage:
    """Pick the storage backend named in settings."""
    backend = settings.cart_storage_backend
    if backend == "memory":
        return MemoryStorage()
    if backend == "file":
        return JsonFileStorage(settings.cart_storage_path)
    if backend == "redis":
        return RedisStorage(ttl_seconds=settings.cart_ttl_seconds)
    raise ValueError(f"Unknown cart storage backend: {backend}")
