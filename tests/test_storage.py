"""Tests for cart storage backends"""
import json
from unittest.mock import Mock

import pytest

from storefront.cart import CartManager, JsonFileStorage, MemoryStorage, RedisStorage, build_storage
from storefront.config import Settings
from storefront.errors import StorageError


class TestMemoryStorage:

    def test_read_write_delete(self):
        storage = MemoryStorage()

        assert storage.read("cart") is None
        storage.write("cart", "[]")
        assert storage.read("cart") == "[]"
        storage.delete("cart")
        storage.delete("cart")
        assert storage.read("cart") is None


class TestJsonFileStorage:

    def test_missing_file_reads_as_empty(self, tmp_path):
        storage = JsonFileStorage(tmp_path / "nested" / "storage.json")

        assert storage.read("cart") is None

    def test_write_creates_file_and_keeps_other_keys(self, tmp_path):
        path = tmp_path / "storage.json"
        storage = JsonFileStorage(path)

        storage.write("theme", "dark")
        storage.write("cart", "[]")

        assert json.loads(path.read_text()) == {"theme": "dark", "cart": "[]"}
        assert list(tmp_path.glob("*.tmp")) == []

    def test_corrupted_file_raises_on_read(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("{broken")

        with pytest.raises(StorageError):
            JsonFileStorage(path).read("cart")

    def test_write_replaces_corrupted_file(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("{broken")
        storage = JsonFileStorage(path)

        storage.write("cart", "[]")

        assert storage.read("cart") == "[]"

    def test_delete(self, tmp_path):
        storage = JsonFileStorage(tmp_path / "storage.json")
        storage.write("cart", "[]")

        storage.delete("cart")

        assert storage.read("cart") is None

    def test_cart_survives_new_manager(self, tmp_path, make_product):
        path = tmp_path / "storage.json"
        first = CartManager(JsonFileStorage(path))
        first.hydrate()
        first.add_item(make_product(1, price="4.50"))
        first.add_item(make_product(1, price="4.50"))

        second = CartManager(JsonFileStorage(path))
        second.hydrate()

        assert [(l.id, l.quantity) for l in second.lines] == [(1, 2)]
        assert second.compute_totals() == first.compute_totals()

    def test_corrupted_file_hydrates_empty(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("][")
        manager = CartManager(JsonFileStorage(path))

        assert manager.hydrate().is_empty

    def test_non_utf8_file_raises_on_read(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_bytes(b"\xff\xfe")

        with pytest.raises(StorageError):
            JsonFileStorage(path).read("cart")

    def test_non_utf8_file_hydrates_empty(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_bytes(b'{"cart": "\xff\xfe"}')
        manager = CartManager(JsonFileStorage(path))

        assert manager.hydrate().is_empty

    def test_non_utf8_file_is_replaced_on_write(self, tmp_path, make_product):
        path = tmp_path / "storage.json"
        path.write_bytes(b"\xff\xfe garbage")
        manager = CartManager(JsonFileStorage(path))

        manager.add_item(make_product(1))

        assert manager.last_storage_error is None
        assert json.loads(JsonFileStorage(path).read("cart"))[0]["id"] == 1

    def test_deeply_nested_file_raises_on_read(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("[" * 100000 + "]" * 100000)

        with pytest.raises(StorageError):
            JsonFileStorage(path).read("cart")


class TestRedisStorage:

    def test_namespaced_keys_and_ttl(self):
        redis = Mock()
        redis.get.return_value = "[]"
        storage = RedisStorage(redis=redis, ttl_seconds=60)

        storage.write("cart", "[]")
        assert storage.read("cart") == "[]"
        storage.delete("cart")

        redis.set.assert_called_once_with("storefront:cart", "[]", ex=60)
        redis.get.assert_called_once_with("storefront:cart")
        redis.delete.assert_called_once_with("storefront:cart")

    def test_no_ttl_by_default(self):
        redis = Mock()
        RedisStorage(redis=redis).write("cart", "[]")

        redis.set.assert_called_once_with("storefront:cart", "[]")

    def test_empty_value_reads_as_none(self):
        redis = Mock()
        redis.get.return_value = None

        assert RedisStorage(redis=redis).read("cart") is None

    def test_client_errors_become_storage_errors(self):
        redis = Mock()
        redis.set.side_effect = ConnectionError("unreachable")

        with pytest.raises(StorageError):
            RedisStorage(redis=redis).write("cart", "[]")

    def test_missing_credentials_become_storage_errors(self, monkeypatch):
        monkeypatch.setattr("storefront.cart.storage.get_redis", Mock(side_effect=ValueError("not set")))

        with pytest.raises(StorageError):
            RedisStorage().read("cart")


class TestBuildStorage:

    def test_selects_backend(self, tmp_path):
        assert isinstance(build_storage(Settings(cart_storage_backend="memory")), MemoryStorage)
        file_storage = build_storage(
            Settings(cart_storage_backend="file", cart_storage_path=str(tmp_path / "s.json"))
        )
        assert isinstance(file_storage, JsonFileStorage)
        redis_storage = build_storage(Settings(cart_storage_backend="redis", cart_ttl_seconds=30))
        assert isinstance(redis_storage, RedisStorage)
        assert redis_storage.ttl_seconds == 30

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            build_storage(Settings(cart_storage_backend="cookies"))

    def test_settings_reject_unknown_backend(self, monkeypatch):
        monkeypatch.setenv("CART_STORAGE_BACKEND", "cookies")

        with pytest.raises(ValueError):
            Settings.from_env()
