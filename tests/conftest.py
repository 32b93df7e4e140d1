"""Pytest configuration and fixtures"""
import os
from typing import Callable, Dict, List, Optional

import httpx
import pytest
from tenacity import wait_none

# Keep tests away from real storage and the real catalog
os.environ.setdefault("CART_STORAGE_BACKEND", "memory")
os.environ.setdefault("CATALOG_API_URL", "https://catalog.test")

from storefront.cart import CartManager, CartStorage, MemoryStorage
from storefront.catalog import CatalogClient, Product
from storefront.errors import StorageError


class FailingStorage(CartStorage):
    """Storage whose reads and/or writes always fail."""

    def __init__(self, fail_reads: bool = False, fail_writes: bool = True):
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self.writes = 0

    def read(self, key: str) -> Optional[str]:
        if self.fail_reads:
            raise StorageError("storage offline")
        return None

    def write(self, key: str, value: str) -> None:
        self.writes += 1
        if self.fail_writes:
            raise StorageError("quota exceeded")

    def delete(self, key: str) -> None:
        if self.fail_writes:
            raise StorageError("quota exceeded")


@pytest.fixture
def sample_product() -> dict:
    """Product payload as served by the catalog"""
    return {
        "id": 1,
        "title": "Fjallraven - Foldsack No. 1 Backpack, Fits 15 Laptops",
        "price": 109.95,
        "description": "Your perfect pack for everyday use and walks in the forest.",
        "category": "men's clothing",
        "image": "https://catalog.test/img/81fPKd-2AYL._AC_SL1500_.jpg",
        "rating": {"rate": 3.9, "count": 120},
    }


@pytest.fixture
def make_product() -> Callable[..., Product]:
    """Build a Product with sensible defaults"""
    def _make(product_id: int = 1, price=10, **overrides) -> Product:
        data = {
            "id": product_id,
            "title": f"Product {product_id}",
            "price": price,
            "category": "electronics",
            "image": f"https://catalog.test/img/{product_id}.jpg",
        }
        data.update(overrides)
        return Product.model_validate(data)
    return _make


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def manager(memory_storage) -> CartManager:
    """Hydrated cart manager over in-memory storage"""
    cart_manager = CartManager(memory_storage)
    cart_manager.hydrate()
    return cart_manager


@pytest.fixture
def failing_storage() -> FailingStorage:
    return FailingStorage()


@pytest.fixture
def unreadable_storage() -> FailingStorage:
    return FailingStorage(fail_reads=True)


@pytest.fixture
def catalog_payloads(sample_product) -> Dict[str, object]:
    """Canned catalog responses keyed by request path"""
    second = {
        "id": 5,
        "title": "John Hardy Women's Legends Naga Bracelet",
        "price": 695,
        "description": "From our Legends Collection.",
        "category": "jewelery",
        "image": "https://catalog.test/img/71pWzhdJNwL._AC_UL640_QL65_ML3_.jpg",
        "rating": {"rate": 4.6, "count": 400},
    }
    return {
        "/products": [sample_product, second],
        "/products/categories": ["electronics", "jewelery", "men's clothing", "women's clothing"],
        "/products/category/jewelery": [second],
        "/products/1": sample_product,
        "/products/5": second,
    }


@pytest.fixture
def make_catalog(catalog_payloads) -> Callable[..., CatalogClient]:
    """CatalogClient backed by httpx.MockTransport; unknown paths 404"""
    def _make(handler=None, calls: Optional[List[httpx.Request]] = None) -> CatalogClient:
        def default_handler(request: httpx.Request) -> httpx.Response:
            path = request.url.path
            if path in catalog_payloads:
                return httpx.Response(200, json=catalog_payloads[path])
            return httpx.Response(404)

        def recording_handler(request: httpx.Request) -> httpx.Response:
            if calls is not None:
                calls.append(request)
            return (handler or default_handler)(request)

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(recording_handler))
        return CatalogClient(
            base_url="https://catalog.test",
            http_client=http_client,
            wait=wait_none(),
        )
    return _make
