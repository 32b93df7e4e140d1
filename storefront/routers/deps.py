"""
Shared Dependencies for Routers

Lazy-loaded singletons: one cart manager and one catalog client per
process. Tests swap them through app.dependency_overrides.
"""

import threading
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from storefront.cart import CartManager
    from storefront.catalog import CatalogClient


# ==================== LAZY SINGLETONS ====================

_cart_manager: Optional["CartManager"] = None
_catalog_client: Optional["CatalogClient"] = None
_cart_manager_lock = threading.Lock()


def get_cart_manager() -> "CartManager":
    """Get or create the hydrated CartManager singleton."""
    global _cart_manager
    if _cart_manager is None:
        with _cart_manager_lock:
            if _cart_manager is None:
                from storefront.cart import CartManager, build_storage
                from storefront.config import get_settings

                settings = get_settings()
                manager = CartManager(build_storage(settings), key=settings.cart_storage_key)
                manager.hydrate()
                _cart_manager = manager
    return _cart_manager


def get_catalog_client() -> "CatalogClient":
    """Get or create CatalogClient singleton."""
    global _catalog_client
    if _catalog_client is None:
        from storefront.catalog import CatalogClient
        _catalog_client = CatalogClient()
    return _catalog_client


# ==================== SHUTDOWN HELPERS ====================

async def shutdown_services():
    """Close singleton services (http clients)."""
    global _catalog_client
    if _catalog_client is not None:
        try:
            await _catalog_client.aclose()
        finally:
            _catalog_client = None
