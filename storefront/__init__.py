"""
Storefront Core Package

- cart: cart manager, pricing, and storage backends
- catalog: product catalog client and display formatting
- session: shopper session tying catalog and cart together
- routers: FastAPI endpoints

Note: Imports are lazy so importing a submodule does not pull in the
HTTP and Redis stacks.
"""

__all__ = [
    "CartManager",
    "CatalogClient",
    "StorefrontSession",
    "get_settings",
]


def __getattr__(name):
    """Lazy attribute access."""
    if name == "CartManager":
        from storefront.cart import CartManager
        return CartManager
    elif name == "CatalogClient":
        from storefront.catalog import CatalogClient
        return CatalogClient
    elif name == "StorefrontSession":
        from storefront.session import StorefrontSession
        return StorefrontSession
    elif name == "get_settings":
        from storefront.config import get_settings
        return get_settings
    raise AttributeError(f"module 'storefront' has no attribute '{name}'")
