"""
FastAPI Routers Package

All routers are included in api/index.py.
"""

from storefront.routers.catalog import router as catalog_router
from storefront.routers.cart import router as cart_router

__all__ = [
    "catalog_router",
    "cart_router",
]
