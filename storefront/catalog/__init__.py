"""Catalog package: product models, API client, and display formatting."""
from .models import Product, Rating
from .client import CatalogClient
from .formatting import (
    ALL_CATEGORIES,
    CategoryFilter,
    ProductCard,
    ProductDetails,
    build_category_filters,
    format_category_name,
    format_price,
)

__all__ = [
    "Product",
    "Rating",
    "CatalogClient",
    "ALL_CATEGORIES",
    "CategoryFilter",
    "ProductCard",
    "ProductDetails",
    "build_category_filters",
    "format_category_name",
    "format_price",
]
