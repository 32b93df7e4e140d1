"""
Storefront Errors

Centralized error messages and the exception types raised by the
storage and catalog layers.
"""

# Catalog errors
ERROR_PRODUCTS_LOAD_FAILED = "Failed to load products. Please try again later."
ERROR_PRODUCTS_FILTER_FAILED = "Failed to filter products. Please try again."
ERROR_PRODUCT_NOT_FOUND = "Product not found"
ERROR_CATALOG_UNAVAILABLE = "Product catalog unavailable"

# Cart errors
ERROR_CART_NOT_SAVED = "Your cart could not be saved. Changes will be lost when the session ends."

# Display messages
MESSAGE_NO_PRODUCTS = "No products found."


class StorefrontError(Exception):
    """Base class for storefront errors."""


class StorageError(StorefrontError):
    """A cart storage backend could not read or write its slot."""


class CatalogUnavailableError(StorefrontError):
    """The remote product catalog failed or returned an unusable payload."""

    def __init__(self, message: str = ERROR_CATALOG_UNAVAILABLE, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
