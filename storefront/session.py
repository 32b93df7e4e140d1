"""
Storefront Session

Ties the catalog client to the cart manager for one shopper:
- product grid with the last fetched lists kept for lookups
- category filters ("all" is served from the cached full list)
- product details panel
- cart actions that answer with toast notices
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from storefront.cart import CartLine, CartManager, CartTotals
from storefront.catalog import (
    ALL_CATEGORIES,
    CatalogClient,
    CategoryFilter,
    Product,
    ProductCard,
    ProductDetails,
    build_category_filters,
)
from storefront.errors import (
    CatalogUnavailableError,
    ERROR_CART_NOT_SAVED,
    ERROR_PRODUCTS_FILTER_FAILED,
    ERROR_PRODUCTS_LOAD_FAILED,
    MESSAGE_NO_PRODUCTS,
)
from storefront.logging import get_logger, sanitize_string_for_logging

logger = get_logger(__name__)


class NoticeKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass(frozen=True)
class Notice:
    """Short-lived message for the shopper (toast)."""
    message: str
    kind: NoticeKind = NoticeKind.INFO


@dataclass
class ProductGrid:
    """What the product grid should show: cards, an empty message, or an error."""
    cards: List[ProductCard] = field(default_factory=list)
    empty_message: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def of(cls, products: List[Product]) -> "ProductGrid":
        if not products:
            return cls(empty_message=MESSAGE_NO_PRODUCTS)
        return cls(cards=[ProductCard.from_product(p) for p in products])


@dataclass(frozen=True)
class CartView:
    lines: List[CartLine]
    item_count: int
    totals: CartTotals


class StorefrontSession:
    """
    One shopper's view of the store.

    Usage:
        session = StorefrontSession(CatalogClient(), manager)
        grid = await session.load_products()
        notices = session.add_to_cart(grid.cards[0].id)
    """

    def __init__(self, catalog: CatalogClient, cart: CartManager):
        self.catalog = catalog
        self.cart = cart
        self.all_products: List[Product] = []
        self.current_products: List[Product] = []
        self.active_category: str = ALL_CATEGORIES

    async def load_products(self) -> ProductGrid:
        """Fetch the full catalog and make it the current list."""
        try:
            products = await self.catalog.get_products()
        except CatalogUnavailableError as e:
            logger.error(f"Error fetching products: {e}")
            return ProductGrid(error=ERROR_PRODUCTS_LOAD_FAILED)

        self.all_products = products
        self.current_products = products
        self.active_category = ALL_CATEGORIES
        return ProductGrid.of(products)

    async def load_categories(self) -> List[CategoryFilter]:
        try:
            categories = await self.catalog.get_categories()
        except CatalogUnavailableError as e:
            logger.error(f"Error fetching categories: {e}")
            categories = []
        return build_category_filters(categories, self.active_category)

    async def filter_by_category(self, category: str) -> ProductGrid:
        """Show one category; "all" restores the cached full list."""
        if category == ALL_CATEGORIES:
            self.current_products = self.all_products
            self.active_category = ALL_CATEGORIES
            return ProductGrid.of(self.all_products)

        try:
            products = await self.catalog.get_products_in_category(category)
        except CatalogUnavailableError as e:
            logger.error(
                f"Error filtering products by {sanitize_string_for_logging(category)}: {e}"
            )
            return ProductGrid(error=ERROR_PRODUCTS_FILTER_FAILED)

        self.current_products = products
        self.active_category = category
        return ProductGrid.of(products)

    def _find_current(self, product_id: int) -> Optional[Product]:
        return next((p for p in self.current_products if p.id == product_id), None)

    def product_details(self, product_id: int) -> Optional[ProductDetails]:
        product = self._find_current(product_id)
        if product is None:
            return None
        return ProductDetails.from_product(product)

    def _with_storage_warning(self, notices: List[Notice]) -> List[Notice]:
        if self.cart.last_storage_error is not None:
            notices.append(Notice(ERROR_CART_NOT_SAVED, NoticeKind.INFO))
        return notices

    def add_to_cart(self, product_id: int) -> List[Notice]:
        """Add a product from the current list; unknown ids produce no notice."""
        product = self._find_current(product_id)
        if product is None:
            return []

        self.cart.add_item(product)
        return self._with_storage_warning(
            [Notice(f'Added "{product.title}" to cart!', NoticeKind.SUCCESS)]
        )

    def remove_from_cart(self, product_id: int) -> List[Notice]:
        removed = self.cart.remove_item(product_id)
        if removed is None:
            return []
        return self._with_storage_warning(
            [Notice(f'Removed "{removed.title}" from cart', NoticeKind.INFO)]
        )

    def update_quantity(self, product_id: int, quantity: int) -> List[Notice]:
        if quantity <= 0:
            return self.remove_from_cart(product_id)
        if self.cart.set_quantity(product_id, quantity) is None:
            return []
        return self._with_storage_warning([])

    def clear_cart(self) -> List[Notice]:
        self.cart.clear()
        return self._with_storage_warning([Notice("Cart cleared", NoticeKind.INFO)])

    def cart_view(self) -> CartView:
        return CartView(
            lines=list(self.cart.lines),
            item_count=self.cart.item_count(),
            totals=self.cart.compute_totals(),
        )
