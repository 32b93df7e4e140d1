"""Cart manager: in-memory cart mirrored to a storage slot."""
import json
import threading
from typing import Callable, Optional, Tuple

from storefront.db import StorageKeys
from storefront.errors import StorageError
from storefront.logging import get_logger, sanitize_string_for_logging

from .models import Cart, CartLine, ProductInput, as_product
from .pricing import CartTotals, compute_totals
from .storage import CartStorage, MemoryStorage

logger = get_logger(__name__)

StorageErrorCallback = Callable[[StorageError], None]


class CartManager:
    """
    Owns the session's cart and persists it after every mutation.

    The in-memory cart is authoritative. A failed write is logged, kept
    in `last_storage_error` and handed to `on_storage_error`; the
    operation that triggered it still completes, even if the callback
    itself raises.

    Mutations hold a lock so API handlers on worker threads can share
    one manager.

    Usage:
        manager = CartManager(JsonFileStorage(".storefront/storage.json"))
        manager.hydrate()
        manager.add_item(product)
        manager.compute_totals()
    """

    def __init__(
        self,
        storage: Optional[CartStorage] = None,
        key: str = StorageKeys.CART,
        on_storage_error: Optional[StorageErrorCallback] = None,
    ):
        self.storage = storage if storage is not None else MemoryStorage()
        self.key = key
        self.on_storage_error = on_storage_error
        self.last_storage_error: Optional[StorageError] = None
        self._cart = Cart()
        self._lock = threading.RLock()

    @property
    def lines(self) -> Tuple[CartLine, ...]:
        """Snapshot of the current lines in insertion order."""
        with self._lock:
            return tuple(self._cart.lines)

    def hydrate(self) -> Cart:
        """Load the persisted cart; missing or unreadable data gives an empty cart."""
        with self._lock:
            self._cart = self._load()
            return self._cart

    def _load(self) -> Cart:
        try:
            raw = self.storage.read(self.key)
        except StorageError as e:
            logger.warning(f"Cart storage unreadable, starting empty: {e}")
            return Cart()

        if not raw:
            return Cart()

        try:
            cart = Cart.from_records(json.loads(raw))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError, RecursionError) as e:
            logger.warning(f"Corrupted cart data under '{self.key}', starting empty: {e}")
            return Cart()

        logger.info(f"Hydrated cart with {len(cart.lines)} line(s)")
        return cart

    def _persist(self) -> bool:
        try:
            self.storage.write(self.key, json.dumps(self._cart.to_records()))
        except StorageError as e:
            logger.warning(f"Cart not persisted, keeping in-memory state: {e}")
            self.last_storage_error = e
            if self.on_storage_error is not None:
                try:
                    self.on_storage_error(e)
                except Exception as callback_error:
                    logger.error(f"Storage error callback failed: {callback_error}", exc_info=True)
            return False
        self.last_storage_error = None
        return True

    def add_item(self, product: ProductInput) -> CartLine:
        """Add one unit of product; returns the updated line."""
        product = as_product(product)
        with self._lock:
            line = self._cart.add(product)
            logger.info(
                f"Cart add: product {line.id} "
                f"({sanitize_string_for_logging(line.title)}) quantity={line.quantity}"
            )
            self._persist()
            return line

    def remove_item(self, product_id: int) -> Optional[CartLine]:
        """Remove product's line; returns it, or None when it was not in the cart."""
        with self._lock:
            removed = self._cart.remove(product_id)
            if removed is not None:
                logger.info(f"Cart remove: product {product_id}")
            self._persist()
            return removed

    def set_quantity(self, product_id: int, quantity: int) -> Optional[CartLine]:
        """
        Overwrite a line's quantity.

        quantity <= 0 behaves exactly like remove_item. A product that is
        not in the cart is ignored and nothing is written.
        """
        if quantity <= 0:
            self.remove_item(product_id)
            return None

        with self._lock:
            line = self._cart.set_quantity(product_id, quantity)
            if line is None:
                logger.debug(f"Cart set_quantity ignored: product {product_id} not in cart")
                return None

            logger.info(f"Cart set_quantity: product {product_id} quantity={quantity}")
            self._persist()
            return line

    def clear(self) -> None:
        """Empty the cart unconditionally."""
        with self._lock:
            self._cart.clear()
            logger.info("Cart cleared")
            self._persist()

    def compute_totals(self) -> CartTotals:
        with self._lock:
            return compute_totals(self._cart.lines)

    def item_count(self) -> int:
        with self._lock:
            return self._cart.item_count
