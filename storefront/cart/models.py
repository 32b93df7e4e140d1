"""Cart models with Decimal-based pricing and pure state transitions."""
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Union

from storefront.catalog.models import Product
from storefront.money import multiply, to_decimal, to_float


@dataclass(frozen=True)
class CartLine:
    """Single product entry in the cart."""
    id: int
    title: str
    price: Decimal
    image: str
    category: str
    quantity: int = 1

    @property
    def line_total(self) -> Decimal:
        """Unrounded price * quantity."""
        return multiply(self.price, self.quantity)

    @classmethod
    def from_product(cls, product: Product) -> "CartLine":
        """New line with quantity 1; display metadata is copied, not linked."""
        return cls(
            id=product.id,
            title=product.title,
            price=product.price,
            image=product.image,
            category=product.category,
            quantity=1,
        )

    def to_dict(self) -> dict:
        """Convert to the persisted record layout."""
        return {
            "id": self.id,
            "title": self.title,
            "price": to_float(self.price),
            "image": self.image,
            "category": self.category,
            "quantity": self.quantity,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CartLine":
        """
        Create from a persisted record.

        Raises:
            KeyError: a field is missing
            TypeError / ValueError: a field has the wrong type or a negative price
        """
        line_id = data["id"]
        quantity = data["quantity"]
        if isinstance(line_id, bool) or not isinstance(line_id, int):
            raise TypeError(f"cart line id must be an integer, got {line_id!r}")
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise TypeError(f"cart line quantity must be an integer, got {quantity!r}")

        raw_price = data["price"]
        if isinstance(raw_price, bool) or not isinstance(raw_price, (int, float)):
            raise TypeError(f"cart line price must be numeric, got {raw_price!r}")
        price = to_decimal(raw_price)
        if not price.is_finite() or price < 0:
            raise ValueError(f"cart line price must be a non-negative number, got {raw_price!r}")

        for name in ("title", "image", "category"):
            if not isinstance(data[name], str):
                raise TypeError(f"cart line {name} must be a string")

        return cls(
            id=line_id,
            title=data["title"],
            price=price,
            image=data["image"],
            category=data["category"],
            quantity=quantity,
        )


@dataclass
class Cart:
    """
    Ordered cart lines keyed by product id.

    Invariants: at most one line per id, every line has quantity >= 1.
    None of these methods persist anything; see CartManager for that.
    """
    lines: List[CartLine] = field(default_factory=list)

    def _index_of(self, product_id: int) -> Optional[int]:
        for index, line in enumerate(self.lines):
            if line.id == product_id:
                return index
        return None

    def find(self, product_id: int) -> Optional[CartLine]:
        index = self._index_of(product_id)
        return None if index is None else self.lines[index]

    @property
    def item_count(self) -> int:
        """Total number of units in cart."""
        return sum(line.quantity for line in self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def add(self, product: Product) -> CartLine:
        """Increment the product's line, or append a new one with quantity 1."""
        index = self._index_of(product.id)
        if index is None:
            line = CartLine.from_product(product)
            self.lines.append(line)
            return line

        line = replace(self.lines[index], quantity=self.lines[index].quantity + 1)
        self.lines[index] = line
        return line

    def remove(self, product_id: int) -> Optional[CartLine]:
        """Drop the line for product_id, returning it (None if absent)."""
        index = self._index_of(product_id)
        if index is None:
            return None
        return self.lines.pop(index)

    def set_quantity(self, product_id: int, quantity: int) -> Optional[CartLine]:
        """
        Overwrite an existing line's quantity.

        quantity <= 0 removes the line and returns None. An absent id is
        left alone and also returns None.
        """
        if quantity <= 0:
            self.remove(product_id)
            return None

        index = self._index_of(product_id)
        if index is None:
            return None

        line = replace(self.lines[index], quantity=quantity)
        self.lines[index] = line
        return line

    def clear(self) -> None:
        self.lines.clear()

    def to_records(self) -> List[Dict[str, Any]]:
        """Convert to the persisted array layout."""
        return [line.to_dict() for line in self.lines]

    @classmethod
    def from_records(cls, records: List[Mapping[str, Any]]) -> "Cart":
        """
        Rebuild a cart from persisted records.

        Lines with quantity <= 0 are dropped and a repeated id keeps its
        first occurrence, so the invariants hold whatever was stored.
        """
        if not isinstance(records, list):
            raise TypeError("persisted cart must be a list of records")

        cart = cls()
        for record in records:
            if not isinstance(record, Mapping):
                raise TypeError("persisted cart record must be an object")
            line = CartLine.from_dict(record)
            if line.quantity <= 0 or cart.find(line.id) is not None:
                continue
            cart.lines.append(line)
        return cart


ProductInput = Union[Product, Mapping[str, Any]]


def as_product(product: ProductInput) -> Product:
    """Accept a Product or a plain mapping with the product fields."""
    if isinstance(product, Product):
        return product
    return Product.model_validate(product)
