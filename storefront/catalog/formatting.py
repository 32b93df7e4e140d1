"""View models for the product grid, filters and details panel."""
from dataclasses import dataclass
from typing import List, Optional

from storefront.money import Numeric, format_money

from .models import Product

ALL_CATEGORIES = "all"


def format_category_name(category: str) -> str:
    """Capitalize the first letter of each space-separated word."""
    return " ".join(word[:1].upper() + word[1:] for word in category.split(" "))


def format_price(value: Numeric) -> str:
    return format_money(value)


def _rating_of(product: Product) -> tuple:
    if product.rating is None:
        return 0, 0
    return product.rating.rate, product.rating.count


@dataclass(frozen=True)
class ProductCard:
    """One tile of the product grid."""
    id: int
    title: str
    image: str
    category_label: str
    price_label: str
    rating: float
    rating_count: int

    @property
    def rating_label(self) -> str:
        return f"{self.rating} ({self.rating_count})"

    @classmethod
    def from_product(cls, product: Product) -> "ProductCard":
        rate, count = _rating_of(product)
        return cls(
            id=product.id,
            title=product.title,
            image=product.image,
            category_label=format_category_name(product.category),
            price_label=format_price(product.price),
            rating=rate,
            rating_count=count,
        )


@dataclass(frozen=True)
class ProductDetails:
    """Content of the product-details panel."""
    id: int
    title: str
    image: str
    category_label: str
    price_label: str
    description: str
    rating_label: str

    @classmethod
    def from_product(cls, product: Product) -> "ProductDetails":
        rate, count = _rating_of(product)
        return cls(
            id=product.id,
            title=product.title,
            image=product.image,
            category_label=format_category_name(product.category),
            price_label=format_price(product.price),
            description=product.description,
            rating_label=f"{rate} ({count} reviews)",
        )


@dataclass(frozen=True)
class CategoryFilter:
    value: str
    label: str
    active: bool = False


def build_category_filters(categories: List[str], active: Optional[str] = None) -> List[CategoryFilter]:
    """Filter buttons, always led by "All"."""
    active = active or ALL_CATEGORIES
    filters = [CategoryFilter(ALL_CATEGORIES, "All", active == ALL_CATEGORIES)]
    filters.extend(
        CategoryFilter(category, format_category_name(category), active == category)
        for category in categories
    )
    return filters
