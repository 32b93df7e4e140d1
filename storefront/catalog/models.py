"""
Pydantic Models - Catalog product schemas

Shapes returned by the public catalog API:
    GET /products            -> list[Product]
    GET /products/{id}       -> Product
    GET /products/categories -> list[str]
"""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from storefront.money import to_decimal


class Rating(BaseModel):
    """Aggregate customer rating."""
    rate: float = 0
    count: int = 0


class Product(BaseModel):
    """Catalog product as served by the remote API."""
    model_config = ConfigDict(extra="ignore")

    id: int
    title: str
    price: Decimal = Field(ge=0)
    description: str = ""
    category: str
    image: str
    rating: Optional[Rating] = None

    @field_validator("price", mode="before")
    @classmethod
    def _price_as_decimal(cls, value):
        # Floats go through str() so 109.95 stays 109.95
        if isinstance(value, float):
            return to_decimal(value)
        return value


ProductList = TypeAdapter(List[Product])
CategoryList = TypeAdapter(List[str])
