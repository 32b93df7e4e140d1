"""
Cart API Router

Cart endpoints backed by the process-wide CartManager. Every mutating
response carries `warning` when the cart could not be persisted.

Storage backends block (file I/O, Upstash REST calls), so handlers that
touch the manager are plain `def` and run in the threadpool.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, Field

from storefront.cart import CartLine, CartManager
from storefront.catalog import CatalogClient
from storefront.errors import (
    CatalogUnavailableError,
    ERROR_CART_NOT_SAVED,
    ERROR_PRODUCT_NOT_FOUND,
)
from .deps import get_cart_manager, get_catalog_client

router = APIRouter(prefix="/api/cart", tags=["cart"])


# ==================== PYDANTIC MODELS ====================

class CartLineResponse(BaseModel):
    id: int
    title: str
    price: float
    image: str
    category: str
    quantity: int


class CartTotalsResponse(BaseModel):
    subtotal: float
    tax: float
    shipping: float
    total: float


class CartResponse(BaseModel):
    items: List[CartLineResponse]
    item_count: int
    totals: CartTotalsResponse
    warning: Optional[str] = None


class CartLineChange(BaseModel):
    item: Optional[CartLineResponse] = None
    cart: CartResponse


class QuantityUpdate(BaseModel):
    quantity: int = Field(..., description="New quantity; 0 or less removes the line")


def _line(line: Optional[CartLine]) -> Optional[CartLineResponse]:
    if line is None:
        return None
    return CartLineResponse(**line.to_dict())


def _cart(manager: CartManager) -> CartResponse:
    totals = manager.compute_totals()
    return CartResponse(
        items=[CartLineResponse(**line.to_dict()) for line in manager.lines],
        item_count=manager.item_count(),
        totals=CartTotalsResponse(**totals.to_dict()),
        warning=ERROR_CART_NOT_SAVED if manager.last_storage_error else None,
    )


# ==================== CART API ====================

@router.get("", response_model=CartResponse)
def get_cart(manager: CartManager = Depends(get_cart_manager)):
    """Current cart with totals"""
    return _cart(manager)


@router.post("/items/{product_id}", response_model=CartLineChange)
async def add_item(
    product_id: int,
    manager: CartManager = Depends(get_cart_manager),
    catalog: CatalogClient = Depends(get_catalog_client),
):
    """Add one unit of a catalog product"""
    try:
        product = await catalog.get_product(product_id)
    except CatalogUnavailableError as e:
        raise HTTPException(status_code=502, detail=str(e))
    if product is None:
        raise HTTPException(status_code=404, detail=ERROR_PRODUCT_NOT_FOUND)

    line = await run_in_threadpool(manager.add_item, product)
    return CartLineChange(item=_line(line), cart=_cart(manager))


@router.patch("/items/{product_id}", response_model=CartLineChange)
def update_item(
    product_id: int,
    body: QuantityUpdate,
    manager: CartManager = Depends(get_cart_manager),
):
    """Set a line's quantity (unknown products are ignored)"""
    line = manager.set_quantity(product_id, body.quantity)
    return CartLineChange(item=_line(line), cart=_cart(manager))


@router.delete("/items/{product_id}", response_model=CartLineChange)
def remove_item(product_id: int, manager: CartManager = Depends(get_cart_manager)):
    """Remove a line (no-op if absent)"""
    removed = manager.remove_item(product_id)
    return CartLineChange(item=_line(removed), cart=_cart(manager))


@router.delete("", response_model=CartResponse)
def clear_cart(manager: CartManager = Depends(get_cart_manager)):
    """Empty the cart"""
    manager.clear()
    return _cart(manager)
