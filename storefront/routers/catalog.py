"""
Catalog API Router

Public read-only product endpoints proxied from the remote catalog.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from storefront.catalog import CatalogClient, Product, format_category_name, format_price
from storefront.errors import CatalogUnavailableError, ERROR_PRODUCT_NOT_FOUND
from storefront.money import to_float

from .deps import get_catalog_client

router = APIRouter(prefix="/api/products", tags=["products"])


# ==================== PYDANTIC MODELS ====================

class ProductResponse(BaseModel):
    id: int
    title: str
    price: float
    price_label: str
    description: str
    category: str
    category_label: str
    image: str
    rating: float = 0
    rating_count: int = 0


class CategoryResponse(BaseModel):
    value: str
    label: str


def _to_response(product: Product) -> ProductResponse:
    return ProductResponse(
        id=product.id,
        title=product.title,
        price=to_float(product.price),
        price_label=format_price(product.price),
        description=product.description,
        category=product.category,
        category_label=format_category_name(product.category),
        image=product.image,
        rating=product.rating.rate if product.rating else 0,
        rating_count=product.rating.count if product.rating else 0,
    )


def _catalog_down(e: CatalogUnavailableError) -> HTTPException:
    return HTTPException(status_code=502, detail=str(e))


# ==================== PRODUCTS API ====================

@router.get("", response_model=List[ProductResponse])
async def list_products(catalog: CatalogClient = Depends(get_catalog_client)):
    """All products"""
    try:
        products = await catalog.get_products()
    except CatalogUnavailableError as e:
        raise _catalog_down(e)
    return [_to_response(p) for p in products]


@router.get("/categories", response_model=List[CategoryResponse])
async def list_categories(catalog: CatalogClient = Depends(get_catalog_client)):
    """Category names with display labels"""
    try:
        categories = await catalog.get_categories()
    except CatalogUnavailableError as e:
        raise _catalog_down(e)
    return [CategoryResponse(value=c, label=format_category_name(c)) for c in categories]


@router.get("/category/{name}", response_model=List[ProductResponse])
async def list_products_in_category(name: str, catalog: CatalogClient = Depends(get_catalog_client)):
    """Products in one category"""
    try:
        products = await catalog.get_products_in_category(name)
    except CatalogUnavailableError as e:
        raise _catalog_down(e)
    return [_to_response(p) for p in products]


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: int, catalog: CatalogClient = Depends(get_catalog_client)):
    """Product by ID"""
    try:
        product: Optional[Product] = await catalog.get_product(product_id)
    except CatalogUnavailableError as e:
        raise _catalog_down(e)
    if product is None:
        raise HTTPException(status_code=404, detail=ERROR_PRODUCT_NOT_FOUND)
    return _to_response(product)
