"""
Catalog Client - public product REST API

Read-only access to the product catalog:
    GET /products
    GET /products/categories
    GET /products/category/{name}
    GET /products/{id}

Transient failures (connection errors, timeouts, 5xx) are retried with
exponential backoff; anything still failing surfaces as
CatalogUnavailableError.
"""
import json
from typing import Any, List, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from storefront.config import get_settings
from storefront.errors import CatalogUnavailableError
from storefront.logging import get_logger, sanitize_string_for_logging

from .models import CategoryList, Product, ProductList

logger = get_logger(__name__)

MAX_ATTEMPTS = 3


def _is_transient(exc: BaseException) -> bool:
    """Connection problems and 5xx responses are worth another attempt."""
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code >= 500
    return False


class CatalogClient:
    """Async client for the product catalog."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        wait=None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.catalog_api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.catalog_timeout_seconds
        self.wait = wait if wait is not None else wait_exponential(multiplier=0.3, min=0.3, max=3)

        # HTTP client (lazy init)
        self._http_client: Optional[httpx.AsyncClient] = http_client

    def _get_http_client(self) -> httpx.AsyncClient:
        """Lazy creation of shared httpx client with timeouts."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout, connect=5.0),
                limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
            )
        return self._http_client

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def _get_json(self, path: str, allow_missing: bool = False) -> Any:
        url = f"{self.base_url}{path}"
        client = self._get_http_client()

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(MAX_ATTEMPTS),
                wait=self.wait,
                retry=retry_if_exception(_is_transient),
                reraise=True,
            ):
                with attempt:
                    logger.debug(f"CatalogClient GET {url} (attempt {attempt.retry_state.attempt_number})")
                    response = await client.get(url)
                    if response.status_code >= 500:
                        response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"Catalog returned {e.response.status_code} for {url}")
            raise CatalogUnavailableError(status_code=e.response.status_code) from e
        except httpx.HTTPError as e:
            logger.error(f"Catalog request failed for {url}: {e}")
            raise CatalogUnavailableError() from e

        if allow_missing and response.status_code == 404:
            return None
        if response.status_code >= 400:
            logger.error(f"Catalog returned {response.status_code} for {url}")
            raise CatalogUnavailableError(status_code=response.status_code)

        # Unknown product ids come back as 200 with an empty body
        if allow_missing and not response.content.strip():
            return None

        try:
            return response.json()
        except json.JSONDecodeError as e:
            logger.error(f"Catalog returned invalid JSON for {url}: {e}")
            raise CatalogUnavailableError() from e

    async def get_products(self) -> List[Product]:
        data = await self._get_json("/products")
        return self._parse_products(data)

    async def get_categories(self) -> List[str]:
        data = await self._get_json("/products/categories")
        try:
            return CategoryList.validate_python(data)
        except ValidationError as e:
            logger.error(f"Unexpected categories payload: {e}")
            raise CatalogUnavailableError() from e

    async def get_products_in_category(self, category: str) -> List[Product]:
        logger.info(f"Fetching category {sanitize_string_for_logging(category)}")
        data = await self._get_json(f"/products/category/{quote(category, safe='')}")
        return self._parse_products(data)

    async def get_product(self, product_id: int) -> Optional[Product]:
        """Single product, or None if the catalog does not know the id."""
        data = await self._get_json(f"/products/{product_id}", allow_missing=True)
        if data is None:
            return None
        try:
            return Product.model_validate(data)
        except ValidationError as e:
            logger.error(f"Unexpected product payload for {product_id}: {e}")
            raise CatalogUnavailableError() from e

    @staticmethod
    def _parse_products(data: Any) -> List[Product]:
        try:
            return ProductList.validate_python(data)
        except ValidationError as e:
            logger.error(f"Unexpected products payload: {e}")
            raise CatalogUnavailableError() from e
