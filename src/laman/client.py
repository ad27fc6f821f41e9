"""Client for the remote catalog/order service.

``CatalogService`` is the contract every engine depends on; ``LamanClient`` is
the HTTP implementation. Tests substitute in-memory implementations of the
protocol.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, TypeVar

import httpx
from pydantic import TypeAdapter
from pydantic import ValidationError as SchemaValidationError

from .config import DEFAULT_API_TIMEOUT, DEFAULT_API_URL, Settings
from .errors import DecodeError, NetworkError, ServerError
from .models import (
    Category,
    CreateOrderRequest,
    Order,
    OrderStatus,
    Product,
    Store,
    StoreCategoryType,
    Subcategory,
)
from .schemas import (
    CategorySchema,
    OrderSchema,
    ProductSchema,
    StatusUpdateRequest,
    StoreSchema,
    SubcategorySchema,
    category_from_schema,
    order_from_schema,
    product_from_schema,
    store_from_schema,
    subcategory_from_schema,
)

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

T = TypeVar("T")

_categories = TypeAdapter(list[CategorySchema])
_subcategories = TypeAdapter(list[SubcategorySchema])
_products = TypeAdapter(list[ProductSchema])
_stores = TypeAdapter(list[StoreSchema])
_store = TypeAdapter(StoreSchema)
_order = TypeAdapter(OrderSchema)


class CatalogService(Protocol):
    """Protocol for the remote catalog/order service.

    Every method may raise NetworkError, ServerError or DecodeError.
    """

    async def list_categories(self) -> list[Category]:
        ...

    async def list_products(
        self,
        category_id: str | None = None,
        subcategory_id: str | None = None,
        search: str | None = None,
    ) -> list[Product]:
        """List available products.

        Args:
            category_id: Restrict to a category.
            subcategory_id: Restrict to a subcategory.
            search: Free-text query; blank means no text filter.
        """
        ...

    async def list_subcategories(self, category_id: str) -> list[Subcategory]:
        ...

    async def list_stores(
        self,
        category_type: StoreCategoryType | None = None,
        search: str | None = None,
    ) -> list[Store]:
        ...

    async def get_store(self, store_id: str) -> Store:
        ...

    async def list_store_products(
        self,
        store_id: str,
        subcategory_id: str | None = None,
        search: str | None = None,
        available_only: bool = True,
    ) -> list[Product]:
        ...

    async def list_store_subcategories(self, store_id: str) -> list[Subcategory]:
        ...

    async def create_order(self, request: CreateOrderRequest) -> Order:
        """Submit an order.

        Returns:
            The order as stored by the service, with server-computed totals.
        """
        ...

    async def update_order_status(self, order_id: str, status: OrderStatus) -> None:
        ...


def _query(**params: Any) -> dict[str, str]:
    """Drop unset and blank parameters, render the rest as query strings."""
    result: dict[str, str] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        elif isinstance(value, StoreCategoryType):
            value = value.value
        value = str(value)
        if not value.strip():
            continue
        result[key] = value
    return result


def _decode(response: httpx.Response, adapter: TypeAdapter[T]) -> T:
    try:
        return adapter.validate_json(response.content)
    except SchemaValidationError as e:
        raise DecodeError(str(response.request.url), str(e)) from e


class LamanClient:
    """HTTP implementation of CatalogService backed by httpx."""

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_API_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize LamanClient.

        Args:
            base_url: Service root, without the /api/v1 prefix.
            timeout: Per-request timeout in seconds.
            transport: Override the httpx transport (for testing).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: httpx.AsyncBaseTransport | None = None
    ) -> "LamanClient":
        return cls(settings.api_url, settings.api_timeout, transport=transport)

    def _get_client(self) -> httpx.AsyncClient:
        """Get a configured async httpx client."""
        return httpx.AsyncClient(
            base_url=self.base_url + API_PREFIX,
            timeout=self.timeout,
            transport=self._transport,
        )

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        logger.debug("%s %s params=%s", method, path, params)
        try:
            async with self._get_client() as client:
                response = await client.request(method, path, params=params, json=json)
        except httpx.RequestError as e:
            logger.error("Catalog service unavailable: %s", e)
            raise NetworkError(f"{self.base_url}{API_PREFIX}{path}", str(e) or type(e).__name__) from e

        if not response.is_success:
            logger.warning("%s %s returned HTTP %d", method, path, response.status_code)
            raise ServerError(response.status_code, response.text)
        return response

    async def _fetch(self, path: str, adapter: TypeAdapter[T], params: dict[str, str] | None = None) -> T:
        response = await self._request("GET", path, params=params)
        return _decode(response, adapter)

    # --- Catalog ---

    async def list_categories(self) -> list[Category]:
        schemas = await self._fetch("/catalog/categories", _categories)
        return [category_from_schema(s) for s in schemas]

    async def list_products(
        self,
        category_id: str | None = None,
        subcategory_id: str | None = None,
        search: str | None = None,
    ) -> list[Product]:
        params = _query(
            available_only=True,
            category_id=category_id,
            subcategory_id=subcategory_id,
            search=search,
        )
        schemas = await self._fetch("/catalog/products", _products, params)
        return [product_from_schema(s) for s in schemas]

    async def list_subcategories(self, category_id: str) -> list[Subcategory]:
        params = _query(category_id=category_id)
        schemas = await self._fetch("/catalog/subcategories", _subcategories, params)
        return [subcategory_from_schema(s) for s in schemas]

    # --- Stores ---

    async def list_stores(
        self,
        category_type: StoreCategoryType | None = None,
        search: str | None = None,
    ) -> list[Store]:
        params = _query(category_type=category_type, search=search)
        schemas = await self._fetch("/stores", _stores, params)
        return [store_from_schema(s) for s in schemas]

    async def get_store(self, store_id: str) -> Store:
        schema = await self._fetch(f"/stores/{store_id}", _store)
        return store_from_schema(schema)

    async def list_store_products(
        self,
        store_id: str,
        subcategory_id: str | None = None,
        search: str | None = None,
        available_only: bool = True,
    ) -> list[Product]:
        params = _query(
            available_only=available_only,
            subcategory_id=subcategory_id,
            search=search,
        )
        schemas = await self._fetch(f"/stores/{store_id}/products", _products, params)
        return [product_from_schema(s) for s in schemas]

    async def list_store_subcategories(self, store_id: str) -> list[Subcategory]:
        schemas = await self._fetch(f"/stores/{store_id}/subcategories", _subcategories)
        return [subcategory_from_schema(s) for s in schemas]

    # --- Orders ---

    async def create_order(self, request: CreateOrderRequest) -> Order:
        response = await self._request("POST", "/orders", json=request.to_dict())
        schema = _decode(response, _order)
        logger.info("Created order %s", schema.id)
        return order_from_schema(schema)

    async def update_order_status(self, order_id: str, status: OrderStatus) -> None:
        body = StatusUpdateRequest(status=status).model_dump(mode="json")
        await self._request("PUT", f"/orders/{order_id}/status", json=body)
        logger.info("Order %s status set to %s", order_id, status.value)
