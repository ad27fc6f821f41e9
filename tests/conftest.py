"""Pytest fixtures for laman tests."""

import asyncio
from decimal import Decimal
from typing import Any

import pytest

from laman.cart import CartEngine
from laman.config import Settings
from laman.errors import LamanError
from laman.models import (
    Category,
    CreateOrderRequest,
    Order,
    OrderItem,
    OrderStatus,
    Product,
    Store,
    StoreCategoryType,
    Subcategory,
)
from laman.product_index import ProductIndex

STORE_A = "5f0c6f7e-0000-4000-8000-00000000000a"
STORE_B = "5f0c6f7e-0000-4000-8000-00000000000b"


def make_product(
    product_id: str,
    store_id: str | None = STORE_A,
    price: str = "100",
    weight: str | None = None,
    name: str | None = None,
    category_id: str | None = None,
    subcategory_id: str | None = None,
) -> Product:
    """Build a product snapshot with sensible defaults."""
    return Product(
        id=product_id,
        store_id=store_id,
        name=name or f"Item {product_id}",
        price=Decimal(price),
        weight=Decimal(weight) if weight is not None else None,
        category_id=category_id,
        subcategory_id=subcategory_id,
    )


def make_store(store_id: str, name: str = "Shop", category: StoreCategoryType = StoreCategoryType.FOOD) -> Store:
    return Store(id=store_id, name=name, category_type=category, rating=4.5)


class FakeCatalogService:
    """In-memory CatalogService that records every call.

    Set ``errors[method]`` to make a method raise, ``delays[method]`` to make
    it sleep before answering.
    """

    def __init__(self) -> None:
        self.categories: list[Category] = []
        self.subcategories: dict[str, list[Subcategory]] = {}
        self.products: list[Product] = []
        self.stores: list[Store] = []
        self.store_subcategories: dict[str, list[Subcategory]] = {}
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.errors: dict[str, LamanError] = {}
        self.delays: dict[str, float] = {}
        self.created: list[CreateOrderRequest] = []
        self.status_updates: list[tuple[str, OrderStatus]] = []
        self._order_seq = 0

    async def _enter(self, method: str, **kwargs: Any) -> None:
        self.calls.append((method, kwargs))
        delay = self.delays.get(method)
        if delay:
            await asyncio.sleep(delay)
        error = self.errors.get(method)
        if error is not None:
            raise error

    def calls_to(self, method: str) -> list[dict[str, Any]]:
        return [kwargs for name, kwargs in self.calls if name == method]

    async def list_categories(self) -> list[Category]:
        await self._enter("list_categories")
        return list(self.categories)

    async def list_products(self, category_id=None, subcategory_id=None, search=None) -> list[Product]:
        await self._enter(
            "list_products",
            category_id=category_id,
            subcategory_id=subcategory_id,
            search=search,
        )
        result = self.products
        if category_id is not None:
            result = [p for p in result if p.category_id == category_id]
        if subcategory_id is not None:
            result = [p for p in result if p.subcategory_id == subcategory_id]
        if search:
            result = [p for p in result if search.lower() in p.name.lower()]
        return list(result)

    async def list_subcategories(self, category_id: str) -> list[Subcategory]:
        await self._enter("list_subcategories", category_id=category_id)
        return list(self.subcategories.get(category_id, []))

    async def list_stores(self, category_type=None, search=None) -> list[Store]:
        await self._enter("list_stores", category_type=category_type, search=search)
        result = self.stores
        if category_type is not None:
            result = [s for s in result if s.category_type == category_type]
        if search:
            result = [s for s in result if search.lower() in s.name.lower()]
        return list(result)

    async def get_store(self, store_id: str) -> Store:
        await self._enter("get_store", store_id=store_id)
        for store in self.stores:
            if store.id == store_id:
                return store
        raise KeyError(store_id)

    async def list_store_products(self, store_id, subcategory_id=None, search=None, available_only=True):
        await self._enter(
            "list_store_products",
            store_id=store_id,
            subcategory_id=subcategory_id,
            search=search,
            available_only=available_only,
        )
        result = [p for p in self.products if p.store_id == store_id]
        if subcategory_id is not None:
            result = [p for p in result if p.subcategory_id == subcategory_id]
        if search:
            result = [p for p in result if search.lower() in p.name.lower()]
        return result

    async def list_store_subcategories(self, store_id: str) -> list[Subcategory]:
        await self._enter("list_store_subcategories", store_id=store_id)
        return list(self.store_subcategories.get(store_id, []))

    async def create_order(self, request: CreateOrderRequest) -> Order:
        await self._enter("create_order", request=request)
        self.created.append(request)
        self._order_seq += 1
        return Order(
            id=f"order-{self._order_seq}",
            guest_name=request.guest_name,
            guest_phone=request.guest_phone,
            guest_address=request.guest_address,
            comment=request.comment,
            status=OrderStatus.NEEDS_CONFIRMATION.value,
            payment_method=request.payment_method,
            items=[
                OrderItem(id=f"line-{i}", product_id=item.product_id, quantity=item.quantity, price=Decimal("0"))
                for i, item in enumerate(request.items)
            ],
        )

    async def update_order_status(self, order_id: str, status: OrderStatus) -> None:
        await self._enter("update_order_status", order_id=order_id, status=status)
        self.status_updates.append((order_id, status))


@pytest.fixture
def settings():
    """Settings with a short debounce so tests stay fast."""
    return Settings(search_debounce_ms=50)


@pytest.fixture
def service():
    return FakeCatalogService()


@pytest.fixture
def product_index():
    return ProductIndex()


@pytest.fixture
def cart(product_index, settings):
    return CartEngine(product_index, settings)
