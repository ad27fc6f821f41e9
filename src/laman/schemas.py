"""Pydantic schemas for the catalog/order service payloads.

The service speaks snake_case JSON. Schemas validate incoming payloads and are
converted to the dataclasses in ``laman.models`` before leaving the client.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from .models import (
    Category,
    Order,
    OrderItem,
    OrderStatus,
    PaymentMethod,
    Product,
    Store,
    StoreCategoryType,
    Subcategory,
)


# --- Catalog Schemas ---


class CategorySchema(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None


class SubcategorySchema(BaseModel):
    id: str
    category_id: str
    name: str
    created_at: Optional[datetime] = None


class ProductSchema(BaseModel):
    id: str
    store_id: str
    name: str
    price: Decimal = Field(..., ge=0)
    category_id: Optional[str] = None
    subcategory_id: Optional[str] = None
    description: Optional[str] = None
    weight: Optional[Decimal] = Field(None, ge=0)
    is_available: bool = True


class StoreSchema(BaseModel):
    id: str
    name: str
    category_type: StoreCategoryType
    rating: float = 0.0
    address: Optional[str] = None
    phone: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None


# --- Order Schemas ---


class OrderItemSchema(BaseModel):
    id: str
    product_id: str
    quantity: int
    price: Decimal
    order_id: Optional[str] = None


class OrderSchema(BaseModel):
    id: str
    guest_name: Optional[str] = None
    guest_phone: Optional[str] = None
    guest_address: Optional[str] = None
    comment: Optional[str] = None
    status: Optional[str] = None
    payment_method: Optional[PaymentMethod] = None
    items_total: Optional[Decimal] = None
    service_fee: Optional[Decimal] = None
    delivery_fee: Optional[Decimal] = None
    final_total: Optional[Decimal] = None
    created_at: Optional[datetime] = None
    items: Optional[list[OrderItemSchema]] = None


class StatusUpdateRequest(BaseModel):
    """Request body for changing an order's status."""

    status: OrderStatus


# --- Conversion Helpers ---


def category_from_schema(schema: CategorySchema) -> Category:
    return Category(
        id=schema.id,
        name=schema.name,
        description=schema.description,
        created_at=schema.created_at,
    )


def subcategory_from_schema(schema: SubcategorySchema) -> Subcategory:
    return Subcategory(
        id=schema.id,
        category_id=schema.category_id,
        name=schema.name,
        created_at=schema.created_at,
    )


def product_from_schema(schema: ProductSchema) -> Product:
    return Product(
        id=schema.id,
        store_id=schema.store_id,
        name=schema.name,
        price=schema.price,
        category_id=schema.category_id,
        subcategory_id=schema.subcategory_id,
        description=schema.description,
        weight=schema.weight,
        is_available=schema.is_available,
    )


def store_from_schema(schema: StoreSchema) -> Store:
    return Store(
        id=schema.id,
        name=schema.name,
        category_type=schema.category_type,
        rating=schema.rating,
        address=schema.address,
        phone=schema.phone,
        description=schema.description,
        image_url=schema.image_url,
    )


def order_from_schema(schema: OrderSchema) -> Order:
    """Convert an order payload, keeping absent totals and status as None."""
    items = [
        OrderItem(
            id=item.id,
            product_id=item.product_id,
            quantity=item.quantity,
            price=item.price,
            order_id=item.order_id,
        )
        for item in schema.items or []
    ]
    return Order(
        id=schema.id,
        guest_name=schema.guest_name,
        guest_phone=schema.guest_phone,
        guest_address=schema.guest_address,
        comment=schema.comment,
        status=schema.status,
        payment_method=schema.payment_method,
        items_total=schema.items_total,
        service_fee=schema.service_fee,
        delivery_fee=schema.delivery_fee,
        final_total=schema.final_total,
        created_at=schema.created_at,
        items=items,
    )
