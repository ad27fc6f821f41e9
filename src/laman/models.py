"""Data models for laman."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from .errors import ValidationError


class StoreCategoryType(str, Enum):
    """Closed set of store directory categories."""

    FOOD = "FOOD"
    CLOTHES = "CLOTHES"
    BUILDING = "BUILDING"
    HOME = "HOME"
    PHARMACY = "PHARMACY"
    AUTO = "AUTO"

    @classmethod
    def visible(cls) -> list["StoreCategoryType"]:
        """Categories offered as filter chips, in display order."""
        return [cls.FOOD, cls.CLOTHES, cls.HOME, cls.BUILDING, cls.PHARMACY]


class OrderStatus(str, Enum):
    """Order lifecycle states. The transition graph belongs to the server."""

    NEW = "NEW"
    NEEDS_CONFIRMATION = "NEEDS_CONFIRMATION"
    CONFIRMED = "CONFIRMED"
    IN_PROGRESS = "IN_PROGRESS"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


# Status assumed for orders the server returned without one
DEFAULT_ORDER_STATUS = OrderStatus.NEW

# Orders in these states can no longer be cancelled
FINAL_ORDER_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})


class PaymentMethod(str, Enum):
    CASH = "CASH"
    TRANSFER = "TRANSFER"


@dataclass(frozen=True)
class Product:
    """A catalog product snapshot as last fetched from the service."""

    id: str
    store_id: str | None
    name: str
    price: Decimal
    category_id: str | None = None
    subcategory_id: str | None = None
    description: str | None = None
    weight: Decimal | None = None  # kilograms
    is_available: bool = True

    @classmethod
    def placeholder(cls, product_id: str) -> "Product":
        """Stand-in for a cart line whose snapshot has not been merged yet."""
        return cls(id=product_id, store_id=None, name="Product", price=Decimal("0"))


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    description: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class Subcategory:
    id: str
    category_id: str
    name: str
    created_at: datetime | None = None


@dataclass(frozen=True)
class Store:
    """A store from the store directory."""

    id: str
    name: str
    category_type: StoreCategoryType
    rating: float = 0.0
    address: str | None = None
    phone: str | None = None
    description: str | None = None
    image_url: str | None = None


@dataclass(frozen=True)
class CartItem:
    """A cart line joined with its product snapshot."""

    product: Product
    quantity: int

    @property
    def line_total(self) -> Decimal:
        return self.product.price * self.quantity

    @property
    def line_weight(self) -> Decimal:
        return (self.product.weight or Decimal("0")) * self.quantity


@dataclass
class OrderItem:
    """A line of a placed order, priced by the server at order time."""

    id: str
    product_id: str
    quantity: int
    price: Decimal
    order_id: str | None = None


@dataclass
class Order:
    """An order as returned by the service."""

    id: str
    guest_name: str | None = None
    guest_phone: str | None = None
    guest_address: str | None = None
    comment: str | None = None
    status: str | None = None  # raw value; see effective_status
    payment_method: PaymentMethod | None = None
    items_total: Decimal | None = None
    service_fee: Decimal | None = None
    delivery_fee: Decimal | None = None
    final_total: Decimal | None = None
    created_at: datetime | None = None
    items: list[OrderItem] = field(default_factory=list)

    @property
    def effective_status(self) -> OrderStatus | None:
        """Status with the missing-status default applied.

        Returns None for a status string outside the known lifecycle.
        """
        if not self.status:
            return DEFAULT_ORDER_STATUS
        try:
            return OrderStatus(self.status)
        except ValueError:
            return None

    @property
    def is_cancellable(self) -> bool:
        return self.effective_status not in FINAL_ORDER_STATUSES

    def with_status(self, status: OrderStatus | str) -> "Order":
        """Return a copy of this order with only the status changed."""
        value = status.value if isinstance(status, OrderStatus) else status
        return replace(self, status=value)


@dataclass(frozen=True)
class CreateOrderItem:
    product_id: str
    quantity: int

    def to_dict(self) -> dict[str, Any]:
        return {"product_id": self.product_id, "quantity": self.quantity}


@dataclass(frozen=True)
class CreateOrderRequest:
    """Order submission payload. Prices are computed by the server."""

    guest_name: str
    guest_phone: str
    guest_address: str
    delivery_address: str
    payment_method: PaymentMethod
    store_id: str
    items: list[CreateOrderItem]
    comment: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "guest_name": self.guest_name,
            "guest_phone": self.guest_phone,
            "guest_address": self.guest_address,
            "delivery_address": self.delivery_address,
            "payment_method": self.payment_method.value,
            "store_id": self.store_id,
            "items": [item.to_dict() for item in self.items],
        }
        if self.comment is not None:
            result["comment"] = self.comment
        return result


@dataclass
class OrderForm:
    """Guest and delivery fields entered on the checkout screen."""

    guest_name: str = ""
    guest_phone: str = ""
    delivery_address: str = ""
    guest_address: str = ""
    comment: str = ""
    payment_method: PaymentMethod = PaymentMethod.CASH

    def missing_fields(self) -> list[str]:
        """Names of required fields that are blank after trimming."""
        required = {
            "guest_name": self.guest_name,
            "guest_phone": self.guest_phone,
            "delivery_address": self.delivery_address,
        }
        return [name for name, value in required.items() if not value.strip()]

    @property
    def is_valid(self) -> bool:
        return not self.missing_fields()

    def validate(self) -> None:
        """
        Raises:
            ValidationError: If a required field is blank.
        """
        missing = self.missing_fields()
        if missing:
            raise ValidationError(f"Required fields are empty: {', '.join(missing)}", missing)

    @property
    def resolved_guest_address(self) -> str:
        """Guest address, falling back to the delivery address when left blank."""
        if not self.guest_address.strip():
            return self.delivery_address
        return self.guest_address

    @property
    def resolved_comment(self) -> str | None:
        return self.comment if self.comment else None
