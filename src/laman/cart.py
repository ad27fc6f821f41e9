"""Cart state, single-store rule and pricing."""

import logging
from decimal import Decimal
from enum import Enum

from .config import Settings
from .errors import ConflictError
from .models import CartItem, Product
from .observable import Observable
from .product_index import ProductIndex

logger = logging.getLogger(__name__)


class CartState(str, Enum):
    """Persistent states of the single-store rule.

    A conflicting change is rejected with ConflictError and never becomes a state.
    """

    EMPTY = "empty"
    SINGLE_STORE = "single_store"


class CartEngine(Observable):
    """Owns cart lines and every figure derived from them.

    Rule: a non-empty cart references products of exactly one store. The rule
    is enforced on every ``set_quantity`` call, not at checkout.

    Derived figures are recomputed on each read from the current lines and the
    shared product index.
    """

    published = (
        "items",
        "active_store_id",
        "subtotal",
        "delivery_fee",
        "service_fee",
        "total",
        "total_item_count",
        "total_weight",
        "is_heavy",
    )

    def __init__(self, product_index: ProductIndex, settings: Settings | None = None):
        super().__init__()
        self.product_index = product_index
        self.settings = settings or Settings()
        self._lines: dict[str, int] = {}

    # --- Mutations ---

    def set_quantity(self, product: Product, quantity: int) -> None:
        """
        Set the quantity of a product; zero or less removes the line.

        Raises:
            ConflictError: If the product's store differs from the active store.
                The cart is unchanged.
        """
        if quantity <= 0:
            self._remove(product.id)
            return

        active = self.active_store_id
        if active is not None and product.store_id != active:
            logger.debug("Rejected %s from store %s; cart store is %s", product.id, product.store_id, active)
            raise ConflictError(active, product.store_id, product.id)

        self.product_index.merge([product])
        self._lines[product.id] = quantity
        self._changed()

    def conflicts_with(self, product: Product) -> bool:
        """Whether adding ``product`` would put a second store in the cart."""
        active = self.active_store_id
        return active is not None and product.store_id != active

    def remove_product(self, product: Product) -> None:
        self._remove(product.id)

    def clear_cart(self) -> None:
        if not self._lines:
            return
        self._lines.clear()
        self._changed()

    def _remove(self, product_id: str) -> None:
        if self._lines.pop(product_id, None) is not None:
            self._changed()

    # --- Reads ---

    def quantity(self, product_id: str) -> int:
        return self._lines.get(product_id, 0)

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def items(self) -> list[CartItem]:
        """Cart lines joined with their snapshots; unknown products get a placeholder."""
        result = []
        for product_id, quantity in self._lines.items():
            if quantity <= 0:
                continue
            product = self.product_index.lookup(product_id) or Product.placeholder(product_id)
            result.append(CartItem(product=product, quantity=quantity))
        return result

    @property
    def active_store_id(self) -> str | None:
        """The single store shared by all items, or None if empty or mixed."""
        store_ids = {item.product.store_id for item in self.items}
        if len(store_ids) != 1:
            return None
        return store_ids.pop()

    @property
    def state(self) -> CartState:
        if self.is_empty:
            return CartState.EMPTY
        return CartState.SINGLE_STORE

    @property
    def subtotal(self) -> Decimal:
        return sum((item.line_total for item in self.items), Decimal("0"))

    @property
    def delivery_fee(self) -> Decimal:
        return self.settings.delivery_fee

    @property
    def service_fee(self) -> Decimal:
        return max(Decimal("0"), self.subtotal * self.settings.service_fee_rate)

    @property
    def total(self) -> Decimal:
        return self.subtotal + self.delivery_fee + self.service_fee

    @property
    def total_item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def total_weight(self) -> Decimal:
        """Total weight in kilograms; products without a weight count as zero."""
        return sum((item.line_weight for item in self.items), Decimal("0"))

    @property
    def is_heavy(self) -> bool:
        """Whether the cargo tariff applies to this cart."""
        return self.total_weight > self.settings.heavy_weight_kg
