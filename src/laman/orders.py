"""Order submission, cancellation and the local order history."""

import logging

from .cart import CartEngine
from .client import CatalogService
from .errors import LamanError, ValidationError
from .models import CreateOrderItem, CreateOrderRequest, Order, OrderForm, OrderStatus
from .observable import Observable

logger = logging.getLogger(__name__)


def build_request(form: OrderForm, cart: CartEngine) -> CreateOrderRequest:
    """
    Build a submission request from the checkout form and the cart.

    Lines carry product id and quantity only; prices are set by the server.

    Raises:
        ValidationError: If the form is incomplete, the cart is empty, or the
            cart has no single active store.
    """
    form.validate()
    items = cart.items
    if not items:
        raise ValidationError("Cart is empty")
    store_id = cart.active_store_id
    if store_id is None:
        raise ValidationError("Cart does not belong to a single store")

    return CreateOrderRequest(
        guest_name=form.guest_name,
        guest_phone=form.guest_phone,
        guest_address=form.resolved_guest_address,
        delivery_address=form.delivery_address,
        comment=form.resolved_comment,
        payment_method=form.payment_method,
        store_id=store_id,
        items=[CreateOrderItem(product_id=item.product.id, quantity=item.quantity) for item in items],
    )


class OrderWorkflow(Observable):
    """Submits and cancels orders and owns the order history (newest first)."""

    published = ("history", "is_submitting", "error")

    def __init__(self, service: CatalogService, cart: CartEngine):
        super().__init__()
        self.service = service
        self.cart = cart
        self.history: list[Order] = []
        self.is_submitting = False
        self.error: LamanError | None = None

    async def submit_order(self, form: OrderForm) -> Order:
        """
        Submit the cart as an order.

        On success the order is prepended to the history and the cart is
        cleared. On failure nothing changes; the error is recorded and raised.

        Raises:
            ValidationError: Before any network call, for a bad form or cart.
            ServiceError: If the service rejects or cannot take the order.
        """
        request = build_request(form, self.cart)

        self.is_submitting = True
        self._changed()
        try:
            order = await self.service.create_order(request)
        except LamanError as e:
            logger.warning("Order submission failed: %s", e)
            self.error = e
            raise
        finally:
            self.is_submitting = False
            self._changed()

        self.history.insert(0, order)
        self.error = None
        self.cart.clear_cart()
        self._changed()
        return order

    async def cancel_order(self, order: Order) -> Order:
        """
        Ask the service to cancel an order and mirror the change locally.

        Eligibility (``Order.is_cancellable``) is checked by the caller.

        Returns:
            The cancelled copy of the order.
        """
        try:
            await self.service.update_order_status(order.id, OrderStatus.CANCELLED)
        except LamanError as e:
            logger.warning("Cancelling order %s failed: %s", order.id, e)
            self.error = e
            self._changed()
            raise

        cancelled = order.with_status(OrderStatus.CANCELLED)
        for i, existing in enumerate(self.history):
            if existing.id == order.id:
                self.history[i] = cancelled
                break
        self.error = None
        self._changed()
        return cancelled

    def find(self, order_id: str) -> Order | None:
        for order in self.history:
            if order.id == order_id:
                return order
        return None

    def dismiss_error(self) -> None:
        if self.error is not None:
            self.error = None
            self._changed()
