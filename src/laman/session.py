"""Session wiring: one product index, cart and history shared by all engines."""

import logging

from .cart import CartEngine
from .catalog import CatalogFilterEngine
from .client import CatalogService, LamanClient
from .config import Settings
from .errors import ConflictError
from .models import Product, Store
from .observable import Observable
from .orders import OrderWorkflow
from .product_index import ProductIndex
from .stores import StoreCatalogEngine, StoreFilterEngine

logger = logging.getLogger(__name__)


class LamanSession(Observable):
    """Composition root for a presentation layer.

    Also carries the store-switch prompt: adding a product from another store
    parks it as ``pending_product`` until the user confirms clearing the cart.
    """

    published = ("pending_product",)

    def __init__(self, service: CatalogService | None = None, settings: Settings | None = None):
        """
        Initialize LamanSession.

        Args:
            service: Catalog/order service (defaults to an HTTP client built
                from settings).
            settings: Settings (defaults to Settings.from_env()).
        """
        super().__init__()
        self.settings = settings or Settings.from_env()
        self.service = service or LamanClient.from_settings(self.settings)
        self.product_index = ProductIndex()
        self.cart = CartEngine(self.product_index, self.settings)
        self.catalog = CatalogFilterEngine(self.service, self.product_index, self.settings)
        self.stores = StoreFilterEngine(self.service, self.settings)
        self.orders = OrderWorkflow(self.service, self.cart)
        self.pending_product: Product | None = None
        self._store_engines: dict[str, StoreCatalogEngine] = {}

    def open_store(self, store: Store) -> StoreCatalogEngine:
        """Return the browsing engine for a store, creating it on first use."""
        engine = self._store_engines.get(store.id)
        if engine is None:
            engine = StoreCatalogEngine(self.service, self.product_index, store, self.settings)
            self._store_engines[store.id] = engine
        return engine

    def request_quantity(self, product: Product, quantity: int) -> bool:
        """
        Apply a quantity change, or park the product if it needs a store switch.

        Returns:
            True if applied, False if confirmation is needed.
        """
        try:
            self.cart.set_quantity(product, quantity)
        except ConflictError as e:
            logger.info("Store switch needed: %s", e)
            self.pending_product = product
            self._changed()
            return False
        return True

    def confirm_store_switch(self) -> None:
        """Clear the cart and add the parked product with quantity 1."""
        product = self.pending_product
        if product is None:
            return
        self.cart.clear_cart()
        self.cart.set_quantity(product, 1)
        self.pending_product = None
        self._changed()

    def dismiss_store_switch(self) -> None:
        if self.pending_product is not None:
            self.pending_product = None
            self._changed()

    async def aclose(self) -> None:
        """Cancel pending searches on every engine."""
        await self.catalog.aclose()
        await self.stores.aclose()
        for engine in self._store_engines.values():
            await engine.aclose()
