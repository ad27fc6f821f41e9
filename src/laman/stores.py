"""Store directory browsing and per-store product browsing."""

import logging

from .client import CatalogService
from .config import Settings
from .engine import BrowseEngine
from .errors import LamanError
from .models import Product, Store, StoreCategoryType, Subcategory
from .product_index import ProductIndex

logger = logging.getLogger(__name__)


class StoreFilterEngine(BrowseEngine):
    """Publishes the store directory filtered by category type and search text."""

    published = ("stores", "selected_category", "search_text", "is_loading", "error")

    def __init__(self, service: CatalogService, settings: Settings | None = None):
        super().__init__(settings, name="store-search")
        self.service = service
        self.stores: list[Store] = []
        self.selected_category: StoreCategoryType | None = None

    async def load_stores(self) -> None:
        category, query = self.selected_category, self.search_query
        logger.debug("Store query category=%s search=%r", category, query)

        async def fetch() -> list[Store]:
            return await self.service.list_stores(category_type=category, search=query)

        await self._run_query(fetch, self._publish_stores)

    async def select_category(self, category: StoreCategoryType | None) -> None:
        """Select a category type and re-fetch at once (no debounce)."""
        self.selected_category = category
        self._changed()
        await self.load_stores()

    async def _search(self, query: str | None) -> None:
        await self.load_stores()

    def _publish_stores(self, stores: list[Store]) -> None:
        self.stores = stores


class StoreCatalogEngine(BrowseEngine):
    """Products of a single store, filtered by the store's subcategories and search."""

    published = (
        "store",
        "subcategories",
        "products",
        "selected_subcategory_id",
        "search_text",
        "is_loading",
        "error",
    )

    def __init__(
        self,
        service: CatalogService,
        product_index: ProductIndex,
        store: Store,
        settings: Settings | None = None,
    ):
        super().__init__(settings, name=f"store-{store.id}-search")
        self.service = service
        self.product_index = product_index
        self.store = store
        self.subcategories: list[Subcategory] = []
        self.products: list[Product] = []
        self.selected_subcategory_id: str | None = None

    async def load(self) -> None:
        """Load the store's subcategories, then its products."""
        await self.load_subcategories()
        await self.load_products()

    async def load_subcategories(self) -> None:
        """Fetch subcategory chips; a failure just hides them."""
        try:
            self.subcategories = await self.service.list_store_subcategories(self.store.id)
        except LamanError as e:
            logger.warning("Subcategories for store %s unavailable: %s", self.store.id, e)
            self.subcategories = []
        self._changed()

    async def refresh_store(self) -> None:
        """Re-fetch the store record."""
        try:
            store = await self.service.get_store(self.store.id)
        except LamanError as e:
            self._record_error(e)
        else:
            self.store = store
            self.error = None
        self._changed()

    async def load_products(self) -> None:
        subcategory_id, query = self.selected_subcategory_id, self.search_query

        async def fetch() -> list[Product]:
            return await self.service.list_store_products(
                self.store.id,
                subcategory_id=subcategory_id,
                search=query,
            )

        await self._run_query(fetch, self._publish_products)

    async def select_subcategory(self, subcategory_id: str | None) -> None:
        self.selected_subcategory_id = subcategory_id
        self._changed()
        await self.load_products()

    async def _search(self, query: str | None) -> None:
        await self.load_products()

    def _publish_products(self, products: list[Product]) -> None:
        self.product_index.merge(products)
        self.products = products
