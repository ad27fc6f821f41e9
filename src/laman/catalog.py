"""Catalog browsing: categories, cascading subcategories and debounced search."""

import asyncio
import logging

from .client import CatalogService
from .config import Settings
from .engine import BrowseEngine
from .errors import LamanError
from .models import Category, Product, Subcategory
from .product_index import ProductIndex

logger = logging.getLogger(__name__)


class CatalogFilterEngine(BrowseEngine):
    """Publishes the product list for the current category, subcategory and search.

    Filter precedence: while the effective search text is non-empty the query
    ignores category and subcategory, so search spans the whole catalog.
    """

    published = (
        "categories",
        "subcategories",
        "products",
        "selected_category_id",
        "selected_subcategory_id",
        "search_text",
        "is_loading",
        "error",
    )

    def __init__(
        self,
        service: CatalogService,
        product_index: ProductIndex,
        settings: Settings | None = None,
    ):
        super().__init__(settings, name="catalog-search")
        self.service = service
        self.product_index = product_index
        self.categories: list[Category] = []
        self.subcategories: list[Subcategory] = []
        self.products: list[Product] = []
        self.selected_category_id: str | None = None
        self.selected_subcategory_id: str | None = None

    async def load_initial(self) -> None:
        """Fetch categories and the unfiltered product list concurrently.

        Both calls settle before anything is published. If either fails the
        previous lists stay in place and the first failure is recorded, unless
        a newer query has taken over in the meantime.
        """
        token = self._queries.issue()
        self.is_loading = True
        self._changed()
        try:
            results = await asyncio.gather(
                self.service.list_categories(),
                self.service.list_products(),
                return_exceptions=True,
            )
            for result in results:
                if isinstance(result, BaseException) and not isinstance(result, LamanError):
                    raise result
            categories, products = results

            failure = next((r for r in results if isinstance(r, LamanError)), None)
            if failure is not None:
                if self._queries.is_current(token):
                    self._record_error(failure)
                else:
                    logger.debug("Initial load superseded, dropping failure: %s", failure)
            else:
                self.categories = categories
                if self._queries.is_current(token):
                    self._publish_products(products)
                    self.error = None
        finally:
            if self._queries.is_current(token):
                self.is_loading = False
            self._changed()

    async def select_category(self, category_id: str | None) -> None:
        """Select a category, reload its subcategories, then re-run the query.

        A selection replaced while its subcategories were loading leaves the
        query to the newer selection.
        """
        self.selected_category_id = category_id
        self.selected_subcategory_id = None
        self.subcategories = []
        self._changed()
        await self._load_subcategories(category_id)
        if self.selected_category_id != category_id:
            return
        await self.apply_filters()

    async def select_subcategory(self, subcategory_id: str | None) -> None:
        self.selected_subcategory_id = subcategory_id
        self._changed()
        await self.apply_filters()

    async def apply_filters(self, search: str | None = None) -> None:
        """
        Query products for the current filters.

        Args:
            search: Search text to use; defaults to the current search text.
        """
        effective = search if search is not None else self.search_query
        if effective:
            category_id, subcategory_id = None, None
        else:
            category_id, subcategory_id = self.selected_category_id, self.selected_subcategory_id
        logger.debug(
            "Catalog query category=%s subcategory=%s search=%r",
            category_id,
            subcategory_id,
            effective,
        )

        async def fetch() -> list[Product]:
            return await self.service.list_products(
                category_id=category_id,
                subcategory_id=subcategory_id,
                search=effective,
            )

        await self._run_query(fetch, self._publish_products)

    async def _search(self, query: str | None) -> None:
        await self.apply_filters(search=query)

    async def _load_subcategories(self, category_id: str | None) -> None:
        if category_id is None:
            return
        try:
            subcategories = await self.service.list_subcategories(category_id)
        except LamanError as e:
            if self.selected_category_id != category_id:
                logger.debug("Subcategories for %s no longer needed: %s", category_id, e)
                return
            # The selection stands; only the subcategory chips are lost
            self._record_error(e)
            subcategories = []
        if self.selected_category_id == category_id:
            self.subcategories = subcategories
            self._changed()

    def _publish_products(self, products: list[Product]) -> None:
        self.product_index.merge(products)
        self.products = products
