"""Shared cache of the latest product snapshots."""

from typing import Iterable

from .models import Product

# Number of identifier characters shown for products missing from the index
SHORT_ID_LENGTH = 8


class ProductIndex:
    """Maps product id to the most recently merged snapshot.

    Merges are last-write-wins with no version check. One instance is shared by
    every engine of a session and injected at construction.
    """

    def __init__(self, products: Iterable[Product] = ()):
        self._products: dict[str, Product] = {}
        self.merge(products)

    def merge(self, products: Iterable[Product]) -> None:
        for product in products:
            self._products[product.id] = product

    def lookup(self, product_id: str) -> Product | None:
        return self._products.get(product_id)

    def display_name(self, product_id: str) -> str:
        """Product name, or a stable fallback naming the short id when unknown."""
        product = self._products.get(product_id)
        if product is not None:
            return product.name
        return f"Product {product_id[:SHORT_ID_LENGTH]}"

    def __len__(self) -> int:
        return len(self._products)

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._products
