"""Tests for CartEngine."""

from decimal import Decimal

import pytest

from laman.cart import CartEngine, CartState
from laman.config import Settings
from laman.errors import ConflictError
from laman.product_index import ProductIndex

from .conftest import STORE_A, STORE_B, make_product


class TestSingleStoreRule:
    def test_empty_cart_has_no_active_store(self, cart):
        assert cart.state == CartState.EMPTY
        assert cart.active_store_id is None
        assert cart.is_empty

    def test_first_product_sets_active_store(self, cart):
        cart.set_quantity(make_product("p1", STORE_A), 2)

        assert cart.state == CartState.SINGLE_STORE
        assert cart.active_store_id == STORE_A

    def test_same_store_products_accumulate(self, cart):
        quantities = {"p1": 2, "p2": 5, "p3": 1}
        for product_id, qty in quantities.items():
            cart.set_quantity(make_product(product_id, STORE_A), qty)
        cart.set_quantity(make_product("p2", STORE_A), 3)

        assert cart.total_item_count == 2 + 3 + 1
        assert cart.active_store_id == STORE_A

    def test_second_store_is_rejected_and_cart_unchanged(self, cart):
        cart.set_quantity(make_product("p1", STORE_A), 2)
        before = (cart.items, cart.version)

        with pytest.raises(ConflictError) as exc_info:
            cart.set_quantity(make_product("x1", STORE_B), 1)

        assert exc_info.value.active_store_id == STORE_A
        assert exc_info.value.product_store_id == STORE_B
        assert (cart.items, cart.version) == before
        assert cart.quantity("x1") == 0

    def test_rejection_is_idempotent(self, cart):
        cart.set_quantity(make_product("p1", STORE_A), 2)
        other = make_product("x1", STORE_B)

        for _ in range(2):
            with pytest.raises(ConflictError):
                cart.set_quantity(other, 1)
            assert len(cart.items) == 1
            assert cart.quantity("p1") == 2
            assert cart.active_store_id == STORE_A

    def test_rejected_product_is_not_merged_into_index(self, cart, product_index):
        cart.set_quantity(make_product("p1", STORE_A), 1)
        with pytest.raises(ConflictError):
            cart.set_quantity(make_product("x1", STORE_B), 1)

        assert "x1" not in product_index

    def test_conflicts_with(self, cart):
        assert cart.conflicts_with(make_product("x1", STORE_B)) is False
        cart.set_quantity(make_product("p1", STORE_A), 1)

        assert cart.conflicts_with(make_product("x1", STORE_B)) is True
        assert cart.conflicts_with(make_product("p2", STORE_A)) is False

    def test_zero_quantity_from_other_store_is_not_a_conflict(self, cart):
        cart.set_quantity(make_product("p1", STORE_A), 1)

        cart.set_quantity(make_product("x1", STORE_B), 0)

        assert cart.active_store_id == STORE_A

    def test_clear_then_add_never_conflicts(self, cart):
        cart.set_quantity(make_product("p1", STORE_A), 4)
        cart.clear_cart()

        cart.set_quantity(make_product("x1", STORE_B), 1)

        assert cart.active_store_id == STORE_B
        assert cart.total_item_count == 1

    def test_removing_last_line_returns_to_empty(self, cart):
        product = make_product("p1", STORE_A)
        cart.set_quantity(product, 3)

        cart.remove_product(product)

        assert cart.state == CartState.EMPTY
        cart.set_quantity(make_product("x1", STORE_B), 1)
        assert cart.active_store_id == STORE_B


class TestQuantities:
    def test_non_positive_quantity_removes_line(self, cart):
        product = make_product("p1")
        cart.set_quantity(product, 3)

        cart.set_quantity(product, -1)

        assert cart.quantity("p1") == 0
        assert cart.items == []

    def test_quantity_of_unknown_product_is_zero(self, cart):
        assert cart.quantity("missing") == 0

    def test_remove_product_is_always_allowed(self, cart):
        cart.set_quantity(make_product("p1", STORE_A), 1)

        cart.remove_product(make_product("x1", STORE_B))

        assert cart.quantity("p1") == 1

    def test_set_quantity_merges_snapshot(self, cart, product_index):
        cart.set_quantity(make_product("p1", price="100"), 1)
        cart.set_quantity(make_product("p1", price="120"), 1)

        assert product_index.lookup("p1").price == Decimal("120")
        assert cart.subtotal == Decimal("120")

    def test_items_use_latest_index_snapshot(self, cart, product_index):
        cart.set_quantity(make_product("p1", price="100"), 2)
        product_index.merge([make_product("p1", price="90")])

        assert cart.subtotal == Decimal("180")


class TestPricing:
    def test_two_line_pricing(self, cart):
        cart.set_quantity(make_product("p1", price="100"), 2)
        cart.set_quantity(make_product("p2", price="50"), 1)

        assert cart.subtotal == Decimal("250")
        assert cart.service_fee == Decimal("12.5")
        assert cart.delivery_fee == Decimal("200")
        assert cart.total == Decimal("462.5")

    def test_empty_cart_pricing(self, cart):
        assert cart.subtotal == 0
        assert cart.service_fee == 0
        assert cart.total == Decimal("200")

    def test_fees_follow_settings(self, product_index):
        settings = Settings(delivery_fee=Decimal("150"), service_fee_rate=Decimal("0.1"))
        cart = CartEngine(product_index, settings)
        cart.set_quantity(make_product("p1", price="100"), 1)

        assert cart.total == Decimal("100") + Decimal("150") + Decimal("10")

    def test_weight_totals(self, cart):
        cart.set_quantity(make_product("p1", weight="5.0"), 3)
        cart.set_quantity(make_product("p2", weight=None), 1)

        assert cart.total_weight == Decimal("15.0")
        assert cart.is_heavy is False

    def test_heavy_cart_over_threshold(self, cart):
        cart.set_quantity(make_product("p1", weight="5.5"), 3)

        assert cart.is_heavy is True

    def test_line_totals(self, cart):
        cart.set_quantity(make_product("p1", price="30", weight="0.5"), 4)

        (item,) = cart.items
        assert item.line_total == Decimal("120")
        assert item.line_weight == Decimal("2.0")


class TestUnresolvedLines:
    def test_placeholder_for_unknown_snapshot(self, settings):
        cart = CartEngine(ProductIndex(), settings)
        cart._lines["ghost"] = 2

        (item,) = cart.items
        assert item.product.id == "ghost"
        assert item.product.price == 0
        assert cart.active_store_id is None
        assert cart.subtotal == 0


class TestNotifications:
    def test_listeners_called_on_change(self, cart):
        seen = []
        unsubscribe = cart.subscribe(lambda engine: seen.append(engine.total_item_count))

        cart.set_quantity(make_product("p1"), 2)
        cart.clear_cart()
        unsubscribe()
        cart.set_quantity(make_product("p1"), 1)

        assert seen == [2, 0]

    def test_clearing_empty_cart_does_not_notify(self, cart):
        version = cart.version
        cart.clear_cart()
        assert cart.version == version

    def test_snapshot_contains_derived_figures(self, cart):
        cart.set_quantity(make_product("p1", price="10"), 1)

        snap = cart.snapshot()

        assert snap["subtotal"] == Decimal("10")
        assert snap["active_store_id"] == STORE_A
        assert len(snap["items"]) == 1
