from decimal import Decimal
from unittest.mock import Mock

import pytest

from storefront.domain import EMPTY_CART, CartItem, CartState
from storefront.services import CartStore
from storefront.tests.factories import CatalogProductFactory, product_payload


def assert_consistent(state: CartState):
    assert state.total == sum((item.unit_price * item.quantity for item in state.items), Decimal("0"))
    assert state.count == sum(item.quantity for item in state.items)


@pytest.mark.unit
class TestCartStoreAdd:
    def setup_method(self):
        self.store = CartStore()

    def test_starts_empty(self):
        state = self.store.current_state()

        assert state is EMPTY_CART
        assert state.count == 0
        assert state.total == Decimal("0")

    def test_add_new_product(self):
        state = self.store.add(product_payload(id="p1", price="1.25"), 2)

        assert len(state.items) == 1
        assert state.items[0].id == "p1"
        assert state.items[0].quantity == 2
        assert state.total == Decimal("2.50")
        assert state.count == 2
        assert_consistent(state)

    def test_adding_same_product_merges_quantities(self):
        product = product_payload(id="p1", price="2.00")
        self.store.add(product, 2)
        state = self.store.add(product, 3)

        assert len(state.items) == 1
        assert state.items[0].quantity == 5
        assert state.total == Decimal("10.00")
        assert_consistent(state)

    def test_merge_keeps_line_order(self):
        self.store.add(product_payload(id="a"), 1)
        self.store.add(product_payload(id="b"), 1)
        state = self.store.add(product_payload(id="a"), 1)

        assert [item.id for item in state.items] == ["a", "b"]

    @pytest.mark.parametrize("qty", [0, -1])
    def test_add_below_one_returns_same_snapshot(self, qty):
        before = self.store.add(product_payload(id="p1"), 1)

        after = self.store.add(product_payload(id="p1"), qty)

        assert after is before
        assert self.store.quantity_of("p1") == 1

    def test_add_catalog_product_fills_image(self):
        product = CatalogProductFactory(id="p9", images=(), price_per_unit=Decimal("3.00"))

        state = self.store.add(product, 1)

        assert state.items[0].image_url == "images/products/placeholder.webp"
        assert state.items[0].unit_price == Decimal("3.00")

    def test_add_raw_product_with_nested_price(self):
        state = self.store.add({"id": "p2", "name": "Honey", "price": {"per_unit": "4.75", "unit": "jar"}}, 2)

        assert state.items[0].unit_price == Decimal("4.75")
        assert state.items[0].product.unit == "jar"
        assert state.total == Decimal("9.50")

    def test_add_product_without_id_raises(self):
        with pytest.raises(ValueError):
            self.store.add({"name": "Nameless"}, 1)


@pytest.mark.unit
class TestCartStoreUpdates:
    def setup_method(self):
        self.store = CartStore()
        self.store.add(product_payload(id="p1", price="1.50"), 2)
        self.store.add(product_payload(id="p2", price="3.00"), 1)

    def test_set_quantity(self):
        state = self.store.set_quantity("p1", 4)

        assert state.get("p1").quantity == 4
        assert state.total == Decimal("9.00")
        assert_consistent(state)

    @pytest.mark.parametrize("qty", [0, -3])
    def test_set_quantity_below_one_is_ignored(self, qty):
        before = self.store.current_state()

        assert self.store.set_quantity("p1", qty) is before

    def test_set_quantity_unknown_id_is_ignored(self):
        before = self.store.current_state()

        assert self.store.set_quantity("missing", 3) is before

    def test_remove(self):
        state = self.store.remove("p1")

        assert not self.store.is_in_cart("p1")
        assert [item.id for item in state.items] == ["p2"]
        assert state.total == Decimal("3.00")
        assert_consistent(state)

    def test_remove_unknown_id_is_ignored(self):
        before = self.store.current_state()

        assert self.store.remove("missing") is before

    def test_increment(self):
        state = self.store.increment_quantity("p2")

        assert state.get("p2").quantity == 2
        assert_consistent(state)

    def test_decrement(self):
        state = self.store.decrement_quantity("p1")

        assert state.get("p1").quantity == 1
        assert_consistent(state)

    def test_decrement_stops_at_one(self):
        before = self.store.current_state()

        after = self.store.decrement_quantity("p2")

        assert after is before
        assert self.store.quantity_of("p2") == 1

    def test_clear(self):
        state = self.store.clear()

        assert state.is_empty
        assert state.total == Decimal("0")
        assert state.count == 0

    def test_queries(self):
        assert self.store.is_in_cart("p1")
        assert not self.store.is_in_cart("p3")
        assert self.store.quantity_of("p1") == 2
        assert self.store.quantity_of("p3") == 0


@pytest.mark.unit
class TestCartStoreSubscriptions:
    def test_listener_receives_each_new_snapshot(self):
        store = CartStore()
        listener = Mock()
        store.subscribe(listener)

        first = store.add(product_payload(id="p1"), 1)
        second = store.set_quantity("p1", 3)

        assert [call.args[0] for call in listener.call_args_list] == [first, second]

    def test_no_notification_when_nothing_changes(self):
        store = CartStore()
        listener = Mock()
        store.subscribe(listener)

        store.clear()
        store.add(product_payload(id="p1"), 0)

        listener.assert_not_called()

    def test_unsubscribe(self):
        store = CartStore()
        listener = Mock()
        unsubscribe = store.subscribe(listener)

        unsubscribe()
        store.add(product_payload(id="p1"), 1)

        listener.assert_not_called()

    def test_failing_listener_does_not_break_mutation(self):
        store = CartStore()
        store.subscribe(Mock(side_effect=RuntimeError("listener down")))
        healthy = Mock()
        store.subscribe(healthy)

        state = store.add(product_payload(id="p1"), 1)

        assert state.count == 1
        healthy.assert_called_once_with(state)

    def test_from_items_rebuilds_aggregates(self):
        store = CartStore.from_items(
            [
                CartItem("a", "Apples", Decimal("1.25"), 2, "a.webp"),
                CartItem("b", "Beans", Decimal("0.75"), 4, "b.webp"),
            ]
        )

        state = store.current_state()
        assert state.total == Decimal("5.50")
        assert state.count == 6


@pytest.mark.unit
class TestCartStorePlacementClaim:
    def test_claim_is_exclusive(self):
        store = CartStore()

        assert store.begin_placement()
        assert store.is_placing
        assert not store.begin_placement()

        store.end_placement()

        assert not store.is_placing
        assert store.begin_placement()

    def test_claim_does_not_touch_items(self):
        store = CartStore()
        state = store.add(product_payload(id="p1"), 2)

        store.begin_placement()

        assert store.current_state() is state
