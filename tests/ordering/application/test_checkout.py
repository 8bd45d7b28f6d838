"""Tests for CheckoutOrchestrator: validation, all-or-nothing commit and the order snapshot."""

from datetime import UTC, datetime

import pytest
from inventory.stock.access import InMemoryInventory
from ordering.cart.catalog import CatalogItem
from ordering.cart.storage import MemoryStorage
from ordering.cart.store import CartStore
from ordering.checkout.order import PaymentMethod
from ordering.checkout.orchestrator import INSUFFICIENT_STOCK, NOTHING_TO_CHECKOUT, CheckoutOrchestrator
from protean.exceptions import ValidationError

PLACED_AT = datetime(2026, 3, 2, 10, 0, tzinfo=UTC)


@pytest.fixture()
def checkout(store, stock):
    return CheckoutOrchestrator(store, stock, shipping_fee=50.0, clock=lambda: PLACED_AT)


def _item(product_id, unit_price=100.0):
    return CatalogItem(product_id=product_id, name=product_id.title(), unit_price=unit_price)


class TestSuccessfulCheckout:
    def test_commit_decrements_stock_and_builds_order(self, store, stock, checkout, rice):
        store.add_item(rice, 2)
        store.toggle_select("rice")

        result = checkout.checkout(PaymentMethod.CARD)

        assert result.success is True
        assert stock.read_stock("rice") == 8
        order = result.order
        assert order.subtotal == 200.0
        assert order.shipping_fee == 50.0
        assert order.total == 250.0
        assert order.payment_method == "card"
        assert order.item_count == 2
        assert [line.product_id for line in order.items] == ["rice"]

    def test_bought_entries_leave_cart_and_selection(self, store, checkout, rice, eggs):
        store.add_item(rice, 2)
        store.add_item(eggs, 1)
        store.toggle_select("rice")

        checkout.checkout()

        assert [e.product_id for e in store.entries] == ["eggs"]
        assert store.selection == []

    def test_unselected_entries_keep_their_stock(self, store, stock, checkout, rice, eggs):
        store.add_item(rice, 2)
        store.add_item(eggs, 1)
        store.toggle_select("rice")

        checkout.checkout()

        assert stock.read_stock("eggs") == 3

    def test_commit_is_written_through(self, store, storage, checkout, rice):
        store.add_item(rice, 2)
        store.toggle_select("rice")

        checkout.checkout()

        assert storage.get("cart.entries") == "[]"
        assert storage.get("cart.selection") == "[]"

    def test_cash_on_delivery_accepted_as_string(self, store, checkout, rice):
        store.add_item(rice)
        store.toggle_select("rice")
        assert checkout.checkout("COD").order.payment_method == "cod"

    def test_delivery_window(self, store, checkout, rice):
        store.add_item(rice)
        store.toggle_select("rice")

        order = checkout.checkout().order

        assert order.placed_at == PLACED_AT
        assert order.to_dict()["delivery_window"] == ["2026-03-05", "2026-03-07"]

    def test_order_lines_snapshot_prices(self, store, checkout, eggs):
        store.add_item(eggs, 2)
        store.toggle_select("eggs")

        order = checkout.checkout().order

        [line] = order.items
        assert line.selling_price == 90.0
        assert line.to_dict()["line_total"] == 180.0
        assert order.total == 230.0

    def test_discounted_total_is_rounded(self, store, stock):
        stock.write_stock("tea", 10)
        store.add_item(CatalogItem(product_id="tea", name="Tea", unit_price=33.33, discount_percent=15), 3)
        store.toggle_select("tea")
        orchestrator = CheckoutOrchestrator(store, stock, shipping_fee=50.0, clock=lambda: PLACED_AT)

        order = orchestrator.checkout().order

        # 33.33 * 0.85 * 3 = 84.9915
        assert order.subtotal == 84.99
        assert order.total == 134.99


class TestRejectedCheckout:
    def test_nothing_selected(self, store, stock, checkout, rice):
        store.add_item(rice)

        result = checkout.checkout()

        assert result.success is False
        assert result.message == NOTHING_TO_CHECKOUT
        assert result.violations == ()
        assert stock.read_stock("rice") == 10

    def test_all_or_nothing_on_shortfall(self):
        stock = InMemoryInventory({"a": 5, "b": 10})
        store = CartStore.load(stock, MemoryStorage())
        store.add_item(_item("a"), 5)
        store.add_item(_item("b"), 2)
        store.select_all()
        stock.write_stock("a", 3)
        orchestrator = CheckoutOrchestrator(store, stock, clock=lambda: PLACED_AT)

        result = orchestrator.checkout()

        assert result.success is False
        assert result.message == INSUFFICIENT_STOCK
        [violation] = result.violations
        assert violation.product_id == "a"
        assert violation.requested == 5
        assert violation.available == 3
        assert violation.message == "Not enough stock for A. Only 3 left."
        assert stock.snapshot() == {"a": 3, "b": 10}
        assert sorted(e.product_id for e in store.entries) == ["a", "b"]
        assert sorted(store.selection) == ["a", "b"]

    def test_every_violation_is_reported(self):
        stock = InMemoryInventory({"a": 5, "b": 5})
        store = CartStore.load(stock, MemoryStorage())
        store.add_item(_item("a"), 5)
        store.add_item(_item("b"), 5)
        store.select_all()
        stock.write_stock_levels({"a": 1, "b": 0})

        result = CheckoutOrchestrator(store, stock).checkout()

        assert sorted(v.product_id for v in result.violations) == ["a", "b"]

    def test_invalid_payment_method(self, store, stock, checkout, rice):
        store.add_item(rice)
        store.toggle_select("rice")

        with pytest.raises(ValidationError) as exc:
            checkout.checkout("bitcoin")

        assert "payment_method" in exc.value.messages
        assert stock.read_stock("rice") == 10
        assert store.selection == ["rice"]

    def test_failure_to_dict(self, store, checkout):
        assert checkout.checkout().to_dict() == {
            "success": False,
            "message": NOTHING_TO_CHECKOUT,
            "violations": [],
        }


class TestValidate:
    def test_validate_has_no_side_effects(self, store, stock, storage, checkout, rice):
        store.add_item(rice, 2)
        store.toggle_select("rice")
        saved = storage.get("cart.entries")

        assert checkout.validate().success is True

        assert stock.read_stock("rice") == 10
        assert storage.get("cart.entries") == saved
        assert store.selection == ["rice"]

    def test_validate_reports_shortfall(self, store, stock, checkout, eggs):
        store.add_item(eggs, 3)
        store.toggle_select("eggs")
        stock.write_stock("eggs", 1)

        result = checkout.validate()

        assert result.success is False
        assert result.violations[0].available == 1


class TestInventoryWrite:
    def test_single_batch_write(self, rice, eggs):
        writes = []

        class RecordingInventory(InMemoryInventory):
            def write_stock_levels(self, levels):
                writes.append(dict(levels))
                super().write_stock_levels(levels)

        stock = RecordingInventory({"rice": 10, "eggs": 3})
        cart_store = CartStore.load(stock, MemoryStorage())
        cart_store.add_item(rice, 2)
        cart_store.add_item(eggs, 3)
        cart_store.select_all()

        CheckoutOrchestrator(cart_store, stock).checkout()

        assert writes == [{"rice": 8, "eggs": 0}]

    def test_failed_inventory_write_leaves_cart_untouched(self, rice):
        class BrokenInventory(InMemoryInventory):
            def write_stock_levels(self, levels):
                raise ValidationError({"levels": ["Inventory unavailable"]})

        stock = BrokenInventory({"rice": 10})
        cart_store = CartStore.load(stock, MemoryStorage())
        cart_store.add_item(rice, 2)
        cart_store.toggle_select("rice")

        with pytest.raises(ValidationError):
            CheckoutOrchestrator(cart_store, stock).checkout()

        assert cart_store.entry_for("rice").quantity == 2
        assert cart_store.selection == ["rice"]
        assert stock.read_stock("rice") == 10
