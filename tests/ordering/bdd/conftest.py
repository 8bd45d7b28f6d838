"""Shared BDD fixtures and step definitions for cart and checkout."""

import pytest
from ordering.cart.catalog import CatalogItem
from ordering.checkout.orchestrator import CheckoutOrchestrator
from pytest_bdd import given, parsers, then


@pytest.fixture()
def checkout(store, stock):
    return CheckoutOrchestrator(store, stock, shipping_fee=50.0)


@pytest.fixture()
def outcome():
    """Mutable holder for the result or exception of the When step."""
    return {}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('"{product_id}" has {count:d} units in stock'))
def product_in_stock(stock, product_id, count):
    stock.write_stock(product_id, count)


@given(parsers.cfparse('"{product_id}" drops to {count:d} unit in stock'))
def product_stock_drops(stock, product_id, count):
    stock.write_stock(product_id, count)


@given(parsers.cfparse('the shopper adds {quantity:d} "{product_id}" priced at {price:f}'))
def shopper_adds(store, product_id, quantity, price):
    item = CatalogItem(product_id=product_id, name=product_id.title(), unit_price=price)
    store.add_item(item, requested_qty=quantity)


@given(parsers.cfparse('the shopper selects "{product_id}"'))
def shopper_selects(store, product_id):
    store.toggle_select(product_id)


@given("the shopper selects everything")
def shopper_selects_everything(store):
    store.select_all()


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('"{product_id}" has {count:d} units in stock'))
def stock_level_is(stock, product_id, count):
    assert stock.read_stock(product_id) == count


@then(parsers.cfparse("the cart still holds {count:d} entries"))
def cart_holds(store, count):
    assert len(store.entries) == count
