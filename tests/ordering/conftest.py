import pytest
from inventory.stock.access import InMemoryInventory
from ordering.cart.catalog import CatalogItem
from ordering.cart.storage import MemoryStorage
from ordering.cart.store import CartStore
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield


@pytest.fixture()
def stock():
    return InMemoryInventory({"rice": 10, "eggs": 3, "milk": 5})


@pytest.fixture()
def storage():
    return MemoryStorage()


@pytest.fixture()
def store(stock, storage):
    return CartStore.load(stock, storage)


@pytest.fixture()
def rice():
    return CatalogItem(product_id="rice", name="Jasmine Rice 5kg", unit_price=100.0)


@pytest.fixture()
def eggs():
    return CatalogItem(product_id="eggs", name="Eggs (dozen)", unit_price=120.0, discount_percent=25.0)


@pytest.fixture()
def milk():
    return CatalogItem(product_id="milk", name="Fresh Milk 1L", unit_price=89.75)
