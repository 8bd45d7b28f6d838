"""ProductInventory port: how other contexts read and write stock.

Anything with these three methods can back a cart or a checkout:

    read_stock(product_id) -> int
    write_stock(product_id, quantity)
    write_stock_levels({product_id: quantity})

``InMemoryInventory`` is a plain dict and suits tests and single-process
demos. ``DomainInventory`` goes through the inventory domain's repository
and commands, pushing the inventory domain context for each call so it can
be used from inside another context's request.
"""

import json

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError

from inventory.domain import inventory
from inventory.stock.adjustment import ApplyStockLevels, SetStockLevel
from inventory.stock.stock import InventoryItem

logger = structlog.get_logger(__name__)


def _check_levels(levels):
    negative = sorted(str(pid) for pid, qty in levels.items() if int(qty) < 0)
    if negative:
        raise ValidationError({"levels": [f"Stock cannot be negative: {', '.join(negative)}"]})


class InMemoryInventory:
    def __init__(self, levels=None):
        self._levels = {str(pid): int(qty) for pid, qty in (levels or {}).items()}

    def read_stock(self, product_id):
        return self._levels.get(str(product_id), 0)

    def write_stock(self, product_id, quantity):
        self.write_stock_levels({product_id: quantity})

    def write_stock_levels(self, levels):
        _check_levels(levels)
        updated = dict(self._levels)
        updated.update({str(pid): int(qty) for pid, qty in levels.items()})
        self._levels = updated

    def snapshot(self):
        return dict(self._levels)


class DomainInventory:
    def __init__(self, domain=None):
        self.domain = domain if domain is not None else inventory

    def read_stock(self, product_id):
        with self.domain.domain_context():
            try:
                item = self.domain.repository_for(InventoryItem).get(str(product_id))
            except ObjectNotFoundError:
                logger.warning("Stock read for unregistered product", product_id=str(product_id))
                return 0
            return item.stock or 0

    def write_stock(self, product_id, quantity):
        with self.domain.domain_context():
            self.domain.process(
                SetStockLevel(product_id=str(product_id), stock=int(quantity)),
                asynchronous=False,
            )

    def write_stock_levels(self, levels):
        _check_levels(levels)
        with self.domain.domain_context():
            self.domain.process(
                ApplyStockLevels(levels=json.dumps({str(pid): int(qty) for pid, qty in levels.items()})),
                asynchronous=False,
            )
        logger.info("Stock levels applied", products=sorted(str(pid) for pid in levels))
