"""Inventory bounded context — authoritative per-product stock.

The cart never owns stock figures; it reads them from here through the
ProductInventory port and only checkout writes them back.
"""

import structlog
from protean.domain import Domain

inventory = Domain(name="inventory")

logger = structlog.get_logger(__name__)
