"""Ordering bounded context — Shopping Cart and Checkout.

Handles the shopper's cart (entries, quantities, selection), pricing, and
the checkout flow that validates the selection against live inventory and
commits an order.
"""

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
