"""Checkout orchestrator: validate the selection, then commit it.

Flow:
    1. Nothing selected → fail, no side effects.
    2. Re-read live stock for every selected product (never the figure
       cached on the cart entry).
    3. Any shortfall → fail with every violation, no side effects.
    4. Write all decremented stock levels as one batch (floored at zero).
    5. Build the Order snapshot (selected subtotal + flat shipping fee).
    6. Remove the bought entries from the cart and the selection.
    7. Return the Order.

Everything up to step 4 is read-only, so a shopper can back out of the
confirm dialog at any point before it with nothing changed. ``validate()``
runs steps 1-3 on their own for exactly that preview.
"""

from datetime import UTC, datetime, timedelta

import structlog
from protean.exceptions import ValidationError

from ordering import pricing
from ordering.cart.cart import SCOPE_SELECTED
from ordering.checkout.order import CheckoutResult, Order, OrderLine, PaymentMethod, StockViolation
from ordering.config import settings

logger = structlog.get_logger(__name__)

NOTHING_TO_CHECKOUT = "No items to checkout."
INSUFFICIENT_STOCK = "Some items do not have enough stock."


def _payment_method(value):
    if isinstance(value, PaymentMethod):
        return value
    try:
        return PaymentMethod(str(value).strip().lower())
    except ValueError:
        choices = ", ".join(m.value for m in PaymentMethod)
        raise ValidationError({"payment_method": [f"Payment method must be one of: {choices}"]}) from None


class CheckoutOrchestrator:
    def __init__(self, store, inventory, shipping_fee=None, clock=None):
        self.store = store
        self.inventory = inventory
        self.shipping_fee = settings.shipping_fee if shipping_fee is None else shipping_fee
        self.clock = clock or (lambda: datetime.now(UTC))

    def _check(self):
        """Steps 1-3. Returns (entries, live stock, failure result or None)."""
        entries = self.store.selected_entries()
        if not entries:
            return entries, {}, CheckoutResult(success=False, message=NOTHING_TO_CHECKOUT)

        available = {str(e.product_id): self.inventory.read_stock(e.product_id) for e in entries}
        violations = tuple(
            StockViolation(
                product_id=str(e.product_id),
                name=e.name,
                requested=e.quantity,
                available=available[str(e.product_id)],
            )
            for e in entries
            if e.quantity > available[str(e.product_id)]
        )
        if violations:
            return entries, available, CheckoutResult(success=False, violations=violations, message=INSUFFICIENT_STOCK)

        return entries, available, None

    def validate(self):
        """Dry run of the commit. ``success`` means ``checkout()`` would go through right now."""
        _, _, failure = self._check()
        return failure or CheckoutResult(success=True)

    def checkout(self, payment_method=PaymentMethod.CARD):
        method = _payment_method(payment_method)

        entries, available, failure = self._check()
        if failure is not None:
            if failure.violations:
                logger.warning(
                    "Checkout rejected: insufficient stock",
                    violations=[v.to_dict() for v in failure.violations],
                )
            else:
                logger.info("Checkout rejected: nothing selected")
            return failure

        lines = tuple(OrderLine.from_entry(e) for e in entries)
        subtotal = self.store.subtotal(SCOPE_SELECTED)

        self.inventory.write_stock_levels(
            {line.product_id: max(available[line.product_id] - line.quantity, 0) for line in lines}
        )

        placed_at = self.clock()
        shipping_fee = pricing.round_money(self.shipping_fee)
        order = Order(
            items=lines,
            subtotal=subtotal,
            shipping_fee=shipping_fee,
            total=pricing.round_money(subtotal + shipping_fee),
            payment_method=method.value,
            placed_at=placed_at,
            delivery_window=(
                placed_at + timedelta(days=settings.delivery_min_days),
                placed_at + timedelta(days=settings.delivery_max_days),
            ),
        )

        self.store.remove_committed([line.product_id for line in lines])

        logger.info(
            "Order placed",
            products=[line.product_id for line in lines],
            subtotal=order.subtotal,
            total=order.total,
            payment_method=order.payment_method,
        )
        return CheckoutResult(success=True, order=order)
