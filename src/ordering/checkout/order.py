"""Order snapshot and checkout outcome types.

An ``Order`` only exists as the return value of a successful checkout. It
is handed to the receipt view and then dropped; nothing persists it.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from ordering import pricing


class PaymentMethod(Enum):
    CARD = "card"
    COD = "cod"


@dataclass(frozen=True)
class OrderLine:
    product_id: str
    name: str
    quantity: int
    unit_price: float
    discount_percent: float
    image_ref: str | None = None

    @classmethod
    def from_entry(cls, entry):
        return cls(
            product_id=str(entry.product_id),
            name=entry.name,
            quantity=entry.quantity,
            unit_price=entry.unit_price,
            discount_percent=entry.discount_percent or 0.0,
            image_ref=entry.image_ref,
        )

    @property
    def selling_price(self):
        return pricing.selling_price(self.unit_price, self.discount_percent)

    @property
    def line_total(self):
        return pricing.line_total(self.unit_price, self.discount_percent, self.quantity)

    def to_dict(self):
        return {
            "product_id": self.product_id,
            "name": self.name,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "discount_percent": self.discount_percent,
            "image_ref": self.image_ref,
            "line_total": pricing.round_money(self.line_total),
        }


@dataclass(frozen=True)
class Order:
    items: tuple[OrderLine, ...]
    subtotal: float
    shipping_fee: float
    total: float
    payment_method: str
    placed_at: datetime
    delivery_window: tuple[datetime, datetime]

    @property
    def item_count(self):
        return sum(line.quantity for line in self.items)

    def to_dict(self):
        earliest, latest = self.delivery_window
        return {
            "items": [line.to_dict() for line in self.items],
            "subtotal": self.subtotal,
            "shipping_fee": self.shipping_fee,
            "total": self.total,
            "payment_method": self.payment_method,
            "placed_at": self.placed_at.isoformat(),
            "delivery_window": [earliest.date().isoformat(), latest.date().isoformat()],
        }


@dataclass(frozen=True)
class StockViolation:
    """A selected entry asks for more units than inventory currently holds."""

    product_id: str
    name: str
    requested: int
    available: int

    @property
    def message(self):
        return f"Not enough stock for {self.name}. Only {self.available} left."

    def to_dict(self):
        return {
            "product_id": self.product_id,
            "name": self.name,
            "requested": self.requested,
            "available": self.available,
        }


@dataclass(frozen=True)
class CheckoutResult:
    success: bool
    order: Order | None = None
    violations: tuple[StockViolation, ...] = field(default_factory=tuple)
    message: str | None = None

    def to_dict(self):
        if self.success:
            return {"success": True, "order": self.order.to_dict() if self.order else None}
        return {
            "success": False,
            "message": self.message,
            "violations": [v.to_dict() for v in self.violations],
        }
