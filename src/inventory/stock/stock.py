"""InventoryItem aggregate — authoritative stock count for one product.

This is the only place stock figures live. Carts read them through the
ProductInventory port (``inventory.stock.access``) and checkout writes the
decremented figures back as one batch.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String

from inventory.domain import inventory
from inventory.stock.events import OutOfStockDetected, StockLevelChanged, StockRegistered


@inventory.aggregate
class InventoryItem:
    product_id = Identifier(identifier=True, required=True)
    name = String(max_length=255)
    stock = Integer(default=0, min_value=0)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, product_id, stock=0, name=None):
        if stock < 0:
            raise ValidationError({"stock": ["Stock cannot be negative"]})

        now = datetime.now(UTC)
        item = cls(
            product_id=product_id,
            name=name,
            stock=stock,
            created_at=now,
            updated_at=now,
        )
        item.raise_(
            StockRegistered(
                product_id=str(product_id),
                name=name,
                initial_stock=stock,
                registered_at=now,
            )
        )
        return item

    # -------------------------------------------------------------------
    # Stock changes
    # -------------------------------------------------------------------
    def set_stock(self, quantity, reason=None):
        if quantity < 0:
            raise ValidationError({"stock": ["Stock cannot be negative"]})

        previous = self.stock or 0
        now = datetime.now(UTC)
        self.stock = quantity
        self.updated_at = now

        self.raise_(
            StockLevelChanged(
                product_id=str(self.product_id),
                previous_stock=previous,
                new_stock=quantity,
                reason=reason,
                changed_at=now,
            )
        )
        if quantity == 0 and previous > 0:
            self.raise_(OutOfStockDetected(product_id=str(self.product_id), detected_at=now))
