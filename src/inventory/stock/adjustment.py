"""Stock level changes: commands and handler.

``ApplyStockLevels`` is the checkout commit: every level in the batch is
loaded and checked before any is written, and the handler runs inside a
single unit of work, so a batch lands completely or not at all.
"""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from inventory.domain import inventory
from inventory.stock.stock import InventoryItem


@inventory.command(part_of="InventoryItem")
class SetStockLevel:
    """Overwrite one product's stock count."""

    product_id = Identifier(required=True)
    stock = Integer(required=True)
    reason = String(default="Correction")


@inventory.command(part_of="InventoryItem")
class ApplyStockLevels:
    """Overwrite several products' stock counts as one batch."""

    levels = Text(required=True)  # JSON: {product_id: stock}
    reason = String(default="Checkout")


@inventory.command_handler(part_of=InventoryItem)
class StockAdjustmentHandler:
    @handle(SetStockLevel)
    def set_stock_level(self, command):
        repo = current_domain.repository_for(InventoryItem)
        item = repo.get(command.product_id)
        item.set_stock(command.stock, reason=command.reason)
        repo.add(item)

    @handle(ApplyStockLevels)
    def apply_stock_levels(self, command):
        levels = json.loads(command.levels) if isinstance(command.levels, str) else command.levels
        repo = current_domain.repository_for(InventoryItem)

        negative = sorted(pid for pid, qty in levels.items() if int(qty) < 0)
        if negative:
            raise ValidationError({"levels": [f"Stock cannot be negative: {', '.join(negative)}"]})

        items = [(repo.get(pid), int(qty)) for pid, qty in levels.items()]
        for item, qty in items:
            item.set_stock(qty, reason=command.reason)
            repo.add(item)
        return len(items)
