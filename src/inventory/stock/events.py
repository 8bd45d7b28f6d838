"""Domain events for the InventoryItem aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from inventory.domain import inventory


@inventory.event(part_of="InventoryItem")
class StockRegistered:
    """A product's stock record was created."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String()
    initial_stock = Integer(required=True)
    registered_at = DateTime(required=True)


@inventory.event(part_of="InventoryItem")
class StockLevelChanged:
    """A product's stock count was overwritten (checkout commit or correction)."""

    __version__ = 1

    product_id = Identifier(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)
    reason = String()
    changed_at = DateTime(required=True)


@inventory.event(part_of="InventoryItem")
class OutOfStockDetected:
    """A product's stock reached zero."""

    __version__ = 1

    product_id = Identifier(required=True)
    detected_at = DateTime(required=True)
