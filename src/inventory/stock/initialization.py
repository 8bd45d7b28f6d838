"""Stock registration: command and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from inventory.domain import inventory
from inventory.stock.stock import InventoryItem


@inventory.command(part_of="InventoryItem")
class RegisterStock:
    """Create the stock record for a product."""

    product_id = Identifier(required=True)
    name = String(max_length=255)
    stock = Integer(default=0)


@inventory.command_handler(part_of=InventoryItem)
class RegisterStockHandler:
    @handle(RegisterStock)
    def register_stock(self, command):
        repo = current_domain.repository_for(InventoryItem)
        try:
            repo.get(command.product_id)
        except ObjectNotFoundError:
            pass
        else:
            raise ValidationError({"product_id": [f"Stock for {command.product_id} is already registered"]})

        item = InventoryItem.create(
            product_id=command.product_id,
            stock=command.stock or 0,
            name=command.name,
        )
        repo.add(item)
        return str(item.product_id)
