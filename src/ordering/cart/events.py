"""Domain events for the ShoppingCart aggregate."""

from protean.fields import Boolean, Identifier, Integer, String, Text

from ordering.domain import ordering


@ordering.event(part_of="ShoppingCart")
class CartItemAdded:
    """A product was added to the cart, or merged into an existing entry."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = String(required=True)
    requested_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    stock = Integer(required=True)


@ordering.event(part_of="ShoppingCart")
class CartQuantityUpdated:
    """The quantity of a cart entry was increased or decreased by one."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = String(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@ordering.event(part_of="ShoppingCart")
class CartItemRemoved:
    """An entry was removed from the cart after the shopper confirmed it."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = String(required=True)


@ordering.event(part_of="ShoppingCart")
class CartSelectionChanged:
    """A product was marked or unmarked for checkout."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = String(required=True)
    selected = Boolean(required=True)


@ordering.event(part_of="ShoppingCart")
class CartItemsCheckedOut:
    """Entries were committed in an order and left the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_ids = Text(required=True)  # JSON array
