"""CartStore: the one object presentation code talks to about the cart.

The application root creates a single store and hands it to whoever needs
it. The store owns a ``ShoppingCart``, asks inventory for live stock before
every bound-sensitive change, and writes the resulting state through to a
key-value storage backend under two keys (entries and selection).

Memory is authoritative. A failed write is logged, the store is marked
dirty, and the next mutation (or an explicit ``flush()``) writes the full
state again.
"""

import json

import structlog
from protean.exceptions import ValidationError

from ordering import pricing
from ordering.cart.cart import SCOPE_ALL, SCOPE_SELECTED, CartEntry, ShoppingCart
from ordering.cart.exceptions import PersistenceError
from ordering.cart.storage import ENTRIES_KEY, SELECTION_KEY

logger = structlog.get_logger(__name__)

ENTRY_FIELDS = (
    "id",
    "product_id",
    "name",
    "unit_price",
    "discount_percent",
    "quantity",
    "stock_at_add",
    "image_ref",
)

BADGE_LIMIT = 99


def _entry_to_dict(entry):
    data = {field: getattr(entry, field) for field in ENTRY_FIELDS}
    data["id"] = str(data["id"])
    return data


def _decode_list(raw):
    if raw is None or raw == "":
        return []
    value = json.loads(raw)
    if not isinstance(value, list):
        raise ValueError(f"Expected a JSON array, got {type(value).__name__}")
    return value


class CartStore:
    def __init__(self, inventory, storage, cart=None):
        self.inventory = inventory
        self.storage = storage
        self.cart = cart if cart is not None else ShoppingCart.create()
        self.dirty = False

    # -------------------------------------------------------------------
    # Loading and persistence
    # -------------------------------------------------------------------
    @classmethod
    def load(cls, inventory, storage):
        """Rebuild the cart from storage; unreadable state means an empty cart."""
        try:
            entries_data = _decode_list(storage.get(ENTRIES_KEY))
            selection_data = _decode_list(storage.get(SELECTION_KEY))

            cart = ShoppingCart.create()
            for data in entries_data:
                cart.add_entries(CartEntry(**{f: data[f] for f in ENTRY_FIELDS if f in data}))

            over = [str(e.product_id) for e in cart.entries if e.quantity > e.stock_at_add]
            if over:
                raise ValidationError({"entries": [f"Quantity exceeds recorded stock: {', '.join(over)}"]})

            in_cart = {str(e.product_id) for e in cart.entries}
            selection = []
            for product_id in map(str, selection_data):
                if product_id in in_cart and product_id not in selection:
                    selection.append(product_id)
            cart.selection = json.dumps(selection)
        except (PersistenceError, ValidationError, ValueError, TypeError, KeyError) as exc:
            logger.warning("Discarding unreadable cart state", error=str(exc))
            cart = ShoppingCart.create()

        store = cls(inventory, storage, cart)
        store._drain_events()
        logger.info("Cart loaded", entries=len(cart.entries), selected=len(cart.selected_ids))
        return store

    def flush(self):
        """Write entries and selection to storage. Returns False if the write failed."""
        entries = json.dumps([_entry_to_dict(e) for e in self.cart.entries])
        selection = json.dumps(self.cart.selected_ids)
        try:
            self.storage.set(ENTRIES_KEY, entries)
            self.storage.set(SELECTION_KEY, selection)
        except PersistenceError as exc:
            self.dirty = True
            logger.error("Cart write-through failed, keeping in-memory state", key=exc.key, error=exc.reason)
            return False

        if self.dirty:
            logger.info("Cart write-through recovered")
        self.dirty = False
        return True

    def _drain_events(self):
        # No repository collects cart events, so the store logs and discards them
        for event in self.cart._events:
            logger.debug("Cart event", event_type=type(event).__name__, data=event.to_dict())
        self.cart._events.clear()

    def _commit(self):
        self._drain_events()
        self.flush()

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def add_item(self, item, requested_qty=1):
        """Add a catalog item, merging with an existing entry. Returns the new quantity."""
        stock = self.inventory.read_stock(item.product_id)
        quantity = self.cart.add_item(
            product_id=str(item.product_id),
            name=item.name,
            unit_price=pricing.normalize_price(item.unit_price),
            discount_percent=pricing.normalize_discount(item.discount_percent),
            image_ref=item.image_ref,
            quantity=requested_qty,
            stock=stock,
        )
        logger.info("Item added to cart", product_id=str(item.product_id), quantity=quantity, stock=stock)
        self._commit()
        return quantity

    def increase_quantity(self, product_id):
        stock = self.inventory.read_stock(product_id)
        quantity = self.cart.increase_quantity(product_id, stock=stock)
        self._commit()
        return quantity

    def decrease_quantity(self, product_id, confirmed=False):
        """Take one unit off. At the last unit this is a removal and needs confirmation."""
        quantity = self.cart.decrease_quantity(product_id, confirmed=confirmed)
        if quantity == 0:
            logger.info("Item removed from cart", product_id=str(product_id))
        self._commit()
        return quantity

    def remove_item(self, product_id, confirmed=False):
        self.cart.remove_item(product_id, confirmed=confirmed)
        logger.info("Item removed from cart", product_id=str(product_id))
        self._commit()

    def toggle_select(self, product_id):
        selected = self.cart.toggle_select(product_id)
        self._commit()
        return selected

    def select_all(self):
        self.cart.select_all()
        self._commit()

    def clear_selection(self):
        self.cart.clear_selection()
        self._commit()

    def remove_committed(self, product_ids):
        """Drop entries that a successful checkout just bought."""
        self.cart.remove_committed(product_ids)
        self._commit()

    # -------------------------------------------------------------------
    # Derived view data
    # -------------------------------------------------------------------
    @property
    def entries(self):
        return list(self.cart.entries)

    @property
    def selection(self):
        return self.cart.selected_ids

    def entry_for(self, product_id):
        return self.cart.entry_for(product_id)

    def selected_entries(self):
        return self.cart.selected_entries()

    def subtotal(self, scope=SCOPE_ALL):
        return self.cart.subtotal(scope)

    def item_count(self):
        return self.cart.item_count()

    def badge_text(self):
        count = self.item_count()
        return f"{BADGE_LIMIT}+" if count > BADGE_LIMIT else str(count)

    def view(self):
        selected = set(self.cart.selected_ids)
        return {
            "entries": [
                {
                    **_entry_to_dict(entry),
                    "selling_price": pricing.round_money(
                        pricing.selling_price(entry.unit_price, entry.discount_percent)
                    ),
                    "line_total": pricing.round_money(entry.line_total),
                    "selected": str(entry.product_id) in selected,
                }
                for entry in self.cart.entries
            ],
            "selection": self.cart.selected_ids,
            "subtotal_all": self.subtotal(SCOPE_ALL),
            "subtotal_selected": self.subtotal(SCOPE_SELECTED),
            "item_count": self.item_count(),
        }
