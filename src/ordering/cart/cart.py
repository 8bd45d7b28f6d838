"""Shopping Cart aggregate — the shopper's entries and checkout selection.

The cart is a plain CQRS aggregate held in memory by ``CartStore``. It
knows nothing about where stock comes from: every bound-sensitive method
takes the live stock figure as an argument, and the store reads it from
inventory right before the call.

Quantity rules:
    1 <= quantity <= stock, where stock is the live figure at the last
    mutation (recorded on the entry as ``stock_at_add``).
    Removing an entry, or decreasing past the last unit, needs an explicit
    ``confirmed=True`` from the caller.
"""

import json
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Integer, String, Text

from ordering import pricing
from ordering.cart.events import (
    CartItemAdded,
    CartItemRemoved,
    CartItemsCheckedOut,
    CartQuantityUpdated,
    CartSelectionChanged,
)
from ordering.cart.exceptions import ConfirmationRequired
from ordering.domain import ordering

SCOPE_ALL = "all"
SCOPE_SELECTED = "selected"


@ordering.entity(part_of="ShoppingCart")
class CartEntry:
    product_id = String(required=True, max_length=100)
    name = String(required=True, max_length=255)
    unit_price = Float(required=True, min_value=0.0)
    discount_percent = Float(default=0.0, min_value=0.0, max_value=100.0)
    quantity = Integer(required=True, min_value=1)
    stock_at_add = Integer(required=True, min_value=1)
    image_ref = String(max_length=500)

    @property
    def line_total(self):
        return pricing.line_total(self.unit_price, self.discount_percent, self.quantity)


@ordering.aggregate
class ShoppingCart:
    entries = HasMany(CartEntry)
    selection = Text()  # JSON array of product ids
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def one_entry_per_product(self):
        product_ids = [str(e.product_id) for e in self.entries]
        if len(product_ids) != len(set(product_ids)):
            raise ValidationError({"entries": ["A product can appear only once in the cart"]})

    @invariant.post
    def selection_must_reference_cart_entries(self):
        in_cart = {str(e.product_id) for e in self.entries}
        stray = [pid for pid in self.selected_ids if pid not in in_cart]
        if stray:
            raise ValidationError({"selection": [f"Selected products are not in the cart: {', '.join(stray)}"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls):
        now = datetime.now(UTC)
        return cls(selection=json.dumps([]), created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------
    @property
    def selected_ids(self):
        return json.loads(self.selection) if self.selection else []

    def entry_for(self, product_id):
        return next((e for e in self.entries if str(e.product_id) == str(product_id)), None)

    def _require_entry(self, product_id):
        entry = self.entry_for(product_id)
        if entry is None:
            raise ValidationError({"product_id": [f"Item {product_id} not found in cart"]})
        return entry

    def is_selected(self, product_id):
        return str(product_id) in self.selected_ids

    def selected_entries(self):
        selected = set(self.selected_ids)
        return [e for e in self.entries if str(e.product_id) in selected]

    def _set_selection(self, product_ids):
        self.selection = json.dumps(list(product_ids))

    def _touch(self):
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product_id, name, unit_price, discount_percent, image_ref, quantity, stock):
        """Add a product, or merge into its existing entry, clamped to stock."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if stock <= 0:
            raise ValidationError({"stock": [f"{name} is out of stock"]})

        existing = self.entry_for(product_id)
        if existing:
            new_quantity = min(existing.quantity + quantity, stock)
            existing.stock_at_add = stock
            existing.quantity = new_quantity
        else:
            new_quantity = min(quantity, stock)
            self.add_entries(
                CartEntry(
                    product_id=str(product_id),
                    name=name,
                    unit_price=unit_price,
                    discount_percent=discount_percent,
                    quantity=new_quantity,
                    stock_at_add=stock,
                    image_ref=image_ref,
                )
            )

        self._touch()
        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                product_id=str(product_id),
                requested_quantity=quantity,
                new_quantity=new_quantity,
                stock=stock,
            )
        )
        return new_quantity

    def increase_quantity(self, product_id, stock):
        """Add one unit; at the stock limit nothing changes and the limit is reported."""
        entry = self._require_entry(product_id)
        if entry.quantity >= stock:
            raise ValidationError({"quantity": [f"Cannot add more than {stock} units of {entry.name}"]})

        previous_quantity = entry.quantity
        entry.stock_at_add = stock
        entry.quantity = previous_quantity + 1
        self._touch()

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                product_id=str(product_id),
                previous_quantity=previous_quantity,
                new_quantity=entry.quantity,
            )
        )
        return entry.quantity

    def decrease_quantity(self, product_id, confirmed=False):
        """Remove one unit. The last unit goes through the removal flow."""
        entry = self._require_entry(product_id)
        if entry.quantity == 1:
            self.remove_item(product_id, confirmed=confirmed)
            return 0

        previous_quantity = entry.quantity
        entry.quantity = previous_quantity - 1
        self._touch()

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                product_id=str(product_id),
                previous_quantity=previous_quantity,
                new_quantity=entry.quantity,
            )
        )
        return entry.quantity

    def remove_item(self, product_id, confirmed=False):
        entry = self._require_entry(product_id)
        if not confirmed:
            raise ConfirmationRequired(product_id, entry.name)

        # Selection first, so it never references a missing entry
        self._set_selection(pid for pid in self.selected_ids if pid != str(product_id))
        self.remove_entries(entry)
        self._touch()

        self.raise_(CartItemRemoved(cart_id=str(self.id), product_id=str(product_id)))

    # -------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------
    def toggle_select(self, product_id):
        self._require_entry(product_id)
        product_id = str(product_id)

        selected = self.selected_ids
        if product_id in selected:
            selected.remove(product_id)
            now_selected = False
        else:
            selected.append(product_id)
            now_selected = True

        self._set_selection(selected)
        self._touch()

        self.raise_(
            CartSelectionChanged(
                cart_id=str(self.id),
                product_id=product_id,
                selected=now_selected,
            )
        )
        return now_selected

    def select_all(self):
        for entry in self.entries:
            if not self.is_selected(entry.product_id):
                self.toggle_select(entry.product_id)

    def clear_selection(self):
        for product_id in self.selected_ids:
            self.toggle_select(product_id)

    # -------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------
    def remove_committed(self, product_ids):
        """Drop entries that were just bought, and their selection marks."""
        committed = {str(pid) for pid in product_ids}
        self._set_selection(pid for pid in self.selected_ids if pid not in committed)
        for entry in [e for e in self.entries if str(e.product_id) in committed]:
            self.remove_entries(entry)
        self._touch()

        self.raise_(
            CartItemsCheckedOut(
                cart_id=str(self.id),
                product_ids=json.dumps(sorted(committed)),
            )
        )

    # -------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------
    def subtotal(self, scope=SCOPE_ALL):
        if scope == SCOPE_ALL:
            entries = self.entries
        elif scope == SCOPE_SELECTED:
            entries = self.selected_entries()
        else:
            raise ValidationError({"scope": [f"Unknown subtotal scope: {scope}"]})
        return pricing.round_money(sum(e.line_total for e in entries))

    def item_count(self):
        return sum(e.quantity for e in self.entries)
