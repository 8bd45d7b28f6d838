"""Freshcart cart maintenance CLI.

Works directly on the JSON cart files the API writes, so it can be used
while the server is stopped.

Usage:
    python src/manage.py show-cart                 # Print the saved cart
    python src/manage.py show-cart --storage-dir d # ...from another directory
    python src/manage.py clear-cart                # Empty the saved cart
"""

import argparse
import sys


def _load_store(storage_dir):
    from inventory.stock.access import InMemoryInventory
    from ordering.cart.storage import JsonFileStorage
    from ordering.cart.store import CartStore
    from ordering.domain import ordering

    with ordering.domain_context():
        return CartStore.load(InMemoryInventory(), JsonFileStorage(storage_dir))


def show_cart(storage_dir):
    """Print every entry, the selection and both subtotals."""
    from ordering.pricing import format_money

    view = _load_store(storage_dir).view()
    if not view["entries"]:
        print("Cart is empty.")
        return

    for entry in view["entries"]:
        mark = "[x]" if entry["selected"] else "[ ]"
        print(f"{mark} {entry['name']} x{entry['quantity']}  {format_money(entry['line_total'])}")
    print(f"Items: {view['item_count']}")
    print(f"Subtotal (all): {format_money(view['subtotal_all'])}")
    print(f"Subtotal (selected): {format_money(view['subtotal_selected'])}")


def clear_cart(storage_dir):
    """Delete both saved cart keys."""
    from ordering.cart.storage import ENTRIES_KEY, SELECTION_KEY, JsonFileStorage

    storage = JsonFileStorage(storage_dir)
    storage.delete(ENTRIES_KEY)
    storage.delete(SELECTION_KEY)
    print("Cart cleared.")


def main():
    from ordering.config import settings
    from ordering.domain import ordering
    from ordering.utils.logging import configure_logging

    configure_logging(settings.log_dir)
    ordering.init()

    parser = argparse.ArgumentParser(description="Freshcart cart maintenance")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (("show-cart", "Print the saved cart"), ("clear-cart", "Empty the saved cart")):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument(
            "--storage-dir",
            default=settings.storage_dir,
            help="Directory holding the cart files (default: FRESHCART_STORAGE_DIR)",
        )

    args = parser.parse_args()

    if args.command == "show-cart":
        show_cart(args.storage_dir)
    elif args.command == "clear-cart":
        clear_cart(args.storage_dir)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
