"""Selling-price math for cart lines.

Prices stay at full float precision through every multiplication and sum.
``round_money`` is applied once, where a figure leaves the core (subtotals,
order totals, display strings).
"""

from decimal import ROUND_HALF_UP, Decimal

from ordering.config import settings


def _non_negative(value) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if number != number or number < 0:  # NaN or negative
        return 0.0
    return number


def normalize_discount(discount_percent) -> float:
    """Clamp a discount to [0, 100]; missing or invalid input means no discount."""
    return min(_non_negative(discount_percent), 100.0)


def normalize_price(unit_price) -> float:
    return _non_negative(unit_price)


def selling_price(unit_price, discount_percent=0) -> float:
    """Base price after discount, before quantity multiplication."""
    return normalize_price(unit_price) * (1 - normalize_discount(discount_percent) / 100)


def line_total(unit_price, discount_percent, quantity) -> float:
    return selling_price(unit_price, discount_percent) * quantity


def round_money(value: float, places: int | None = None) -> float:
    """Round half-up to the configured number of decimal places."""
    places = settings.decimals if places is None else places
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def format_money(value: float) -> str:
    """Display string, e.g. ``₱1,234.50``."""
    return f"{settings.currency_symbol}{round_money(value):,.{settings.decimals}f}"
