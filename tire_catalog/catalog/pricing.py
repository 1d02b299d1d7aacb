"""
Price and Inventory Derivation

Turns a variant's IVA-inclusive price into the catalogue price columns.
Money is rounded to cents half away from zero (not banker's rounding).
"""

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

from ..common.constants import DISCOUNT_TIERS, IVA
from ..models import Item

CENT = Decimal("0.01")

# Larger prices cannot be quantized to cents within the decimal context
MAX_PRICE = 1e15


def _to_decimal(value: float) -> Decimal:
    # str() keeps the shortest repr, so 0.35 stays 0.35 and not 0.34999...
    return Decimal(str(value))


def round2(value) -> float:
    """
    Round to 2 decimals, halves away from zero.

    Example:
        >>> round2(2.675)
        2.68
    """
    return float(_to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP))


def safe_number(value: Any) -> float:
    """
    Parse a price, treating anything unusable as 0.

    Accepts numbers and numeric strings with either '.' or ',' as the
    decimal separator. None, blanks, garbage, NaN, infinities and values
    beyond MAX_PRICE give 0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(str(value).strip().replace(",", ".", 1))
    except ValueError:
        return 0.0
    if not math.isfinite(number) or abs(number) >= MAX_PRICE:
        return 0.0
    return number


def safe_int(value: Any) -> int:
    """Parse an inventory quantity, treating anything unusable as 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    number = safe_number(value)
    return int(number)


def price_without_tax(inclusive_price: float, tax_rate: float = IVA) -> float:
    """
    Remove IVA from a price: round2(price / (1 + tax_rate)).

    A zero price gives exactly 0.
    """
    if not inclusive_price:
        return 0.0
    return round2(_to_decimal(inclusive_price) / (1 + _to_decimal(tax_rate)))


def discounted_price(inclusive_price: float, discount: float) -> float:
    """Apply a discount to the IVA-inclusive price: round2(price * (1 - discount))."""
    if not inclusive_price:
        return 0.0
    return round2(_to_decimal(inclusive_price) * (1 - _to_decimal(discount)))


def derive_item(
    sku: str,
    inclusive_price: Any,
    inventory_qty: Any,
    tax_rate: float = IVA,
    medida: Optional[str] = None,
    apps: Optional[str] = None,
) -> Item:
    """
    Build a catalogue Item from raw variant values.

    Args:
        sku: Variant SKU (already validated as non-empty)
        inclusive_price: Price including IVA, any format (bad values -> 0)
        inventory_qty: Inventory quantity (bad values -> 0)
        tax_rate: IVA rate
        medida: Tire size
        apps: Application models text

    Returns:
        Item with price without IVA and the four discount tiers

    Example:
        >>> item = derive_item("ABC123", "119000.00", 5)
        >>> item.precio_sin_iva, item.precio35
        (100000.0, 77350.0)
    """
    price = safe_number(inclusive_price)
    discounts = {name: discounted_price(price, pct) for name, pct in DISCOUNT_TIERS}

    return Item(
        sku=sku,
        inventario=safe_int(inventory_qty),
        precio_sin_iva=price_without_tax(price, tax_rate),
        precio_con_iva=round2(price),
        medida=medida or None,
        apps=apps or None,
        **discounts,
    )
