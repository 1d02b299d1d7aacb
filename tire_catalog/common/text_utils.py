"""
Text Utilities

Helper functions for whitespace cleanup, accent/case folding and
money display.
"""

import re
import unicodedata
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation


def normalize_whitespace(text) -> str:
    """
    Trim text and collapse internal whitespace runs to a single space.

    Args:
        text: Any value (None becomes "")

    Returns:
        Cleaned string

    Example:
        >>> normalize_whitespace("  Model   X ")
        'Model X'
    """
    if text is None:
        return ""
    return re.sub(r'\s+', ' ', str(text)).strip()


def fold(text) -> str:
    """
    Build a case- and accent-insensitive comparison key.

    Used for matching only, never for display.

    Example:
        >>> fold("tóuring")
        'TOURING'
    """
    decomposed = unicodedata.normalize('NFD', normalize_whitespace(text).upper())
    return ''.join(ch for ch in decomposed if not unicodedata.combining(ch))


def format_cop(amount) -> str:
    """
    Format an amount as Colombian pesos without decimals.

    Example:
        >>> format_cop(1234567.5)
        '$ 1.234.568'
    """
    try:
        value = Decimal(str(amount if amount is not None else 0))
    except InvalidOperation:
        value = Decimal(0)
    if not value.is_finite():
        value = Decimal(0)

    rounded = int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))
    digits = f"{abs(rounded):,}".replace(',', '.')
    sign = '-' if rounded < 0 else ''
    return f"{sign}$ {digits}"
