"""
Money Utilities - Safe Decimal operations for monetary values.

Avoids float precision issues by using Decimal throughout. Prices coming
from product rows may be numbers or display strings such as "$1,250.00";
normalize_price() turns either into a non-negative Decimal.
"""
import re
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union

Number = Union[str, int, float, Decimal, None]

# Default precision for money operations (2 decimal places)
MONEY_PRECISION = Decimal("0.01")

ZERO = Decimal("0")

# Everything except digits and the decimal point is stripped from price strings
_NON_NUMERIC = re.compile(r"[^0-9.]")
# Leading numeric prefix of what remains ("1.2.3" -> "1.2")
_NUMERIC_PREFIX = re.compile(r"\d+(?:\.\d*)?|\.\d+")


def to_decimal(value: Number) -> Decimal:
    """
    Convert any value to Decimal safely.

    Args:
        value: Value to convert (str, int, float, Decimal, or None)

    Returns:
        Decimal representation of the value, or Decimal("0") if None/invalid
    """
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, Decimal):
        return value

    try:
        # Convert via string to avoid float precision issues
        if isinstance(value, float):
            return Decimal(str(value))
        return Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return ZERO


def normalize_price(value: object) -> Decimal:
    """
    Normalize a raw product price to a finite, non-negative Decimal.

    Strings keep only digits and dots and are read up to the first invalid
    character, so "$5.00" is 5.00 and "free" is 0. Numbers are taken as-is.
    NaN, infinities and negative results collapse to 0.
    """
    if isinstance(value, str):
        match = _NUMERIC_PREFIX.match(_NON_NUMERIC.sub("", value))
        if not match:
            return ZERO
        price = to_decimal(match.group(0))
    elif isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        price = to_decimal(value)
    else:
        return ZERO

    if not price.is_finite() or price < 0:
        return ZERO
    return price


def round_money(value: Number) -> Decimal:
    """Round monetary value to cents."""
    return to_decimal(value).quantize(MONEY_PRECISION, rounding=ROUND_HALF_UP)


def format_money(value: Number, symbol: str = "$") -> str:
    """Format monetary value for display, e.g. "$1,250.00"."""
    return f"{symbol}{round_money(value):,.2f}"


def to_float(value: Number) -> float:
    """
    Convert Decimal to float for JSON serialization or external APIs.

    Use only at API boundaries, not for internal calculations.
    """
    return float(to_decimal(value))


def multiply(value: Number, factor: Number) -> Decimal:
    """Safe multiplication of monetary value by a factor."""
    return to_decimal(value) * to_decimal(factor)
