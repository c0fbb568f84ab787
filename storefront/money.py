"""
Money Utilities - Safe Decimal operations for cart prices.

Prices arrive as captured product fields (strings, ints, floats, or junk),
so every conversion degrades to Decimal("0") instead of raising.
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Any, Union

# Default precision for money operations (2 decimal places)
MONEY_PRECISION = Decimal("0.01")

Number = Union[str, int, float, Decimal]


def to_decimal(value: Any) -> Decimal:
    """
    Convert any value to Decimal safely.

    Args:
        value: Value to convert (str, int, float, Decimal, or None)

    Returns:
        Decimal representation of the value, or Decimal("0") if None/invalid
    """
    if value is None or isinstance(value, bool):
        return Decimal("0")

    if isinstance(value, Decimal):
        result = value
    else:
        try:
            # Go through str so floats keep their printed precision
            result = Decimal(str(value).strip()) if isinstance(value, (str, float)) else Decimal(value)
        except (InvalidOperation, ValueError, TypeError):
            return Decimal("0")

    if not result.is_finite():
        return Decimal("0")
    return result


def round_money(value: Number) -> Decimal:
    """Round a monetary value to cents."""
    return to_decimal(value).quantize(MONEY_PRECISION, rounding=ROUND_HALF_UP)


def multiply(value: Number, factor: Number) -> Decimal:
    """Safe multiplication of monetary value by a factor."""
    return to_decimal(value) * to_decimal(factor)


def to_float(value: Number) -> float:
    """
    Convert Decimal to float for JSON-friendly views.

    Use only at presentation boundaries, not for internal calculations.
    """
    return float(to_decimal(value))


def format_money(value: Number, symbol: str = "$") -> str:
    """Format a value the way the cart summary shows it, e.g. $1,234.50."""
    return f"{symbol}{round_money(value):,.2f}"
