"""Decimal helpers for weights, volumes and money."""

from decimal import ROUND_HALF_UP, Decimal


def to_decimal(value) -> Decimal:
    # str() first so 1.234 stays 1.234 instead of its binary expansion
    return value if isinstance(value, Decimal) else Decimal(str(value))


def round_half_up(value, places: int) -> float:
    """Round ``value`` to ``places`` decimals, halves away from zero."""
    quantum = Decimal(1).scaleb(-places)
    return float(to_decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def multiply(quantity, rate, places: int = 2) -> float:
    """Multiply two floats in decimal arithmetic and round the product."""
    return round_half_up(to_decimal(quantity) * to_decimal(rate), places)


def total(values, places: int) -> float:
    """Sum the non-null ``values`` and round the result."""
    return round_half_up(sum((to_decimal(v) for v in values if v is not None), Decimal(0)), places)
