# storefront/core/money.py
"""
Currency helpers.

All monetary rounding in the project goes through `money()` so that every
call site rounds the same way (2 decimals, half-up on the decimal string of
the value, not on its binary float representation).
"""

import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Sequence

CENT = Decimal("0.01")


def to_decimal(value: float | int | str | Decimal | None) -> Decimal:
    """Convert to Decimal via str() so 0.1 stays 0.1. Non-finite -> 0."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value if value.is_finite() else Decimal("0")
    if isinstance(value, float) and not math.isfinite(value):
        return Decimal("0")
    try:
        result = Decimal(str(value))
    except ArithmeticError:
        return Decimal("0")
    return result if result.is_finite() else Decimal("0")


def quantize(value: float | int | str | Decimal | None) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def money(value: float | int | str | Decimal | None) -> float:
    """Round to currency precision (2 decimals, half-up)."""
    return float(quantize(value))


def allocate_discount(discount: float, line_subtotals: Sequence[float]) -> list[float]:
    """
    Split `discount` across lines proportionally to their subtotals.

    Every line but the last gets money(discount * line / subtotal), capped at
    what is still unallocated; the last line gets the exact remainder. The
    result therefore sums to money(discount) and never contains a negative.
    """
    if not line_subtotals:
        return []

    total_discount = quantize(discount)
    if total_discount <= 0:
        return [0.0 for _ in line_subtotals]

    lines = [to_decimal(line) for line in line_subtotals]
    subtotal = sum(lines, Decimal("0"))

    allocations: list[Decimal] = []
    remaining = total_discount
    last_index = len(lines) - 1

    for index, line in enumerate(lines):
        if index == last_index:
            share = remaining
        elif subtotal > 0:
            share = quantize(total_discount * line / subtotal)
            share = max(Decimal("0"), min(share, remaining))
        else:
            share = Decimal("0")
        allocations.append(share)
        remaining -= share

    return [float(a) for a in allocations]
