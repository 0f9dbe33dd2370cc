# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Plain arithmetic helpers for quotes, orders and margins.

All money is `Decimal`; results are rounded half-up to the requested number
of places, matching how amounts are shown on invoices. Percentages of a zero
base are 0 rather than an error: a quote with no sales has no margin yet.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, NamedTuple, Optional, Union

Number = Union[Decimal, int, float, str]

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value: Number) -> Decimal:
    """Convert ints, strings and Decimals to Decimal without float drift."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def quantize(value: Number, places: int = 2) -> Decimal:
    """Round half-up to `places` decimals."""
    return to_decimal(value).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def percentage(part: Number, whole: Number, places: int = 2) -> Decimal:
    """`part / whole * 100`, rounded; 0 when `whole` is 0."""
    whole = to_decimal(whole)
    if whole == 0:
        return quantize(ZERO, places)
    return quantize(to_decimal(part) / whole * HUNDRED, places)


class OrderItem(NamedTuple):
    quantity: Decimal
    unit_price: Decimal
    discount: Decimal = ZERO


class OrderTotals(NamedTuple):
    subtotal: Decimal
    discount_total: Decimal
    taxes: Decimal
    total: Decimal


class ProfitMargin(NamedTuple):
    margin: Decimal
    percentage: Decimal


def item_total(quantity: Number, unit_price: Number, discount: Number = 0) -> Decimal:
    """Line total after a percentage discount."""
    subtotal = to_decimal(quantity) * to_decimal(unit_price)
    discount_amount = subtotal * to_decimal(discount) / HUNDRED
    return quantize(subtotal - discount_amount)


def order_totals(
    items: Iterable[OrderItem],
    global_discount: Number = 0,
    tax_rate: Number = 0,
) -> OrderTotals:
    """
    Totals for a quote or order.

    Line discounts apply first, then the global discount on the subtotal,
    then tax on what remains.

    Example:
        >>> order_totals([OrderItem(Decimal(2), Decimal(100))], tax_rate=21).total
        Decimal('242.00')
    """
    subtotal = sum(
        (item_total(i.quantity, i.unit_price, i.discount) for i in items), ZERO
    )
    discount_total = subtotal * to_decimal(global_discount) / HUNDRED
    taxable = subtotal - discount_total
    taxes = taxable * to_decimal(tax_rate) / HUNDRED
    return OrderTotals(
        subtotal=quantize(subtotal),
        discount_total=quantize(discount_total),
        taxes=quantize(taxes),
        total=quantize(taxable + taxes),
    )


def pending_balance(total: Number, paid: Number) -> Decimal:
    return quantize(to_decimal(total) - to_decimal(paid))


def progress_percentage(paid: Number, total: Number) -> Decimal:
    return percentage(paid, total)


def profit_margin(sale_price: Number, cost: Number) -> ProfitMargin:
    """Gross margin and margin as a share of the sale price."""
    margin = to_decimal(sale_price) - to_decimal(cost)
    return ProfitMargin(margin=quantize(margin), percentage=percentage(margin, sale_price))


def roi(investment: Number, gain: Number) -> Decimal:
    """Return on investment in percent; 0 when nothing was invested."""
    return percentage(gain, investment)


def safe_ratio(numerator: Number, denominator: Number) -> Optional[Decimal]:
    """
    Ratio that never divides by zero.

    Returns:
        numerator / denominator; `Decimal('Infinity')` (signed like the
        numerator) when only the denominator is zero; None for 0 / 0.
    """
    numerator = to_decimal(numerator)
    denominator = to_decimal(denominator)
    if denominator == 0:
        if numerator == 0:
            return None
        return Decimal("Infinity") if numerator > 0 else Decimal("-Infinity")
    return numerator / denominator
