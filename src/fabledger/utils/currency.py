# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Currency formatting and conversion for the two operating currencies.

Amounts are rendered the way the business's locale writes them: "." groups
thousands and "," separates decimals, e.g. ``$ 1.234,56`` or ``US$ 99,00``.
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Optional

from ..core.calculations import Number, quantize, to_decimal
from ..core.primitives.enums import Currency
from ..core.primitives.settings import CurrencySettings

_SYMBOLS = {Currency.LOCAL: "$", Currency.USD: "US$"}
_NON_NUMERIC = re.compile(r"[^0-9.\-]")


def currency_symbol(currency: Currency) -> str:
    return _SYMBOLS[Currency(currency)]


def format_number(
    amount: Number, places: int = 2, settings: Optional[CurrencySettings] = None
) -> str:
    """Locale-grouped number without a currency symbol."""
    settings = settings or CurrencySettings()
    rendered = f"{quantize(amount, places):,.{places}f}"
    # Swap through a placeholder so "," and "." do not collide
    return (
        rendered.replace(",", "\x00")
        .replace(".", settings.decimal_separator)
        .replace("\x00", settings.grouping_separator)
    )


def format_amount(
    amount: Number,
    currency: Currency = Currency.LOCAL,
    places: int = 2,
    settings: Optional[CurrencySettings] = None,
) -> str:
    """
    Render an amount with its currency symbol.

    Example:
        >>> format_amount(Decimal("1234.5"))
        '$ 1.234,50'
        >>> format_amount(-20, Currency.USD)
        '-US$ 20,00'
    """
    value = quantize(amount, places)
    body = format_number(abs(value), places, settings)
    sign = "-" if value < 0 else ""
    return f"{sign}{currency_symbol(currency)} {body}"


def convert_currency(
    amount: Number,
    from_currency: Currency,
    to_currency: Currency,
    exchange_rate: Optional[Number] = None,
    settings: Optional[CurrencySettings] = None,
) -> Decimal:
    """
    Convert between local currency and USD.

    Args:
        exchange_rate: Local units per dollar; defaults to the configured rate

    Raises:
        ValueError: If the exchange rate is not positive
    """
    amount = to_decimal(amount)
    from_currency, to_currency = Currency(from_currency), Currency(to_currency)
    if from_currency is to_currency:
        return amount

    settings = settings or CurrencySettings()
    rate = to_decimal(exchange_rate) if exchange_rate is not None else settings.usd_exchange_rate
    if rate <= 0:
        raise ValueError(f"Exchange rate must be positive, got {rate}")

    if from_currency is Currency.USD:
        return quantize(amount * rate)
    return quantize(amount / rate)


def parse_amount(value: str) -> Decimal:
    """Extract a number from free text such as "$1250.50"; 0 when nothing parses."""
    cleaned = _NON_NUMERIC.sub("", value or "")
    try:
        return Decimal(cleaned)
    except InvalidOperation:
        return Decimal("0")


def is_valid_amount(value: str) -> bool:
    """True when the text holds a non-negative number."""
    cleaned = _NON_NUMERIC.sub("", value or "")
    try:
        return Decimal(cleaned) >= 0
    except InvalidOperation:
        return False
