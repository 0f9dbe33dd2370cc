# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from .currency import (
    convert_currency,
    currency_symbol,
    format_amount,
    format_number,
    is_valid_amount,
    parse_amount,
)
from .dates import (
    DateRange,
    date_ranges,
    days_until,
    due_status,
    elapsed_days,
    format_date,
    format_period,
    month_start,
    to_naive_timestamp,
)

__all__ = [
    "DateRange",
    "convert_currency",
    "currency_symbol",
    "date_ranges",
    "days_until",
    "due_status",
    "elapsed_days",
    "format_amount",
    "format_date",
    "format_number",
    "format_period",
    "is_valid_amount",
    "month_start",
    "parse_amount",
    "to_naive_timestamp",
]
