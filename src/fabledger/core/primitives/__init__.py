# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
fabledger Core Primitives

Building blocks shared by records, aggregators and reports: the immutable
model base, closed enumerations, constrained types, settings and validators.
"""

from .enums import (
    AgingBucket,
    ChequeStatus,
    Currency,
    DueStatus,
    FlowDirection,
    Granularity,
    MarginStatus,
    OrderStatus,
    QuoteStatus,
    SourceCodeEnum,
    TransactionType,
    Trend,
)
from .model import Model
from .settings import (
    AgingSettings,
    CurrencySettings,
    GlobalSettings,
    ReportingSettings,
)
from .types import NonNegativeDecimal, PositiveInt, RatioDecimal
from .validation import ValidationMixin, coerce_source_code

__all__ = [
    "AgingBucket",
    "AgingSettings",
    "ChequeStatus",
    "Currency",
    "CurrencySettings",
    "DueStatus",
    "FlowDirection",
    "GlobalSettings",
    "Granularity",
    "MarginStatus",
    "Model",
    "NonNegativeDecimal",
    "OrderStatus",
    "PositiveInt",
    "QuoteStatus",
    "RatioDecimal",
    "ReportingSettings",
    "SourceCodeEnum",
    "TransactionType",
    "Trend",
    "ValidationMixin",
    "coerce_source_code",
]
