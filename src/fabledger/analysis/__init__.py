# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Ledger aggregation: aging, period flows, balances, ratios and projections.
"""

from .aggregator import LedgerAggregator
from .results import (
    AgingBucketSummary,
    Balance,
    CashFlowProjection,
    FinancialRatios,
    PeriodFlow,
    PeriodTotals,
    RatioInputs,
    ReceivablesAging,
)

__all__ = [
    "AgingBucketSummary",
    "Balance",
    "CashFlowProjection",
    "FinancialRatios",
    "LedgerAggregator",
    "PeriodFlow",
    "PeriodTotals",
    "RatioInputs",
    "ReceivablesAging",
]
