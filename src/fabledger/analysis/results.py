# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Derived views produced by the LedgerAggregator.

These are computed, never stored. All are immutable so a caller can cache or
share them freely.
"""

from __future__ import annotations

import datetime
from decimal import Decimal
from typing import Dict, Optional

from pydantic import Field

from fabledger.core.calculations import ZERO
from fabledger.core.primitives import AgingBucket, Model, RatioDecimal, Trend


class Balance(Model):
    """
    Collection status of a sale.

    `outstanding` is `total - collected` and is not clamped; `is_overpaid`
    flags a negative value so the caller can decide how to display it.
    """

    total: Decimal
    collected: Decimal
    outstanding: Decimal
    collected_percentage: Decimal

    @property
    def is_overpaid(self) -> bool:
        return self.outstanding < 0


class PeriodFlow(Model):
    """Income, expense and net for one day or month."""

    period: str
    start: datetime.date
    income_total: Decimal = ZERO
    expense_total: Decimal = ZERO
    net: Decimal = ZERO
    cumulative_net: Decimal = ZERO


class PeriodTotals(Model):
    """Income and expense totals over a whole transaction set."""

    income_total: Decimal = ZERO
    expense_total: Decimal = ZERO
    net: Decimal = ZERO
    neutral_total: Decimal = ZERO
    count: int = 0


class AgingBucketSummary(Model):
    bucket: AgingBucket
    amount: Decimal = ZERO
    count: int = 0

    @property
    def label(self) -> str:
        return self.bucket.label


class ReceivablesAging(Model):
    """Outstanding client balances grouped by age."""

    total_outstanding: Decimal = ZERO
    count: int = 0
    oldest_days: int = 0
    buckets: Dict[AgingBucket, AgingBucketSummary] = Field(default_factory=dict)


class RatioInputs(Model):
    """
    Figures a set of financial ratios is computed from.

    Flow figures (`income_total`, `expense_total`, `net`) cover one period of
    `period_days` days (the configured ratio period when unset); balance
    figures are snapshots at the end of it.
    """

    income_total: Decimal = ZERO
    expense_total: Decimal = ZERO
    net: Decimal = ZERO
    current_assets: Decimal = ZERO
    current_liabilities: Decimal = ZERO
    total_assets: Decimal = ZERO
    total_liabilities: Decimal = ZERO
    receivables: Decimal = ZERO
    payables: Decimal = ZERO
    inventory_value: Decimal = ZERO
    material_cost: Decimal = ZERO
    period_days: Optional[int] = Field(default=None, ge=1)

    @classmethod
    def from_totals(cls, totals: PeriodTotals, **balances) -> "RatioInputs":
        """Seed the flow figures from aggregated totals."""
        return cls(
            income_total=totals.income_total,
            expense_total=totals.expense_total,
            net=totals.net,
            **balances,
        )


class FinancialRatios(Model):
    """
    Ratio metrics.

    A ratio whose denominator is zero is `Decimal('Infinity')` (or
    `-Infinity`) when the numerator is non-zero and None when both are zero.
    A zero denominator never produces 0: "no liabilities" and "zero
    liquidity" are different answers.
    """

    liquidity: Optional[RatioDecimal] = None
    operating_margin: Optional[RatioDecimal] = None
    return_on_assets: Optional[RatioDecimal] = None
    debt_ratio: Optional[RatioDecimal] = None
    inventory_turnover: Optional[RatioDecimal] = None
    days_sales_outstanding: Optional[RatioDecimal] = None
    days_payable_outstanding: Optional[RatioDecimal] = None


class CashFlowProjection(Model):
    period: str
    start: datetime.date
    projected_net: Decimal
    trend: Trend
