# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Financial ledger aggregation and derived metrics.

The LedgerAggregator turns already-fetched transactions and sales into the
views dashboards and reports display: aging buckets, zero-filled period
flows, balances, ratios and short-range projections.

Every method is a pure function of its arguments and the aggregator's
settings. Time-relative computations take an explicit `reference_date`
instead of reading the clock, so the same inputs always give the same output.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence

import pandas as pd

from fabledger.core.calculations import (
    HUNDRED,
    ZERO,
    Number,
    percentage,
    quantize,
    safe_ratio,
    to_decimal,
)
from fabledger.core.ledger.mapper import FlowDirectionMapper
from fabledger.core.ledger.records import Sale, Transaction
from fabledger.core.primitives import (
    AgingBucket,
    Currency,
    FlowDirection,
    GlobalSettings,
    Granularity,
    OrderStatus,
    TransactionType,
    Trend,
)
from fabledger.utils.dates import DateLike, elapsed_days, to_naive_timestamp

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

logger = logging.getLogger(__name__)


class LedgerAggregator:
    """
    Pure aggregation over transactions and sales.

    Holds only its (immutable) settings, so one instance can be shared by
    any number of callers.

    Example:
        >>> aggregator = LedgerAggregator()
        >>> aggregator.classify_by_aging(date(2025, 4, 1), date(2025, 1, 1)).label
        '90+'
    """

    def __init__(self, settings: Optional[GlobalSettings] = None):
        self.settings = settings or GlobalSettings()

    @property
    def _places(self) -> int:
        return self.settings.reporting.decimal_precision

    # === CLASSIFICATION ===

    def classify_by_aging(
        self, reference_date: DateLike, order_date: DateLike
    ) -> AgingBucket:
        """
        Classify a balance by whole days elapsed since the order date.

        Args:
            reference_date: The "today" the age is measured at
            order_date: When the order was placed

        Returns:
            CURRENT up to `current_days` inclusive, DAYS_31_60 up to
            `mid_days` inclusive, DAYS_61_90 below `overdue_days`, and
            DAYS_90_PLUS from `overdue_days` on. A future-dated order
            (negative age) is CURRENT.
        """
        days = elapsed_days(reference_date, order_date)
        aging = self.settings.aging
        if days <= aging.current_days:
            return AgingBucket.CURRENT
        if days <= aging.mid_days:
            return AgingBucket.DAYS_31_60
        if days < aging.overdue_days:
            return AgingBucket.DAYS_61_90
        return AgingBucket.DAYS_90_PLUS

    @staticmethod
    def is_income_type(transaction_type: TransactionType) -> bool:
        """True for INCOME, ADVANCE and WORK_PAYMENT; TRANSFER/ADJUSTMENT are neither."""
        return FlowDirectionMapper.is_income(transaction_type)

    @staticmethod
    def is_expense_type(transaction_type: TransactionType) -> bool:
        """True for EXPENSE, SUPPLIER_PAYMENT and GENERAL_EXPENSE."""
        return FlowDirectionMapper.is_expense(transaction_type)

    # === TOTALS & PERIOD FLOWS ===

    def summarize_totals(
        self,
        transactions: Iterable[Transaction],
        currency: Optional[Currency] = None,
    ) -> PeriodTotals:
        """Income, expense, net and neutral totals over a transaction set."""
        income = expense = neutral = ZERO
        count = 0
        for transaction in transactions:
            if currency is not None and transaction.currency is not currency:
                continue
            count += 1
            direction = transaction.direction
            if direction is FlowDirection.INFLOW:
                income += transaction.amount
            elif direction is FlowDirection.OUTFLOW:
                expense += transaction.amount
            else:
                neutral += transaction.amount

        return PeriodTotals(
            income_total=income,
            expense_total=expense,
            net=income - expense,
            neutral_total=neutral,
            count=count,
        )

    def aggregate_by_period(
        self,
        transactions: Iterable[Transaction],
        granularity: Granularity,
        window_size: int,
        reference_date: DateLike,
        currency: Optional[Currency] = None,
    ) -> List[PeriodFlow]:
        """
        Bucket income and expense into the last `window_size` periods.

        The window ends with the period containing `reference_date`. Every
        period in the window is present, zero-filled when nothing happened,
        in ascending order, so charts always get a continuous axis.

        Args:
            transactions: Transactions to bucket; those outside the window
                and neutral types are ignored
            granularity: DAY or MONTH buckets
            window_size: Number of periods returned (none when <= 0)
            reference_date: Last day of the window
            currency: Only count this currency when given

        Returns:
            List of PeriodFlow with a running `cumulative_net`
        """
        if window_size <= 0:
            return []

        freq = Granularity(granularity).freq
        last = pd.Period(to_naive_timestamp(reference_date), freq=freq)
        window = pd.period_range(end=last, periods=window_size, freq=freq)
        first = window[0]

        income: Dict[pd.Period, Decimal] = {period: ZERO for period in window}
        expense: Dict[pd.Period, Decimal] = {period: ZERO for period in window}

        counted = 0
        for transaction in transactions:
            if currency is not None and transaction.currency is not currency:
                continue
            direction = transaction.direction
            if direction is FlowDirection.NEUTRAL:
                continue
            period = pd.Period(to_naive_timestamp(transaction.date), freq=freq)
            if period < first or period > last:
                continue
            counted += 1
            if direction is FlowDirection.INFLOW:
                income[period] += transaction.amount
            else:
                expense[period] += transaction.amount

        logger.debug(
            f"Aggregated {counted} transactions into {window_size} "
            f"{Granularity(granularity).value} buckets {first}..{last}"
        )

        flows = []
        cumulative = ZERO
        for period in window:
            net = income[period] - expense[period]
            cumulative += net
            flows.append(
                PeriodFlow(
                    period=str(period),
                    start=period.start_time.date(),
                    income_total=income[period],
                    expense_total=expense[period],
                    net=net,
                    cumulative_net=cumulative,
                )
            )
        return flows

    # === BALANCES ===

    def compute_balance(self, total: Number, collected: Number) -> Balance:
        """
        Outstanding balance and collection progress of a sale.

        A negative outstanding (overpayment) is returned as-is and flagged by
        `Balance.is_overpaid`. The collected percentage of a zero total is 0.
        """
        total = to_decimal(total)
        collected = to_decimal(collected)
        outstanding = total - collected
        if outstanding < 0:
            logger.warning(
                f"Overpaid balance: collected {collected} exceeds total {total}"
            )
        return Balance(
            total=total,
            collected=collected,
            outstanding=outstanding,
            collected_percentage=percentage(collected, total, self._places),
        )

    def summarize_receivables(
        self, sales: Iterable[Sale], reference_date: DateLike
    ) -> ReceivablesAging:
        """
        Group what clients still owe by the age of their orders.

        Only sales with a positive outstanding balance that were not
        cancelled are included. All four buckets are always present.
        """
        amounts = {bucket: ZERO for bucket in AgingBucket}
        counts = {bucket: 0 for bucket in AgingBucket}
        total = ZERO
        count = 0
        oldest = 0

        for sale in sales:
            if sale.status is OrderStatus.CANCELLED or sale.outstanding <= 0:
                continue
            bucket = self.classify_by_aging(reference_date, sale.order_date)
            amounts[bucket] += sale.outstanding
            counts[bucket] += 1
            total += sale.outstanding
            count += 1
            oldest = max(oldest, elapsed_days(reference_date, sale.order_date))

        return ReceivablesAging(
            total_outstanding=total,
            count=count,
            oldest_days=oldest,
            buckets={
                bucket: AgingBucketSummary(
                    bucket=bucket, amount=amounts[bucket], count=counts[bucket]
                )
                for bucket in AgingBucket
            },
        )

    # === RATIOS ===

    def _rounded(self, value: Optional[Decimal]) -> Optional[Decimal]:
        if value is None or not value.is_finite():
            return value
        return quantize(value, self._places)

    def compute_ratios(self, inputs: RatioInputs) -> FinancialRatios:
        """
        Liquidity and related ratios.

        A zero denominator gives an explicit sentinel instead of raising:
        signed `Decimal('Infinity')` for a non-zero numerator and None for
        0 / 0. Percentages such as `operating_margin` follow the same rule.
        """
        period_days = Decimal(inputs.period_days or self.settings.reporting.period_days)

        def scaled(ratio: Optional[Decimal], factor: Decimal) -> Optional[Decimal]:
            return None if ratio is None else self._rounded(ratio * factor)

        return FinancialRatios(
            liquidity=self._rounded(
                safe_ratio(inputs.current_assets, inputs.current_liabilities)
            ),
            operating_margin=scaled(safe_ratio(inputs.net, inputs.income_total), HUNDRED),
            return_on_assets=scaled(safe_ratio(inputs.net, inputs.total_assets), HUNDRED),
            debt_ratio=scaled(
                safe_ratio(inputs.total_liabilities, inputs.total_assets), HUNDRED
            ),
            inventory_turnover=self._rounded(
                safe_ratio(inputs.material_cost, inputs.inventory_value)
            ),
            days_sales_outstanding=scaled(
                safe_ratio(inputs.receivables, inputs.income_total), period_days
            ),
            days_payable_outstanding=scaled(
                safe_ratio(inputs.payables, inputs.expense_total), period_days
            ),
        )

    # === PROJECTIONS ===

    def project_cash_flow(
        self,
        flows: Sequence[PeriodFlow],
        reference_date: DateLike,
        months_ahead: Optional[int] = None,
        lookback: Optional[int] = None,
    ) -> List[CashFlowProjection]:
        """
        Project net flow for the coming months from the recent average.

        Averages income and expense over the last `lookback` monthly flows
        and repeats their difference for each of the next `months_ahead`
        months after `reference_date`. Returns nothing when there are fewer
        than `lookback` flows to average.
        """
        reporting = self.settings.reporting
        months_ahead = reporting.projection_months if months_ahead is None else months_ahead
        lookback = reporting.projection_lookback if lookback is None else lookback
        if lookback <= 0 or months_ahead <= 0 or len(flows) < lookback:
            return []

        recent = flows[-lookback:]
        avg_income = sum((f.income_total for f in recent), ZERO) / lookback
        avg_expense = sum((f.expense_total for f in recent), ZERO) / lookback
        projected = quantize(avg_income - avg_expense, self._places)
        trend = Trend.POSITIVE if avg_income > avg_expense else Trend.NEGATIVE

        current = pd.Period(to_naive_timestamp(reference_date), freq="M")
        projections = []
        for offset in range(1, months_ahead + 1):
            period = current + offset
            projections.append(
                CashFlowProjection(
                    period=str(period),
                    start=period.start_time.date(),
                    projected_net=projected,
                    trend=trend,
                )
            )
        return projections
