# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Unit tests for LedgerAggregator.

Covers aging classification, income/expense classification, zero-filled
period aggregation, balances, receivables, ratios and projections.
"""

import logging
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pandas as pd
import pytest

from fabledger.analysis import LedgerAggregator, PeriodFlow, RatioInputs
from fabledger.core.primitives import (
    AgingBucket,
    AgingSettings,
    Currency,
    GlobalSettings,
    Granularity,
    TransactionType,
    Trend,
)


@pytest.fixture
def aggregator():
    return LedgerAggregator()


class TestAging:
    @pytest.mark.parametrize(
        "reference, order, expected",
        [
            (date(2025, 1, 31), date(2025, 1, 1), AgingBucket.CURRENT),
            (date(2025, 1, 1), date(2025, 1, 1), AgingBucket.CURRENT),
            (date(2025, 2, 1), date(2025, 1, 1), AgingBucket.DAYS_31_60),
            (date(2025, 3, 2), date(2025, 1, 1), AgingBucket.DAYS_31_60),
            (date(2025, 3, 3), date(2025, 1, 1), AgingBucket.DAYS_61_90),
            (date(2025, 3, 31), date(2025, 1, 1), AgingBucket.DAYS_61_90),
            (date(2025, 4, 1), date(2025, 1, 1), AgingBucket.DAYS_90_PLUS),
            (date(2026, 1, 1), date(2025, 1, 1), AgingBucket.DAYS_90_PLUS),
        ],
    )
    def test_bucket_boundaries(self, aggregator, reference, order, expected):
        """Test 30 days is still current and 90 days is 90+."""
        assert aggregator.classify_by_aging(reference, order) is expected

    def test_labels(self, aggregator):
        assert aggregator.classify_by_aging(date(2025, 1, 31), date(2025, 1, 1)).label == "0-30"
        assert aggregator.classify_by_aging(date(2025, 4, 1), date(2025, 1, 1)).label == "90+"

    def test_future_order_is_current(self, aggregator):
        assert aggregator.classify_by_aging(date(2025, 1, 1), date(2025, 2, 1)) is AgingBucket.CURRENT

    def test_partial_days_are_floored(self, aggregator):
        """Test that 30 days and 23 hours still counts as 30 days."""
        reference = datetime(2025, 1, 31, 23, 0)
        assert aggregator.classify_by_aging(reference, datetime(2025, 1, 1)) is AgingBucket.CURRENT

    def test_timezone_aware_dates(self, aggregator):
        """Test that aware values are normalized to UTC before subtracting."""
        reference = datetime(2025, 1, 31, 2, 0, tzinfo=timezone(timedelta(hours=3)))
        # 2025-01-30 23:00 UTC: only 29 days and 23 hours elapsed
        assert aggregator.classify_by_aging(reference, datetime(2025, 1, 1)) is AgingBucket.CURRENT
        assert aggregator.classify_by_aging(pd.Timestamp("2025-04-01", tz="UTC"), date(2025, 1, 1)) is AgingBucket.DAYS_90_PLUS

    def test_custom_thresholds(self):
        settings = GlobalSettings(
            aging=AgingSettings(current_days=45, mid_days=75, overdue_days=120)
        )
        aggregator = LedgerAggregator(settings)
        assert aggregator.classify_by_aging(date(2025, 2, 10), date(2025, 1, 1)) is AgingBucket.CURRENT


class TestClassification:
    @pytest.mark.parametrize(
        "t", [TransactionType.INCOME, TransactionType.ADVANCE, TransactionType.WORK_PAYMENT]
    )
    def test_income_types(self, t):
        assert LedgerAggregator.is_income_type(t)
        assert not LedgerAggregator.is_expense_type(t)

    @pytest.mark.parametrize(
        "t",
        [TransactionType.EXPENSE, TransactionType.SUPPLIER_PAYMENT, TransactionType.GENERAL_EXPENSE],
    )
    def test_expense_types(self, t):
        assert LedgerAggregator.is_expense_type(t)
        assert not LedgerAggregator.is_income_type(t)

    def test_transfer_and_adjustment_excluded_from_totals(self, aggregator, mixed_transactions):
        """Test that neutral types appear in neither sum of a combined total."""
        assert not LedgerAggregator.is_income_type(TransactionType.TRANSFER)
        assert not LedgerAggregator.is_income_type(TransactionType.ADJUSTMENT)

        totals = aggregator.summarize_totals(mixed_transactions)
        assert totals.income_total == Decimal("1500")
        assert totals.expense_total == Decimal("600")
        assert totals.neutral_total == Decimal("725")
        assert totals.count == 8

    def test_net_is_exact(self, aggregator, transaction_factory):
        """Test that income minus expense equals net with no drift."""
        transactions = [transaction_factory(amount="0.10") for _ in range(10)]
        transactions += [transaction_factory(TransactionType.EXPENSE, "0.03") for _ in range(10)]
        totals = aggregator.summarize_totals(transactions)

        assert totals.income_total == Decimal("1.00")
        assert totals.expense_total == Decimal("0.30")
        assert totals.net == totals.income_total - totals.expense_total == Decimal("0.70")

    def test_empty_totals(self, aggregator):
        totals = aggregator.summarize_totals([])
        assert totals.net == Decimal("0")
        assert totals.count == 0

    def test_currency_filter(self, aggregator, transaction_factory):
        transactions = [
            transaction_factory(amount="100"),
            transaction_factory(amount="5", currency=Currency.USD),
        ]
        assert aggregator.summarize_totals(transactions, Currency.USD).income_total == Decimal("5")


class TestAggregateByPeriod:
    def test_empty_input_returns_full_window(self, aggregator):
        """Test that the window is zero-filled even with no transactions."""
        flows = aggregator.aggregate_by_period([], Granularity.MONTH, 6, date(2025, 6, 15))

        assert len(flows) == 6
        assert [f.period for f in flows] == [
            "2025-01", "2025-02", "2025-03", "2025-04", "2025-05", "2025-06"
        ]
        assert all(f.net == 0 and f.cumulative_net == 0 for f in flows)

    def test_monthly_buckets_and_cumulative(self, aggregator, transaction_factory):
        transactions = [
            transaction_factory(amount="100", on=datetime(2025, 4, 3)),
            transaction_factory(TransactionType.EXPENSE, "30", on=datetime(2025, 4, 20)),
            transaction_factory(amount="50", on=datetime(2025, 6, 1)),
            transaction_factory(TransactionType.SUPPLIER_PAYMENT, "80", on=datetime(2025, 6, 30)),
            # Neutral and out-of-window transactions are ignored
            transaction_factory(TransactionType.TRANSFER, "1000", on=datetime(2025, 5, 1)),
            transaction_factory(amount="999", on=datetime(2024, 12, 31)),
            transaction_factory(amount="999", on=datetime(2025, 7, 1)),
        ]
        flows = aggregator.aggregate_by_period(transactions, Granularity.MONTH, 3, date(2025, 6, 15))

        assert [f.period for f in flows] == ["2025-04", "2025-05", "2025-06"]
        assert [f.income_total for f in flows] == [Decimal("100"), Decimal("0"), Decimal("50")]
        assert [f.expense_total for f in flows] == [Decimal("30"), Decimal("0"), Decimal("80")]
        assert [f.net for f in flows] == [Decimal("70"), Decimal("0"), Decimal("-30")]
        assert [f.cumulative_net for f in flows] == [Decimal("70"), Decimal("70"), Decimal("40")]
        assert flows[0].start == date(2025, 4, 1)

    def test_daily_buckets(self, aggregator, transaction_factory):
        transactions = [
            transaction_factory(amount="10", on=datetime(2025, 3, 9, 8)),
            transaction_factory(amount="5", on=datetime(2025, 3, 15, 23, 59)),
        ]
        flows = aggregator.aggregate_by_period(transactions, Granularity.DAY, 7, date(2025, 3, 15))

        assert len(flows) == 7
        assert flows[0].period == "2025-03-09"
        assert flows[0].income_total == Decimal("10")
        assert flows[-1].income_total == Decimal("5")
        assert flows[-1].cumulative_net == Decimal("15")

    def test_window_ends_in_reference_period(self, aggregator):
        flows = aggregator.aggregate_by_period([], Granularity.MONTH, 12, date(2025, 1, 31))
        assert flows[0].period == "2024-02"
        assert flows[-1].period == "2025-01"

    def test_non_positive_window_is_empty(self, aggregator):
        assert aggregator.aggregate_by_period([], Granularity.DAY, 0, date(2025, 1, 1)) == []

    def test_currency_filter(self, aggregator, transaction_factory):
        transactions = [
            transaction_factory(amount="100"),
            transaction_factory(amount="5", currency=Currency.USD),
        ]
        flows = aggregator.aggregate_by_period(
            transactions, Granularity.MONTH, 1, date(2025, 3, 31), currency=Currency.USD
        )
        assert flows[0].income_total == Decimal("5")

    def test_deterministic(self, aggregator, mixed_transactions):
        """Test that identical inputs give structurally identical output."""
        args = (mixed_transactions, Granularity.DAY, 10, date(2025, 3, 10))
        assert aggregator.aggregate_by_period(*args) == aggregator.aggregate_by_period(*args)


class TestBalance:
    def test_fully_collected(self, aggregator):
        balance = aggregator.compute_balance(1000, 1000)
        assert balance.outstanding == Decimal("0")
        assert balance.collected_percentage == Decimal("100.00")
        assert not balance.is_overpaid

    def test_zero_total(self, aggregator):
        """Test that an empty sale reports 0%, not NaN."""
        balance = aggregator.compute_balance(0, 0)
        assert balance.collected_percentage == Decimal("0.00")
        assert balance.collected_percentage.is_finite()

    def test_partial(self, aggregator):
        balance = aggregator.compute_balance(Decimal("1500"), Decimal("500"))
        assert balance.outstanding == Decimal("1000")
        assert balance.collected_percentage == Decimal("33.33")

    def test_overpayment_flagged_not_clamped(self, aggregator, caplog):
        with caplog.at_level(logging.WARNING, logger="fabledger.analysis.aggregator"):
            balance = aggregator.compute_balance(100, 120)

        assert balance.outstanding == Decimal("-20")
        assert balance.is_overpaid
        assert "Overpaid" in caplog.text


class TestReceivables:
    def test_buckets_and_exclusions(self, aggregator, sale_factory):
        reference = date(2025, 4, 1)
        sales = [
            sale_factory(total="1000", collected="200", order_date=date(2025, 3, 20)),
            sale_factory(total="500", order_date=date(2025, 2, 15)),
            sale_factory(total="300", order_date=date(2025, 1, 1)),
            # Paid in full, overpaid and cancelled sales are left out
            sale_factory(total="400", collected="400", order_date=date(2025, 1, 1)),
            sale_factory(total="100", collected="150", order_date=date(2025, 1, 1)),
            sale_factory(total="900", order_date=date(2025, 1, 1), status="CANCELADO"),
        ]
        summary = aggregator.summarize_receivables(sales, reference)

        assert summary.total_outstanding == Decimal("1600")
        assert summary.count == 3
        assert summary.oldest_days == 90
        assert summary.buckets[AgingBucket.CURRENT].amount == Decimal("800")
        assert summary.buckets[AgingBucket.DAYS_31_60].amount == Decimal("500")
        assert summary.buckets[AgingBucket.DAYS_61_90].count == 0
        assert summary.buckets[AgingBucket.DAYS_90_PLUS].amount == Decimal("300")

    def test_empty(self, aggregator):
        summary = aggregator.summarize_receivables([], date(2025, 1, 1))
        assert summary.total_outstanding == Decimal("0")
        assert set(summary.buckets) == set(AgingBucket)


class TestRatios:
    def test_regular_ratios(self, aggregator):
        ratios = aggregator.compute_ratios(
            RatioInputs(
                income_total=Decimal("1000"),
                expense_total=Decimal("600"),
                net=Decimal("400"),
                current_assets=Decimal("3000"),
                current_liabilities=Decimal("2000"),
                total_assets=Decimal("8000"),
                total_liabilities=Decimal("2000"),
                receivables=Decimal("500"),
                payables=Decimal("300"),
                inventory_value=Decimal("400"),
                material_cost=Decimal("1000"),
            )
        )
        assert ratios.liquidity == Decimal("1.50")
        assert ratios.operating_margin == Decimal("40.00")
        assert ratios.return_on_assets == Decimal("5.00")
        assert ratios.debt_ratio == Decimal("25.00")
        assert ratios.inventory_turnover == Decimal("2.50")
        assert ratios.days_sales_outstanding == Decimal("15.00")
        assert ratios.days_payable_outstanding == Decimal("15.00")

    def test_zero_liabilities_is_infinite_not_zero(self, aggregator):
        """Test that 'no liabilities' is distinguishable from 'no liquidity'."""
        ratios = aggregator.compute_ratios(RatioInputs(current_assets=Decimal("100")))
        assert ratios.liquidity == Decimal("Infinity")
        assert ratios.liquidity != 0

    def test_zero_over_zero_is_none(self, aggregator):
        ratios = aggregator.compute_ratios(RatioInputs())
        assert ratios.liquidity is None
        assert ratios.debt_ratio is None
        assert ratios.operating_margin is None

    def test_zero_income_margin_is_sentinel(self, aggregator):
        """Test that losing money with no income is not reported as break-even."""
        ratios = aggregator.compute_ratios(
            RatioInputs(expense_total=Decimal("500"), net=Decimal("-500"))
        )
        assert ratios.operating_margin == Decimal("-Infinity")
        assert ratios.operating_margin != 0

    def test_negative_numerator_sentinel(self, aggregator):
        ratios = aggregator.compute_ratios(RatioInputs(net=Decimal("-50")))
        assert ratios.return_on_assets == Decimal("-Infinity")


class TestProjections:
    def flows(self, pairs):
        return [
            PeriodFlow(
                period=f"2025-{i + 1:02d}",
                start=date(2025, i + 1, 1),
                income_total=Decimal(income),
                expense_total=Decimal(expense),
            )
            for i, (income, expense) in enumerate(pairs)
        ]

    def test_projects_average_net(self, aggregator):
        flows = self.flows([("900", "0"), ("100", "50"), ("200", "100"), ("300", "150")])
        projections = aggregator.project_cash_flow(flows, date(2025, 4, 30))

        assert [p.period for p in projections] == ["2025-05", "2025-06", "2025-07"]
        assert all(p.projected_net == Decimal("100.00") for p in projections)
        assert all(p.trend is Trend.POSITIVE for p in projections)

    def test_negative_trend(self, aggregator):
        flows = self.flows([("10", "50")] * 3)
        projections = aggregator.project_cash_flow(flows, date(2025, 3, 31), months_ahead=1)
        assert projections[0].trend is Trend.NEGATIVE
        assert projections[0].projected_net == Decimal("-40.00")

    def test_not_enough_history(self, aggregator):
        assert aggregator.project_cash_flow(self.flows([("1", "0")] * 2), date(2025, 2, 28)) == []
