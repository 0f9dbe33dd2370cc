# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from fabledger.core.primitives import Currency, TransactionType
from fabledger.reporting import DashboardReport


@pytest.fixture
def dashboard(transaction_factory, sale_factory):
    transactions = [
        transaction_factory(amount="100", on=datetime(2025, 3, 1, 9)),
        transaction_factory(TransactionType.ADVANCE, "50", on=datetime(2025, 3, 14, 12)),
        transaction_factory(TransactionType.EXPENSE, "70", on=datetime(2025, 3, 14, 13)),
        transaction_factory(amount="500", on=datetime(2025, 2, 28, 18)),
        # After the reference instant
        transaction_factory(amount="999", on=datetime(2025, 3, 16)),
        transaction_factory(amount="20", on=datetime(2025, 3, 10), currency=Currency.USD),
    ]
    sales = [
        sale_factory(total="1000", collected="250", status="EN_PROCESO", delivery_date=date(2025, 3, 1)),
        sale_factory(total="400", status="EN_PRODUCCION", delivery_date=date(2025, 4, 1)),
        sale_factory(total="300", status="CONFIRMADO"),
        sale_factory(total="200", collected="200", status="ENTREGADO", delivery_date=date(2025, 1, 1)),
    ]
    return DashboardReport(transactions, sales)


class TestDashboardReport:
    def test_headline_figures(self, dashboard):
        result = dashboard.generate(datetime(2025, 3, 15, 12))

        assert result.reference_date == date(2025, 3, 15)
        assert result.month_income == Decimal("150")
        assert result.receivables == Decimal("1450")
        assert result.open_orders == 3
        assert result.late_orders == 1

    def test_daily_income_last_week(self, dashboard):
        """Test that the daily series covers seven days and ignores expenses."""
        daily = dashboard.generate(date(2025, 3, 15)).daily_income

        assert len(daily) == 7
        assert daily[0].period == "2025-03-09"
        assert daily[-1].period == "2025-03-15"
        by_day = {f.period: f.income_total for f in daily}
        assert by_day["2025-03-14"] == Decimal("50")
        assert all(f.expense_total == 0 for f in daily)

    def test_recent_transactions(self, dashboard):
        recent = dashboard.generate(datetime(2025, 3, 15, 12)).recent_transactions

        assert len(recent) == 4
        assert recent[0].type is TransactionType.EXPENSE
        assert recent[-1].date == datetime(2025, 2, 28, 18)

    def test_usd_dashboard(self, dashboard):
        result = dashboard.generate(date(2025, 3, 15), currency=Currency.USD)
        assert result.month_income == Decimal("20")
        assert result.open_orders == 0

    def test_empty_inputs(self):
        result = DashboardReport([]).generate(date(2025, 3, 15))
        assert result.month_income == Decimal("0")
        assert result.late_orders == 0
        assert len(result.daily_income) == 7

    def test_mixed_naive_and_aware_dates(self, transaction_factory, sale_factory):
        """Test that offset-aware and naive records are ordered on one UTC timeline."""
        transactions = [
            transaction_factory(amount="10", on=datetime(2025, 3, 14, 9)),
            transaction_factory(amount="20", on=datetime(2025, 3, 14, 12, tzinfo=timezone.utc)),
            transaction_factory(amount="30", on="2025-03-14T08:00:00-03:00"),
        ]
        sales = [
            sale_factory(status="EN_PROCESO", delivery_date=datetime(2025, 3, 1)),
            sale_factory(
                status="EN_PROCESO",
                delivery_date=datetime(2025, 3, 2, tzinfo=timezone.utc),
            ),
        ]
        result = DashboardReport(transactions, sales).generate(date(2025, 3, 15))

        assert [t.amount for t in result.recent_transactions] == [
            Decimal("20"),
            Decimal("30"),
            Decimal("10"),
        ]
        assert result.month_income == Decimal("60")
        assert result.late_orders == 2
