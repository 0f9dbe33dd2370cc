# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Dashboard Report

Headline figures for the landing page: income so far this month, what
clients still owe, the last week of daily income and order alerts.
"""

from __future__ import annotations

import datetime
import logging
from decimal import Decimal
from typing import Iterable, List, Optional

from pydantic import Field

from ..analysis.results import PeriodFlow
from ..core.calculations import ZERO
from ..core.ledger import Sale, Transaction
from ..core.primitives import (
    Currency,
    FlowDirection,
    GlobalSettings,
    Granularity,
    Model,
    OrderStatus,
)
from ..utils.dates import DateLike, month_start, to_naive_timestamp
from .base import BaseReport

logger = logging.getLogger(__name__)

# Orders still waiting on the workshop
OPEN_STATUSES = frozenset(
    {
        OrderStatus.PENDING,
        OrderStatus.CONFIRMED,
        OrderStatus.IN_PROGRESS,
        OrderStatus.IN_PRODUCTION,
    }
)

# Orders whose delivery date can slip
WORK_STATUSES = frozenset({OrderStatus.IN_PROGRESS, OrderStatus.IN_PRODUCTION})

DAILY_WINDOW = 7
RECENT_LIMIT = 5


class DashboardSummary(Model):
    reference_date: datetime.date
    currency: Currency
    month_income: Decimal = ZERO
    receivables: Decimal = ZERO
    open_orders: int = 0
    late_orders: int = 0
    daily_income: List[PeriodFlow] = Field(default_factory=list)
    recent_transactions: List[Transaction] = Field(default_factory=list)


class DashboardReport(BaseReport):
    """
    Landing-page summary for one currency.

    Example:
        >>> report = DashboardReport(transactions, sales)
        >>> report.generate(reference_date=date(2025, 3, 15)).late_orders
        2
    """

    def __init__(
        self,
        transactions: Iterable[Transaction],
        sales: Iterable[Sale] = (),
        settings: Optional[GlobalSettings] = None,
    ):
        super().__init__(settings)
        self._transactions = self._require(transactions, Transaction, "transactions")
        self._sales = self._require(sales, Sale, "sales")

    def generate(
        self, reference_date: DateLike, currency: Optional[Currency] = None
    ) -> DashboardSummary:
        """
        Build the dashboard as of `reference_date`.

        Income for the month runs from the first of the month up to the
        reference instant. Late orders are those in the workshop whose
        delivery date is already past.
        """
        currency = (
            Currency(currency)
            if currency is not None
            else self.settings.reporting.default_currency
        )
        reference = to_naive_timestamp(reference_date)
        first_of_month = to_naive_timestamp(month_start(reference))

        transactions = [t for t in self._transactions if t.currency is currency]
        sales = [s for s in self._sales if s.currency is currency]

        month_income = sum(
            (
                t.amount
                for t in transactions
                if t.direction is FlowDirection.INFLOW
                and first_of_month <= to_naive_timestamp(t.date) <= reference
            ),
            ZERO,
        )
        receivables = self.aggregator.summarize_receivables(sales, reference)

        # Daily chart shows income only
        daily = self.aggregator.aggregate_by_period(
            [t for t in transactions if t.direction is FlowDirection.INFLOW],
            Granularity.DAY,
            DAILY_WINDOW,
            reference,
        )

        late = [
            s
            for s in sales
            if s.status in WORK_STATUSES
            and s.delivery_date is not None
            and to_naive_timestamp(s.delivery_date) < reference
        ]
        if late:
            logger.info(f"{len(late)} orders past their delivery date")

        recent = sorted(
            (t for t in transactions if to_naive_timestamp(t.date) <= reference),
            key=lambda t: (t.date, str(t.id)),
            reverse=True,
        )[:RECENT_LIMIT]

        return DashboardSummary(
            reference_date=reference.date(),
            currency=currency,
            month_income=month_income,
            receivables=receivables.total_outstanding,
            open_orders=sum(1 for s in sales if s.status in OPEN_STATUSES),
            late_orders=len(late),
            daily_income=daily,
            recent_transactions=recent,
        )
