# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Financial Report

Income and expense analysis for a date range: totals, category breakdowns,
monthly flow with cumulative net, counterparty rankings, per-project
profitability, ratios and optional projections.
"""

from __future__ import annotations

import datetime
import logging
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional, Sequence
from uuid import UUID

import pandas as pd
from pydantic import Field

from ..analysis.results import (
    CashFlowProjection,
    FinancialRatios,
    PeriodFlow,
    PeriodTotals,
    RatioInputs,
)
from ..core.calculations import ZERO, percentage, roi
from ..core.ledger import GeneralExpense, Ledger, LedgerQueries, Sale, Transaction
from ..core.primitives import (
    Currency,
    FlowDirection,
    GlobalSettings,
    Granularity,
    Model,
    RatioDecimal,
)
from ..utils.dates import DateLike, to_naive_timestamp
from .base import BaseReport

logger = logging.getLogger(__name__)

# Ratio inputs the report derives itself from the ledger and the sales
DERIVED_RATIO_INPUTS = frozenset(
    {"income_total", "expense_total", "net", "receivables", "period_days"}
)


class CategoryAmount(Model):
    category: str
    amount: Decimal
    share: Decimal


class CounterpartyTotal(Model):
    counterparty_id: UUID
    name: str
    amount: Decimal
    transactions: int


class ProjectProfitability(Model):
    """Return on one delivered project (obra)."""

    sale_id: UUID
    number: str
    investment: Decimal
    revenue: Decimal
    margin: Decimal
    roi: Decimal
    margin_percentage: Decimal


class FinancialReportResult(Model):
    start_date: datetime.date
    end_date: datetime.date
    currency: Currency
    totals: PeriodTotals
    operating_margin: Optional[RatioDecimal] = None
    receivables: Decimal
    income_by_category: List[CategoryAmount] = Field(default_factory=list)
    expense_by_category: List[CategoryAmount] = Field(default_factory=list)
    monthly: List[PeriodFlow] = Field(default_factory=list)
    top_clients: List[CounterpartyTotal] = Field(default_factory=list)
    top_suppliers: List[CounterpartyTotal] = Field(default_factory=list)
    profitability: List[ProjectProfitability] = Field(default_factory=list)
    ratios: FinancialRatios
    projections: List[CashFlowProjection] = Field(default_factory=list)


def flows_to_frame(flows: Sequence[PeriodFlow]) -> pd.DataFrame:
    """
    Tabulate period flows for charting or export.

    Returns:
        DataFrame indexed by period label with income, expense, net and
        cumulative columns (Decimal values)
    """
    columns = ["income", "expense", "net", "cumulative"]
    if not flows:
        return pd.DataFrame(columns=columns, index=pd.Index([], name="period"))
    return pd.DataFrame(
        [
            [f.income_total, f.expense_total, f.net, f.cumulative_net]
            for f in flows
        ],
        columns=columns,
        index=pd.Index([f.period for f in flows], name="period"),
    )


def _months_between(start: pd.Timestamp, end: pd.Timestamp) -> int:
    return (pd.Period(end, freq="M") - pd.Period(start, freq="M")).n + 1


class FinancialReport(BaseReport):
    """
    Financial analysis over a date range in one currency.

    General expenses recorded outside the transaction log are merged into the
    expense side as GENERAL_EXPENSE transactions.
    """

    def __init__(
        self,
        ledger: Ledger,
        sales: Iterable[Sale] = (),
        general_expenses: Iterable[GeneralExpense] = (),
        settings: Optional[GlobalSettings] = None,
    ):
        super().__init__(settings)
        if not isinstance(ledger, Ledger):
            raise TypeError("FinancialReport requires a Ledger object")
        self._ledger = ledger
        self._sales = self._require(sales, Sale, "sales")
        self._general_expenses = self._require(
            general_expenses, GeneralExpense, "general_expenses"
        )

    @staticmethod
    def _in_scope(
        transactions: Iterable[Transaction],
        start: pd.Timestamp,
        end: pd.Timestamp,
        currency: Currency,
    ) -> List[Transaction]:
        return [
            t
            for t in transactions
            if t.currency is currency and start <= to_naive_timestamp(t.date) <= end
        ]

    def _profitability(
        self,
        transactions: Sequence[Transaction],
        start: pd.Timestamp,
        end: pd.Timestamp,
        currency: Currency,
    ) -> List[ProjectProfitability]:
        revenue_by_order: Dict[UUID, Decimal] = {}
        for t in transactions:
            if t.order_id is not None and t.direction is FlowDirection.INFLOW:
                revenue_by_order[t.order_id] = revenue_by_order.get(t.order_id, ZERO) + t.amount

        rows = []
        for sale in self._sales:
            if sale.currency is not currency or not sale.status.is_completed:
                continue
            if not (start <= to_naive_timestamp(sale.order_date) <= end):
                continue
            investment = sale.total_cost
            revenue = revenue_by_order.get(sale.id, ZERO)
            margin = revenue - investment
            rows.append(
                ProjectProfitability(
                    sale_id=sale.id,
                    number=sale.number,
                    investment=investment,
                    revenue=revenue,
                    margin=margin,
                    roi=roi(investment, margin),
                    margin_percentage=percentage(margin, revenue, self.places),
                )
            )
        return rows[: self.settings.reporting.profitability_limit]

    def generate(
        self,
        start_date: DateLike,
        end_date: DateLike,
        currency: Optional[Currency] = None,
        include_projections: bool = False,
        balances: Optional[Mapping[str, Decimal]] = None,
        client_names: Optional[Mapping[UUID, str]] = None,
        supplier_names: Optional[Mapping[UUID, str]] = None,
    ) -> FinancialReportResult:
        """
        Build the financial report.

        Args:
            start_date: First instant included
            end_date: Last instant included; also the projection reference
            currency: Report currency; defaults to the configured one
            include_projections: Add projections from the trailing months
            balances: Balance-sheet figures for ratios (current_assets,
                current_liabilities, total_assets, total_liabilities,
                payables, inventory_value, material_cost)
            client_names: Display names for client ids
            supplier_names: Display names for supplier ids

        Raises:
            ValueError: If end_date precedes start_date, or if `balances`
                carries a figure the report derives itself
        """
        reporting = self.settings.reporting
        balances = dict(balances or {})
        derived = sorted(DERIVED_RATIO_INPUTS.intersection(balances))
        if derived:
            raise ValueError(
                f"balances cannot override figures derived from the ledger: {derived}"
            )
        currency = Currency(currency) if currency is not None else reporting.default_currency
        start = to_naive_timestamp(start_date)
        end = to_naive_timestamp(end_date)
        if end < start:
            raise ValueError("end_date must be on or after start_date")

        transactions = self._in_scope(self._ledger.records, start, end, currency)
        transactions += self._in_scope(
            (g.to_transaction() for g in self._general_expenses), start, end, currency
        )
        logger.debug(
            f"Financial report {start.date()}..{end.date()} ({currency.value}): "
            f"{len(transactions)} transactions"
        )

        scoped = Ledger(settings=self._ledger.settings)
        scoped.add_transactions(transactions)
        queries = LedgerQueries(scoped, decimal_precision=self.places)

        totals = self.aggregator.summarize_totals(transactions)
        monthly = self.aggregator.aggregate_by_period(
            transactions, Granularity.MONTH, _months_between(start, end), end
        )

        receivables = self.aggregator.summarize_receivables(
            (s for s in self._sales if s.currency is currency), end
        ).total_outstanding
        ratio_inputs = RatioInputs.from_totals(
            totals,
            receivables=receivables,
            period_days=max((end.normalize() - start.normalize()).days + 1, 1),
            **balances,
        )
        ratios = self.aggregator.compute_ratios(ratio_inputs)

        projections: List[CashFlowProjection] = []
        if include_projections:
            projections = self.aggregator.project_cash_flow(monthly, end)

        return FinancialReportResult(
            start_date=start.date(),
            end_date=end.date(),
            currency=currency,
            totals=totals,
            operating_margin=ratios.operating_margin,
            receivables=receivables,
            income_by_category=_categories(queries.income_by_category()),
            expense_by_category=_categories(queries.expense_by_category()),
            monthly=monthly,
            top_clients=_counterparties(queries.top_clients(reporting.top_n, client_names)),
            top_suppliers=_counterparties(
                queries.top_suppliers(reporting.top_n, supplier_names)
            ),
            profitability=self._profitability(transactions, start, end, currency),
            ratios=ratios,
            projections=projections,
        )


def _categories(frame: pd.DataFrame) -> List[CategoryAmount]:
    """Non-zero category rows as models."""
    return [
        CategoryAmount(category=row.category, amount=row.amount, share=row.share)
        for row in frame.itertuples(index=False)
        if row.amount > 0
    ]


def _counterparties(frame: pd.DataFrame) -> List[CounterpartyTotal]:
    return [
        CounterpartyTotal(
            counterparty_id=row.counterparty_id,
            name=row.name,
            amount=row.amount,
            transactions=int(row.transactions),
        )
        for row in frame.itertuples(index=False)
    ]
