# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Performance Report

How each project (obra) went against its own numbers: margin on the order
total, return on costs, cost overrun against the target cost share, days
of delivery slippage and a combined efficiency score.
"""

from __future__ import annotations

import datetime
import logging
from decimal import Decimal
from typing import Iterable, List, Optional
from uuid import UUID

from pydantic import Field

from ..core.calculations import HUNDRED, ZERO, percentage, quantize, roi
from ..core.ledger import Sale
from ..core.primitives import Currency, GlobalSettings, Model, OrderStatus
from ..utils.dates import DateLike, days_until, to_date, to_naive_timestamp
from .base import BaseReport

logger = logging.getLogger(__name__)

# Efficiency points lost per day of delivery slippage, either way
SCHEDULE_PENALTY = Decimal("2")
# Points of cost overrun that cost one efficiency point
BUDGET_PENALTY_DIVISOR = Decimal("2")


class ProjectPerformance(Model):
    sale_id: UUID
    number: str
    client_name: str
    status: OrderStatus
    order_date: datetime.date
    delivery_date: Optional[datetime.date] = None
    actual_delivery_date: Optional[datetime.date] = None
    total: Decimal
    material_cost: Decimal
    expense_total: Decimal
    collected: Decimal
    outstanding: Decimal
    gross_margin: Decimal
    margin_percentage: Decimal
    profitability: Decimal
    budget_deviation: Decimal
    schedule_deviation_days: int
    efficiency: Decimal


class PerformanceSummary(Model):
    projects: int = 0
    average_margin_percentage: Decimal = ZERO
    billed_total: Decimal = ZERO
    costs_total: Decimal = ZERO
    net_gain: Decimal = ZERO
    profitable: int = 0
    loss: int = 0
    average_schedule_deviation: Decimal = ZERO


class PerformanceReportResult(Model):
    reference_date: datetime.date
    currency: Currency
    rows: List[ProjectPerformance] = Field(default_factory=list)
    summary: PerformanceSummary = Field(default_factory=PerformanceSummary)


class PerformanceReport(BaseReport):
    """
    Per-project performance for one currency, newest orders first.

    Example:
        >>> report = PerformanceReport(sales)
        >>> result = report.generate(reference_date=date(2025, 3, 15))
        >>> result.summary.profitable, result.summary.loss
        (4, 1)
    """

    def __init__(self, sales: Iterable[Sale], settings: Optional[GlobalSettings] = None):
        super().__init__(settings)
        self._sales = self._require(sales, Sale, "sales")

    def _budget_deviation(self, sale: Sale) -> Decimal:
        """Cost overrun, in percent, over the target share of the order total."""
        costs = sale.total_cost
        if costs <= 0 or sale.total <= 0:
            return ZERO
        target = sale.total * self.settings.reporting.target_cost_share
        return quantize((costs - target) / target * HUNDRED, self.places)

    @staticmethod
    def _schedule_deviation(sale: Sale, reference: datetime.date) -> int:
        """
        Days between the planned and the actual delivery (positive when late).

        A delivered order with no recorded delivery day is measured up to the
        reference day. Orders without a planned day have no deviation.
        """
        if sale.delivery_date is None:
            return 0
        if sale.actual_delivery_date is not None:
            return days_until(sale.actual_delivery_date, sale.delivery_date)
        if sale.status.is_completed:
            return days_until(reference, sale.delivery_date)
        return 0

    def _efficiency(self, schedule_days: int, budget_deviation: Decimal) -> Decimal:
        on_time = max(ZERO, HUNDRED - abs(schedule_days) * SCHEDULE_PENALTY)
        on_budget = max(ZERO, HUNDRED - abs(budget_deviation) / BUDGET_PENALTY_DIVISOR)
        return quantize((on_time + on_budget) / 2, self.places)

    def _performance(self, sale: Sale, reference: datetime.date) -> ProjectPerformance:
        costs = sale.total_cost
        gross = sale.total - costs
        budget = self._budget_deviation(sale)
        schedule = self._schedule_deviation(sale, reference)
        return ProjectPerformance(
            sale_id=sale.id,
            number=sale.number,
            client_name=sale.client_name,
            status=sale.status,
            order_date=to_date(sale.order_date),
            delivery_date=to_date(sale.delivery_date) if sale.delivery_date else None,
            actual_delivery_date=(
                to_date(sale.actual_delivery_date) if sale.actual_delivery_date else None
            ),
            total=sale.total,
            material_cost=sale.material_cost,
            expense_total=sale.expense_total,
            collected=sale.collected,
            outstanding=sale.outstanding,
            gross_margin=gross,
            margin_percentage=percentage(gross, sale.total, self.places),
            profitability=roi(costs, gross),
            budget_deviation=budget,
            schedule_deviation_days=schedule,
            efficiency=self._efficiency(schedule, budget),
        )

    def generate(
        self,
        reference_date: DateLike,
        currency: Optional[Currency] = None,
        status: Optional[OrderStatus] = None,
        client_id: Optional[UUID] = None,
        start_date: Optional[DateLike] = None,
        end_date: Optional[DateLike] = None,
        search: str = "",
    ) -> PerformanceReportResult:
        """
        Measure every project that passes the filters.

        Args:
            reference_date: "Today" for delivered orders with no recorded
                delivery day
            currency: Report currency; defaults to the configured one
            status: Keep only orders in this status
            client_id: Keep only this client's orders
            start_date: Earliest order date kept (inclusive)
            end_date: Latest order day kept (the whole day is included)
            search: Case-insensitive match on order number or client name
        """
        currency = (
            Currency(currency)
            if currency is not None
            else self.settings.reporting.default_currency
        )
        reference = to_date(reference_date)
        start = to_naive_timestamp(start_date) if start_date is not None else None
        end = to_date(end_date) if end_date is not None else None
        needle = search.strip().lower()

        selected = []
        for sale in self._sales:
            if sale.currency is not currency:
                continue
            if status is not None and sale.status is not OrderStatus(status):
                continue
            if client_id is not None and sale.client_id != client_id:
                continue
            if needle and needle not in sale.number.lower() and needle not in sale.client_name.lower():
                continue
            if start is not None and to_naive_timestamp(sale.order_date) < start:
                continue
            if end is not None and to_date(sale.order_date) > end:
                continue
            selected.append(sale)

        selected.sort(key=lambda s: (s.order_date, s.number), reverse=True)
        rows = [self._performance(sale, reference) for sale in selected]
        logger.debug(f"Performance report ({currency.value}): {len(rows)} projects")

        return PerformanceReportResult(
            reference_date=reference,
            currency=currency,
            rows=rows,
            summary=self._summarize(rows),
        )

    def _summarize(self, rows: List[ProjectPerformance]) -> PerformanceSummary:
        if not rows:
            return PerformanceSummary()
        count = len(rows)
        return PerformanceSummary(
            projects=count,
            average_margin_percentage=quantize(
                sum((r.margin_percentage for r in rows), ZERO) / count, self.places
            ),
            billed_total=sum((r.total for r in rows), ZERO),
            costs_total=sum((r.material_cost + r.expense_total for r in rows), ZERO),
            net_gain=sum((r.gross_margin for r in rows), ZERO),
            profitable=sum(1 for r in rows if r.margin_percentage > 0),
            loss=sum(1 for r in rows if r.margin_percentage < 0),
            average_schedule_deviation=quantize(
                Decimal(sum(r.schedule_deviation_days for r in rows)) / count,
                self.places,
            ),
        )
