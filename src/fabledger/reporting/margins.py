# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Margin Report

Gross margin of each quote: what was sold against it minus the expenses
booked to it.
"""

from __future__ import annotations

import datetime
from decimal import Decimal
from typing import Iterable, List, Optional
from uuid import UUID

from pydantic import Field

from ..core.calculations import ZERO, percentage, quantize
from ..core.ledger import Quote
from ..core.primitives import (
    Currency,
    GlobalSettings,
    MarginStatus,
    Model,
    QuoteStatus,
)
from ..utils.dates import DateLike, to_naive_timestamp
from .base import BaseReport


class QuoteMargin(Model):
    quote_id: UUID
    number: str
    client_name: str
    issue_date: datetime.date
    status: QuoteStatus
    currency: Currency
    quote_total: Decimal
    sold_total: Decimal
    expense_total: Decimal
    gross_margin: Decimal
    margin_percentage: Decimal
    margin_status: MarginStatus


class MarginSummary(Model):
    quotes: int = 0
    with_expenses: int = 0
    profitable: int = 0
    loss: int = 0
    average_margin_percentage: Decimal = ZERO
    quotes_total: Decimal = ZERO
    expenses_total: Decimal = ZERO
    gross_margin_total: Decimal = ZERO


class MarginReportResult(Model):
    rows: List[QuoteMargin] = Field(default_factory=list)
    summary: MarginSummary = Field(default_factory=MarginSummary)


def margin_status(gross_margin: Decimal) -> MarginStatus:
    if gross_margin > 0:
        return MarginStatus.POSITIVE
    if gross_margin < 0:
        return MarginStatus.NEGATIVE
    return MarginStatus.BREAK_EVEN


class MarginReport(BaseReport):
    """
    Per-quote gross margin with filtering and a summary of the filtered set.

    A quote with nothing sold yet has a margin percentage of 0.
    """

    def __init__(self, quotes: Iterable[Quote], settings: Optional[GlobalSettings] = None):
        super().__init__(settings)
        self._quotes = self._require(quotes, Quote, "quotes")

    def _margin(self, quote: Quote) -> QuoteMargin:
        gross = quote.sold_total - quote.expense_total
        return QuoteMargin(
            quote_id=quote.id,
            number=quote.number,
            client_name=quote.client_name,
            issue_date=quote.issue_date.date(),
            status=quote.status,
            currency=quote.currency,
            quote_total=quote.total,
            sold_total=quote.sold_total,
            expense_total=quote.expense_total,
            gross_margin=gross,
            margin_percentage=percentage(gross, quote.sold_total, self.places),
            margin_status=margin_status(gross),
        )

    def generate(
        self,
        status: Optional[QuoteStatus] = None,
        margin: Optional[MarginStatus] = None,
        start_date: Optional[DateLike] = None,
        end_date: Optional[DateLike] = None,
        search: str = "",
    ) -> MarginReportResult:
        """
        Compute margins and summarize the quotes that pass every filter.

        Args:
            status: Keep only quotes in this status
            margin: Keep only quotes with this margin sign
            start_date: Earliest issue date kept (inclusive)
            end_date: Latest issue date kept (inclusive)
            search: Case-insensitive match on quote number or client name
        """
        start = to_naive_timestamp(start_date) if start_date is not None else None
        end = to_naive_timestamp(end_date) if end_date is not None else None
        needle = search.strip().lower()

        rows = []
        for quote in self._quotes:
            if needle and needle not in quote.number.lower() and needle not in quote.client_name.lower():
                continue
            if status is not None and quote.status is not QuoteStatus(status):
                continue
            issued = to_naive_timestamp(quote.issue_date)
            if start is not None and issued < start:
                continue
            if end is not None and issued > end:
                continue
            row = self._margin(quote)
            if margin is not None and row.margin_status is not MarginStatus(margin):
                continue
            rows.append(row)

        return MarginReportResult(rows=rows, summary=self._summarize(rows))

    def _summarize(self, rows: List[QuoteMargin]) -> MarginSummary:
        if not rows:
            return MarginSummary()
        average = sum((r.margin_percentage for r in rows), ZERO) / len(rows)
        return MarginSummary(
            quotes=len(rows),
            with_expenses=sum(1 for r in rows if r.expense_total > 0),
            profitable=sum(1 for r in rows if r.margin_status is MarginStatus.POSITIVE),
            loss=sum(1 for r in rows if r.margin_status is MarginStatus.NEGATIVE),
            average_margin_percentage=quantize(average, self.places),
            quotes_total=sum((r.quote_total for r in rows), ZERO),
            expenses_total=sum((r.expense_total for r in rows), ZERO),
            gross_margin_total=sum((r.gross_margin for r in rows), ZERO),
        )
