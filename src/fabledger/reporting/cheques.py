# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Cheque Portfolio Report

Postdated cheques held by the business: what is still in the portfolio,
what has cleared and which cheques are overdue or about to fall due.
"""

from __future__ import annotations

import datetime
import logging
from decimal import Decimal
from typing import Iterable, List, Optional
from uuid import UUID

from pydantic import Field

from ..core.calculations import ZERO
from ..core.ledger import Cheque
from ..core.primitives import ChequeStatus, Currency, DueStatus, GlobalSettings, Model
from ..utils.dates import DateLike, days_until, due_status, to_date
from .base import BaseReport

logger = logging.getLogger(__name__)


class ChequeRow(Model):
    cheque_id: UUID
    number: str
    bank: str
    amount: Decimal
    status: ChequeStatus
    due_date: datetime.date
    days_until_due: int
    # Only set while the cheque is in the portfolio
    due_status: Optional[DueStatus] = None


class ChequePortfolio(Model):
    reference_date: datetime.date
    currency: Currency
    in_portfolio_total: Decimal = ZERO
    cleared_total: Decimal = ZERO
    overdue_count: int = 0
    due_soon_count: int = 0
    rows: List[ChequeRow] = Field(default_factory=list)


class ChequePortfolioReport(BaseReport):
    def __init__(self, cheques: Iterable[Cheque], settings: Optional[GlobalSettings] = None):
        super().__init__(settings)
        self._cheques = self._require(cheques, Cheque, "cheques")

    def generate(
        self, reference_date: DateLike, currency: Optional[Currency] = None
    ) -> ChequePortfolio:
        """
        Summarize the portfolio as of `reference_date`.

        Due proximity is measured in calendar days. A cheque due within
        `due_soon_days` (inclusive, default 7) is due soon; one whose due day
        has passed is overdue. Only cheques still in the portfolio count.
        """
        currency = (
            Currency(currency)
            if currency is not None
            else self.settings.reporting.default_currency
        )
        reference = to_date(reference_date)
        soon_days = self.settings.reporting.due_soon_days

        in_portfolio = cleared = ZERO
        overdue = due_soon = 0
        rows = []
        for cheque in sorted(self._cheques, key=lambda c: (c.due_date, c.number)):
            if cheque.currency is not currency:
                continue
            status = None
            if cheque.status is ChequeStatus.IN_PORTFOLIO:
                in_portfolio += cheque.amount
                status = due_status(cheque.due_date, reference, soon_days)
                if status is DueStatus.OVERDUE:
                    overdue += 1
                elif status is DueStatus.DUE_SOON:
                    due_soon += 1
            elif cheque.status is ChequeStatus.CLEARED:
                cleared += cheque.amount

            rows.append(
                ChequeRow(
                    cheque_id=cheque.id,
                    number=cheque.number,
                    bank=cheque.bank,
                    amount=cheque.amount,
                    status=cheque.status,
                    due_date=to_date(cheque.due_date),
                    days_until_due=days_until(cheque.due_date, reference),
                    due_status=status,
                )
            )

        if overdue:
            logger.warning(f"{overdue} cheques in portfolio are past due")

        return ChequePortfolio(
            reference_date=reference,
            currency=currency,
            in_portfolio_total=in_portfolio,
            cleared_total=cleared,
            overdue_count=overdue,
            due_soon_count=due_soon,
            rows=rows,
        )
