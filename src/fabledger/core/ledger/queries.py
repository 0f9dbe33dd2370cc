# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Ledger query layer.

Breakdowns the financial reports need (totals by type, income and expense by
category, counterparty rankings, monthly flows) computed with pandas over
`Ledger.ledger_df()`. Amounts stay `Decimal`; every sum goes through
`_decimal_sum` so no float ever enters the totals.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Dict, List, Mapping, Optional, Tuple
from uuid import UUID

import pandas as pd

from ..calculations import ZERO, percentage
from ..primitives.enums import Currency, FlowDirection, TransactionType
from .mapper import FlowDirectionMapper

if TYPE_CHECKING:
    from .ledger import Ledger

################################################################################
# CATEGORY GROUPINGS
################################################################################

# Income categories shown on the financial report [INFLOW TYPES]
INCOME_CATEGORIES: List[Tuple[str, List[TransactionType]]] = [
    ("Sales", [TransactionType.INCOME]),
    ("Advances", [TransactionType.ADVANCE]),
    ("Work Payments", [TransactionType.WORK_PAYMENT]),
]

# Expense categories shown on the financial report [OUTFLOW TYPES]
EXPENSE_CATEGORIES: List[Tuple[str, List[TransactionType]]] = [
    ("Materials", [TransactionType.SUPPLIER_PAYMENT]),
    ("General Expenses", [TransactionType.GENERAL_EXPENSE]),
    ("Other Expenses", [TransactionType.EXPENSE]),
]

CATEGORY_COLUMNS = ["category", "amount", "share"]
RANKING_COLUMNS = ["counterparty_id", "name", "amount", "transactions"]
FLOW_COLUMNS = ["income", "expense", "net"]


def _decimal_sum(values) -> Decimal:
    return sum(values, ZERO)


class LedgerQueries:
    """
    Read-only queries over a Ledger, optionally restricted to one currency.

    Example:
        >>> queries = LedgerQueries(ledger, currency=Currency.LOCAL)
        >>> queries.income_total()
        Decimal('15000')
    """

    def __init__(
        self,
        ledger: "Ledger",
        currency: Optional[Currency] = None,
        decimal_precision: int = 2,
    ):
        self._ledger = ledger
        self._currency = currency
        self._places = decimal_precision

    @property
    def df(self) -> pd.DataFrame:
        """Ledger rows in scope for this query object."""
        df = self._ledger.ledger_df()
        if self._currency is not None and not df.empty:
            df = df[df["currency"] == self._currency.value]
        return df

    def _rows_of(self, types) -> pd.DataFrame:
        df = self.df
        return df[df["type"].isin([t.value for t in types])]

    # === TOTALS ===

    def totals_by_type(self) -> pd.Series:
        """Sum of amounts for every transaction type, zero-filled."""
        df = self.df
        index = [t.value for t in TransactionType]
        if df.empty:
            return pd.Series([ZERO] * len(index), index=index, dtype=object, name="amount")
        grouped = (
            df.groupby(df["type"].astype(str))["amount"].agg(_decimal_sum)
        )
        totals = {key: grouped.get(key, ZERO) for key in index}
        return pd.Series(totals, dtype=object, name="amount")

    def income_total(self) -> Decimal:
        return _decimal_sum(self._rows_of(FlowDirectionMapper.income_types())["amount"])

    def expense_total(self) -> Decimal:
        return _decimal_sum(self._rows_of(FlowDirectionMapper.expense_types())["amount"])

    def neutral_total(self) -> Decimal:
        return _decimal_sum(self._rows_of(FlowDirectionMapper.neutral_types())["amount"])

    def net(self) -> Decimal:
        return self.income_total() - self.expense_total()

    # === CATEGORY BREAKDOWNS ===

    def _category_breakdown(
        self, categories: List[Tuple[str, List[TransactionType]]]
    ) -> pd.DataFrame:
        totals = self.totals_by_type()
        amounts: Dict[str, Decimal] = {}
        for name, types in categories:
            amounts[name] = _decimal_sum(totals[t.value] for t in types)

        grand_total = _decimal_sum(amounts.values())
        rows = [
            {
                "category": name,
                "amount": amount,
                "share": percentage(amount, grand_total, self._places),
            }
            for name, amount in amounts.items()
        ]
        return pd.DataFrame(rows, columns=CATEGORY_COLUMNS)

    def income_by_category(self) -> pd.DataFrame:
        """Income split into sales, advances and work payments with % shares."""
        return self._category_breakdown(INCOME_CATEGORIES)

    def expense_by_category(self) -> pd.DataFrame:
        """Expenses split into materials, general and other with % shares."""
        return self._category_breakdown(EXPENSE_CATEGORIES)

    # === COUNTERPARTY RANKINGS ===

    def _ranking(
        self,
        direction: FlowDirection,
        id_column: str,
        limit: int,
        names: Optional[Mapping[UUID, str]],
    ) -> pd.DataFrame:
        df = self.df
        df = df[(df["direction"] == direction.value) & df[id_column].notna()]
        if df.empty:
            return pd.DataFrame(columns=RANKING_COLUMNS)

        grouped = df.groupby(id_column).agg(
            amount=("amount", _decimal_sum),
            transactions=("amount", "size"),
        )
        ranking = grouped.reset_index().rename(columns={id_column: "counterparty_id"})
        ranking["name"] = [
            (names or {}).get(cid, str(cid)) for cid in ranking["counterparty_id"]
        ]
        # Stable tie-break on id keeps output deterministic
        ranking["_key"] = ranking["counterparty_id"].astype(str)
        ranking = ranking.sort_values(
            ["amount", "_key"], ascending=[False, True], kind="mergesort"
        )
        return ranking[RANKING_COLUMNS].head(limit).reset_index(drop=True)

    def top_clients(
        self, limit: int = 5, names: Optional[Mapping[UUID, str]] = None
    ) -> pd.DataFrame:
        """Clients ranked by income received from them."""
        return self._ranking(FlowDirection.INFLOW, "client_id", limit, names)

    def top_suppliers(
        self, limit: int = 5, names: Optional[Mapping[UUID, str]] = None
    ) -> pd.DataFrame:
        """Suppliers ranked by what was paid to them."""
        return self._ranking(FlowDirection.OUTFLOW, "supplier_id", limit, names)

    # === TIME SERIES ===

    def monthly_flows(self) -> pd.DataFrame:
        """
        Income, expense and net per month for months with activity.

        Returns:
            DataFrame indexed by monthly Period with FLOW_COLUMNS. For a
            continuous, zero-filled axis use
            `LedgerAggregator.aggregate_by_period` instead.
        """
        df = self.df
        df = df[df["direction"] != FlowDirection.NEUTRAL.value]
        if df.empty:
            return pd.DataFrame(
                columns=FLOW_COLUMNS, index=pd.PeriodIndex([], freq="M", name="period")
            )

        rows = {}
        for period, group in df.groupby("period"):
            income = _decimal_sum(
                group.loc[group["direction"] == FlowDirection.INFLOW.value, "amount"]
            )
            expense = _decimal_sum(
                group.loc[group["direction"] == FlowDirection.OUTFLOW.value, "amount"]
            )
            rows[period] = {"income": income, "expense": expense, "net": income - expense}

        result = pd.DataFrame.from_dict(rows, orient="index", columns=FLOW_COLUMNS)
        result.index = pd.PeriodIndex(result.index, freq="M", name="period")
        return result.sort_index()
