# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Transaction ledger backed by a pandas DataFrame.

The Ledger collects validated Transaction records and materializes a
DataFrame only when asked for one. Query methods live in
`fabledger.core.ledger.queries`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional, Union

import pandas as pd

from ...utils.dates import to_naive_timestamp
from .records import Transaction, parse_transactions
from .settings import LedgerSettings

logger = logging.getLogger(__name__)

LEDGER_COLUMNS = [
    "transaction_id",
    "date",
    "period",
    "type",
    "direction",
    "amount",
    "signed_amount",
    "currency",
    "client_id",
    "supplier_id",
    "order_id",
    "payment_method_id",
    "concept",
]


@dataclass
class Ledger:
    """
    Owner of a set of transactions and of the DataFrame built from them.

    The ledger "owns" its records; `ledger_df()` is the only way to get the
    tabular view, which is rebuilt only after new records arrive.
    Amount columns hold `Decimal` objects so sums stay exact.
    """

    settings: Optional[LedgerSettings] = None

    # Internal state
    records: List[Transaction] = field(default_factory=list, init=False)
    _current_ledger: Optional[pd.DataFrame] = field(
        default=None, init=False, repr=False
    )
    _ledger_dirty: bool = field(default=False, init=False, repr=False)

    def __post_init__(self):
        if self.settings is None:
            self.settings = LedgerSettings()

    @classmethod
    def from_rows(
        cls, rows: Iterable[Mapping[str, Any]], settings: Optional[LedgerSettings] = None
    ) -> "Ledger":
        """Build a ledger from raw rows, validating them first."""
        ledger = cls(settings=settings)
        ledger.add_transactions(parse_transactions(rows))
        return ledger

    def add_transactions(
        self, transactions: Iterable[Union[Transaction, Mapping[str, Any]]]
    ) -> None:
        """
        Add transactions, validating any raw mappings on the way in.

        Raises:
            pydantic.ValidationError: If a raw mapping is malformed. Nothing
                from the batch is added in that case.
        """
        batch = [
            t if isinstance(t, Transaction) else Transaction.model_validate(t)
            for t in transactions
        ]
        if self.settings.skip_zero_amounts:
            batch = [t for t in batch if t.amount != 0]
        if batch:
            self.records.extend(batch)
            self._ledger_dirty = True

    def ledger_df(self) -> pd.DataFrame:
        """
        Get the current ledger as a DataFrame, creating it if necessary.

        Returns:
            One row per transaction, sorted by date then id, with LEDGER_COLUMNS
        """
        if self._current_ledger is None or self._ledger_dirty:
            self._current_ledger = self._to_dataframe()
            self._ledger_dirty = False

        return self._current_ledger

    def _to_dataframe(self) -> pd.DataFrame:
        logger.debug(f"_to_dataframe called with {len(self.records)} records")

        if not self.records:
            return self._empty_ledger()

        df = self._records_to_dataframe(self.records)
        df = df.sort_values(["date", "transaction_id"], kind="mergesort").reset_index(
            drop=True
        )

        if self.settings.use_categorical_dtypes:
            df = self._apply_categorical_dtypes(df)

        logger.info(f"Built ledger with {len(df)} transactions")
        return df

    def _empty_ledger(self) -> pd.DataFrame:
        """Create empty ledger with proper schema."""
        return pd.DataFrame(columns=LEDGER_COLUMNS)

    def _records_to_dataframe(self, records: List[Transaction]) -> pd.DataFrame:
        data = []
        for record in records:
            date = to_naive_timestamp(record.date)
            data.append(
                {
                    "transaction_id": str(record.id),
                    "date": date,
                    "period": date.to_period("M"),
                    "type": record.type.value,
                    "direction": record.direction.value,
                    "amount": record.amount,
                    "signed_amount": record.signed_amount,
                    "currency": record.currency.value,
                    "client_id": record.client_id,
                    "supplier_id": record.supplier_id,
                    "order_id": record.order_id,
                    "payment_method_id": record.payment_method_id,
                    "concept": record.concept,
                }
            )

        return pd.DataFrame(data, columns=LEDGER_COLUMNS)

    def _apply_categorical_dtypes(self, df: pd.DataFrame) -> pd.DataFrame:
        for col in ("type", "direction", "currency"):
            if not isinstance(df[col].dtype, pd.CategoricalDtype):
                df[col] = df[col].astype("category")
        return df

    def clear(self) -> None:
        """Clear all records and reset state."""
        self.records.clear()
        self._current_ledger = None
        self._ledger_dirty = False

    def __len__(self) -> int:
        return len(self.records)
