# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Flow direction mapping for the transactional ledger.

Every page of the source ERP repeated its own "income vs expense" filter.
This module holds the one classification the rest of the library uses.
"""

from decimal import Decimal
from functools import lru_cache
from typing import Dict, FrozenSet

from fabledger.core.primitives import FlowDirection, TransactionType

_INCOME_TYPES: FrozenSet[TransactionType] = frozenset(
    {
        TransactionType.INCOME,
        TransactionType.ADVANCE,
        TransactionType.WORK_PAYMENT,
    }
)

_EXPENSE_TYPES: FrozenSet[TransactionType] = frozenset(
    {
        TransactionType.EXPENSE,
        TransactionType.SUPPLIER_PAYMENT,
        TransactionType.GENERAL_EXPENSE,
    }
)

# Transfers move money between the business's own accounts and adjustments
# correct balances; neither is earned or spent, so both stay out of totals.
_NEUTRAL_TYPES: FrozenSet[TransactionType] = frozenset(
    {
        TransactionType.TRANSFER,
        TransactionType.ADJUSTMENT,
    }
)


class FlowDirectionMapper:
    """
    Pure utility class for mapping transaction types to flow directions.

    No state, no __init__ - only static methods.
    """

    @staticmethod
    @lru_cache(maxsize=None)
    def _direction_table() -> Dict[TransactionType, FlowDirection]:
        table = {t: FlowDirection.INFLOW for t in _INCOME_TYPES}
        table.update({t: FlowDirection.OUTFLOW for t in _EXPENSE_TYPES})
        table.update({t: FlowDirection.NEUTRAL for t in _NEUTRAL_TYPES})
        return table

    @staticmethod
    def direction(transaction_type: TransactionType) -> FlowDirection:
        """
        Determine the flow direction of a transaction type.

        Args:
            transaction_type: One of the eight TransactionType members

        Returns:
            INFLOW, OUTFLOW or NEUTRAL

        Raises:
            ValueError: If the value is not a TransactionType (no fallback)
        """
        table = FlowDirectionMapper._direction_table()
        try:
            return table[TransactionType(transaction_type)]
        except (KeyError, ValueError):
            raise ValueError(
                f"Unknown transaction type: {transaction_type!r}. Use TransactionType values."
            ) from None

    @staticmethod
    def is_income(transaction_type: TransactionType) -> bool:
        return FlowDirectionMapper.direction(transaction_type) is FlowDirection.INFLOW

    @staticmethod
    def is_expense(transaction_type: TransactionType) -> bool:
        return FlowDirectionMapper.direction(transaction_type) is FlowDirection.OUTFLOW

    @staticmethod
    def signed_amount(transaction_type: TransactionType, amount: Decimal) -> Decimal:
        """Apply the sign a type contributes to net flow."""
        direction = FlowDirectionMapper.direction(transaction_type)
        if direction is FlowDirection.INFLOW:
            return amount
        if direction is FlowDirection.OUTFLOW:
            return -amount
        return Decimal("0")

    @staticmethod
    def income_types() -> FrozenSet[TransactionType]:
        return _INCOME_TYPES

    @staticmethod
    def expense_types() -> FrozenSet[TransactionType]:
        return _EXPENSE_TYPES

    @staticmethod
    def neutral_types() -> FrozenSet[TransactionType]:
        return _NEUTRAL_TYPES
